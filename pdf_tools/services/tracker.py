"""
Temporary artifact tracking for conversion jobs.

Every scratch file a job creates or takes ownership of is registered
here, and removed when the job ends however it ends.
"""

from pathlib import Path
from types import TracebackType

from loguru import logger

from pdf_tools.utils.fs import safe_unlink


class TempArtifactTracker:
    """
    Scoped owner of a job's scratch files.

    Usable as a context manager; leaving the block always runs
    :meth:`cleanup`. Removal is best-effort: failures are logged and
    never raised, and one failure does not stop the remaining removals.
    """

    def __init__(self, label: str = "job") -> None:
        self.label = label
        self._paths: list[Path] = []
        self._cleaned = False

    @property
    def paths(self) -> list[Path]:
        return list(self._paths)

    def register(self, path: str | Path) -> Path:
        """
        Take ownership of ``path``.

        Args:
            path: Scratch file to remove at cleanup

        Returns:
            The registered path
        """
        path = Path(path)
        if self._cleaned:
            logger.warning(f"[{self.label}] Registering {path} after cleanup; removing it now")
            self._remove(path)
            return path
        if path not in self._paths:
            self._paths.append(path)
            logger.debug(f"[{self.label}] Tracking temporary file: {path}")
        return path

    def cleanup(self) -> list[Path]:
        """
        Remove every registered path exactly once.

        Returns:
            Paths that could not be removed
        """
        if self._cleaned:
            return []
        self._cleaned = True

        failed = [path for path in self._paths if not self._remove(path)]
        self._paths.clear()
        return failed

    def _remove(self, path: Path) -> bool:
        try:
            if not safe_unlink(path):
                logger.debug(f"[{self.label}] Temporary file already gone: {path}")
            return True
        except OSError as exc:
            logger.warning(f"[{self.label}] Failed to remove temporary file {path}: {exc}")
            return False

    def __enter__(self) -> "TempArtifactTracker":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.cleanup()
