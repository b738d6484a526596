"""
Shared fixtures for the PDF Tools Backend tests.

External converters are never run: ``FakeConverter`` stands in for
``run_command_safely`` and writes (or withholds) the file the real tool
would produce.
"""

from pathlib import Path
from unittest.mock import patch

import pytest

from pdf_tools.config import Settings
from pdf_tools.services.orchestrator import ConversionOrchestrator
from pdf_tools.services.registry import build_registry
from pdf_tools.utils.shell import CommandResult


def output_path_from_command(cmd: list[str]) -> Path:
    """Work out where the real tool would write, from its argument list."""
    if "--convert-to" in cmd:
        extension = cmd[cmd.index("--convert-to") + 1]
        outdir = Path(cmd[cmd.index("--outdir") + 1])
        return outdir / f"{Path(cmd[-1]).stem}.{extension}"
    for arg in cmd:
        if arg.startswith("-sOutputFile="):
            return Path(arg.split("=", 1)[1])
    # ImageMagick arguments carry an explicit "coder:" prefix
    return Path(cmd[-1].split(":", 1)[-1])


class FakeConverter:
    """Callable replacing ``run_command_safely`` in the executor."""

    def __init__(self, returncode: int = 0, stderr: str = "", write_output: bool = True,
                 content: bytes = b"converted", raises: Exception | None = None):
        self.returncode = returncode
        self.stderr = stderr
        self.write_output = write_output
        self.content = content
        self.raises = raises
        self.calls: list[list[str]] = []

    def __call__(self, cmd, cwd=None, timeout=None, env=None) -> CommandResult:
        self.calls.append(list(cmd))
        if self.raises is not None:
            raise self.raises
        if self.write_output:
            output_path_from_command(cmd).write_bytes(self.content)
        return CommandResult(returncode=self.returncode, stdout="", stderr=self.stderr)


@pytest.fixture
def scratch_dir(tmp_path: Path) -> Path:
    scratch = tmp_path / "scratch"
    (scratch / "converted").mkdir(parents=True)
    return scratch


@pytest.fixture
def output_dir(scratch_dir: Path) -> Path:
    return scratch_dir / "converted"


@pytest.fixture
def test_settings(scratch_dir: Path) -> Settings:
    return Settings(
        SCRATCH_DIR=str(scratch_dir),
        LIBREOFFICE_PATH="libreoffice",
        GHOSTSCRIPT_PATH="gs",
        IMAGEMAGICK_PATH="convert",
        MAX_FILE_SIZE=1024 * 1024,
    )


@pytest.fixture
def registry(test_settings: Settings):
    return build_registry(test_settings)


@pytest.fixture
def orchestrator(registry, test_settings: Settings) -> ConversionOrchestrator:
    return ConversionOrchestrator.from_settings(registry, test_settings)


@pytest.fixture
def fake_converter():
    """Successful converter patched into the executor."""
    converter = FakeConverter()
    with patch("pdf_tools.services.executor.run_command_safely", converter):
        yield converter


def scratch_files(scratch_dir: Path) -> list[Path]:
    """All regular files left anywhere in the scratch directory."""
    return [p for p in scratch_dir.rglob("*") if p.is_file()]
