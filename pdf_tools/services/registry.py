"""
Converter profile registry.

Maps each supported operation to the external tool invocation that
performs it and to the naming convention that tool follows for its
output. The registry is built once at startup and never mutated.
"""

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from pathlib import PurePath
from types import MappingProxyType

from pdf_tools.config import Settings
from pdf_tools.exceptions import UnsupportedInputError, UnsupportedOperationError
from pdf_tools.models.conversion import Operation

NamingRule = Callable[[str], str]

# Accepted image extensions and the ImageMagick coder forced for each
IMAGE_CODERS: Mapping[str, str] = MappingProxyType({
    "jpg": "jpeg",
    "jpeg": "jpeg",
    "png": "png",
    "webp": "webp",
})


def stem_with_extension(extension: str) -> NamingRule:
    """Naming rule of tools that keep the base name and swap the extension."""

    def rule(name: str) -> str:
        return f"{PurePath(name).stem}.{extension}"

    return rule


def compressed_prefix(name: str) -> str:
    """Naming rule of the compression operations."""
    return f"compressed-{PurePath(name).name}"


@dataclass(frozen=True)
class ConverterProfile:
    """
    How to invoke one external tool for one operation.

    ``arguments`` is a template; each element becomes exactly one argv
    entry after substituting ``{input}``, ``{outdir}``, ``{output}``,
    ``{preset}``, ``{quality}`` and ``{coder}``.
    """

    operation: Operation
    executable: str
    arguments: tuple[str, ...]
    target_extension: str | None
    output_naming: NamingRule
    download_naming: NamingRule
    options: tuple[str, ...] = ()
    input_coders: Mapping[str, str] | None = None

    def check_input(self, input_name: str) -> None:
        """
        Reject inputs whose extension the tool must not be handed.

        Profiles without ``input_coders`` accept any file.

        Raises:
            UnsupportedInputError: If the extension is not allowed
        """
        if self.input_coders is None:
            return
        extension = PurePath(input_name).suffix.lstrip(".").lower()
        if extension not in self.input_coders:
            raise UnsupportedInputError(self.operation.value, extension)

    def coder(self, input_name: str) -> str:
        """Explicit tool format for ``input_name``, empty when the profile has none."""
        if self.input_coders is None:
            return ""
        return self.input_coders.get(PurePath(input_name).suffix.lstrip(".").lower(), "")

    def target_format(self, input_name: str) -> str:
        """Extension of the artifact produced from ``input_name``."""
        if self.target_extension is not None:
            return self.target_extension
        return PurePath(input_name).suffix.lstrip(".").lower()


class ConverterRegistry(Mapping[str, ConverterProfile]):
    """Read-only mapping of operation identifiers to converter profiles."""

    def __init__(self, profiles: list[ConverterProfile]):
        self._profiles = MappingProxyType({p.operation.value: p for p in profiles})

    def get_profile(self, operation: str) -> ConverterProfile:
        """
        Look up the profile for ``operation``.

        Raises:
            UnsupportedOperationError: If no profile is registered
        """
        try:
            return self._profiles[operation]
        except KeyError:
            raise UnsupportedOperationError(operation) from None

    def __getitem__(self, operation: str) -> ConverterProfile:
        return self._profiles[operation]

    def __iter__(self) -> Iterator[str]:
        return iter(self._profiles)

    def __len__(self) -> int:
        return len(self._profiles)


def _libreoffice(settings: Settings, operation: Operation, extension: str) -> ConverterProfile:
    return ConverterProfile(
        operation=operation,
        executable=settings.LIBREOFFICE_PATH,
        arguments=("--headless", "--convert-to", extension, "--outdir", "{outdir}", "{input}"),
        target_extension=extension,
        output_naming=stem_with_extension(extension),
        download_naming=stem_with_extension(extension),
    )


def build_registry(settings: Settings) -> ConverterRegistry:
    """
    Build the registry from the configured tool paths.

    Args:
        settings: Application settings

    Returns:
        ConverterRegistry: Registry with one profile per supported operation
    """
    return ConverterRegistry([
        _libreoffice(settings, Operation.PDF_TO_WORD, "docx"),
        _libreoffice(settings, Operation.WORD_TO_PDF, "pdf"),
        _libreoffice(settings, Operation.PDF_TO_POWERPOINT, "pptx"),
        _libreoffice(settings, Operation.POWERPOINT_TO_PDF, "pdf"),
        _libreoffice(settings, Operation.PDF_TO_EXCEL, "xlsx"),
        _libreoffice(settings, Operation.EXCEL_TO_PDF, "pdf"),
        ConverterProfile(
            operation=Operation.COMPRESS_PDF,
            executable=settings.GHOSTSCRIPT_PATH,
            arguments=(
                "-sDEVICE=pdfwrite",
                f"-dCompatibilityLevel={settings.PDF_COMPATIBILITY_LEVEL}",
                "-dPDFSETTINGS=/{preset}",
                "-dNOPAUSE",
                "-dQUIET",
                "-dBATCH",
                "-sOutputFile={output}",
                "{input}",
            ),
            target_extension="pdf",
            output_naming=compressed_prefix,
            download_naming=compressed_prefix,
            options=("level",),
        ),
        ConverterProfile(
            operation=Operation.COMPRESS_IMAGE,
            executable=settings.IMAGEMAGICK_PATH,
            arguments=("{coder}:{input}", "-strip", "-quality", "{quality}", "{coder}:{output}"),
            target_extension=None,
            output_naming=compressed_prefix,
            download_naming=compressed_prefix,
            input_coders=IMAGE_CODERS,
        ),
    ])
