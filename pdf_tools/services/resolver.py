"""
Output resolver.

A zero exit status from some converters does not guarantee the named
file was written, so the predicted output is checked on disk before a
job may succeed.
"""

from pathlib import Path

from loguru import logger

from pdf_tools.exceptions import OutputNotFoundError
from pdf_tools.models.conversion import ConversionJob
from pdf_tools.services.registry import ConverterProfile
from pdf_tools.utils.fs import get_file_info


class OutputResolver:
    """Locates and verifies converter output."""

    def __init__(self, output_dir: Path):
        self.output_dir = output_dir

    def resolve(self, job: ConversionJob, profile: ConverterProfile) -> Path:
        """
        Return the verified output path of ``job``.

        Raises:
            OutputNotFoundError: If the expected file does not exist
        """
        expected = self.output_dir / profile.output_naming(job.input_path.name)
        if not expected.is_file():
            logger.error(
                f"[{job.job_id}] Conversion succeeded but output file was not found. "
                f"Expected path: {expected}; input path was: {job.input_path}"
            )
            raise OutputNotFoundError(str(expected))

        info = get_file_info(expected)
        logger.debug(f"[{job.job_id}] Output verified: {info['path']} ({info['size']} bytes)")
        return expected
