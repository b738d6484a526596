"""
Conversion executor.

Builds the concrete command line for a job from its converter profile
and runs the external tool.
"""

import subprocess
from pathlib import Path
from typing import NamedTuple

from loguru import logger

from pdf_tools.exceptions import ExecutionFailedError
from pdf_tools.models.conversion import ConversionJob
from pdf_tools.services.registry import ConverterProfile
from pdf_tools.utils.shell import run_command_safely


class ExecutionResult(NamedTuple):
    """Outcome of one external tool run."""
    returncode: int
    stderr: str


class ConversionExecutor:
    """Runs external converters for conversion jobs."""

    def __init__(self, output_dir: Path, timeout: int | None = None):
        """
        Initialize the executor.

        Args:
            output_dir: Scratch directory converters write into
            timeout: Optional limit in seconds for a single tool run
        """
        self.output_dir = output_dir
        self.timeout = timeout

    def expected_output(self, job: ConversionJob, profile: ConverterProfile) -> Path:
        """Path the converter is expected to write for ``job``."""
        return self.output_dir / profile.output_naming(job.input_path.name)

    def build_command(self, job: ConversionJob, profile: ConverterProfile) -> list[str]:
        """
        Build the argument list for ``job``.

        Only scratch paths generated by the service are substituted;
        the caller's original filename never reaches the command.
        """
        values = {
            "input": str(job.input_path),
            "outdir": str(self.output_dir),
            "output": str(self.expected_output(job, profile)),
            "preset": job.options.level.ghostscript_preset,
            "quality": str(job.options.image_quality),
            "coder": profile.coder(job.input_path.name),
        }
        return [profile.executable] + [arg.format_map(values) for arg in profile.arguments]

    def execute(self, job: ConversionJob, profile: ConverterProfile) -> ExecutionResult:
        """
        Run the external converter for ``job``.

        Args:
            job: Job being executed
            profile: Converter profile of the job's operation

        Returns:
            ExecutionResult of a zero-exit run

        Raises:
            ExecutionFailedError: If the tool cannot be launched, times
                out, or exits non-zero
        """
        cmd = self.build_command(job, profile)
        logger.info(f"[{job.job_id}] Running {profile.executable} for {job.operation}")

        try:
            result = run_command_safely(cmd, cwd=self.output_dir, timeout=self.timeout)
        except subprocess.TimeoutExpired as exc:
            raise ExecutionFailedError(f"{profile.executable} timed out after {exc.timeout}s") from exc
        except (OSError, ValueError) as exc:
            raise ExecutionFailedError(f"{profile.executable} could not be started: {exc}") from exc

        if result.returncode != 0:
            diagnostic = (result.stderr or result.stdout).strip()
            raise ExecutionFailedError(
                diagnostic or f"{profile.executable} exited with status {result.returncode}",
                result.returncode,
            )

        return ExecutionResult(returncode=result.returncode, stderr=result.stderr)
