"""
Conversion job orchestrator for the PDF Tools Backend.

Drives one request from saved upload to delivered artifact:
validate input, execute the converter, resolve its output, hand the
output to the delivery sink, and remove every scratch file on the way
out, whatever happened.
"""

from collections.abc import Awaitable, Callable
from pathlib import Path

from loguru import logger
from starlette.concurrency import run_in_threadpool

from pdf_tools.config import Settings
from pdf_tools.exceptions import (
    ConversionError,
    DeliveryFailedError,
    ErrorTypes,
    MissingInputError,
)
from pdf_tools.models.conversion import ConversionJob, InputDescriptor, JobOptions, JobStatus
from pdf_tools.services.executor import ConversionExecutor
from pdf_tools.services.registry import ConverterProfile, ConverterRegistry
from pdf_tools.services.resolver import OutputResolver
from pdf_tools.services.tracker import TempArtifactTracker

DeliverySink = Callable[[Path, str], Awaitable[None]]


class ConversionOrchestrator:
    """Runs conversion jobs against an immutable converter registry."""

    def __init__(
        self,
        registry: ConverterRegistry,
        executor: ConversionExecutor,
        resolver: OutputResolver,
    ):
        self.registry = registry
        self.executor = executor
        self.resolver = resolver

    @classmethod
    def from_settings(cls, registry: ConverterRegistry, settings: Settings) -> "ConversionOrchestrator":
        """Build an orchestrator writing into the configured scratch output directory."""
        output_dir = Path(settings.SCRATCH_DIR).resolve() / settings.OUTPUT_SUBDIR
        return cls(
            registry=registry,
            executor=ConversionExecutor(output_dir, timeout=settings.CONVERSION_TIMEOUT),
            resolver=OutputResolver(output_dir),
        )

    def convert(
        self,
        descriptor: InputDescriptor | None,
        operation: str,
        options: JobOptions,
        tracker: TempArtifactTracker,
    ) -> ConversionJob:
        """
        Validate, execute and resolve one job.

        Every path the job touches is registered with ``tracker``; the
        caller owns the tracker and decides when to clean up.

        Args:
            descriptor: Saved upload, or None if the request had no file
            operation: Requested operation identifier
            options: Resolved operation options
            tracker: Tracker receiving the job's scratch files

        Returns:
            ConversionJob in status ``succeeded``

        Raises:
            ConversionError: The job failed; its subclass names the reason
        """
        job = ConversionJob(operation=operation, options=options)
        tracker.label = job.job_id
        if descriptor is not None:
            job.input_path = tracker.register(descriptor.path)
            job.original_name = descriptor.original_name

        try:
            profile = self._validate(job, descriptor)
            job.advance(JobStatus.EXECUTING)
            # Registered before launch so partial output from a failed run is removed too
            tracker.register(self.executor.expected_output(job, profile))
            result = self.executor.execute(job, profile)
            if result.stderr:
                logger.debug(f"[{job.job_id}] Converter stderr: {result.stderr[:200]}")

            job.advance(JobStatus.RESOLVING)
            job.output_path = tracker.register(self.resolver.resolve(job, profile))
            job.advance(JobStatus.SUCCEEDED)
        except ConversionError as exc:
            job.fail(exc.error_type)
            logger.error(f"[{job.job_id}] {job.operation} failed ({exc.error_type}): {exc}")
            raise
        except Exception:
            job.fail(ErrorTypes.INTERNAL_ERROR)
            raise

        logger.info(f"[{job.job_id}] {job.operation} succeeded: {job.output_path.name} -> '{job.download_name}'")
        return job

    def _validate(self, job: ConversionJob, descriptor: InputDescriptor | None) -> ConverterProfile:
        if descriptor is None:
            raise MissingInputError()
        profile = self.registry.get_profile(job.operation)
        profile.check_input(descriptor.path.name)
        job.target_format = profile.target_format(descriptor.path.name)
        job.download_name = profile.download_naming(descriptor.original_name)
        logger.info(
            f"[{job.job_id}] New {job.operation} job for '{descriptor.original_name}' "
            f"({descriptor.size} bytes) -> .{job.target_format}"
        )
        return profile

    async def process(
        self,
        descriptor: InputDescriptor | None,
        operation: str,
        options: JobOptions,
        deliver: DeliverySink,
    ) -> ConversionJob:
        """
        Run a job to completion and hand its output to ``deliver``.

        The conversion itself runs in a worker thread. Scratch files are
        removed after delivery, or after any failure. A delivery failure
        is logged and leaves the job succeeded.

        Raises:
            ConversionError: The job failed before delivery; unexpected
                errors are reported as ``INTERNAL_ERROR``
        """
        with TempArtifactTracker() as tracker:
            try:
                job = await run_in_threadpool(self.convert, descriptor, operation, options, tracker)
            except ConversionError:
                raise
            except Exception as exc:
                logger.exception(f"Unexpected error during {operation} conversion: {exc}")
                raise ConversionError(f"Unexpected conversion error: {exc}", ErrorTypes.INTERNAL_ERROR) from exc

            try:
                await deliver(job.output_path, job.download_name)
            except Exception as exc:
                error = DeliveryFailedError(str(exc) or type(exc).__name__)
                logger.error(f"[{job.job_id}] {error}")
            else:
                logger.info(f"[{job.job_id}] Delivered '{job.download_name}'")
            return job
