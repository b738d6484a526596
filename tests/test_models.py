"""
Test the conversion job model and option resolution.
"""

from pathlib import Path

import pytest

from pdf_tools.models.conversion import (
    CompressionLevel,
    ConversionJob,
    InvalidTransitionError,
    JobOptions,
    JobStatus,
    resolve_level,
)


class TestCompressionLevel:
    """Test compression level defaults and presets."""

    @pytest.mark.parametrize("raw,expected", [
        ("low", CompressionLevel.LOW),
        ("medium", CompressionLevel.MEDIUM),
        ("high", CompressionLevel.HIGH),
        ("HIGH", CompressionLevel.HIGH),
        (" low ", CompressionLevel.LOW),
    ])
    def test_known_levels(self, raw, expected):
        """Test that known levels resolve to themselves."""
        assert resolve_level(raw) is expected

    @pytest.mark.parametrize("raw", [None, "", "ultra", "0", "screen"])
    def test_unknown_levels_default_to_medium(self, raw):
        """Test that absent or unknown levels resolve to medium."""
        assert resolve_level(raw) is CompressionLevel.MEDIUM

    def test_ghostscript_presets(self):
        """Test mapping of levels to Ghostscript presets."""
        assert CompressionLevel.LOW.ghostscript_preset == "screen"
        assert CompressionLevel.MEDIUM.ghostscript_preset == "ebook"
        assert CompressionLevel.HIGH.ghostscript_preset == "printer"

    def test_job_options_substitute_default(self):
        """Test that JobOptions applies the default before use."""
        assert JobOptions(level="bogus").level is CompressionLevel.MEDIUM
        assert JobOptions(level=None).level is CompressionLevel.MEDIUM
        assert JobOptions(level="low").level is CompressionLevel.LOW

    def test_job_options_reject_bad_quality(self):
        """Test image quality bounds."""
        with pytest.raises(ValueError):
            JobOptions(image_quality=0)


class TestConversionJobStatus:
    """Test the job status state machine."""

    def _job(self) -> ConversionJob:
        return ConversionJob(operation="word-to-pdf", input_path=Path("/tmp/1-2.docx"))

    def test_initial_state(self):
        """Test a new job is pending with no output."""
        job = self._job()
        assert job.status is JobStatus.PENDING
        assert job.output_path is None
        assert job.failure_reason is None
        assert job.job_id

    def test_happy_path(self):
        """Test the full forward path."""
        job = self._job()
        job.advance(JobStatus.EXECUTING)
        job.advance(JobStatus.RESOLVING)
        job.advance(JobStatus.SUCCEEDED)
        assert job.status is JobStatus.SUCCEEDED
        assert job.completed_at is not None

    @pytest.mark.parametrize("steps", [
        [],
        [JobStatus.EXECUTING],
        [JobStatus.EXECUTING, JobStatus.RESOLVING],
    ])
    def test_fail_from_any_active_state(self, steps):
        """Test that every non-terminal state can fail."""
        job = self._job()
        for step in steps:
            job.advance(step)
        job.fail("EXECUTION_FAILED")
        assert job.status is JobStatus.FAILED
        assert job.failure_reason == "EXECUTION_FAILED"

    def test_cannot_skip_execution(self):
        """Test that resolving requires executing first."""
        job = self._job()
        with pytest.raises(InvalidTransitionError):
            job.advance(JobStatus.RESOLVING)

    def test_cannot_go_backwards(self):
        """Test monotonic transitions."""
        job = self._job()
        job.advance(JobStatus.EXECUTING)
        job.advance(JobStatus.RESOLVING)
        with pytest.raises(InvalidTransitionError):
            job.advance(JobStatus.EXECUTING)

    def test_terminal_states_are_final(self):
        """Test that a finished job never changes state again."""
        job = self._job()
        job.fail("MISSING_INPUT")
        with pytest.raises(InvalidTransitionError):
            job.advance(JobStatus.EXECUTING)
        with pytest.raises(InvalidTransitionError):
            job.fail("MISSING_INPUT")
