"""
Conversion models for the PDF Tools Backend.

This module defines the data structures of a single conversion job:
the requested operation, its options, the uploaded input and the job's
lifecycle status.
"""

from datetime import datetime
from enum import Enum
from pathlib import Path
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Operation(str, Enum):
    """Enumeration of supported conversion operations."""

    PDF_TO_WORD = "pdf-to-word"
    WORD_TO_PDF = "word-to-pdf"
    PDF_TO_POWERPOINT = "pdf-to-powerpoint"
    POWERPOINT_TO_PDF = "powerpoint-to-pdf"
    PDF_TO_EXCEL = "pdf-to-excel"
    EXCEL_TO_PDF = "excel-to-pdf"
    COMPRESS_PDF = "compress-pdf"
    COMPRESS_IMAGE = "compress-image"


class CompressionLevel(str, Enum):
    """PDF compression presets, from smallest file to highest fidelity."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def ghostscript_preset(self) -> str:
        """Ghostscript -dPDFSETTINGS name for this level."""
        return _GHOSTSCRIPT_PRESETS[self]


_GHOSTSCRIPT_PRESETS = {
    CompressionLevel.LOW: "screen",
    CompressionLevel.MEDIUM: "ebook",
    CompressionLevel.HIGH: "printer",
}


def resolve_level(raw: str | CompressionLevel | None) -> CompressionLevel:
    """
    Resolve a caller-supplied compression level.

    Absent or unrecognised values fall back to ``medium``.
    """
    if isinstance(raw, CompressionLevel):
        return raw
    try:
        return CompressionLevel((raw or "").strip().lower())
    except ValueError:
        return CompressionLevel.MEDIUM


class JobStatus(str, Enum):
    """Enumeration of conversion job statuses."""

    PENDING = "pending"
    EXECUTING = "executing"
    RESOLVING = "resolving"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


# Allowed forward transitions; terminal states have none
_TRANSITIONS: dict[JobStatus, frozenset[JobStatus]] = {
    JobStatus.PENDING: frozenset({JobStatus.EXECUTING, JobStatus.FAILED}),
    JobStatus.EXECUTING: frozenset({JobStatus.RESOLVING, JobStatus.FAILED}),
    JobStatus.RESOLVING: frozenset({JobStatus.SUCCEEDED, JobStatus.FAILED}),
    JobStatus.SUCCEEDED: frozenset(),
    JobStatus.FAILED: frozenset(),
}


class InvalidTransitionError(Exception):
    """Raised when a job is moved to a state it cannot reach."""


class InputDescriptor(BaseModel):
    """An upload already persisted to the scratch directory."""

    model_config = ConfigDict(frozen=True)

    path: Path = Field(..., description="Absolute scratch path of the saved upload")
    original_name: str = Field(..., description="Filename supplied by the caller")
    size: int = Field(..., ge=0, description="Size of the upload in bytes")


class JobOptions(BaseModel):
    """Operation-specific parameters, resolved before command construction."""

    model_config = ConfigDict(frozen=True)

    level: CompressionLevel = Field(default=CompressionLevel.MEDIUM, description="PDF compression preset")
    image_quality: int = Field(default=80, description="Image compression quality")

    @field_validator("level", mode="before")
    @classmethod
    def validate_level(cls, v: str | CompressionLevel | None) -> CompressionLevel:
        """Substitute the default for absent or unknown levels."""
        return resolve_level(v)

    @field_validator("image_quality")
    @classmethod
    def validate_image_quality(cls, v: int) -> int:
        """Validate image quality is within the codec's range."""
        if not 1 <= v <= 100:
            raise ValueError("image_quality must be between 1 and 100")
        return v


class ConversionJob(BaseModel):
    """Model representing one request's conversion lifecycle."""

    job_id: str = Field(default_factory=lambda: uuid4().hex[:12], description="Unique job identifier")
    input_path: Path | None = Field(None, description="Scratch path of the uploaded input")
    original_name: str = Field("", description="Caller-supplied filename")
    operation: str = Field(..., description="Requested operation")
    target_format: str | None = Field(None, description="Extension of the produced artifact")
    options: JobOptions = Field(default_factory=JobOptions, description="Operation options")
    output_path: Path | None = Field(None, description="Verified output artifact")
    download_name: str | None = Field(None, description="Filename offered to the caller")
    status: JobStatus = Field(default=JobStatus.PENDING, description="Job status")
    failure_reason: str | None = Field(None, description="Error type if the job failed")
    created_at: datetime = Field(default_factory=datetime.utcnow, description="Job creation time")
    completed_at: datetime | None = Field(None, description="Time the job reached a terminal state")

    @property
    def is_terminal(self) -> bool:
        return self.status in (JobStatus.SUCCEEDED, JobStatus.FAILED)

    def advance(self, status: JobStatus) -> None:
        """
        Move the job to ``status``.

        Raises:
            InvalidTransitionError: If the transition would go backwards
                or skip a required step
        """
        if status not in _TRANSITIONS[self.status]:
            raise InvalidTransitionError(
                f"Job {self.job_id} cannot move from {self.status.value} to {status.value}"
            )
        self.status = status
        if self.is_terminal:
            self.completed_at = datetime.utcnow()

    def fail(self, reason: str) -> None:
        """Mark the job failed with ``reason``."""
        self.advance(JobStatus.FAILED)
        self.failure_reason = reason
