"""
Data models for the PDF Tools Backend.
"""

from .conversion import (
    CompressionLevel,
    ConversionJob,
    InputDescriptor,
    InvalidTransitionError,
    JobOptions,
    JobStatus,
    Operation,
    resolve_level,
)
from .response import ErrorResponse, HealthResponse, OperationInfo, OperationsResponse

__all__ = [
    "CompressionLevel",
    "ConversionJob",
    "InputDescriptor",
    "InvalidTransitionError",
    "JobOptions",
    "JobStatus",
    "Operation",
    "resolve_level",
    "ErrorResponse",
    "HealthResponse",
    "OperationInfo",
    "OperationsResponse",
]
