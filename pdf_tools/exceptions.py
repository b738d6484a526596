"""
Exception classes for the PDF Tools Backend.

Every failure a conversion job can end in is a ``ConversionError``
subclass carrying a machine-readable ``error_type``, the HTTP status the
API answers with, and a generic message that is safe to show callers.
Diagnostics go into ``details`` and the log, never into the response.
"""

from typing import Any


class BaseServiceError(Exception):
    """Base exception for all service errors."""

    def __init__(self, message: str, error_type: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.error_type = error_type
        self.details = details or {}


# Common error types for consistency
class ErrorTypes:
    """Common error type constants."""

    MISSING_INPUT = "MISSING_INPUT"
    UNSUPPORTED_OPERATION = "UNSUPPORTED_OPERATION"
    UNSUPPORTED_INPUT = "UNSUPPORTED_INPUT"
    FILE_SIZE_EXCEEDED = "FILE_SIZE_EXCEEDED"
    EXECUTION_FAILED = "EXECUTION_FAILED"
    OUTPUT_NOT_FOUND = "OUTPUT_NOT_FOUND"
    DELIVERY_FAILED = "DELIVERY_FAILED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ConversionError(BaseServiceError):
    """Base exception for conversion job failures."""

    status_code: int = 500
    public_message: str = "An unexpected error occurred on the server. Please try again later."

    def __init__(
        self,
        message: str,
        error_type: str = ErrorTypes.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, error_type, details)


class MissingInputError(ConversionError):
    """Raised when a request carries no file."""

    status_code = 400
    public_message = "No file uploaded."

    def __init__(self):
        super().__init__("No input file supplied", ErrorTypes.MISSING_INPUT)


class UnsupportedOperationError(ConversionError):
    """Raised when the requested operation has no converter profile."""

    status_code = 404
    public_message = "Unsupported conversion operation."

    def __init__(self, operation: str):
        super().__init__(
            f"Unsupported operation: {operation!r}",
            ErrorTypes.UNSUPPORTED_OPERATION,
            {"operation": operation},
        )


class UnsupportedInputError(ConversionError):
    """Raised when an operation does not accept the uploaded file type."""

    status_code = 415
    public_message = "Unsupported file type for this operation."

    def __init__(self, operation: str, extension: str):
        super().__init__(
            f"Operation {operation!r} does not accept {extension or 'extensionless'!r} files",
            ErrorTypes.UNSUPPORTED_INPUT,
            {"operation": operation, "extension": extension},
        )


class UploadTooLargeError(ConversionError):
    """Raised when an upload exceeds the configured size limit."""

    status_code = 413
    public_message = "Uploaded file is too large."

    def __init__(self, size: int, max_size: int):
        super().__init__(
            f"Upload of {size} bytes exceeds limit of {max_size} bytes",
            ErrorTypes.FILE_SIZE_EXCEEDED,
            {"size": size, "max_size": max_size},
        )


class ExecutionFailedError(ConversionError):
    """Raised when the external converter exits non-zero or cannot be launched."""

    public_message = "File conversion failed on the server."

    def __init__(self, diagnostic: str, returncode: int | None = None):
        super().__init__(
            f"External converter failed: {diagnostic}",
            ErrorTypes.EXECUTION_FAILED,
            {"diagnostic": diagnostic, "returncode": returncode},
        )
        self.diagnostic = diagnostic
        self.returncode = returncode


class OutputNotFoundError(ConversionError):
    """Raised when the converter reported success but produced no file."""

    public_message = "Conversion failed: Output file not created."

    def __init__(self, expected_path: str):
        super().__init__(
            f"Expected output not found: {expected_path}",
            ErrorTypes.OUTPUT_NOT_FOUND,
            {"expected_path": expected_path},
        )
        self.expected_path = expected_path


class DeliveryFailedError(ConversionError):
    """Raised when streaming a finished artifact to the caller breaks."""

    def __init__(self, reason: str):
        super().__init__(f"Delivery failed: {reason}", ErrorTypes.DELIVERY_FAILED, {"reason": reason})
