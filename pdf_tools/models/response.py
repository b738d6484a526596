"""
Response models for the PDF Tools Backend API.

This module defines Pydantic models for API response formatting.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Response model for error responses.

    Failed conversions answer with a generic message and a
    machine-readable error code; diagnostics stay in the server log.
    """

    error: str = Field(..., description="Error code")
    message: str = Field(..., description="Human-readable error message")
    request_id: str | None = Field(default=None, description="Request identifier")


class HealthResponse(BaseModel):
    """
    Response model for health check endpoints.

    This model provides system health and status information.
    """

    status: str = Field(..., description="Service status")
    service: str = Field(..., description="Service name")
    version: str = Field(..., description="Service version")
    environment: str = Field(..., description="Environment name")
    timestamp: datetime = Field(default_factory=datetime.utcnow)

    # Optional system information
    system: dict[str, Any] | None = Field(default=None)
    metrics: dict[str, Any] | None = Field(default=None)
    dependencies: dict[str, bool] | None = Field(default=None)


class OperationInfo(BaseModel):
    """A supported conversion operation."""

    operation: str = Field(..., description="Operation identifier, also its URL path")
    target_format: str | None = Field(..., description="Output extension, null when it follows the input")
    options: list[str] = Field(default_factory=list, description="Accepted form fields besides 'file'")


class OperationsResponse(BaseModel):
    """List of supported conversion operations."""

    total: int
    operations: list[OperationInfo]
