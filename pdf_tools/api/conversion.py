"""
Conversion API endpoints for the PDF Tools Backend.

Each supported operation is served at ``POST /<operation>`` and takes a
multipart upload in the ``file`` field. The converted file is streamed
back; failures answer with a generic JSON error.
"""

from pathlib import Path
from typing import Any

from fastapi import APIRouter, File, Form, Request, UploadFile
from fastapi.responses import FileResponse, JSONResponse, Response
from loguru import logger
from starlette.concurrency import run_in_threadpool

from pdf_tools.exceptions import ConversionError
from pdf_tools.models.conversion import InputDescriptor, JobOptions
from pdf_tools.models.response import ErrorResponse, OperationInfo, OperationsResponse
from pdf_tools.services.intake import save_upload
from pdf_tools.services.orchestrator import ConversionOrchestrator

router = APIRouter()
api_router = APIRouter()


def error_response(exc: ConversionError, request_id: str | None = None) -> JSONResponse:
    """
    Build the uniform failure response for ``exc``.

    Only the generic message and error code are exposed.
    """
    body = ErrorResponse(error=exc.error_type, message=exc.public_message, request_id=request_id)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


class ConversionJobResponse(Response):
    """
    Response that runs a conversion job while it is being sent.

    The job's whole lifetime, delivery included, happens inside
    :meth:`ConversionOrchestrator.process`, so scratch files are
    removed only once the artifact has been streamed or the job failed.
    """

    def __init__(
        self,
        orchestrator: ConversionOrchestrator,
        descriptor: InputDescriptor | None,
        operation: str,
        options: JobOptions,
    ) -> None:
        super().__init__()
        self.orchestrator = orchestrator
        self.descriptor = descriptor
        self.operation = operation
        self.options = options
        self.job = None

    async def __call__(self, scope: dict[str, Any], receive: Any, send: Any) -> None:
        async def deliver(path: Path, filename: str) -> None:
            await FileResponse(path, filename=filename)(scope, receive, send)

        try:
            self.job = await self.orchestrator.process(self.descriptor, self.operation, self.options, deliver)
        except ConversionError as exc:
            await error_response(exc, scope.get("request_id"))(scope, receive, send)


@router.post("/{operation}")
async def convert_file(
    request: Request,
    operation: str,
    file: UploadFile | None = File(None),
    level: str | None = Form(None),
) -> Response:
    """
    Convert an uploaded file with the requested operation.

    Args:
        request: Incoming request
        operation: Operation identifier, e.g. ``word-to-pdf``
        file: Uploaded file
        level: PDF compression level (low, medium, high); other values
            and absence mean medium

    Returns:
        Response: Streamed artifact, or a JSON error
    """
    app_settings = request.app.state.settings
    scratch_dir = Path(app_settings.SCRATCH_DIR).resolve()

    try:
        descriptor = await run_in_threadpool(save_upload, file, scratch_dir, app_settings.MAX_FILE_SIZE)
    except ConversionError as exc:
        logger.warning(f"Upload rejected for {operation}: {exc}")
        return error_response(exc, request.scope.get("request_id"))

    options = JobOptions(level=level, image_quality=app_settings.IMAGE_QUALITY)
    return ConversionJobResponse(request.app.state.orchestrator, descriptor, operation, options)


@api_router.get("/operations", response_model=OperationsResponse)
async def list_operations(request: Request) -> OperationsResponse:
    """
    List supported conversion operations.

    Returns:
        OperationsResponse: Operations with their output format
    """
    registry = request.app.state.registry
    operations = [
        OperationInfo(
            operation=name,
            target_format=profile.target_extension,
            options=list(profile.options),
        )
        for name, profile in registry.items()
    ]
    return OperationsResponse(total=len(operations), operations=operations)
