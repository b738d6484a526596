"""
Health check endpoints for the PDF Tools Backend.

This module provides health check endpoints for monitoring
and service discovery.
"""

import platform
from datetime import datetime

import psutil
from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from loguru import logger
from starlette.concurrency import run_in_threadpool

from pdf_tools.config import Settings
from pdf_tools.models.response import HealthResponse
from pdf_tools.utils.shell import get_command_version

router = APIRouter()
root_router = APIRouter()


@root_router.get("/", response_class=PlainTextResponse, include_in_schema=False)
async def index() -> str:
    """Plain liveness banner."""
    return "PDF Tools Backend is running!"


@router.get("/healthz")
async def health_check(request: Request) -> JSONResponse:
    """
    Basic health check endpoint.

    Returns:
        JSONResponse: Health status and basic information
    """
    app_settings = request.app.state.settings
    health = HealthResponse(
        status="healthy",
        service=app_settings.APP_NAME,
        version=app_settings.VERSION,
        environment=app_settings.ENVIRONMENT,
    )
    return JSONResponse(status_code=200, content=health.model_dump(mode="json", exclude_none=True))


@router.get("/health")
async def detailed_health_check(request: Request) -> JSONResponse:
    """
    Detailed health check endpoint with system information.

    Returns:
        JSONResponse: Detailed health status and system metrics
    """
    app_settings = request.app.state.settings
    try:
        system_info = {
            "platform": platform.system(),
            "platform_version": platform.version(),
            "python_version": platform.python_version(),
            "architecture": platform.architecture()[0]
        }

        # Scratch disk usage matters most here: every job writes there
        system_metrics = {
            "cpu_percent": psutil.cpu_percent(interval=None),
            "memory_percent": psutil.virtual_memory().percent,
            "scratch_disk_percent": psutil.disk_usage(app_settings.SCRATCH_DIR).percent
        }

        dependencies_status = await run_in_threadpool(check_dependencies, app_settings)
    except Exception as e:
        logger.error(f"Detailed health check failed: {e}")
        raise HTTPException(status_code=503, detail="Service unhealthy")

    health = HealthResponse(
        status="healthy",
        service=app_settings.APP_NAME,
        version=app_settings.VERSION,
        environment=app_settings.ENVIRONMENT,
        system=system_info,
        metrics=system_metrics,
        dependencies=dependencies_status,
    )
    return JSONResponse(status_code=200, content=health.model_dump(mode="json"))


def check_dependencies(app_settings: Settings) -> dict[str, bool]:
    """
    Check the status of the external converters.

    Returns:
        dict: Availability of each converter
    """
    tools = {
        "libreoffice": (app_settings.LIBREOFFICE_PATH, "--version"),
        "ghostscript": (app_settings.GHOSTSCRIPT_PATH, "--version"),
        "imagemagick": (app_settings.IMAGEMAGICK_PATH, "-version"),
    }
    return {
        name: get_command_version(path, flag) is not None
        for name, (path, flag) in tools.items()
    }


@router.get("/ready")
async def readiness_check(request: Request) -> JSONResponse:
    """
    Readiness check endpoint for container health checks.

    Returns:
        JSONResponse: 200 when every converter is available, 503 otherwise
    """
    app_settings = request.app.state.settings
    dependencies = await run_in_threadpool(check_dependencies, app_settings)

    if all(dependencies.values()):
        return JSONResponse(
            status_code=200,
            content={
                "status": "ready",
                "service": app_settings.APP_NAME,
                "timestamp": datetime.utcnow().isoformat()
            }
        )
    return JSONResponse(
        status_code=503,
        content={
            "status": "not_ready",
            "service": app_settings.APP_NAME,
            "missing_dependencies": [
                dep for dep, status in dependencies.items()
                if not status
            ],
            "timestamp": datetime.utcnow().isoformat()
        }
    )
