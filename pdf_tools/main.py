"""
FastAPI application entry point for the PDF Tools Backend.

This module initializes the FastAPI application with proper configuration,
middleware, and routing for the file conversion service.
"""

import sys
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from loguru import logger

from pdf_tools.api import conversion, health
from pdf_tools.config import Settings, get_settings, settings
from pdf_tools.middleware import ErrorHandlingMiddleware, LoggingMiddleware
from pdf_tools.services.orchestrator import ConversionOrchestrator
from pdf_tools.services.registry import build_registry
from pdf_tools.utils.fs import ensure_directory
from pdf_tools.utils.shell import check_command_available


def validate_tool_paths(app_settings: Settings) -> None:
    """Validate that required external tools are available."""
    required_tools = {
        "libreoffice": app_settings.LIBREOFFICE_PATH,
        "gs": app_settings.GHOSTSCRIPT_PATH,
        "convert": app_settings.IMAGEMAGICK_PATH,
    }

    missing_tools = []
    for tool_name, tool_path in required_tools.items():
        if Path(tool_path).is_absolute() and Path(tool_path).exists():
            logger.info(f"Tool validated: {tool_name} at {tool_path}")
        elif check_command_available(tool_path):
            logger.info(f"Tool found in PATH: {tool_path}")
        else:
            missing_tools.append(f"{tool_name} (expected at {tool_path})")
            logger.warning(f"Tool not found: {tool_name} at {tool_path}")

    if missing_tools and app_settings.ENVIRONMENT == "production":
        raise RuntimeError(
            f"Required tools not found in production: {', '.join(missing_tools)}. "
            "Please ensure LibreOffice, Ghostscript and ImageMagick are installed."
        )
    elif missing_tools:
        logger.warning(
            f"Some tools not found (non-fatal in {app_settings.ENVIRONMENT}): {', '.join(missing_tools)}"
        )


def prepare_scratch(app_settings: Settings) -> Path:
    """
    Create the scratch directory and its converter output subdirectory.

    Returns:
        Path: Resolved scratch directory
    """
    scratch_dir = ensure_directory(Path(app_settings.SCRATCH_DIR).resolve())
    ensure_directory(scratch_dir / app_settings.OUTPUT_SUBDIR)
    return scratch_dir


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for FastAPI application.

    Handles startup and shutdown events.
    """
    app_settings: Settings = app.state.settings

    # Startup
    logger.info(f"Starting {app_settings.APP_NAME}")
    logger.info(f"Environment: {app_settings.ENVIRONMENT}")
    logger.info(f"Scratch directory: {app_settings.SCRATCH_DIR}")

    try:
        validate_tool_paths(app_settings)
    except RuntimeError as exc:
        logger.error(f"Tool validation failed: {exc}")
        raise

    yield

    # Shutdown
    logger.info(f"Shutting down {app_settings.APP_NAME}")


def create_app(app_settings: Settings | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings: Settings to use instead of the environment-derived ones

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    app_settings = app_settings or get_settings()

    app = FastAPI(
        title=app_settings.APP_NAME,
        description="Converts and compresses office documents, PDFs and images using external tools",
        version=app_settings.VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan
    )

    # Registry and orchestrator are built once and only read afterwards
    prepare_scratch(app_settings)
    registry = build_registry(app_settings)
    app.state.settings = app_settings
    app.state.registry = registry
    app.state.orchestrator = ConversionOrchestrator.from_settings(registry, app_settings)

    setup_middleware(app, app_settings)
    setup_routers(app)
    setup_logging(app_settings)

    return app


def setup_middleware(app: FastAPI, app_settings: Settings) -> None:
    """
    Configure middleware for the FastAPI application.

    Args:
        app: FastAPI application instance
        app_settings: Application settings
    """
    # Innermost: turns escaped exceptions into JSON 500s
    app.add_middleware(ErrorHandlingMiddleware)  # type: ignore

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.ALLOWED_ORIGINS,
        allow_credentials="*" not in app_settings.ALLOWED_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition"],
    )

    # Trusted host middleware
    app.add_middleware(
        TrustedHostMiddleware,
        allowed_hosts=app_settings.ALLOWED_HOSTS
    )

    # Outermost: request ids and timing
    app.add_middleware(LoggingMiddleware)  # type: ignore


def setup_routers(app: FastAPI) -> None:
    """
    Include API routers in the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    app.include_router(health.root_router)
    app.include_router(health.router, prefix="/api/v1", tags=["health"])
    app.include_router(conversion.api_router, prefix="/api/v1", tags=["conversion"])
    # Catch-all POST /{operation}; included last
    app.include_router(conversion.router, tags=["conversion"])


def setup_logging(app_settings: Settings) -> None:
    """
    Configure logging with loguru.
    """
    logger.remove()  # Remove default handler

    # Add console handler
    logger.add(
        sink=sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        level=app_settings.LOG_LEVEL,
        colorize=True
    )

    # Add file handler for production
    if app_settings.ENVIRONMENT == "production":
        log_dir = Path("logs")
        log_dir.mkdir(exist_ok=True)

        logger.add(
            "logs/app.log",
            rotation="1 day",
            retention="30 days",
            level=app_settings.LOG_LEVEL,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"
        )


# Create the FastAPI application instance
app = create_app()


def run() -> None:
    """Console entry point: serve the application with uvicorn."""
    uvicorn.run(
        "pdf_tools.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )


if __name__ == "__main__":
    run()
