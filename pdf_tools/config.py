"""
Configuration settings for the PDF Tools Backend.

This module handles environment variables, application settings,
and configuration validation using Pydantic Settings.
"""

import tempfile

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    All settings can be overridden using environment variables
    with the same name (case-insensitive).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application settings
    APP_NAME: str = "PDF Tools Backend"
    VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False

    # Server settings
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # CORS settings
    ALLOWED_ORIGINS: list[str] = ["*"]
    ALLOWED_HOSTS: list[str] = ["*"]

    # Logging settings
    LOG_LEVEL: str = "INFO"

    # Upload and scratch settings
    MAX_FILE_SIZE: int = 100 * 1024 * 1024  # 100MB
    SCRATCH_DIR: str = tempfile.gettempdir()
    OUTPUT_SUBDIR: str = "converted"

    # External tools settings
    LIBREOFFICE_PATH: str = "libreoffice"
    GHOSTSCRIPT_PATH: str = "gs"
    IMAGEMAGICK_PATH: str = "convert"

    # Conversion settings
    PDF_COMPATIBILITY_LEVEL: str = "1.4"
    IMAGE_QUALITY: int = 80
    CONVERSION_TIMEOUT: int | None = None  # None waits for the tool indefinitely

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment setting."""
        allowed_envs = ["development", "staging", "production"]
        if v not in allowed_envs:
            raise ValueError(f"ENVIRONMENT must be one of {allowed_envs}")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level setting."""
        allowed_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed_levels:
            raise ValueError(f"LOG_LEVEL must be one of {allowed_levels}")
        return v.upper()

    @field_validator("MAX_FILE_SIZE")
    @classmethod
    def validate_max_file_size(cls, v: int) -> int:
        """Validate maximum file size."""
        if v <= 0:
            raise ValueError("MAX_FILE_SIZE must be positive")
        if v > 500 * 1024 * 1024:  # 500MB
            raise ValueError("MAX_FILE_SIZE cannot exceed 500MB")
        return v

    @field_validator("IMAGE_QUALITY")
    @classmethod
    def validate_image_quality(cls, v: int) -> int:
        """Validate image compression quality."""
        if not 1 <= v <= 100:
            raise ValueError("IMAGE_QUALITY must be between 1 and 100")
        return v

    @field_validator("CONVERSION_TIMEOUT")
    @classmethod
    def validate_conversion_timeout(cls, v: int | None) -> int | None:
        """Validate the optional external tool timeout."""
        if v is not None and v <= 0:
            raise ValueError("CONVERSION_TIMEOUT must be positive when set")
        return v


# Create settings instance
settings = Settings()


def get_settings() -> Settings:
    """
    Get application settings.

    Returns:
        Settings: Application settings instance
    """
    return settings


# Note: Environment-specific configurations should be set via environment variables
# Example .env file for production:
#
#   ENVIRONMENT=production
#   LOG_LEVEL=WARNING
#   ALLOWED_ORIGINS=["https://tools.your-domain.com"]
#   SCRATCH_DIR=/var/tmp/pdf-tools
#   LIBREOFFICE_PATH=/usr/bin/soffice
