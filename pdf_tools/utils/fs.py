"""
Filesystem utilities for safe file operations.

This module provides filesystem operations on the scratch area with
proper error handling and path validation.
"""

from pathlib import Path

from loguru import logger


def ensure_directory(path: str | Path) -> Path:
    """
    Ensure directory exists, creating it if necessary.

    Args:
        path: Directory path to ensure

    Returns:
        Path object of the directory

    Raises:
        OSError: If directory cannot be created
        ValueError: If path is invalid
    """
    path = Path(path)

    # Security: Validate path
    _validate_path_safety(path)

    try:
        path.mkdir(parents=True, exist_ok=True)
        logger.debug(f"Directory ensured: {path}")
        return path
    except OSError as exc:
        logger.error(f"Failed to create directory {path}: {exc}")
        raise


def safe_unlink(path: str | Path) -> bool:
    """
    Remove a single file, tolerating its absence.

    Args:
        path: File to remove

    Returns:
        True if a file was removed, False if there was nothing to remove

    Raises:
        OSError: If the file exists but cannot be removed
    """
    path = Path(path)
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    logger.debug(f"Removed file: {path}")
    return True


def get_file_info(path: str | Path) -> dict:
    """
    Get file information safely.

    Args:
        path: File path

    Returns:
        Dictionary with file information

    Raises:
        OSError: If file access fails
        ValueError: If path is invalid
    """
    path = Path(path)

    # Security: Validate path
    _validate_path_safety(path)

    if not path.exists():
        raise ValueError(f"File does not exist: {path}")

    try:
        stat = path.stat()
        return {
            "path": str(path),
            "name": path.name,
            "size": stat.st_size,
            "modified": stat.st_mtime,
            "is_file": path.is_file(),
            "extension": path.suffix,
            "stem": path.stem
        }
    except OSError as exc:
        logger.error(f"Failed to get file info for {path}: {exc}")
        raise


def _validate_path_safety(path: Path) -> None:
    """
    Validate path for security issues.

    Args:
        path: Path to validate

    Raises:
        ValueError: If path is unsafe
    """
    try:
        abs_path = path.resolve()
    except OSError:
        raise ValueError(f"Invalid path: {path}")

    # Check for path traversal attempts
    if ".." in path.parts:
        raise ValueError(f"Path traversal detected: {path}")

    # Check for dangerous patterns
    dangerous_prefixes = ["/etc/", "/sys/", "/proc/", "/dev/"]
    path_str = str(abs_path).lower() + "/"

    for prefix in dangerous_prefixes:
        if path_str.startswith(prefix):
            raise ValueError(f"Access to system directory not allowed: {path}")
