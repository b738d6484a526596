"""
Utilities package for the PDF Tools Backend.

This package contains utility modules for common operations.
"""

from .fs import (
    ensure_directory,
    get_file_info,
    safe_unlink,
)
from .shell import (
    CommandResult,
    check_command_available,
    get_command_version,
    run_command_safely,
)

__all__ = [
    "run_command_safely", "check_command_available",
    "get_command_version", "CommandResult",
    "ensure_directory", "safe_unlink", "get_file_info",
]
