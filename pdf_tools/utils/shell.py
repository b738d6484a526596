"""
Shell utilities for safe subprocess execution.

Commands are always passed to the OS as argument lists, never through a
shell, so no argument is ever interpreted by a command-line parser.
"""

import os
import subprocess
import tempfile
from pathlib import Path, PurePath
from typing import NamedTuple

from loguru import logger

RESTRICTED_PATH = "/usr/bin:/bin:/usr/local/bin"


class CommandResult(NamedTuple):
    """Result of a command execution."""
    returncode: int
    stdout: str
    stderr: str


def run_command_safely(
    cmd: list[str],
    cwd: Path | None = None,
    timeout: int | None = None,
    env: dict[str, str] | None = None
) -> CommandResult:
    """
    Run a command with a restricted environment and capture its output.

    Args:
        cmd: Command to run as list of strings
        cwd: Working directory for the command
        timeout: Timeout in seconds, None to wait indefinitely
        env: Extra environment variables

    Returns:
        CommandResult with return code and output

    Raises:
        subprocess.TimeoutExpired: If command times out
        OSError: If the executable cannot be launched
        ValueError: If command contains unsafe arguments
    """
    _validate_command_safety(cmd)

    # Prepare environment
    run_env = {
        "PATH": RESTRICTED_PATH,
        # LibreOffice writes its user profile under HOME
        "HOME": os.environ.get("HOME", tempfile.gettempdir()),
        "LANG": os.environ.get("LANG", "C.UTF-8"),
    }
    if env:
        run_env.update(env)

    logger.debug(f"Running command: {' '.join(cmd)}")
    if cwd:
        logger.debug(f"Working directory: {cwd}")

    try:
        result = subprocess.run(
            cmd,
            cwd=cwd,
            capture_output=True,
            text=True,
            errors="replace",
            timeout=timeout,
            env=run_env,
            check=False  # Don't raise exception on non-zero return code
        )
    except subprocess.TimeoutExpired:
        logger.error(f"Command timed out after {timeout}s: {' '.join(cmd)}")
        raise
    except OSError as exc:
        logger.error(f"Command could not be started: {exc}")
        raise

    logger.debug(f"Command completed with return code: {result.returncode}")
    if result.stdout:
        logger.debug(f"STDOUT: {result.stdout[:200]}...")
    if result.stderr:
        logger.debug(f"STDERR: {result.stderr[:200]}...")

    return CommandResult(
        returncode=result.returncode,
        stdout=result.stdout,
        stderr=result.stderr
    )


def _validate_command_safety(cmd: list[str]) -> None:
    """
    Validate command arguments.

    Args:
        cmd: Command to validate

    Raises:
        ValueError: If command is empty or contains unsafe arguments
    """
    if not cmd:
        raise ValueError("Empty command")

    for part in cmd:
        if "\x00" in part or "\n" in part:
            raise ValueError(f"Control character in command argument: {part!r}")
        # Path traversal in any path-like argument, including -sOutputFile=...
        value = part.split("=", 1)[-1]
        if ".." in PurePath(value).parts:
            raise ValueError(f"Path traversal detected in argument: {part}")


def check_command_available(cmd: str) -> bool:
    """
    Check if a command is reachable with the PATH converters run under.

    Args:
        cmd: Command to check

    Returns:
        True if command is available, False otherwise
    """
    try:
        result = subprocess.run(
            ["which", cmd],
            capture_output=True,
            text=True,
            timeout=10, check=False,
            env={"PATH": RESTRICTED_PATH},
        )
        return result.returncode == 0
    except (subprocess.TimeoutExpired, FileNotFoundError):
        return False


def get_command_version(cmd: str, version_flag: str = "--version") -> str | None:
    """
    Get version information for a command.

    Args:
        cmd: Command to check
        version_flag: Flag to get version (default: --version)

    Returns:
        First line of the version output or None if not available
    """
    try:
        result = run_command_safely([cmd, version_flag], timeout=30)
    except (OSError, subprocess.TimeoutExpired, ValueError):
        return None
    if result.returncode == 0 and result.stdout.strip():
        return result.stdout.strip().splitlines()[0]
    return None
