"""
Upload intake.

Persists an uploaded file to the shared scratch directory under a
unique, service-generated name before any conversion runs.
"""

import re
import secrets
import shutil
import time
from pathlib import Path, PurePath
from typing import BinaryIO

from fastapi import UploadFile
from loguru import logger

from pdf_tools.exceptions import UploadTooLargeError
from pdf_tools.models.conversion import InputDescriptor
from pdf_tools.utils.fs import safe_unlink

_CHUNK_SIZE = 1024 * 1024
_EXTENSION_RE = re.compile(r"[^a-z0-9]")


def scratch_name(original_name: str) -> str:
    """
    Generate a unique scratch filename that keeps the original extension.

    The name is ``<epoch-ms>-<random>`` plus the original extension
    reduced to lowercase alphanumerics.
    """
    extension = _EXTENSION_RE.sub("", PurePath(original_name).suffix.lower())
    unique = f"{int(time.time() * 1000)}-{secrets.randbelow(10**9)}"
    return f"{unique}.{extension}" if extension else unique


def _copy_limited(source: BinaryIO, target: Path, max_size: int) -> int:
    written = 0
    with open(target, "wb") as out:
        while chunk := source.read(_CHUNK_SIZE):
            written += len(chunk)
            if written > max_size:
                raise UploadTooLargeError(written, max_size)
            out.write(chunk)
    return written


def save_upload(upload: UploadFile | None, scratch_dir: Path, max_size: int) -> InputDescriptor | None:
    """
    Save an uploaded file into ``scratch_dir``.

    Args:
        upload: Uploaded file, or None if the request carried none
        scratch_dir: Shared scratch directory
        max_size: Maximum accepted size in bytes

    Returns:
        InputDescriptor of the saved file, or None when no file was sent

    Raises:
        UploadTooLargeError: If the upload exceeds ``max_size``
    """
    if upload is None or not upload.filename:
        return None

    original_name = PurePath(upload.filename.replace("\\", "/")).name
    target = (scratch_dir / scratch_name(original_name)).resolve()

    try:
        size = _copy_limited(upload.file, target, max_size)
    except BaseException:
        safe_unlink(target)
        raise

    logger.info(f"Saved upload '{original_name}' ({size} bytes) to: {target}")
    return InputDescriptor(path=target, original_name=original_name, size=size)


def copy_to_scratch(source: Path, scratch_dir: Path, original_name: str | None = None) -> InputDescriptor:
    """Place an existing local file into the scratch directory as an upload."""
    original_name = original_name or source.name
    target = (scratch_dir / scratch_name(original_name)).resolve()
    shutil.copyfile(source, target)
    return InputDescriptor(path=target, original_name=original_name, size=target.stat().st_size)
