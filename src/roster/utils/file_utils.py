"""Utilities for file operations."""
import os
from pathlib import Path
from typing import Optional

import xxhash
from loguru import logger

from roster.exceptions import RosterError

# Read size used when streaming file content through the hasher
CHUNK_SIZE = 65536

# Suffix of the sibling file written before an atomic replace
TEMP_SUFFIX = ".tmp"


class FileError(RosterError):
    """Base exception for file operations."""
    pass


class FileWriteError(FileError):
    """Raised when file operations fail."""
    pass


def compute_checksum(path: Path, chunk_size: int = CHUNK_SIZE) -> str:
    """
    Compute the XXH64 checksum of a file's content.

    The file is streamed in chunks so memory use stays flat regardless of
    file size.

    Args:
        path: File to hash
        chunk_size: Number of bytes read per iteration

    Returns:
        XXH64 hex digest (16 characters)

    Raises:
        OSError: If the file cannot be opened or read
    """
    hasher = xxhash.xxh64()
    with open(path, "rb") as f:
        while chunk := f.read(chunk_size):
            hasher.update(chunk)
    return hasher.hexdigest()


def temp_path_for(path: Path) -> Path:
    """Sibling path that ``write_file_atomic`` writes before replacing ``path``."""
    return path.with_name(f"{path.name}{TEMP_SUFFIX}")


def write_file_atomic(path: Path, content: str, mode: Optional[int] = None) -> None:
    """
    Write file with atomic operation using temporary file.

    The temporary file is created with ``mode`` already applied, so its
    content is never visible with wider permissions than the target's.

    Args:
        path: Target file path
        content: Content to write
        mode: Permission bits applied to the file before it replaces the target

    Raises:
        FileWriteError: If write operation fails
    """
    temp_path = temp_path_for(path)
    create_mode = 0o666 if mode is None else mode
    try:
        # a leftover from a crashed write may carry other permissions
        temp_path.unlink(missing_ok=True)
        fd = os.open(temp_path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, create_mode)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        if mode is not None:
            os.chmod(temp_path, mode)
        temp_path.replace(path)
    except OSError as e:
        temp_path.unlink(missing_ok=True)
        logger.error(f"Failed to write file: {path}: {e}")
        raise FileWriteError(f"Failed to write file {path}: {e}") from e
