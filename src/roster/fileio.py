"""
File I/O operations for roster.
Handles reading and writing roster files (configuration plus member index).
"""

import stat
from dataclasses import dataclass, field
from pathlib import Path

import yaml
from loguru import logger
from pydantic import ValidationError

from roster.config import ScanConfig
from roster.exceptions import (
    DirectoryNotFoundError,
    InvalidPathError,
    NotRegularFileError,
    RosterFormatError,
)
from roster.schemas import ConfigBlock, RosterDocument
from roster.sync.index import RosterIndex
from roster.utils.file_utils import write_file_atomic

# Permission bits of roster files written to disk
ROSTER_FILE_MODE = 0o600


@dataclass
class RosterFile:
    """A roster file loaded into memory: where it lives, its config and its index."""

    path: Path
    config: ScanConfig = field(default_factory=ScanConfig)
    index: RosterIndex = field(default_factory=RosterIndex)
    exists: bool = False


def load_roster(path: Path) -> RosterFile:
    """
    Load a roster file.

    A missing roster file is not an error: the returned roster carries the
    default configuration and an empty index, and ``exists`` is False.

    Args:
        path: Path of the roster file

    Returns:
        RosterFile with the parsed configuration and index

    Raises:
        DirectoryNotFoundError: If the directory holding the roster file does not exist
        InvalidPathError: If that directory path is not a directory
        NotRegularFileError: If the roster path exists but is not a regular file
        RosterFormatError: If the file is not valid YAML or fails validation
    """
    path = Path(path)
    directory = path.parent
    if not directory.exists():
        raise DirectoryNotFoundError(directory)
    if not directory.is_dir():
        raise InvalidPathError(directory)

    try:
        mode = path.lstat().st_mode
    except FileNotFoundError:
        logger.debug(f"No roster file at {path}, using defaults")
        return RosterFile(path=path, config=ConfigBlock.default().to_scan_config())

    if not stat.S_ISREG(mode):
        raise NotRegularFileError(path)

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise RosterFormatError(f"invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise RosterFormatError(f"roster file must contain a mapping: {path}")

    try:
        document = RosterDocument.model_validate(data)
    except ValidationError as e:
        raise RosterFormatError(f"invalid roster file {path}: {e}") from e

    logger.debug(f"Loaded {len(document.members)} members from {path}")
    return RosterFile(
        path=path,
        config=document.config.to_scan_config(),
        index=RosterIndex(document.snapshots()),
        exists=True,
    )


def dump_roster(roster: RosterFile) -> str:
    """Format a roster as YAML, members sorted by path."""
    document = RosterDocument.build(roster.config, roster.index.members())
    return yaml.safe_dump(document.model_dump(), sort_keys=False, allow_unicode=True)


def save_roster(roster: RosterFile) -> None:
    """
    Write a roster's configuration and index to disk.

    The file is replaced atomically and readable by its owner only.

    Raises:
        FileWriteError: If the file cannot be written
    """
    write_file_atomic(roster.path, dump_roster(roster), mode=ROSTER_FILE_MODE)
    roster.exists = True
    logger.debug(f"Wrote {len(roster.index)} members to {roster.path}")
