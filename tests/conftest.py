"""Common test fixtures."""

import sys
from pathlib import Path
from typing import Dict, Union

import pytest
from loguru import logger

from roster.config import ScanConfig
from roster.models import ComparisonPolicy
from roster.sync import FileChangeScanner, RosterIndex


def write_files(root: Path, files: Dict[str, Union[str, bytes]]) -> None:
    """Create files under ``root`` from a mapping of relative path to content."""
    for rel_path, content in files.items():
        path = root / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content)


@pytest.fixture
def tree(tmp_path: Path) -> Path:
    """Directory to scan, separate from anything else the test writes."""
    root = tmp_path / "tree"
    root.mkdir()
    return root


@pytest.fixture
def scan_config() -> ScanConfig:
    return ScanConfig(threads=4, policy=ComparisonPolicy.all(), ignore=(r"\.git",))


@pytest.fixture
def index() -> RosterIndex:
    return RosterIndex()


@pytest.fixture
def file_change_scanner(index: RosterIndex, scan_config: ScanConfig) -> FileChangeScanner:
    return FileChangeScanner(index, scan_config)


@pytest.fixture(autouse=True)
def reset_logging():
    """The CLI swaps loguru sinks; put the default one back after each test."""
    yield
    logger.remove()
    logger.add(sys.stderr, level="WARNING")
