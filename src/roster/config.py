"""Configuration management for roster."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from roster.ignore_utils import DEFAULT_IGNORE_PATTERNS
from roster.models import ComparisonPolicy

ROSTER_FILE_NAME = ".roster.yml"

# Special values for the runtime block of a roster file
THREADS_NO_LIMIT = 0  # use one worker per CPU
DEPTH_NO_LIMIT = 0  # unlimited recursion


class RosterSettings(BaseSettings):
    """Process-wide settings for the roster CLI and service."""

    roster_file_name: str = Field(
        default=ROSTER_FILE_NAME,
        description="Name of the roster file kept at the root of each scanned directory",
    )
    update: bool = Field(
        default=False,
        description="Write scan results back to the roster file",
    )
    log_level: str = Field(default="WARNING", description="Console log level")
    log_file: Optional[Path] = Field(default=None, description="Optional debug log file")

    model_config = SettingsConfigDict(
        env_prefix="ROSTER_",
        extra="ignore",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    @field_validator("roster_file_name")
    @classmethod
    def ensure_plain_name(cls, v: str) -> str:
        """The roster file name is a basename, never a path."""
        if not v or os.sep in v or "/" in v:
            raise ValueError(f"roster file name must be a plain file name: {v!r}")
        return v


@dataclass(frozen=True)
class ScanConfig:
    """Runtime tunables for one scan, read from the roster file's config block."""

    threads: int = THREADS_NO_LIMIT
    max_depth: int = DEPTH_NO_LIMIT
    policy: ComparisonPolicy = field(default_factory=ComparisonPolicy.all)
    ignore: Tuple[str, ...] = DEFAULT_IGNORE_PATTERNS

    @property
    def worker_count(self) -> int:
        """Number of worker threads, resolving ``THREADS_NO_LIMIT`` to the CPU count."""
        if self.threads <= THREADS_NO_LIMIT:
            return os.cpu_count() or 1
        return self.threads

    def within_depth(self, relative_path: str) -> bool:
        """True if a slash-separated relative path lies within ``max_depth``."""
        if self.max_depth <= DEPTH_NO_LIMIT:
            return True
        return relative_path.count("/") + 1 <= self.max_depth
