"""Pydantic models for the persisted roster document.

A roster file has two top-level blocks:

1. ``config`` holds the runtime tunables, the attributes used to detect
   changes and the ignore patterns
2. ``members`` maps each indexed relative path to its recorded attributes

Unmeasured attributes are written with sentinel values so that every member
row has the same shape. The sentinels are converted to ``None`` on the way
into ``AttributeSnapshot`` and back on the way out.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from roster.config import DEPTH_NO_LIMIT, THREADS_NO_LIMIT, ScanConfig
from roster.ignore_utils import DEFAULT_IGNORE_PATTERNS
from roster.models import AttributeSnapshot, ComparisonPolicy

# Sentinel encodings for unmeasured attributes
NO_SIZE = -1
NO_PERMS = 0xFFFFFFFF
NO_MTIME = -1
NO_CHECKSUM = ""


class RuntimeBlock(BaseModel):
    """Worker count and recursion limit."""

    threads: int = Field(default=THREADS_NO_LIMIT, ge=0)
    maxdepth: int = Field(default=DEPTH_NO_LIMIT, ge=0)


class VerifyBlock(BaseModel):
    """Attributes recorded for indexed files and used to identify changed files."""

    filesize: bool = True
    permissions: bool = True
    lastmodtime: bool = True
    checksum: bool = True

    @model_validator(mode="after")
    def require_one_attribute(self) -> "VerifyBlock":
        if not (self.filesize or self.permissions or self.lastmodtime or self.checksum):
            raise ValueError("at least one verify attribute must be enabled")
        return self

    def to_policy(self) -> ComparisonPolicy:
        return ComparisonPolicy(
            filesize=self.filesize,
            permissions=self.permissions,
            lastmodtime=self.lastmodtime,
            checksum=self.checksum,
        )

    @classmethod
    def from_policy(cls, policy: ComparisonPolicy) -> "VerifyBlock":
        return cls(
            filesize=policy.filesize,
            permissions=policy.permissions,
            lastmodtime=policy.lastmodtime,
            checksum=policy.checksum,
        )


class ConfigBlock(BaseModel):
    """Roster configuration."""

    runtime: RuntimeBlock = Field(default_factory=RuntimeBlock)
    verify: VerifyBlock = Field(default_factory=VerifyBlock)
    ignore: List[str] = Field(default_factory=list)

    @field_validator("ignore", mode="before")
    @classmethod
    def none_is_empty(cls, v):
        return [] if v is None else v

    def to_scan_config(self) -> ScanConfig:
        return ScanConfig(
            threads=self.runtime.threads,
            max_depth=self.runtime.maxdepth,
            policy=self.verify.to_policy(),
            ignore=tuple(self.ignore),
        )

    @classmethod
    def from_scan_config(cls, config: ScanConfig) -> "ConfigBlock":
        return cls(
            runtime=RuntimeBlock(threads=config.threads, maxdepth=config.max_depth),
            verify=VerifyBlock.from_policy(config.policy),
            ignore=list(config.ignore),
        )

    @classmethod
    def default(cls) -> "ConfigBlock":
        """Configuration written for a directory that has no roster file yet."""
        return cls(ignore=list(DEFAULT_IGNORE_PATTERNS))


class MemberStatus(BaseModel):
    """Recorded attributes of one indexed file, sentinel-encoded."""

    size: int = NO_SIZE
    perm: int = NO_PERMS
    last: int = NO_MTIME
    hash: str = NO_CHECKSUM

    @field_validator("hash", mode="before")
    @classmethod
    def none_is_unmeasured(cls, v):
        return NO_CHECKSUM if v is None else str(v)

    def to_snapshot(self) -> AttributeSnapshot:
        return AttributeSnapshot(
            size=None if self.size == NO_SIZE else self.size,
            perms=None if self.perm == NO_PERMS else self.perm,
            mtime=None if self.last == NO_MTIME else self.last,
            checksum=None if self.hash == NO_CHECKSUM else self.hash,
        )

    @classmethod
    def from_snapshot(cls, snapshot: AttributeSnapshot) -> "MemberStatus":
        return cls(
            size=NO_SIZE if snapshot.size is None else snapshot.size,
            perm=NO_PERMS if snapshot.perms is None else snapshot.perms,
            last=NO_MTIME if snapshot.mtime is None else snapshot.mtime,
            hash=NO_CHECKSUM if snapshot.checksum is None else snapshot.checksum,
        )


class RosterDocument(BaseModel):
    """The complete contents of a roster file."""

    config: ConfigBlock = Field(default_factory=ConfigBlock)
    members: Dict[str, MemberStatus] = Field(default_factory=dict)

    @field_validator("members", mode="before")
    @classmethod
    def none_is_empty(cls, v):
        return {} if v is None else v

    def snapshots(self) -> Dict[str, AttributeSnapshot]:
        return {path: status.to_snapshot() for path, status in self.members.items()}

    @classmethod
    def build(
        cls, config: ScanConfig, members: Optional[Dict[str, AttributeSnapshot]] = None
    ) -> "RosterDocument":
        return cls(
            config=ConfigBlock.from_scan_config(config),
            members={
                path: MemberStatus.from_snapshot(snapshot)
                for path, snapshot in sorted((members or {}).items())
            },
        )
