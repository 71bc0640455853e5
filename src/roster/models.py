"""Core value types describing the verifiable state of indexed files.

An ``AttributeSnapshot`` records what was measured about one file during one
scan. Which attributes are measured, and which participate in equality, is
decided by a ``ComparisonPolicy``. Attributes that were not measured are
``None``; sentinel encodings only exist in the persisted roster document
(see ``roster.schemas``).
"""

import os
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from roster.utils.file_utils import compute_checksum


@dataclass(frozen=True)
class ComparisonPolicy:
    """Which file attributes are measured and compared."""

    filesize: bool = True
    permissions: bool = True
    lastmodtime: bool = True
    checksum: bool = True

    @classmethod
    def all(cls) -> "ComparisonPolicy":
        return cls(filesize=True, permissions=True, lastmodtime=True, checksum=True)

    @property
    def enabled(self) -> bool:
        """True if at least one attribute is selected."""
        return self.filesize or self.permissions or self.lastmodtime or self.checksum

    def equal(self, a: "AttributeSnapshot", b: "AttributeSnapshot") -> bool:
        """Compare two snapshots using only the attributes enabled in this policy."""
        return (
            (not self.filesize or a.size == b.size)
            and (not self.permissions or a.perms == b.perms)
            and (not self.lastmodtime or a.mtime == b.mtime)
            and (not self.checksum or a.checksum == b.checksum)
        )


@dataclass(frozen=True)
class AttributeSnapshot:
    """Immutable point-in-time record of a file's verifiable attributes."""

    size: Optional[int] = None
    perms: Optional[int] = None
    mtime: Optional[int] = None
    checksum: Optional[str] = None

    def valid(self, policy: ComparisonPolicy) -> bool:
        """A snapshot is valid when a policy-enabled attribute was actually measured."""
        return not policy.equal(self, UNMEASURED)


UNMEASURED = AttributeSnapshot()


@dataclass(frozen=True)
class Candidate:
    """A regular file accepted by the walk and waiting for classification."""

    path: str
    stat: os.stat_result


def take_snapshot(
    root: Path, candidate: Candidate, policy: ComparisonPolicy
) -> AttributeSnapshot:
    """
    Measure the attributes of a candidate file selected by ``policy``.

    Size, permission bits and modification time come from the stat result
    gathered during the walk. The checksum requires reading the whole file
    and is only computed when the policy asks for it.

    Raises:
        OSError: If the file cannot be read while computing the checksum
    """
    st = candidate.stat
    return AttributeSnapshot(
        size=st.st_size if policy.filesize else None,
        perms=stat.S_IMODE(st.st_mode) if policy.permissions else None,
        mtime=int(st.st_mtime) if policy.lastmodtime else None,
        checksum=compute_checksum(root / candidate.path) if policy.checksum else None,
    )
