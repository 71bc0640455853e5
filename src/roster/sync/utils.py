"""Types and utilities for file sync."""

from dataclasses import dataclass, field
from typing import Dict, List


@dataclass
class SyncReport:
    """Report of file changes found compared to the roster index.

    Attributes:
        new: Files on disk that had no valid index entry
        modified: Indexed files whose attributes differ under the active policy
        deleted: Indexed files that were not found on disk
        errors: Files that could not be classified, mapped to the failure message
    """

    new: List[str] = field(default_factory=list)
    modified: List[str] = field(default_factory=list)
    deleted: List[str] = field(default_factory=list)
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def total_changes(self) -> int:
        """Total number of files that need attention."""
        return len(self.new) + len(self.modified) + len(self.deleted)
