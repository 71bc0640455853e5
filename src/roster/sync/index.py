"""Thread-safe in-memory index of roster members."""

import threading
from typing import Callable, Dict, Iterable, List, Optional, Set

from loguru import logger

from roster.ignore_utils import IgnorePredicate, filter_paths
from roster.models import AttributeSnapshot


class RosterIndex:
    """
    Mapping from relative file path to its last recorded snapshot.

    Worker threads call ``get``, ``put`` and ``confirm`` concurrently during a
    scan. Member lookups and writes share one lock, the pending-absence set has
    its own; no operation holds both. The underlying dict is never handed out,
    ``members()`` returns a copy.

    The pending-absence set is seeded by ``begin_scan`` and pruned as files are
    confirmed present. Whatever remains once every worker has finished is the
    set of deleted files.
    """

    def __init__(self, members: Optional[Dict[str, AttributeSnapshot]] = None):
        self._members: Dict[str, AttributeSnapshot] = dict(members or {})
        self._absent: Set[str] = set()
        self._members_lock = threading.Lock()
        self._absent_lock = threading.Lock()

    def __len__(self) -> int:
        with self._members_lock:
            return len(self._members)

    def __contains__(self, path: str) -> bool:
        with self._members_lock:
            return path in self._members

    def get(self, path: str) -> Optional[AttributeSnapshot]:
        """Return the recorded snapshot for ``path``, or None if it is not indexed."""
        with self._members_lock:
            return self._members.get(path)

    def put(self, path: str, snapshot: AttributeSnapshot) -> None:
        """Insert or replace the snapshot for ``path``."""
        with self._members_lock:
            self._members[path] = snapshot

    def remove(self, path: str) -> bool:
        """Remove ``path`` from the index. Returns False if it was not indexed."""
        with self._members_lock:
            return self._members.pop(path, None) is not None

    def members(self) -> Dict[str, AttributeSnapshot]:
        """Copy of the current members, safe to iterate."""
        with self._members_lock:
            return dict(self._members)

    def begin_scan(
        self,
        ignore: IgnorePredicate,
        keep: Callable[[str], bool] = lambda path: True,
    ) -> int:
        """
        Seed the pending-absence set for a new scan.

        Every indexed path is expected to be found again, except paths matched
        by ``ignore`` or rejected by ``keep``; those are filtered out of the
        walk, so their entries are preserved rather than reported deleted.

        Returns:
            Number of paths expected to be confirmed
        """
        kept, ignored_count = filter_paths(sorted(self.members()), ignore)
        pending = {path for path in kept if keep(path)}
        with self._absent_lock:
            self._absent = pending
        logger.debug(
            f"Expecting {len(pending)} indexed files "
            f"({ignored_count} ignored, {len(kept) - len(pending)} beyond depth)"
        )
        return len(pending)

    def confirm(self, path: str) -> None:
        """Mark ``path`` as present on disk for the current scan."""
        with self._absent_lock:
            self._absent.discard(path)

    def absentees(self) -> List[str]:
        """Paths that were expected but never confirmed, sorted."""
        with self._absent_lock:
            return sorted(self._absent)

    def expel(self, paths: Iterable[str]) -> List[str]:
        """
        Remove absent paths from both the index and the pending-absence set.

        Must only be called once every worker of the current scan has finished.

        Returns:
            The paths that were actually removed from the index
        """
        removed = []
        for path in paths:
            if self.remove(path):
                removed.append(path)
            with self._absent_lock:
                self._absent.discard(path)
        return removed
