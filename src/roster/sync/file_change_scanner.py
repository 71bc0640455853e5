"""Service for detecting changes between the filesystem and a roster index."""

import os
import queue
import stat
import threading
from enum import Enum
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union

from loguru import logger

from roster.config import ROSTER_FILE_NAME, ScanConfig
from roster.exceptions import DirectoryNotFoundError, InvalidPathError, ScanError
from roster.ignore_utils import IgnorePredicate
from roster.models import Candidate, take_snapshot
from roster.sync.aggregator import ResultAggregator
from roster.sync.index import RosterIndex
from roster.sync.utils import SyncReport
from roster.utils.file_utils import TEMP_SUFFIX

# Placed on the work queue once per worker when dispatch is finished
_STOP = None


class Classification(str, Enum):
    """Outcome of comparing a file on disk with its index entry."""

    NEW = "new"
    CHANGED = "changed"
    UNCHANGED = "unchanged"


class FileChangeScanner:
    """
    Walks a directory tree and classifies every file against a roster index.

    The calling thread walks the tree and hands candidates to a fixed pool of
    worker threads through a bounded queue, so the walk never runs further ahead
    than one queued file per worker. Workers snapshot each file, compare it
    with the index and update the index in place. Once the pool and the result
    aggregator have both drained, indexed files that were never confirmed are
    reported deleted and expelled from the index.

    A scanner is bound to one index; scans against the same index must not
    overlap.
    """

    def __init__(
        self,
        index: RosterIndex,
        config: Optional[ScanConfig] = None,
        roster_file_name: str = ROSTER_FILE_NAME,
    ):
        self.index = index
        self.config = config or ScanConfig()
        self.roster_file_name = roster_file_name
        # the roster file and the temporary file it is saved through
        self._own_files = {roster_file_name, f"{roster_file_name}{TEMP_SUFFIX}"}
        if not self.config.policy.enabled:
            raise ValueError("comparison policy must enable at least one attribute")
        # compiled up front so a bad pattern fails before anything is walked
        self.ignore = IgnorePredicate(self.config.ignore)

    def keep(self, relative_path: str) -> bool:
        """True if a regular file at ``relative_path`` should be classified."""
        if relative_path.rsplit("/", 1)[-1] in self._own_files:
            return False
        if not self.config.within_depth(relative_path):
            return False
        return not self.ignore.matches(relative_path)

    def walk(self, directory: Path) -> Iterator[Candidate]:
        """
        Yield every regular file under ``directory`` that should be classified.

        Directories are descended but never yielded. Symlinks, devices and other
        special files are skipped, as are the roster file itself and ignored
        paths.

        Raises:
            ScanError: If a directory cannot be listed or a file cannot be stat'ed
        """

        def on_walk_error(error: OSError):
            logger.error(f"Walk failed at {error.filename}: {error}")
            raise ScanError(f"cannot read {error.filename}: {error.strerror or error}") from error

        max_depth = self.config.max_depth
        for dirpath, dirnames, filenames in os.walk(directory, onerror=on_walk_error):
            current = Path(dirpath)
            rel_dir = current.relative_to(directory).as_posix()
            prefix = "" if rel_dir == "." else f"{rel_dir}/"

            # files below a directory at max depth can never be candidates
            if max_depth and prefix.count("/") + 1 >= max_depth:
                dirnames.clear()

            dirnames.sort()
            filenames.sort()

            for filename in filenames:
                rel_path = f"{prefix}{filename}"
                try:
                    st = os.lstat(current / filename)
                except FileNotFoundError:
                    logger.debug(f"Vanished before stat: {rel_path}")
                    continue
                except OSError as e:
                    logger.error(f"Cannot stat {rel_path}: {e}")
                    raise ScanError(f"cannot stat {rel_path}: {e}") from e

                if not stat.S_ISREG(st.st_mode):
                    logger.debug(f"Skipping non-regular file: {rel_path}")
                    continue
                if not self.keep(rel_path):
                    continue
                yield Candidate(path=rel_path, stat=st)

    def classify(self, directory: Path, candidate: Candidate) -> Classification:
        """
        Compare one candidate with its index entry and update the index.

        New and changed files get their fresh snapshot written to the index.
        Every classified file is confirmed present for the current scan.

        Raises:
            OSError: If the file cannot be read; the index is left untouched
        """
        policy = self.config.policy
        prior = self.index.get(candidate.path)
        snapshot = take_snapshot(directory, candidate, policy)

        if prior is None or not prior.valid(policy):
            outcome = Classification.NEW
        elif policy.equal(prior, snapshot):
            outcome = Classification.UNCHANGED
        else:
            outcome = Classification.CHANGED

        if outcome is not Classification.UNCHANGED:
            self.index.put(candidate.path, snapshot)
        self.index.confirm(candidate.path)

        logger.debug(f"{outcome.value}: {candidate.path}")
        return outcome

    def _work(
        self,
        directory: Path,
        work_queue: "queue.Queue[Optional[Candidate]]",
        aggregator: ResultAggregator,
        errors: Dict[str, str],
        errors_lock: threading.Lock,
        cancelled: threading.Event,
    ) -> None:
        while True:
            candidate = work_queue.get()
            if candidate is _STOP:
                return
            if cancelled.is_set():
                continue

            try:
                outcome = self.classify(directory, candidate)
            except Exception as e:
                logger.warning(f"Failed to check {candidate.path}: {e}")
                with errors_lock:
                    errors[candidate.path] = str(e)
                continue

            if outcome is Classification.NEW:
                aggregator.new.emit(candidate.path)
            elif outcome is Classification.CHANGED:
                aggregator.modified.emit(candidate.path)

    def scan(self, directory: Union[Path, str]) -> SyncReport:
        """
        Scan ``directory`` and report new, modified and deleted files.

        The index is updated in place: new and modified files carry their fresh
        snapshot, deleted files are removed. Files that failed to be read are
        listed in ``SyncReport.errors`` and appear in none of the other lists;
        their index entries are kept as they were.

        Args:
            directory: Root of the tree to scan

        Returns:
            SyncReport with sorted path lists

        Raises:
            DirectoryNotFoundError: If ``directory`` does not exist
            InvalidPathError: If ``directory`` is not a directory
            ScanError: If the walk fails; workers that already finished keep
                their index updates
        """
        directory = Path(directory)
        if not directory.exists():
            raise DirectoryNotFoundError(directory)
        if not directory.is_dir():
            raise InvalidPathError(directory)

        workers = self.config.worker_count
        logger.info(f"Scanning {directory} with {workers} workers")
        self.index.begin_scan(self.ignore, keep=self.config.within_depth)

        aggregator = ResultAggregator()
        errors: Dict[str, str] = {}
        errors_lock = threading.Lock()
        cancelled = threading.Event()
        work_queue: "queue.Queue[Optional[Candidate]]" = queue.Queue(maxsize=workers)

        pool: List[threading.Thread] = []
        dispatched = 0
        try:
            for i in range(workers):
                thread = threading.Thread(
                    target=self._work,
                    args=(directory, work_queue, aggregator, errors, errors_lock, cancelled),
                    name=f"roster-worker-{i}",
                    daemon=True,
                )
                thread.start()
                pool.append(thread)

            for candidate in self.walk(directory):
                work_queue.put(candidate)
                dispatched += 1
        except BaseException:
            cancelled.set()
            raise
        finally:
            for _ in pool:
                work_queue.put(_STOP)
            for thread in pool:
                thread.join()
            aggregator.close()
            aggregator.join()

        # every worker has exited, so the pending-absence set is final
        deleted = self.index.absentees()
        unreadable = [path for path in deleted if path in errors]
        deleted = [path for path in deleted if path not in errors]
        self.index.expel(deleted)

        report = SyncReport(
            new=aggregator.new_paths,
            modified=aggregator.modified_paths,
            deleted=deleted,
            errors=dict(sorted(errors.items())),
        )

        logger.info(
            f"Scanned {dispatched} files in {directory}: "
            f"{len(report.new)} new, {len(report.modified)} modified, "
            f"{len(report.deleted)} deleted"
        )
        if report.errors:
            logger.warning(f"{len(report.errors)} files skipped due to errors:")
            for path, error in report.errors.items():
                logger.warning(f"  {path}: {error}")
        if unreadable:
            logger.debug(f"Keeping {len(unreadable)} unreadable files in the index")

        return report
