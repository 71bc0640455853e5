"""Service for scanning directories against their roster files."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, Optional, Union

from loguru import logger

from roster.config import RosterSettings
from roster.fileio import RosterFile, load_roster, save_roster
from roster.sync import FileChangeScanner, SyncReport

PathHandler = Callable[[str], None]


def _ignore_path(path: str) -> None:
    pass


@dataclass
class ScanHandlers:
    """Callbacks invoked once per reported path, in sorted order."""

    on_new: PathHandler = _ignore_path
    on_modified: PathHandler = _ignore_path
    on_deleted: PathHandler = _ignore_path


@dataclass
class TakeSummary:
    """Totals over every directory scanned by ``RosterService.take``."""

    new: int = 0
    modified: int = 0
    deleted: int = 0
    errors: int = 0
    reports: Dict[Path, SyncReport] = field(default_factory=dict)

    @property
    def total_changes(self) -> int:
        return self.new + self.modified + self.deleted


class RosterService:
    """Loads a directory's roster, scans the directory and optionally saves the result."""

    def __init__(self, settings: Optional[RosterSettings] = None):
        self.settings = settings or RosterSettings()

    def roster_path(self, directory: Path) -> Path:
        return Path(directory) / self.settings.roster_file_name

    def load(self, directory: Union[Path, str]) -> RosterFile:
        return load_roster(self.roster_path(Path(directory)))

    def scan_directory(
        self, directory: Union[Path, str], update: Optional[bool] = None
    ) -> SyncReport:
        """
        Scan one directory against its roster file.

        Args:
            directory: Directory holding the roster file
            update: Save the updated roster afterwards; defaults to the settings value

        Returns:
            SyncReport for the directory

        Raises:
            RosterError: If the roster cannot be loaded or the walk fails
        """
        directory = Path(directory)
        update = self.settings.update if update is None else update

        roster = self.load(directory)
        scanner = FileChangeScanner(
            roster.index, roster.config, roster_file_name=self.settings.roster_file_name
        )
        report = scanner.scan(directory)

        if update:
            save_roster(roster)
            logger.info(f"Updated roster {roster.path}")
        return report

    def take(
        self,
        directories: Iterable[Union[Path, str]],
        handlers: Optional[ScanHandlers] = None,
        update: Optional[bool] = None,
    ) -> TakeSummary:
        """
        Scan each directory in turn and report every change through ``handlers``.

        The first directory that fails stops the run; rosters of directories
        already scanned have been saved when ``update`` is set.
        """
        handlers = handlers or ScanHandlers()
        summary = TakeSummary()

        for directory in directories:
            directory = Path(directory)
            report = self.scan_directory(directory, update=update)
            summary.reports[directory] = report

            for path in report.new:
                handlers.on_new(path)
            for path in report.modified:
                handlers.on_modified(path)
            for path in report.deleted:
                handlers.on_deleted(path)

            summary.new += len(report.new)
            summary.modified += len(report.modified)
            summary.deleted += len(report.deleted)
            summary.errors += len(report.errors)

        return summary
