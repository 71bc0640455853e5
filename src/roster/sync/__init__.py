from .aggregator import ResultAggregator
from .file_change_scanner import Classification, FileChangeScanner
from .index import RosterIndex
from .utils import SyncReport

__all__ = ["FileChangeScanner", "Classification", "RosterIndex", "ResultAggregator", "SyncReport"]
