from .roster_service import RosterService, ScanHandlers, TakeSummary

__all__ = ["RosterService", "ScanHandlers", "TakeSummary"]
