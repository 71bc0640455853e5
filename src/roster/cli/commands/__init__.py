"""CLI commands for roster."""

from . import config, scan

__all__ = ["config", "scan"]
