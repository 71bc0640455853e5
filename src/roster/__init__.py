"""roster - detect new, modified and deleted files in a directory tree."""

__version__ = "0.2.0"
