"""Exceptions raised by roster."""


class RosterError(Exception):
    """Base class for all roster errors."""

    pass


class DirectoryNotFoundError(RosterError):
    """Raised when a scan root or roster directory does not exist"""

    def __init__(self, path):
        super().__init__(f"directory not found: {path}")
        self.path = path


class InvalidPathError(RosterError):
    """Raised when a path that must be a directory is something else"""

    def __init__(self, path):
        super().__init__(f"invalid file path: {path}")
        self.path = path


class NotRegularFileError(RosterError):
    """Raised when the roster file exists but is not a regular file"""

    def __init__(self, path):
        super().__init__(f"not a regular file: {path}")
        self.path = path


class RosterFormatError(RosterError):
    """Raised when a roster file cannot be parsed or fails validation"""

    pass


class IgnorePatternError(RosterError):
    """Raised when an ignore pattern fails to compile"""

    def __init__(self, pattern: str, reason: str):
        super().__init__(f"invalid ignore pattern {pattern!r}: {reason}")
        self.pattern = pattern


class ScanError(RosterError):
    """Raised when traversal of a directory tree fails and the scan is aborted"""

    pass
