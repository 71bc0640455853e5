"""Utilities for handling ignore patterns and file filtering."""

import re
from typing import Iterable, List, Pattern, Sequence, Tuple

from roster.exceptions import IgnorePatternError

# Version-control metadata directories ignored when a roster is first created
DEFAULT_IGNORE_PATTERNS: Tuple[str, ...] = (r"\.git", r"\.svn")

LITERAL_QUOTE = "`"


def compile_pattern(pattern: str) -> Pattern[str]:
    """Compile a single ignore pattern.

    A pattern surrounded by backticks is matched as a literal string, e.g.
    ``"`build (old)`"``. Anything else is treated as a regular expression.

    Raises:
        IgnorePatternError: If the regular expression does not compile
    """
    if len(pattern) >= 2 and pattern.startswith(LITERAL_QUOTE) and pattern.endswith(LITERAL_QUOTE):
        return re.compile(re.escape(pattern[1:-1]))
    try:
        return re.compile(pattern)
    except re.error as e:
        raise IgnorePatternError(pattern, str(e)) from e


class IgnorePredicate:
    """Decides whether a relative path is excluded from the roster.

    Patterns are searched anywhere in the slash-separated relative path, so
    ``\\.git`` excludes ``.git/HEAD`` as well as ``sub/.git/config``. Instances
    are immutable after construction and safe to share between threads.
    """

    def __init__(self, patterns: Iterable[str] = ()):
        self.patterns: Tuple[str, ...] = tuple(patterns)
        self._compiled: List[Pattern[str]] = [compile_pattern(p) for p in self.patterns]

    def matches(self, relative_path: str) -> bool:
        """True if any pattern matches the path."""
        return any(regex.search(relative_path) for regex in self._compiled)

    def __call__(self, relative_path: str) -> bool:
        return self.matches(relative_path)

    def __repr__(self) -> str:
        return f"IgnorePredicate({list(self.patterns)!r})"


def filter_paths(paths: Sequence[str], predicate: IgnorePredicate) -> Tuple[List[str], int]:
    """Filter a list of relative paths through an ignore predicate.

    Returns:
        Tuple of (kept_paths, ignored_count)
    """
    kept = []
    ignored_count = 0
    for path in paths:
        if predicate.matches(path):
            ignored_count += 1
        else:
            kept.append(path)
    return kept, ignored_count
