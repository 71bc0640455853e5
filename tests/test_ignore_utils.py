"""Tests for ignore pattern handling."""

import pytest

from roster.exceptions import IgnorePatternError
from roster.ignore_utils import (
    DEFAULT_IGNORE_PATTERNS,
    IgnorePredicate,
    compile_pattern,
    filter_paths,
)


def test_default_patterns_skip_vcs_metadata():
    predicate = IgnorePredicate(DEFAULT_IGNORE_PATTERNS)
    assert predicate.matches(".git/HEAD")
    assert predicate.matches("vendor/lib/.svn/entries")
    assert not predicate.matches("src/gitignore.txt")


def test_regex_is_searched_anywhere():
    predicate = IgnorePredicate([r"\.tmp$", "^build/"])
    assert predicate("a/b/c.tmp")
    assert predicate("build/out.o")
    assert not predicate("src/build/out.o")


def test_backtick_pattern_is_literal():
    regex = compile_pattern("`photos (1).jpg`")
    assert regex.search("album/photos (1).jpg")
    assert not regex.search("album/photos 1.jpg")


def test_single_backtick_is_regex():
    assert compile_pattern("`").search("a`b")


def test_invalid_pattern_raises():
    with pytest.raises(IgnorePatternError, match=r"\(unclosed"):
        IgnorePredicate(["ok", "(unclosed"])


def test_empty_predicate_keeps_everything():
    assert not IgnorePredicate().matches("anything")


def test_filter_paths():
    kept, ignored = filter_paths([".git/config", "a.txt", "b.txt"], IgnorePredicate([r"\.git"]))
    assert kept == ["a.txt", "b.txt"]
    assert ignored == 1
