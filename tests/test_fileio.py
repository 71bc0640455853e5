"""Tests for reading and writing roster files."""

import stat
from pathlib import Path

import pytest
import yaml

from roster.config import ScanConfig
from roster.exceptions import (
    DirectoryNotFoundError,
    InvalidPathError,
    NotRegularFileError,
    RosterFormatError,
)
from roster.fileio import ROSTER_FILE_MODE, RosterFile, dump_roster, load_roster, save_roster
from roster.models import AttributeSnapshot, ComparisonPolicy
from roster.sync import RosterIndex


def test_missing_roster_uses_defaults(tmp_path: Path):
    roster = load_roster(tmp_path / ".roster.yml")
    assert roster.exists is False
    assert len(roster.index) == 0
    assert roster.config.policy == ComparisonPolicy.all()
    assert roster.config.ignore == (r"\.git", r"\.svn")


def test_save_and_load(tmp_path: Path):
    path = tmp_path / ".roster.yml"
    config = ScanConfig(threads=2, max_depth=4, ignore=("`a b`",))
    index = RosterIndex(
        {
            "z.txt": AttributeSnapshot(size=3, perms=0o644, mtime=1_600_000_000, checksum="0a"),
            "a/b.txt": AttributeSnapshot(size=0, checksum="ef46db3751d8e999"),
        }
    )
    save_roster(RosterFile(path=path, config=config, index=index))

    assert stat.S_IMODE(path.stat().st_mode) == ROSTER_FILE_MODE
    assert not path.with_name(".roster.yml.tmp").exists()

    loaded = load_roster(path)
    assert loaded.exists
    assert loaded.config == config
    assert loaded.index.members() == index.members()


def test_dump_layout(tmp_path: Path):
    index = RosterIndex({"b.txt": AttributeSnapshot(size=1), "a.txt": AttributeSnapshot(size=2)})
    text = dump_roster(RosterFile(path=tmp_path / "r.yml", index=index))
    data = yaml.safe_load(text)

    assert list(data) == ["config", "members"]
    assert list(data["config"]) == ["runtime", "verify", "ignore"]
    assert list(data["members"]) == ["a.txt", "b.txt"]
    assert data["members"]["b.txt"] == {"size": 1, "perm": 0xFFFFFFFF, "last": -1, "hash": ""}


def test_existing_roster_without_ignore_keeps_it_empty(tmp_path: Path):
    path = tmp_path / ".roster.yml"
    path.write_text("config:\n  runtime:\n    threads: 1\n")
    assert load_roster(path).config.ignore == ()


def test_empty_roster_file(tmp_path: Path):
    path = tmp_path / ".roster.yml"
    path.write_text("")
    roster = load_roster(path)
    assert roster.exists
    assert len(roster.index) == 0


def test_missing_directory(tmp_path: Path):
    with pytest.raises(DirectoryNotFoundError):
        load_roster(tmp_path / "nope" / ".roster.yml")


def test_parent_is_not_a_directory(tmp_path: Path):
    parent = tmp_path / "file"
    parent.write_text("x")
    with pytest.raises(InvalidPathError):
        load_roster(parent / ".roster.yml")


def test_roster_path_is_a_directory(tmp_path: Path):
    (tmp_path / ".roster.yml").mkdir()
    with pytest.raises(NotRegularFileError):
        load_roster(tmp_path / ".roster.yml")


def test_invalid_yaml(tmp_path: Path):
    path = tmp_path / ".roster.yml"
    path.write_text("config: [unclosed\n")
    with pytest.raises(RosterFormatError):
        load_roster(path)


def test_invalid_schema(tmp_path: Path):
    path = tmp_path / ".roster.yml"
    path.write_text("members:\n  a.txt:\n    size: lots\n")
    with pytest.raises(RosterFormatError):
        load_roster(path)


def test_not_a_mapping(tmp_path: Path):
    path = tmp_path / ".roster.yml"
    path.write_text("- a\n- b\n")
    with pytest.raises(RosterFormatError):
        load_roster(path)
