"""Tests for file utilities."""

import os
import stat
from pathlib import Path

import pytest
import xxhash

from roster.utils import file_utils
from roster.utils.file_utils import (
    FileWriteError,
    compute_checksum,
    temp_path_for,
    write_file_atomic,
)


def test_compute_checksum_empty_file(tmp_path: Path):
    path = tmp_path / "empty"
    path.write_bytes(b"")
    assert compute_checksum(path) == "ef46db3751d8e999"


def test_compute_checksum_streams_in_chunks(tmp_path: Path):
    data = bytes(range(256)) * 1000
    path = tmp_path / "data.bin"
    path.write_bytes(data)

    checksum = compute_checksum(path, chunk_size=1000)
    assert checksum == xxhash.xxh64(data).hexdigest()
    assert len(checksum) == 16


def test_compute_checksum_is_order_sensitive(tmp_path: Path):
    a = tmp_path / "a"
    b = tmp_path / "b"
    a.write_bytes(b"abcd")
    b.write_bytes(b"dcba")
    assert compute_checksum(a) != compute_checksum(b)


def test_compute_checksum_missing_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        compute_checksum(tmp_path / "missing")


def test_write_file_atomic(tmp_path: Path):
    """Test atomic file writing."""
    test_file = tmp_path / "test.yml"
    write_file_atomic(test_file, "content: 1\n", mode=0o600)

    assert test_file.read_text() == "content: 1\n"
    assert stat.S_IMODE(test_file.stat().st_mode) == 0o600
    # Temp file should be cleaned up
    assert not (tmp_path / "test.yml.tmp").exists()


def test_write_file_atomic_error(tmp_path: Path):
    """Test error handling in atomic write."""
    test_file = tmp_path / "missing_dir" / "test.yml"
    with pytest.raises(FileWriteError):
        write_file_atomic(test_file, "test content")


def test_write_file_atomic_creates_temp_with_mode(tmp_path: Path, monkeypatch):
    """The temporary file is never created with wider permissions than requested."""
    modes = []
    real_chmod = os.chmod

    def record_chmod(path, mode, *args, **kwargs):
        modes.append(stat.S_IMODE(os.stat(path).st_mode))
        return real_chmod(path, mode, *args, **kwargs)

    monkeypatch.setattr(file_utils.os, "chmod", record_chmod)
    test_file = tmp_path / "test.yml"
    write_file_atomic(test_file, "secret: 1\n", mode=0o600)

    assert modes == [0o600]
    assert stat.S_IMODE(test_file.stat().st_mode) == 0o600


def test_write_file_atomic_replaces_stale_temp(tmp_path: Path):
    stale = temp_path_for(tmp_path / "test.yml")
    stale.write_text("leftover")
    stale.chmod(0o644)

    write_file_atomic(tmp_path / "test.yml", "fresh\n", mode=0o600)

    assert (tmp_path / "test.yml").read_text() == "fresh\n"
    assert stat.S_IMODE((tmp_path / "test.yml").stat().st_mode) == 0o600
    assert not stale.exists()
