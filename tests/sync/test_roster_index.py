"""Test the thread-safe roster index."""

import threading

from roster.ignore_utils import IgnorePredicate
from roster.models import AttributeSnapshot
from roster.sync import RosterIndex


def snap(size: int) -> AttributeSnapshot:
    return AttributeSnapshot(size=size)


def test_put_get_remove():
    index = RosterIndex()
    assert index.get("a.txt") is None

    index.put("a.txt", snap(1))
    index.put("a.txt", snap(2))
    assert index.get("a.txt") == snap(2)
    assert len(index) == 1

    assert index.remove("a.txt") is True
    assert index.remove("a.txt") is False
    assert "a.txt" not in index


def test_members_is_a_copy():
    index = RosterIndex({"a.txt": snap(1)})
    members = index.members()
    members["b.txt"] = snap(2)
    assert "b.txt" not in index


def test_begin_scan_skips_ignored_and_out_of_depth_paths():
    index = RosterIndex(
        {
            "a.txt": snap(1),
            ".git/config": snap(2),
            "deep/er/file.txt": snap(3),
        }
    )
    expected = index.begin_scan(
        IgnorePredicate([r"\.git"]), keep=lambda path: path.count("/") < 2
    )
    assert expected == 1
    assert index.absentees() == ["a.txt"]


def test_confirm_and_expel():
    index = RosterIndex({"a.txt": snap(1), "b.txt": snap(2), "c.txt": snap(3)})
    index.begin_scan(IgnorePredicate())

    index.confirm("a.txt")
    index.confirm("not-indexed.txt")
    assert index.absentees() == ["b.txt", "c.txt"]

    removed = index.expel(index.absentees())
    assert removed == ["b.txt", "c.txt"]
    assert index.absentees() == []
    assert sorted(index.members()) == ["a.txt"]


def test_begin_scan_resets_pending():
    index = RosterIndex({"a.txt": snap(1)})
    index.begin_scan(IgnorePredicate())
    index.confirm("a.txt")
    index.begin_scan(IgnorePredicate())
    assert index.absentees() == ["a.txt"]


def test_concurrent_updates():
    index = RosterIndex({f"f{i}": snap(0) for i in range(400)})
    index.begin_scan(IgnorePredicate())

    def worker(offset: int):
        for i in range(offset, 400, 8):
            path = f"f{i}"
            index.get(path)
            index.put(path, snap(i))
            index.confirm(path)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert index.absentees() == []
    assert all(index.get(f"f{i}") == snap(i) for i in range(400))
