"""Tests for root-confined file access."""

import pytest

from dirban.errors import NotFound, ParseError, PathTraversal
from dirban.storage import Storage


@pytest.fixture
def storage(tmp_path):
    return Storage(tmp_path / "root")


def test_write_and_read_json(storage):
    storage.write_json({"a": 1, "b": "ü"}, "x", "doc.json")
    assert storage.read_json("x", "doc.json") == {"a": 1, "b": "ü"}
    text = storage.read_text("x", "doc.json")
    assert text.endswith("\n")
    assert '  "a": 1' in text


def test_write_leaves_no_temp_files(storage):
    storage.write_text("one", "f.txt")
    storage.write_text("two", "f.txt")
    assert storage.read_text("f.txt") == "two"
    assert sorted(p.name for p in storage.root.iterdir()) == ["f.txt"]


def test_read_missing(storage):
    with pytest.raises(NotFound):
        storage.read_bytes("missing.txt")


def test_read_invalid_json(storage):
    storage.write_text("{not json", "bad.json")
    with pytest.raises(ParseError):
        storage.read_json("bad.json")


def test_read_non_utf8(storage):
    storage.write_bytes(b"\xff\xfe\x00", "bin.txt")
    with pytest.raises(ParseError):
        storage.read_text("bin.txt")


def test_path_traversal_rejected(storage):
    with pytest.raises(PathTraversal):
        storage.path("..", "outside.txt")
    with pytest.raises(PathTraversal):
        storage.path("a/../../outside.txt")


def test_absolute_parts_stay_inside(storage):
    assert storage.path("/etc/passwd") == storage.root / "etc" / "passwd"


def test_list_dir_hides_dotfiles_and_sorts(storage):
    storage.write_text("", "b.txt")
    storage.write_text("", "a.txt")
    storage.write_text("", ".hidden")
    storage.mkdir("__MACOSX")
    assert [e.name for e in storage.list_dir()] == ["a.txt", "b.txt"]


def test_list_dir_missing(storage):
    with pytest.raises(NotFound):
        storage.list_dir("nope")


def test_list_subdirs(storage):
    storage.mkdir("one")
    storage.mkdir("two")
    storage.write_text("", "file.txt")
    assert storage.list_subdirs() == ["one", "two"]
    assert storage.list_subdirs("nope") == []


def test_remove_is_idempotent(storage):
    storage.write_text("x", "dir", "f.txt")
    assert storage.remove("dir") is True
    assert storage.remove("dir") is False
    assert not storage.exists("dir")


def test_remove_refuses_root(storage):
    storage.mkdir()
    with pytest.raises(PathTraversal):
        storage.remove()


def test_remove_symlink_to_file(storage):
    target = storage.write_text("keep", "target.txt")
    storage.root.joinpath("link.txt").symlink_to(target)

    assert storage.remove("link.txt") is True
    assert not storage.root.joinpath("link.txt").is_symlink()
    assert target.read_text() == "keep"


def test_remove_symlink_to_dir(storage):
    storage.write_text("keep", "real", "f.txt")
    storage.root.joinpath("alias").symlink_to(storage.root / "real")

    assert storage.remove("alias") is True
    assert not storage.root.joinpath("alias").is_symlink()
    assert storage.read_text("real", "f.txt") == "keep"
