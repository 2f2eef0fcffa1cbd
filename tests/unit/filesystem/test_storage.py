"""Tests for LocalStorage on the real filesystem."""

import errno
from pathlib import Path

import pytest
from twinpane.filesystem.storage import LocalStorage


@pytest.fixture
def local() -> LocalStorage:
    return LocalStorage()


class TestLocalStorage:
    """Tests for LocalStorage primitives."""

    def test_classification(self, local: LocalStorage, tmp_path: Path) -> None:
        """Files, directories and links are classified without following links."""
        (tmp_path / "dir").mkdir()
        (tmp_path / "file.txt").write_text("x")
        (tmp_path / "dir_link").symlink_to(tmp_path / "dir")

        assert local.is_dir(str(tmp_path / "dir"))
        assert local.is_file(str(tmp_path / "file.txt"))
        assert local.is_file(str(tmp_path / "dir_link"))
        assert not local.is_dir(str(tmp_path / "dir_link"))
        assert local.read_link(str(tmp_path / "dir_link")) == str(tmp_path / "dir")

    def test_dead_link_exists(self, local: LocalStorage, tmp_path: Path) -> None:
        """A dangling link still exists as an entry."""
        link = tmp_path / "dead"
        link.symlink_to(tmp_path / "missing")
        assert local.exists(str(link))

    def test_list_and_walk(self, local: LocalStorage, tmp_path: Path) -> None:
        """Listings are sorted and walk covers the whole tree."""
        (tmp_path / "sub" / "deeper").mkdir(parents=True)
        (tmp_path / "b.txt").write_text("b")
        (tmp_path / "a.txt").write_text("a")
        (tmp_path / "sub" / "deeper" / "c.txt").write_text("c")

        root = str(tmp_path)
        assert local.list_files(root) == [str(tmp_path / "a.txt"), str(tmp_path / "b.txt")]
        assert local.list_dirs(root) == [str(tmp_path / "sub")]
        assert str(tmp_path / "sub" / "deeper" / "c.txt") in local.list_files(root, recursive=True)
        assert len(list(local.walk(root))) == 5

    def test_move_refuses_existing_destination(self, local: LocalStorage, tmp_path: Path) -> None:
        """move() raises FileExistsError instead of replacing."""
        (tmp_path / "a.txt").write_text("a")
        (tmp_path / "b.txt").write_text("b")

        with pytest.raises(FileExistsError):
            local.move(str(tmp_path / "a.txt"), str(tmp_path / "b.txt"))

        assert (tmp_path / "b.txt").read_text() == "b"

    def test_copy_and_replace(self, local: LocalStorage, tmp_path: Path) -> None:
        """copy_file() duplicates content and replace() renames over a file."""
        (tmp_path / "src.txt").write_text("payload")
        (tmp_path / "dst.txt").write_text("old")

        local.copy_file(str(tmp_path / "src.txt"), str(tmp_path / "dst.txt.tmp"))
        local.replace(str(tmp_path / "dst.txt.tmp"), str(tmp_path / "dst.txt"))

        assert (tmp_path / "dst.txt").read_text() == "payload"
        assert not (tmp_path / "dst.txt.tmp").exists()

    def test_remove_non_empty_dir(self, local: LocalStorage, tmp_path: Path) -> None:
        """Non-recursive removal of a non-empty directory fails with ENOTEMPTY."""
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "f.txt").write_text("f")

        with pytest.raises(OSError) as exc_info:
            local.remove_dir(str(tmp_path / "sub"))

        assert exc_info.value.errno == errno.ENOTEMPTY
        local.remove_dir(str(tmp_path / "sub"), recursive=True)
        assert not (tmp_path / "sub").exists()

    def test_entry(self, local: LocalStorage, tmp_path: Path) -> None:
        """entry() snapshots size, type and an aware modification time."""
        (tmp_path / "f.bin").write_bytes(b"12345")

        entry = local.entry(str(tmp_path / "f.bin"))

        assert entry.name == "f.bin"
        assert entry.size == 5
        assert entry.is_dir is False
        assert entry.modified.tzinfo is not None
        assert local.entry(str(tmp_path)).size == 0
