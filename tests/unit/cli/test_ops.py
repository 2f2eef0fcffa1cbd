"""Unit tests for the file mutation commands."""

from pathlib import Path

import pytest
from twinpane.cli.main import app
from twinpane.filesystem.operator import TEMP_SUFFIX
from typer.testing import CliRunner

runner = CliRunner()


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Settings file path that does not exist yet (defaults apply)."""
    return tmp_path / "config.toml"


@pytest.fixture
def tree(tmp_path: Path) -> Path:
    """Small directory tree on disk."""
    root = tmp_path / "tree"
    (root / "sub").mkdir(parents=True)
    (root / "a.txt").write_text("alpha")
    (root / "sub" / "b.txt").write_text("beta")
    return root


def _invoke(config_file: Path, *args: str, input: str | None = None):
    return runner.invoke(app, ["--config", str(config_file), *args], input=input)


class TestCopyCommand:
    """Tests for the copy command."""

    def test_copy_tree(self, config_file: Path, tree: Path, tmp_path: Path) -> None:
        """copy duplicates a directory tree."""
        result = _invoke(config_file, "copy", str(tree), str(tmp_path / "out"))

        assert result.exit_code == 0
        assert "Copied" in result.output
        assert (tmp_path / "out" / "sub" / "b.txt").read_text() == "beta"

    def test_existing_destination(self, config_file: Path, tree: Path) -> None:
        """An existing file is not overwritten without --overwrite."""
        target = tree / "copy.txt"
        target.write_text("old")

        result = _invoke(config_file, "copy", str(tree / "a.txt"), str(target))

        assert result.exit_code == 1
        assert "already exists" in result.output
        assert target.read_text() == "old"

    def test_overwrite(self, config_file: Path, tree: Path) -> None:
        """--overwrite replaces the destination."""
        target = tree / "copy.txt"
        target.write_text("old")

        result = _invoke(config_file, "copy", "--overwrite", str(tree / "a.txt"), str(target))

        assert result.exit_code == 0
        assert target.read_text() == "alpha"


class TestMoveAndRename:
    """Tests for the move and rename commands."""

    def test_move(self, config_file: Path, tree: Path, tmp_path: Path) -> None:
        """move relocates a tree."""
        result = _invoke(config_file, "move", str(tree), str(tmp_path / "moved"))

        assert result.exit_code == 0
        assert not tree.exists()
        assert (tmp_path / "moved" / "a.txt").exists()

    def test_rename(self, config_file: Path, tree: Path) -> None:
        """rename accepts a bare new name."""
        result = _invoke(config_file, "rename", str(tree / "a.txt"), "renamed.txt")

        assert result.exit_code == 0
        assert (tree / "renamed.txt").read_text() == "alpha"

    def test_rename_missing(self, config_file: Path, tree: Path) -> None:
        """Renaming a missing path fails with exit code 1."""
        result = _invoke(config_file, "rename", str(tree / "ghost"), "spirit")

        assert result.exit_code == 1
        assert "not found" in result.output


class TestDeleteCommand:
    """Tests for the delete command."""

    def test_delete_file(self, config_file: Path, tree: Path) -> None:
        """A file is deleted without confirmation."""
        result = _invoke(config_file, "delete", str(tree / "a.txt"))

        assert result.exit_code == 0
        assert not (tree / "a.txt").exists()

    def test_recursive_with_yes(self, config_file: Path, tree: Path) -> None:
        """--yes skips the confirmation for recursive deletes."""
        result = _invoke(config_file, "delete", "--recursive", "--yes", str(tree))

        assert result.exit_code == 0
        assert not tree.exists()

    def test_recursive_declined(self, config_file: Path, tree: Path) -> None:
        """Declining the prompt leaves the tree in place."""
        result = _invoke(config_file, "delete", "-r", str(tree), input="n\n")

        assert result.exit_code == 0
        assert "Aborted" in result.output
        assert tree.exists()

    def test_non_empty_without_recursive(self, config_file: Path, tree: Path) -> None:
        """A non-empty directory needs --recursive."""
        result = _invoke(config_file, "delete", str(tree))

        assert result.exit_code == 1
        assert "not empty" in result.output

    def test_protected_path(self, config_file: Path) -> None:
        """Protected system roots are refused."""
        result = _invoke(config_file, "delete", "-r", "-y", "/etc")

        assert result.exit_code == 1
        assert "protected path" in result.output

    def test_extra_protected_path_from_settings(self, config_file: Path, tree: Path) -> None:
        """Paths listed in the settings file are protected too."""
        config_file.write_text(f"extra_protected_paths = [{str(tree)!r}]\n")

        result = _invoke(config_file, "delete", "-r", "-y", str(tree))

        assert result.exit_code == 1
        assert tree.exists()


class TestCleanupCommand:
    """Tests for the cleanup command."""

    def test_removes_temp_files(self, config_file: Path, tree: Path) -> None:
        """Temporary copy artifacts are removed and counted."""
        (tree / f"a.txt{TEMP_SUFFIX}").write_text("partial")
        (tree / "sub" / f"b.txt{TEMP_SUFFIX}").write_text("partial")

        result = _invoke(config_file, "cleanup", str(tree))

        assert result.exit_code == 0
        assert "Removed 2 temporary file(s)" in result.output
        assert not list(tree.rglob(f"*{TEMP_SUFFIX}"))

    def test_no_recursive(self, config_file: Path, tree: Path) -> None:
        """--no-recursive leaves subdirectories alone."""
        (tree / "sub" / f"b.txt{TEMP_SUFFIX}").write_text("partial")

        result = _invoke(config_file, "cleanup", "--no-recursive", str(tree))

        assert result.exit_code == 0
        assert "No temporary files found" in result.output
        assert (tree / "sub" / f"b.txt{TEMP_SUFFIX}").exists()
