"""Unit tests for the settings commands and global options."""

from pathlib import Path

from twinpane import __version__
from twinpane.cli.main import app
from twinpane.core.config import load_settings
from typer.testing import CliRunner

runner = CliRunner()


class TestGlobalOptions:
    """Tests for options handled by the main callback."""

    def test_version(self) -> None:
        """--version prints the version and exits."""
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert f"twinpane version {__version__}" in result.output

    def test_no_args_shows_help(self) -> None:
        """Running without a command shows usage."""
        result = runner.invoke(app, [])

        assert "Usage" in result.output

    def test_invalid_settings_file(self, tmp_path: Path) -> None:
        """A broken settings file aborts with exit code 1."""
        config_file = tmp_path / "config.toml"
        config_file.write_text("platform = [\n")

        result = runner.invoke(app, ["--config", str(config_file), "config", "show"])

        assert result.exit_code == 1
        assert "Invalid TOML" in result.output


class TestConfigInit:
    """Tests for config init."""

    def test_writes_defaults(self, tmp_path: Path) -> None:
        """init creates a loadable settings file."""
        config_file = tmp_path / "twinpane" / "config.toml"

        result = runner.invoke(app, ["--config", str(config_file), "config", "init"])

        assert result.exit_code == 0
        assert "Settings written" in result.output
        assert load_settings(config_file).platform == "auto"

    def test_existing_file_kept(self, tmp_path: Path) -> None:
        """An existing file is kept without --force."""
        config_file = tmp_path / "config.toml"
        config_file.write_text('platform = "linux"\n')

        result = runner.invoke(app, ["--config", str(config_file), "config", "init"])

        assert result.exit_code == 0
        assert "already exists" in result.output
        assert load_settings(config_file).platform == "linux"

    def test_force_overwrites(self, tmp_path: Path) -> None:
        """--force replaces an existing file with defaults."""
        config_file = tmp_path / "config.toml"
        config_file.write_text('platform = "linux"\n')

        result = runner.invoke(app, ["--config", str(config_file), "config", "init", "--force"])

        assert result.exit_code == 0
        assert load_settings(config_file).platform == "auto"


class TestConfigShow:
    """Tests for config show."""

    def test_shows_settings_and_protected_paths(self, tmp_path: Path) -> None:
        """show lists settings and the effective protected paths."""
        config_file = tmp_path / "config.toml"
        config_file.write_text(
            'platform = "linux"\nextra_protected_paths = ["/srv/vault"]\n'
        )

        result = runner.invoke(app, ["--config", str(config_file), "config", "show"])

        assert result.exit_code == 0
        assert "Protected paths:" in result.output
        assert "/srv/vault" in result.output
        assert "/etc" in result.output
