"""Engine settings and their TOML persistence.

Settings live in ~/.config/twinpane/config.toml. A missing file means
defaults; an unreadable or invalid file is an error.

Example file:
    platform = "auto"
    extra_protected_paths = ["/srv/backups"]
    unprotected_paths = []
    log_level = "WARNING"
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated, Literal

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from twinpane.core.paths import ensure_dir, get_config_path

logger = logging.getLogger(__name__)

PlatformTag = Literal["auto", "linux", "darwin", "windows"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


class EngineSettings(BaseModel):
    """User settings for the file operation engine.

    Attributes:
        platform: Platform profile tag, or "auto" to detect.
        extra_protected_paths: Paths protected in addition to the system roots.
        unprotected_paths: Default protected paths to release.
        log_level: Logging level used by the CLI.
    """

    model_config = ConfigDict(extra="forbid")

    platform: Annotated[
        PlatformTag,
        Field(description="Platform profile tag (auto = detect)"),
    ] = "auto"
    extra_protected_paths: Annotated[
        list[str],
        Field(description="Additional paths on which mutation is refused"),
    ] = []
    unprotected_paths: Annotated[
        list[str],
        Field(description="Default protected paths to release"),
    ] = []
    log_level: Annotated[
        LogLevel,
        Field(description="Log level for the command-line interface"),
    ] = "WARNING"


class SettingsError(Exception):
    """Base exception for settings errors."""


class SettingsParseError(SettingsError):
    """Raised when the settings file is not valid TOML."""


def load_settings(path: Path | None = None) -> EngineSettings:
    """Load settings from a TOML file.

    Args:
        path: Settings file. If None, uses the default config path.

    Returns:
        Validated EngineSettings; defaults if the file does not exist.

    Raises:
        SettingsParseError: If the TOML syntax is invalid.
        SettingsError: If the file cannot be read or the content doesn't
            match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        logger.debug("No settings file at %s, using defaults", config_path)
        return EngineSettings()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML syntax in {config_path}: {e}"
        raise SettingsParseError(msg) from e
    except OSError as e:
        msg = f"Failed to read settings: {e}"
        raise SettingsError(msg) from e

    try:
        return EngineSettings.model_validate(data)
    except ValidationError as e:
        msg = f"Invalid settings in {config_path}: {e}"
        raise SettingsError(msg) from e


def save_settings(settings: EngineSettings, path: Path | None = None) -> Path:
    """Save settings to a TOML file.

    The file is written to a temporary file in the same directory and
    moved into place with os.replace().

    Args:
        settings: Settings to save.
        path: Target file. If None, uses the default config path.

    Returns:
        Path where the settings were saved.

    Raises:
        SettingsError: If the file cannot be written.
    """
    config_path = path or get_config_path()
    try:
        ensure_dir(config_path.parent, "config")
    except RuntimeError as e:
        raise SettingsError(str(e)) from e

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(settings.model_dump(), f)
        os.replace(tmp_path, config_path)
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        msg = f"Failed to write settings: {e}"
        raise SettingsError(msg) from e

    logger.info("Settings saved to %s", config_path)
    return config_path
