"""
Centralized path management for the launcher.

Every location the settings subsystem touches is resolved once into a
``Locations`` value and passed explicitly to the migrator and the manager.
"""

from __future__ import annotations

import os
import platform
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from config.project import get_project
from launcher.errors import ConfigurationError

if TYPE_CHECKING:
    from config import Config

APP_NAME = get_project().name
APP_ID = "launcher"


def get_user_data_dir() -> Path:
    """Get the user data directory for the application."""
    system = platform.system()

    if system == "Darwin":  # macOS
        return Path.home() / "Library" / "Application Support" / APP_NAME
    if system == "Windows":
        # Use APPDATA environment variable or fallback
        appdata = os.environ.get("APPDATA")
        if appdata:
            return Path(appdata) / APP_NAME
        return Path.home() / "AppData" / "Roaming" / APP_NAME
    # Linux and others
    # Follow XDG Base Directory Specification
    xdg_data = os.environ.get("XDG_DATA_HOME")
    if xdg_data:
        return Path(xdg_data) / APP_NAME
    return Path.home() / ".local" / "share" / APP_NAME


def get_project_root() -> Path:
    """Get the project root directory."""
    return Path(__file__).parent.parent


@dataclass(frozen=True)
class Locations:
    """Resolved on-disk locations for settings, app data and plugin data."""

    user_data_dir: Path
    app_id: str = APP_ID

    @property
    def settings_dir(self) -> Path:
        return self.user_data_dir / "settings"

    @property
    def plugin_settings_dir(self) -> Path:
        # Plugins share the settings directory with the legacy global files,
        # which is why the plugin scan skips names containing the app id.
        return self.settings_dir

    @property
    def legacy_setting_path(self) -> Path:
        return self.settings_dir / f"{self.app_id}.setting.json"

    @property
    def legacy_app_data_path(self) -> Path:
        return self.settings_dir / f"{self.app_id}.app.data.json"

    @property
    def database_path(self) -> Path:
        return self.user_data_dir / f"{self.app_id}.db"

    def plugin_setting_path(self, plugin_id: str) -> Path:
        return self.plugin_settings_dir / f"{plugin_id}.json"

    def ensure_dirs(self) -> None:
        """Create the data and settings directories if they are missing."""
        self.settings_dir.mkdir(parents=True, exist_ok=True)

    @classmethod
    def from_config(cls, config: Config) -> Locations:
        """Build locations from configuration, honouring a data dir override."""
        if not config.app_id:
            # Every file name contains "", which would hide all plugin files
            raise ConfigurationError("LAUNCHER_APP_ID must not be empty")
        data_dir = config.data_dir or get_user_data_dir()
        return cls(user_data_dir=Path(data_dir).expanduser(), app_id=config.app_id)


__all__ = [
    "APP_ID",
    "APP_NAME",
    "Locations",
    "get_project_root",
    "get_user_data_dir",
]
