"""Settings management CLI commands."""

from __future__ import annotations

import json
from typing import Any

import click
import clicycle
from pydantic_core import to_jsonable_python

from launcher import __version__
from launcher.errors import SettingsError
from launcher.settings import SettingKey, SettingsManager


def format_value(value: Any) -> str:
    """Render a setting the way it would be passed to ``settings set``."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value if value else "not set"
    if isinstance(value, int):
        return str(value)
    return json.dumps(to_jsonable_python(value, by_alias=True), ensure_ascii=False)


def list_settings(manager: SettingsManager):
    """Show all current settings."""
    clicycle.header("Current Settings")
    clicycle.info(f"Version: {__version__}")

    clicycle.section("Application Settings")
    for key in SettingKey:
        clicycle.info(f"{key.value}: {format_value(manager.get_setting(key))}")


def get_value(manager: SettingsManager, key: str):
    """Get a setting value."""
    try:
        value = manager.get_setting(key)
    except SettingsError as e:
        clicycle.error(str(e))
        clicycle.info("Use 'launcher settings list' to see available settings")
        raise click.exceptions.Exit(1) from e

    clicycle.info(f"{key}: {format_value(value)}")


def set_value(manager: SettingsManager, key: str, value: str):
    """Set a setting value."""
    try:
        setting_key = manager.update_setting(key, value)
    except (SettingsError, ValueError) as e:
        raise click.ClickException(f"Failed to set {key}: {e}") from e

    clicycle.success(
        f"Set {setting_key.value}: {format_value(manager.get_setting(setting_key))}"
    )
