"""Readers for the JSON files written before settings moved into the database."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from launcher.settings.defaults import apply_setting_defaults
from launcher.settings.models import AppData, GlobalSettings, PluginSetting

logger = logging.getLogger(__name__)


def read_settings_file(path: Path) -> GlobalSettings:
    """Parse a global settings file. Raises on I/O or parse errors."""
    return GlobalSettings.model_validate_json(path.read_bytes())


def read_app_data_file(path: Path) -> AppData:
    """Parse an app data file, histories sorted oldest first."""
    app_data = AppData.model_validate_json(path.read_bytes())
    app_data.sort_histories()
    return app_data


def read_plugin_setting_file(path: Path) -> PluginSetting:
    """Parse a ``{Name, Settings}`` plugin settings file."""
    return PluginSetting.model_validate_json(path.read_bytes())


def write_json_file(path: Path, data: dict) -> None:
    """Write pretty-printed JSON, creating the parent directory if needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


def load_legacy_settings(path: Path, defaults: GlobalSettings) -> GlobalSettings:
    """Load the legacy global settings file, falling back to ``defaults``.

    Never raises: a missing, empty or unreadable file yields the defaults,
    and a readable one is back-filled field by field.
    """
    if not path.exists():
        return defaults

    try:
        content = path.read_bytes()
    except OSError as e:
        logger.warning(f"Failed to read {path.name}: {e}, using defaults for migration")
        return defaults

    if not content.strip():
        return defaults

    try:
        loaded = json.loads(content)
        if not isinstance(loaded, dict):
            raise ValueError("settings file does not hold a JSON object")
        settings = GlobalSettings.model_validate(
            merge_over_defaults(defaults.to_json_dict(), loaded)
        )
    except ValueError as e:
        logger.warning(
            f"Failed to parse {path.name}: {e}, using defaults for migration"
        )
        return defaults

    logger.info(f"Loaded {path.name} for migration")
    return apply_setting_defaults(settings, defaults)


def merge_over_defaults(
    defaults: dict[str, Any], loaded: dict[str, Any]
) -> dict[str, Any]:
    """Overlay the fields present in ``loaded`` on ``defaults``.

    Nested objects, such as the per-OS values, merge key by key so a file
    that only sets ``WinValue`` keeps the default mac and linux variants.
    A ``null`` leaves the default in place.
    """
    merged = dict(defaults)
    for key, value in loaded.items():
        if value is None:
            continue
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = merge_over_defaults(current, value)
        else:
            merged[key] = value
    return merged


def load_legacy_app_data(path: Path) -> AppData:
    """Load the legacy app data file; app data is optional, so never raises."""
    if not path.exists():
        return AppData()

    try:
        content = path.read_bytes()
        if not content.strip():
            return AppData()
        app_data = AppData.model_validate_json(content)
    except (OSError, ValidationError) as e:
        logger.warning(f"Failed to load {path.name}: {e}, using empty app data")
        return AppData()

    app_data.sort_histories()
    return app_data
