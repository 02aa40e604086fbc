"""Where the settings manager keeps its snapshots.

Two backends share one protocol: the database backend used after migration,
and a JSON file backend that reads and writes the legacy file layout.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from config.paths import Locations
from launcher.database import Database, PluginSettingStore, SettingStore, decode_json
from launcher.settings.legacy import (
    read_app_data_file,
    read_plugin_setting_file,
    read_settings_file,
    write_json_file,
)
from launcher.settings.models import AppData, GlobalSettings, PluginSetting

logger = logging.getLogger(__name__)

# Legacy field name -> key in the core namespace, where they differ
RENAMED_KEYS = {"LastQueryMode": "QueryMode"}

QUERY_HISTORIES_KEY = "QueryHistories"
ACTIONED_RESULTS_KEY = "ActionedResults"
FAVORITE_RESULTS_KEY = "FavoriteResults"


def _store_key(field_name: str) -> str:
    alias = GlobalSettings.model_fields[field_name].alias or field_name
    return RENAMED_KEYS.get(alias, alias)


def core_setting_keys() -> dict[str, str]:
    """Core namespace key for every settings field, in declaration order."""
    return {_store_key(name): name for name in GlobalSettings.model_fields}


def settings_to_entries(settings: GlobalSettings) -> dict[str, Any]:
    """Split a settings snapshot into one value per core key."""
    return {
        key: getattr(settings, field_name)
        for key, field_name in core_setting_keys().items()
    }


def settings_from_entries(raw: dict[str, str]) -> GlobalSettings | None:
    """Rebuild settings from stored core keys; ``None`` when none are stored."""
    data: dict[str, Any] = {}
    for key, field_name in core_setting_keys().items():
        if key not in raw:
            continue
        if GlobalSettings.model_fields[field_name].annotation is str:
            data[field_name] = raw[key]
        else:
            data[field_name] = decode_json(raw[key])
    if not data:
        return None
    return GlobalSettings.model_validate(data)


class SnapshotBackend(Protocol):
    """Loads and saves whole snapshots; ``None`` means nothing stored yet."""

    def load_settings(self) -> GlobalSettings | None: ...

    def save_settings(self, settings: GlobalSettings) -> None: ...

    def load_app_data(self) -> AppData | None: ...

    def save_app_data(self, app_data: AppData) -> None: ...

    def load_plugin_setting(self, plugin_id: str) -> PluginSetting | None: ...

    def save_plugin_setting(self, plugin_id: str, setting: PluginSetting) -> None: ...


class DatabaseBackend:
    """Snapshots in the target settings store."""

    def __init__(self, database: Database) -> None:
        self.database = database

    def load_settings(self) -> GlobalSettings | None:
        with self.database.session() as db:
            raw = SettingStore(db).get_all()
        return settings_from_entries(raw)

    def save_settings(self, settings: GlobalSettings) -> None:
        # Every key is rewritten in one transaction, never just the changed one
        with self.database.session() as db:
            store = SettingStore(db)
            for key, value in settings_to_entries(settings).items():
                store.set(key, value)

    def load_app_data(self) -> AppData | None:
        with self.database.session() as db:
            store = SettingStore(db)
            histories = store.get(QUERY_HISTORIES_KEY)
            actioned = store.get(ACTIONED_RESULTS_KEY)
            favorites = store.get(FAVORITE_RESULTS_KEY)

        if histories is None and actioned is None and favorites is None:
            return None

        app_data = AppData.model_validate(
            {
                "query_histories": decode_json(histories, []),
                "actioned_results": decode_json(actioned, {}),
                "favorite_results": decode_json(favorites, {}),
            }
        )
        app_data.sort_histories()
        return app_data

    def save_app_data(self, app_data: AppData) -> None:
        with self.database.session() as db:
            store = SettingStore(db)
            store.set(QUERY_HISTORIES_KEY, app_data.query_histories)
            store.set(ACTIONED_RESULTS_KEY, app_data.actioned_results)
            store.set(FAVORITE_RESULTS_KEY, app_data.favorite_results)

    def load_plugin_setting(self, plugin_id: str) -> PluginSetting | None:
        with self.database.session() as db:
            stored = PluginSettingStore(db, plugin_id).get_all()
        if not stored:
            return None
        return PluginSetting(settings=stored)

    def save_plugin_setting(self, plugin_id: str, setting: PluginSetting) -> None:
        with self.database.session() as db:
            store = PluginSettingStore(db, plugin_id)
            for key, value in (setting.settings or {}).items():
                store.set(key, value)


class JsonFileBackend:
    """Snapshots in the legacy JSON files."""

    def __init__(self, locations: Locations) -> None:
        self.locations = locations

    def load_settings(self) -> GlobalSettings | None:
        path = self.locations.legacy_setting_path
        if not path.exists():
            return None
        return read_settings_file(path)

    def save_settings(self, settings: GlobalSettings) -> None:
        write_json_file(self.locations.legacy_setting_path, settings.to_json_dict())

    def load_app_data(self) -> AppData | None:
        path = self.locations.legacy_app_data_path
        if not path.exists():
            return None
        return read_app_data_file(path)

    def save_app_data(self, app_data: AppData) -> None:
        write_json_file(self.locations.legacy_app_data_path, app_data.to_json_dict())

    def load_plugin_setting(self, plugin_id: str) -> PluginSetting | None:
        path = self.locations.plugin_setting_path(plugin_id)
        if not path.exists():
            return None
        return read_plugin_setting_file(path)

    def save_plugin_setting(self, plugin_id: str, setting: PluginSetting) -> None:
        write_json_file(
            self.locations.plugin_setting_path(plugin_id), setting.to_json_dict()
        )
