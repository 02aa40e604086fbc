"""Steady-state owner of the live settings and usage history.

The manager is constructed once at startup and handed to its consumers; it
holds no locks, so callers must serialise access (one event thread).
"""

from __future__ import annotations

import logging
import time
from typing import Any

from launcher.errors import PersistenceError
from launcher.settings.collaborators import Collaborators
from launcher.settings.defaults import (
    apply_setting_defaults,
    default_app_data,
    default_global_settings,
)
from launcher.settings.models import (
    MAX_ACTIONED_RESULTS,
    MAX_QUERY_HISTORIES,
    ActionedResult,
    AppData,
    GlobalSettings,
    PluginSetting,
    PluginSettingDefinition,
    QueryHistory,
    get_all_defaults,
    new_result_hash,
)
from launcher.settings.persistence import SnapshotBackend
from launcher.settings.updates import SettingKey, apply_setting_update, read_setting

logger = logging.getLogger(__name__)


def system_timestamp() -> int:
    """Current time in milliseconds."""
    return int(time.time() * 1000)


class SettingsManager:
    """Owns ``GlobalSettings`` and ``AppData`` and persists every change."""

    def __init__(
        self,
        backend: SnapshotBackend,
        collaborators: Collaborators | None = None,
        system_locale: str | None = None,
    ) -> None:
        self.backend = backend
        self.collaborators = collaborators or Collaborators()
        self.system_locale = system_locale
        self._settings = GlobalSettings()
        self._app_data = AppData()
        self._initialized = False

    def init(self) -> None:
        """Load both snapshots, reconcile autostart and start auto backup.

        Settings are essential: a load failure is raised. App data is not, so
        a failure there falls back to empty history.
        """
        self._load_settings()

        try:
            self._load_app_data()
        except Exception as e:
            logger.error(f"Failed to load app data: {e}")
            self._app_data = default_app_data()

        self._reconcile_autostart()
        self._start_auto_backup()
        self._initialized = True

    def shutdown(self) -> None:
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    def _load_settings(self) -> None:
        defaults = default_global_settings(self.system_locale)
        try:
            settings = self.backend.load_settings()
        except Exception as e:
            raise PersistenceError(f"failed to load settings: {e}") from e

        if settings is None:
            self._settings = defaults
            self.save_settings()
            return

        self._settings = apply_setting_defaults(settings, defaults)

    def _load_app_data(self) -> None:
        app_data = self.backend.load_app_data()
        if app_data is None:
            app_data = default_app_data()
            self.backend.save_app_data(app_data)
        self._app_data = app_data

    def _reconcile_autostart(self) -> None:
        try:
            actual = self.collaborators.autostart.is_autostart_enabled()
        except Exception as e:
            logger.error(f"Failed to check autostart status: {e}")
            return

        if actual is None:
            return

        configured = self._settings.enable_autostart.get()
        if actual == configured:
            return

        logger.warning(
            f"Autostart setting mismatch: config {configured}, actual {actual}. "
            "Updating config."
        )
        self._settings.enable_autostart.set(actual)
        try:
            self.save_settings()
        except PersistenceError as e:
            logger.error(f"Failed to save updated autostart setting: {e}")

    def _start_auto_backup(self) -> None:
        if not self._settings.enable_auto_backup:
            return
        try:
            self.collaborators.backup.start_auto_backup()
        except Exception as e:
            logger.error(f"Failed to start auto backup: {e}")

    def get_settings(self) -> GlobalSettings:
        return self._settings

    def get_app_data(self) -> AppData:
        return self._app_data

    def get_setting(self, key: str) -> Any:
        """Current value of one updatable setting; raises ``UnknownSettingError``."""
        return read_setting(self._settings, key)

    def update_setting(self, key: str, value: str) -> SettingKey:
        """Validate, apply and persist one setting.

        Raises ``UnknownSettingError`` for keys outside ``SettingKey`` and
        propagates validation errors unchanged; nothing is mutated then.
        """
        setting_key = apply_setting_update(
            self._settings, self.collaborators, key, value
        )
        self.save_settings()
        return setting_key

    def save_settings(self) -> None:
        try:
            self.backend.save_settings(self._settings)
        except Exception as e:
            logger.error(f"Failed to save settings: {e}")
            raise PersistenceError(f"failed to save settings: {e}") from e
        logger.info("Settings saved")

    def _save_app_data(self, reason: str) -> None:
        try:
            self.backend.save_app_data(self._app_data)
        except Exception as e:
            logger.error(f"Failed to save app data ({reason}): {e}")
            return
        logger.debug(f"App data saved, reason: {reason}")

    def add_query_history(self, query: str) -> None:
        if not query:
            return

        logger.debug(f"Add query history: {query}")
        histories = self._app_data.query_histories
        histories.append(QueryHistory(query=query, timestamp=system_timestamp()))
        if len(histories) > MAX_QUERY_HISTORIES:
            del histories[: len(histories) - MAX_QUERY_HISTORIES]

        self._save_app_data("add query history")

    def get_latest_query_history(self, n: int) -> list[QueryHistory]:
        """Up to ``n`` most recent queries, newest first."""
        if n <= 0:
            return []
        histories = self._app_data.query_histories
        n = min(n, len(histories))
        return list(reversed(histories[len(histories) - n :]))

    def add_actioned_result(
        self, plugin_id: str, title: str, subtitle: str, query: str
    ) -> None:
        result_hash = new_result_hash(plugin_id, title, subtitle)
        actioned = self._app_data.actioned_results.setdefault(result_hash, [])
        actioned.append(ActionedResult(timestamp=system_timestamp(), query=query))
        if len(actioned) > MAX_ACTIONED_RESULTS:
            del actioned[: len(actioned) - MAX_ACTIONED_RESULTS]

        self._save_app_data("add actioned result")

    def add_favorite_result(self, plugin_id: str, title: str, subtitle: str) -> None:
        logger.info(f"Add favorite result: {title}, {subtitle}")
        result_hash = new_result_hash(plugin_id, title, subtitle)
        self._app_data.favorite_results[result_hash] = True
        self._save_app_data("add favorite result")

    def is_favorite_result(self, plugin_id: str, title: str, subtitle: str) -> bool:
        result_hash = new_result_hash(plugin_id, title, subtitle)
        return result_hash in self._app_data.favorite_results

    def remove_favorite_result(
        self, plugin_id: str, title: str, subtitle: str
    ) -> None:
        logger.info(f"Remove favorite result: {title}, {subtitle}")
        result_hash = new_result_hash(plugin_id, title, subtitle)
        self._app_data.favorite_results.pop(result_hash, None)
        self._save_app_data("remove favorite result")

    def load_plugin_setting(
        self,
        plugin_id: str,
        plugin_name: str,
        definitions: list[PluginSettingDefinition],
    ) -> PluginSetting:
        """Load a plugin's settings, back-filling keys it declared since.

        Values the user already set are kept; the returned name is always
        ``plugin_name``.
        """
        defaults = get_all_defaults(definitions)
        stored = self.backend.load_plugin_setting(plugin_id)
        if stored is None:
            return PluginSetting(name=plugin_name, settings=defaults)

        settings = stored.settings if stored.settings is not None else {}
        for key, value in defaults.items():
            settings.setdefault(key, value)

        return PluginSetting(name=plugin_name, settings=settings)

    def save_plugin_setting(self, plugin_id: str, plugin_setting: PluginSetting) -> None:
        try:
            self.backend.save_plugin_setting(plugin_id, plugin_setting)
        except Exception as e:
            logger.error(f"Failed to save plugin setting {plugin_id}: {e}")
            raise PersistenceError(f"failed to save plugin setting: {e}") from e
        logger.info(f"Plugin setting saved: {plugin_id}")
