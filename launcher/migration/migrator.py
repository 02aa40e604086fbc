"""One-shot transition from the legacy JSON files to the settings database.

Core settings, plugin settings, query history and favorites are written in a
single transaction. Core settings are all-or-nothing; the rest is best
effort. Clipboard favorites are reconciled afterwards, outside the
transaction, since they come from a store the clipboard plugin owns.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from config.paths import Locations
from launcher.database import Database, PluginSettingStore, SettingStore
from launcher.errors import MigrationError
from launcher.migration.clipboard import migrate_clipboard_favorites
from launcher.settings.defaults import default_global_settings
from launcher.settings.legacy import (
    load_legacy_app_data,
    load_legacy_settings,
    read_plugin_setting_file,
)
from launcher.settings.models import AppData, GlobalSettings
from launcher.settings.persistence import (
    FAVORITE_RESULTS_KEY,
    QUERY_HISTORIES_KEY,
    settings_to_entries,
)

logger = logging.getLogger(__name__)

BACKUP_SUFFIX = ".bak"


class MigrationStatus(StrEnum):
    SKIPPED = "skipped"
    DONE = "done"


@dataclass
class MigrationResult:
    """Outcome of a migration run."""

    status: MigrationStatus
    reason: str = ""
    core_keys: int = 0
    plugins_migrated: int = 0
    plugins_skipped: int = 0
    plugin_values: int = 0
    query_histories: int = 0
    favorite_results: int = 0
    clipboard_favorites: int = 0
    archived: list[Path] = field(default_factory=list)

    @classmethod
    def skipped(cls, reason: str) -> MigrationResult:
        return cls(status=MigrationStatus.SKIPPED, reason=reason)


def backup_path(path: Path) -> Path:
    return path.with_name(path.name + BACKUP_SUFFIX)


def archive_file(path: Path) -> Path | None:
    """Rename ``path`` to ``<name>.bak``; failures are logged, not raised."""
    target = backup_path(path)
    try:
        path.rename(target)
    except OSError as e:
        logger.warning(f"Failed to rename {path.name} to {target.name}: {e}")
        return None
    logger.info(f"Renamed {path.name} to {target.name}")
    return target


class Migrator:
    """Moves legacy settings into the database, once.

    The database file is the only marker of a finished migration: it is
    checked once at the start of ``run`` and, when present, nothing else
    happens.
    """

    def __init__(
        self,
        locations: Locations,
        database_factory: Callable[[Path], Database] = Database,
        system_locale: str | None = None,
    ) -> None:
        self.locations = locations
        self.database_factory = database_factory
        self.system_locale = system_locale

    def run(self) -> MigrationResult:
        """Run the migration if it is still needed.

        Raises ``MigrationError`` when the transaction cannot be opened or
        committed, or when any core setting fails to write. Nothing is
        committed in that case.
        """
        db_path = self.locations.database_path
        if db_path.exists():
            logger.info("Database already exists, skipping migration")
            return MigrationResult.skipped("database already exists")

        setting_path = self.locations.legacy_setting_path
        app_data_path = self.locations.legacy_app_data_path
        if not setting_path.exists() and not app_data_path.exists():
            logger.info("No legacy settings found, skipping migration")
            return MigrationResult.skipped("no legacy settings found")

        logger.info("Starting migration from legacy settings files")

        settings = load_legacy_settings(
            setting_path, default_global_settings(self.system_locale)
        )
        app_data = load_legacy_app_data(app_data_path)

        result = MigrationResult(status=MigrationStatus.DONE)
        database = self.database_factory(db_path)
        try:
            self._migrate_in_transaction(database, settings, app_data, result)

            for path in (setting_path, app_data_path):
                if path.exists() and archive_file(path) is not None:
                    result.archived.append(path)

            # The core transaction is committed; nothing here may undo it
            try:
                result.clipboard_favorites = migrate_clipboard_favorites(
                    database, self.locations.plugin_settings_dir
                )
            except Exception as e:
                logger.warning(f"Failed to migrate clipboard favorites: {e}")
        finally:
            database.dispose()

        logger.info("Migration completed successfully")
        return result

    def _migrate_in_transaction(
        self,
        database: Database,
        settings: GlobalSettings,
        app_data: AppData,
        result: MigrationResult,
    ) -> None:
        try:
            database.init_db()
            with database.session() as db:
                result.core_keys = self._migrate_core(db, settings)
                self._migrate_plugins(db, result)
                result.query_histories = self._migrate_query_histories(db, app_data)
                result.favorite_results = self._migrate_favorite_results(db, app_data)
        except MigrationError:
            raise
        except SQLAlchemyError as e:
            raise MigrationError("Transaction", str(e)) from e

    def _migrate_core(self, db: Session, settings: GlobalSettings) -> int:
        store = SettingStore(db)
        entries = settings_to_entries(settings)
        for key, value in entries.items():
            try:
                store.set(key, value)
            except Exception as e:
                raise MigrationError("MigrateCore", f"failed to write {key}: {e}") from e
        logger.info(f"Migrated {len(entries)} core settings")
        return len(entries)

    def _plugin_setting_files(self) -> list[Path]:
        plugin_dir = self.locations.plugin_settings_dir
        if not plugin_dir.is_dir():
            return []
        return sorted(
            path
            for path in plugin_dir.iterdir()
            if path.is_file()
            and path.suffix == ".json"
            and self.locations.app_id not in path.name
        )

    def _migrate_plugins(self, db: Session, result: MigrationResult) -> None:
        try:
            paths = self._plugin_setting_files()
        except OSError as e:
            logger.warning(f"Failed to read plugin settings directory: {e}")
            return

        for path in paths:
            plugin_id = path.stem
            try:
                plugin_setting = read_plugin_setting_file(path)
            except (OSError, ValueError) as e:
                logger.warning(f"Failed to parse plugin settings {path.name}: {e}")
                result.plugins_skipped += 1
                continue

            store = PluginSettingStore(db, plugin_id)
            for key, value in (plugin_setting.settings or {}).items():
                if not value:
                    continue
                try:
                    # Per-value savepoint; a failed write is dropped alone
                    with db.begin_nested():
                        store.set(key, value)
                except SQLAlchemyError as e:
                    logger.warning(
                        f"Failed to migrate plugin setting {plugin_id}.{key}: {e}"
                    )
                    continue
                result.plugin_values += 1

            result.plugins_migrated += 1
            logger.info(f"Migrated plugin settings for {plugin_id}")
            archive_file(path)

    def _migrate_query_histories(self, db: Session, app_data: AppData) -> int:
        if not app_data.query_histories:
            return 0
        try:
            with db.begin_nested():
                SettingStore(db).set(QUERY_HISTORIES_KEY, app_data.query_histories)
        except SQLAlchemyError as e:
            logger.warning(f"Failed to migrate query histories: {e}")
            return 0
        logger.info(f"Migrated {len(app_data.query_histories)} query histories")
        return len(app_data.query_histories)

    def _migrate_favorite_results(self, db: Session, app_data: AppData) -> int:
        if not app_data.favorite_results:
            return 0
        try:
            with db.begin_nested():
                SettingStore(db).set(FAVORITE_RESULTS_KEY, app_data.favorite_results)
        except SQLAlchemyError as e:
            logger.warning(f"Failed to migrate favorite results: {e}")
            return 0
        logger.info(f"Migrated {len(app_data.favorite_results)} favorite results")
        return len(app_data.favorite_results)

