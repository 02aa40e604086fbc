"""Application startup: migrate legacy settings, then bring up the manager."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from config import Config, get_config
from config.paths import Locations
from launcher.database import Database
from launcher.errors import handle_errors
from launcher.migration import MigrationResult, Migrator
from launcher.settings import Collaborators, DatabaseBackend, SettingsManager
from launcher.settings.defaults import detect_system_locale

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Everything the entry points need once startup has finished."""

    config: Config
    locations: Locations
    database: Database
    migration: MigrationResult
    manager: SettingsManager

    def close(self) -> None:
        self.manager.shutdown()
        self.database.dispose()


@handle_errors()
def startup_checks(
    config: Config | None = None,
    collaborators: Collaborators | None = None,
) -> AppContext:
    """Run the one-time migration and initialise the settings manager.

    Call this once from main entry points, before anything reads settings.
    Raises ``MigrationError`` or ``PersistenceError`` when settings cannot
    be brought up.
    """
    logger.debug("Running startup checks...")
    config = config or get_config()
    locations = Locations.from_config(config)
    locations.ensure_dirs()
    system_locale = detect_system_locale()

    migration = Migrator(locations, system_locale=system_locale).run()

    database = Database(locations.database_path)
    database.init_db()

    manager = SettingsManager(
        DatabaseBackend(database),
        collaborators=collaborators,
        system_locale=system_locale,
    )
    manager.init()

    logger.debug("Startup checks completed")
    return AppContext(
        config=config,
        locations=locations,
        database=database,
        migration=migration,
        manager=manager,
    )
