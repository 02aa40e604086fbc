"""Pytest configuration for the test suite."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from config.paths import Locations
from launcher.database import Database
from launcher.settings import Collaborators, DatabaseBackend, SettingsManager


@pytest.fixture
def locations(tmp_path: Path) -> Locations:
    """Locations rooted in a temporary user data directory."""
    locations = Locations(user_data_dir=tmp_path / "data")
    locations.ensure_dirs()
    return locations


@pytest.fixture
def database(locations: Locations):
    """An initialised settings database, disposed after the test."""
    db = Database(locations.database_path)
    db.init_db()
    yield db
    db.dispose()


@pytest.fixture
def collaborators() -> Collaborators:
    """Collaborators that accept everything and record their calls."""
    hotkeys = MagicMock()
    hotkeys.is_available.return_value = True
    autostart = MagicMock()
    autostart.is_autostart_enabled.return_value = None
    return Collaborators(
        hotkeys=hotkeys,
        proxy=MagicMock(),
        languages=MagicMock(),
        autostart=autostart,
        backup=MagicMock(),
    )


@pytest.fixture
def manager(database: Database, collaborators: Collaborators) -> SettingsManager:
    """An initialised manager over an empty database."""
    manager = SettingsManager(
        DatabaseBackend(database), collaborators=collaborators, system_locale="en_US"
    )
    manager.init()
    return manager
