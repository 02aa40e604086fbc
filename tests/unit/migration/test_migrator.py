"""Tests for the legacy settings migration."""

import json
from unittest.mock import patch

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from launcher.database import (
    CoreSetting,
    Database,
    PluginSettingRecord,
    PluginSettingStore,
    SettingStore,
)
from launcher.errors import MigrationError
from launcher.migration import CLIPBOARD_PLUGIN_ID, MigrationStatus, Migrator
from launcher.migration.clipboard import clipboard_database_path
from launcher.migration.migrator import backup_path
from launcher.settings import DatabaseBackend
from tests.helpers import (
    LEGACY_SETTINGS,
    count_rows,
    db_row,
    make_clipboard_db,
    write_json,
)

PLUGIN_ID = "0f9b2c2e-1c55-4a1c-8f0e-3b1d2a9c7e11"


@pytest.fixture
def legacy_files(locations):
    """A complete legacy layout: settings, app data and one plugin."""
    write_json(locations.legacy_setting_path, LEGACY_SETTINGS)
    write_json(
        locations.legacy_app_data_path,
        {
            "QueryHistories": [
                {"Query": "second", "Timestamp": 2000},
                {"Query": "first", "Timestamp": 1000},
            ],
            "ActionedResults": {},
            "FavoriteResults": {"d41d8cd98f00b204e9800998ecf8427e": True},
        },
    )
    write_json(
        locations.plugin_setting_path(PLUGIN_ID),
        {"Name": "Calculator", "Settings": {"precision": "4", "empty": ""}},
    )
    return locations


def _count(database: Database, model) -> int:
    with database.session() as db:
        return db.scalar(select(func.count()).select_from(model))


def _open(locations) -> Database:
    return Database(locations.database_path)


class TestSkip:
    """Cases where nothing is migrated."""

    def test_skips_when_database_exists(self, legacy_files):
        legacy_files.database_path.touch()

        result = Migrator(legacy_files).run()

        assert result.status is MigrationStatus.SKIPPED
        assert legacy_files.legacy_setting_path.exists()

    def test_skips_without_legacy_files(self, locations):
        result = Migrator(locations).run()

        assert result.status is MigrationStatus.SKIPPED
        assert not locations.database_path.exists()

    def test_second_run_is_a_no_op(self, legacy_files):
        first = Migrator(legacy_files).run()
        write_json(legacy_files.legacy_setting_path, LEGACY_SETTINGS)

        with patch.object(SettingStore, "set") as mock_set:
            second = Migrator(legacy_files).run()

        assert first.status is MigrationStatus.DONE
        assert second.status is MigrationStatus.SKIPPED
        mock_set.assert_not_called()


class TestMigration:
    """A full migration run."""

    def test_core_settings_are_migrated(self, legacy_files):
        result = Migrator(legacy_files, system_locale="en_US").run()

        assert result.status is MigrationStatus.DONE
        assert result.core_keys == 25

        database = _open(legacy_files)
        try:
            settings = DatabaseBackend(database).load_settings()
            with database.session() as db:
                store = SettingStore(db)
                assert store.get("QueryMode") == "preserve"
                assert store.get("LastQueryMode") is None
        finally:
            database.dispose()

        assert settings.theme_id == "custom-theme"
        assert settings.app_width == 960
        assert settings.use_pin_yin is True
        assert settings.query_shortcuts[0].query == "github {0}"
        # Back-filled from defaults
        assert settings.max_result_count == 10

    def test_history_and_favorites_are_migrated(self, legacy_files):
        result = Migrator(legacy_files).run()

        assert result.query_histories == 2
        assert result.favorite_results == 1

        database = _open(legacy_files)
        try:
            app_data = DatabaseBackend(database).load_app_data()
        finally:
            database.dispose()

        assert [h.query for h in app_data.query_histories] == ["first", "second"]
        assert app_data.favorite_results == {"d41d8cd98f00b204e9800998ecf8427e": True}

    def test_plugin_settings_are_migrated(self, legacy_files):
        result = Migrator(legacy_files).run()

        assert result.plugins_migrated == 1
        assert result.plugin_values == 1

        database = _open(legacy_files)
        try:
            with database.session() as db:
                stored = PluginSettingStore(db, PLUGIN_ID).get_all()
        finally:
            database.dispose()

        # Empty values are not carried over
        assert stored == {"precision": "4"}

    def test_legacy_files_are_archived(self, legacy_files):
        plugin_path = legacy_files.plugin_setting_path(PLUGIN_ID)

        result = Migrator(legacy_files).run()

        for path in (
            legacy_files.legacy_setting_path,
            legacy_files.legacy_app_data_path,
            plugin_path,
        ):
            assert not path.exists()
            assert backup_path(path).exists()
        assert backup_path(plugin_path).name == f"{PLUGIN_ID}.json.bak"
        assert len(result.archived) == 2

    def test_settings_file_alone_is_enough(self, locations):
        write_json(locations.legacy_setting_path, LEGACY_SETTINGS)

        result = Migrator(locations).run()

        assert result.status is MigrationStatus.DONE
        assert result.query_histories == 0

    def test_corrupt_settings_file_migrates_defaults(self, locations):
        locations.legacy_setting_path.write_text("{broken", encoding="utf-8")

        result = Migrator(locations, system_locale="zh_CN").run()

        database = _open(locations)
        try:
            settings = DatabaseBackend(database).load_settings()
        finally:
            database.dispose()

        assert result.status is MigrationStatus.DONE
        assert settings.lang_code == "zh_CN"

    def test_global_files_are_not_treated_as_plugins(self, legacy_files):
        write_json(legacy_files.settings_dir / "launcher.extra.json", {"Name": "x"})

        result = Migrator(legacy_files).run()

        assert result.plugins_migrated == 1
        assert (legacy_files.settings_dir / "launcher.extra.json").exists()


class TestFailures:
    """Partial failures and atomicity."""

    def test_malformed_plugin_file_is_skipped(self, legacy_files):
        bad_path = legacy_files.settings_dir / "bad-plugin.json"
        bad_path.write_text("{not json", encoding="utf-8")

        result = Migrator(legacy_files).run()

        assert result.status is MigrationStatus.DONE
        assert result.plugins_skipped == 1
        assert result.plugins_migrated == 1
        assert result.query_histories == 2
        assert result.favorite_results == 1
        assert bad_path.exists()

    def test_core_write_failure_rolls_back_everything(self, legacy_files):
        original_set = SettingStore.set
        calls = {"count": 0}

        def failing_set(self, key, value):
            calls["count"] += 1
            if calls["count"] == 3:
                raise RuntimeError("disk full")
            original_set(self, key, value)

        with (
            patch.object(SettingStore, "set", failing_set),
            pytest.raises(MigrationError, match="MigrateCore"),
        ):
            Migrator(legacy_files).run()

        database = _open(legacy_files)
        try:
            assert _count(database, CoreSetting) == 0
            assert _count(database, PluginSettingRecord) == 0
        finally:
            database.dispose()

        # Nothing was archived
        assert legacy_files.legacy_setting_path.exists()
        assert legacy_files.plugin_setting_path(PLUGIN_ID).exists()

    def test_commit_failure_is_fatal(self, legacy_files):
        with (
            patch(
                "sqlalchemy.orm.Session.commit",
                side_effect=OperationalError("COMMIT", {}, Exception("database is locked")),
            ),
            pytest.raises(MigrationError, match="Transaction"),
        ):
            Migrator(legacy_files).run()

        assert legacy_files.legacy_setting_path.exists()

    def test_archive_failure_is_not_fatal(self, legacy_files):
        with patch("pathlib.Path.rename", side_effect=OSError("busy")):
            result = Migrator(legacy_files).run()

        assert result.status is MigrationStatus.DONE
        assert result.archived == []
        assert legacy_files.legacy_setting_path.exists()

    def test_clipboard_failure_does_not_undo_core(self, legacy_files):
        with patch(
            "launcher.migration.migrator.migrate_clipboard_favorites",
            side_effect=OSError("clipboard db locked"),
        ):
            result = Migrator(legacy_files).run()

        assert result.status is MigrationStatus.DONE
        database = _open(legacy_files)
        try:
            assert _count(database, CoreSetting) > 0
        finally:
            database.dispose()

    def test_bad_clipboard_row_does_not_abort(self, legacy_files):
        make_clipboard_db(
            clipboard_database_path(legacy_files.plugin_settings_dir),
            [db_row("bad", created_at="garbage")],
        )

        result = Migrator(legacy_files).run()

        assert result.status is MigrationStatus.DONE
        assert result.clipboard_favorites == 0
        assert backup_path(legacy_files.legacy_setting_path).exists()


class TestClipboard:
    """Clipboard favorites carried through a full run."""

    def test_json_and_database_favorites_are_merged(self, legacy_files):
        history = [
            {"id": "j1", "text": "pinned", "type": "text", "timestamp": 1700000000500, "isFavorite": True},
            {"id": "j2", "text": "plain", "type": "text", "timestamp": 1700000000600, "isFavorite": False},
        ]
        write_json(
            legacy_files.plugin_setting_path(CLIPBOARD_PLUGIN_ID),
            {"Name": "Clipboard", "Settings": {"history": json.dumps(history)}},
        )
        clipboard_db = clipboard_database_path(legacy_files.plugin_settings_dir)
        make_clipboard_db(
            clipboard_db,
            [db_row("d1", timestamp=1000), db_row("d2", timestamp=2000), db_row("d3", is_favorite=0)],
        )

        result = Migrator(legacy_files).run()

        assert result.status is MigrationStatus.DONE
        assert result.plugins_migrated == 2
        assert result.clipboard_favorites == 3

        database = _open(legacy_files)
        try:
            with database.session() as db:
                store = PluginSettingStore(db, CLIPBOARD_PLUGIN_ID)
                stored_history = store.get("history")
                favorites = json.loads(store.get("favorites"))
        finally:
            database.dispose()

        assert stored_history == ""
        assert [item["id"] for item in favorites] == ["j1", "d2", "d1"]
        assert favorites[0]["content"] == "pinned"
        assert favorites[0]["createdAt"] == 1700000000
        assert count_rows(clipboard_db, "is_favorite = 1") == 0
        assert count_rows(clipboard_db) == 1
