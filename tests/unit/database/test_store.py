"""Tests for the namespaced key-value stores."""

import pytest
from sqlalchemy import select

from launcher.database import CoreSetting, PluginSettingStore, SettingStore, encode_value
from launcher.settings.models import QueryHistory


def test_set_and_get(database):
    with database.session() as db:
        SettingStore(db).set("ThemeId", "dark")

    with database.session() as db:
        assert SettingStore(db).get("ThemeId") == "dark"
        assert SettingStore(db).get("Missing") is None


def test_set_overwrites(database):
    with database.session() as db:
        store = SettingStore(db)
        store.set("AppWidth", 800)
        store.set("AppWidth", 1024)

    with database.session() as db:
        assert SettingStore(db).get_json("AppWidth") == 1024


def test_session_rolls_back_on_error(database):
    with pytest.raises(RuntimeError), database.session() as db:
        SettingStore(db).set("ThemeId", "dark")
        raise RuntimeError("abort")

    with database.session() as db:
        assert db.scalars(select(CoreSetting)).all() == []


def test_plugin_namespaces_are_isolated(database):
    with database.session() as db:
        PluginSettingStore(db, "one").set("key", "a")
        PluginSettingStore(db, "two").set("key", "b")

    with database.session() as db:
        assert PluginSettingStore(db, "one").get_all() == {"key": "a"}
        assert PluginSettingStore(db, "two").get("key") == "b"
        assert SettingStore(db).get("key") is None


def test_delete(database):
    with database.session() as db:
        PluginSettingStore(db, "one").set("key", "a")

    with database.session() as db:
        PluginSettingStore(db, "one").delete("key")

    with database.session() as db:
        assert PluginSettingStore(db, "one").get("key") is None


def test_encode_value_uses_legacy_aliases():
    encoded = encode_value([QueryHistory(query="hi", timestamp=1)])

    assert encoded == '[{"Query": "hi", "Timestamp": 1}]'
    assert encode_value("plain") == "plain"
    assert encode_value(True) == "true"
