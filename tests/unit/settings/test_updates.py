"""Tests for the setting update table."""

import os
from unittest.mock import MagicMock

import pytest

from launcher.errors import LanguageSwitchError, UnknownSettingError
from launcher.settings.collaborators import Collaborators, StaticLanguages
from launcher.settings.defaults import default_global_settings
from launcher.settings.updates import (
    SETTING_UPDATES,
    SettingKey,
    apply_setting_update,
    read_setting,
    resolve_setting_key,
)


@pytest.fixture
def settings():
    return default_global_settings("en_US")


def test_every_key_has_a_handler():
    assert set(SETTING_UPDATES) == set(SettingKey)


def test_every_handler_targets_a_settings_field(settings):
    for update in SETTING_UPDATES.values():
        assert update.field_name in type(settings).model_fields


def test_resolve_rejects_unknown_key():
    with pytest.raises(UnknownSettingError) as exc_info:
        resolve_setting_key("WindowX")

    assert exc_info.value.key == "WindowX"


def test_per_platform_update_keeps_other_variants(settings):
    apply_setting_update(settings, MagicMock(), "HttpProxyUrl", "http://proxy")

    variants = [
        settings.http_proxy_url.win,
        settings.http_proxy_url.mac,
        settings.http_proxy_url.linux,
    ]
    assert variants.count("http://proxy") == 1
    assert variants.count("") == 2


def test_read_setting_per_platform(settings):
    assert read_setting(settings, "MainHotkey") == settings.main_hotkey.get()
    assert read_setting(settings, SettingKey.APP_WIDTH) == 800


def test_static_languages_rejects_unsupported():
    languages = StaticLanguages()

    with pytest.raises(LanguageSwitchError):
        languages.switch_language("xx_XX")

    languages.switch_language("pt_BR")
    assert languages.active == "pt_BR"


def test_default_collaborators_export_proxy(settings, monkeypatch):
    for name in ("HTTP_PROXY", "HTTPS_PROXY", "http_proxy", "https_proxy"):
        monkeypatch.delenv(name, raising=False)
    collaborators = Collaborators()

    apply_setting_update(settings, collaborators, "HttpProxyUrl", "http://proxy:3128")
    apply_setting_update(settings, collaborators, "HttpProxyEnabled", "true")

    assert os.environ["HTTPS_PROXY"] == "http://proxy:3128"

    apply_setting_update(settings, collaborators, "HttpProxyEnabled", "false")

    assert "HTTPS_PROXY" not in os.environ
