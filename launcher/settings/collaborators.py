"""Narrow contracts to the parts of the launcher the settings core calls out to.

The GUI, the OS autostart toggle, i18n and the network stack own the real
behaviour; the defaults here are what the CLI uses when running standalone.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Protocol

from launcher.errors import LanguageSwitchError

logger = logging.getLogger(__name__)

SUPPORTED_LANG_CODES = frozenset({"en_US", "zh_CN", "pt_BR", "ru_RU"})

PROXY_ENV_VARS = ("HTTP_PROXY", "HTTPS_PROXY", "http_proxy", "https_proxy")


class HotkeyRegistry(Protocol):
    def is_available(self, hotkey: str) -> bool: ...


class ProxyConfigurator(Protocol):
    def update_proxy(self, url: str) -> None:
        """Route outgoing HTTP through ``url``; an empty url clears the proxy."""


class LanguageSwitcher(Protocol):
    def switch_language(self, lang_code: str) -> None:
        """Activate ``lang_code``; raises ``LanguageSwitchError`` on failure."""


class AutostartController(Protocol):
    def is_autostart_enabled(self) -> bool | None:
        """Actual OS autostart state, or ``None`` when it cannot be determined."""


class BackupScheduler(Protocol):
    def start_auto_backup(self) -> None:
        """Begin periodic backups of the user data directory."""


class AlwaysAvailableHotkeys:
    """Accepts every hotkey; the GUI performs the real registration check."""

    def is_available(self, hotkey: str) -> bool:
        return True


class EnvironmentProxy:
    """Exports the proxy through the standard environment variables."""

    def update_proxy(self, url: str) -> None:
        logger.info(f"Updating HTTP proxy, url: {url}")
        for name in PROXY_ENV_VARS:
            if url:
                os.environ[name] = url
            else:
                os.environ.pop(name, None)


class StaticLanguages:
    """Accepts the bundled languages."""

    def __init__(self, supported: frozenset[str] = SUPPORTED_LANG_CODES) -> None:
        self.supported = supported
        self.active: str | None = None

    def switch_language(self, lang_code: str) -> None:
        if lang_code not in self.supported:
            raise LanguageSwitchError(lang_code, "language is not supported")
        self.active = lang_code


class UnknownAutostart:
    """Reports no autostart state, which skips reconciliation."""

    def is_autostart_enabled(self) -> bool | None:
        return None


class NoBackups:
    """Standalone runs do not schedule backups."""

    def start_auto_backup(self) -> None:
        logger.debug("Auto backup is not available in standalone mode")


@dataclass
class Collaborators:
    """Everything the settings manager calls out to."""

    hotkeys: HotkeyRegistry = field(default_factory=AlwaysAvailableHotkeys)
    proxy: ProxyConfigurator = field(default_factory=EnvironmentProxy)
    languages: LanguageSwitcher = field(default_factory=StaticLanguages)
    autostart: AutostartController = field(default_factory=UnknownAutostart)
    backup: BackupScheduler = field(default_factory=NoBackups)
