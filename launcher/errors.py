"""Exception classes and error handling utilities for the launcher."""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable
from typing import Any, TypeVar

logger = logging.getLogger(__name__)


class LauncherError(Exception):
    """Base exception for all launcher errors."""


class ConfigurationError(LauncherError):
    """Raised when configuration is invalid or missing."""


class MigrationError(LauncherError):
    """Raised when the core settings migration cannot be completed.

    Startup treats this as fatal: the primary transaction was not committed.
    """

    def __init__(self: MigrationError, step: str, message: str) -> None:
        self.step = step
        super().__init__(f"migration failed at {step}: {message}")


class ClipboardMigrationError(LauncherError):
    """Raised when clipboard favorites cannot be reconciled."""


class SettingsError(LauncherError):
    """Base exception for settings manager errors."""


class UnknownSettingError(SettingsError):
    """Raised when an update targets a key outside the known set."""

    def __init__(self: UnknownSettingError, key: str) -> None:
        self.key = key
        super().__init__(f"unknown key: {key}" if key else "key is empty")


class HotkeyUnavailableError(SettingsError):
    """Raised when a hotkey is already taken by another application."""

    def __init__(self: HotkeyUnavailableError, hotkey: str) -> None:
        self.hotkey = hotkey
        super().__init__(f"hotkey is not available: {hotkey}")


class LanguageSwitchError(SettingsError):
    """Raised when the active language cannot be changed."""

    def __init__(self: LanguageSwitchError, lang_code: str, reason: str) -> None:
        self.lang_code = lang_code
        super().__init__(f"failed to switch language to {lang_code}: {reason}")


class PersistenceError(SettingsError):
    """Raised when a settings snapshot cannot be read or written."""


T = TypeVar("T")


def handle_errors(
    *,
    default: T | None = None,
    reraise: bool = True,
    log_level: int = logging.ERROR,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Decorator for consistent error handling.

    Args:
        default: Default value to return on error
        reraise: Whether to re-raise the exception after logging
        log_level: Logging level for errors

    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args: tuple[Any, ...], **kwargs: dict[str, Any]) -> T:
            try:
                return func(*args, **kwargs)
            except LauncherError as e:
                logger.log(log_level, f"{func.__name__} failed: {e}")
                if reraise:
                    raise
                return default
            except Exception:
                logger.exception(f"Unexpected error in {func.__name__}")
                if reraise:
                    raise
                return default

        return wrapper

    return decorator
