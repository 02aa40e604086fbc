"""Per-OS setting values and the resolver that picks the running OS variant."""

from __future__ import annotations

import copy
import platform
from enum import StrEnum
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class Platform(StrEnum):
    """Operating systems a setting can carry a variant for."""

    WINDOWS = "windows"
    MACOS = "darwin"
    LINUX = "linux"
    UNKNOWN = "unknown"


def current_platform() -> Platform:
    """Detect the running operating system."""
    system = platform.system()
    if system == "Darwin":
        return Platform.MACOS
    if system == "Windows":
        return Platform.WINDOWS
    if system == "Linux":
        return Platform.LINUX
    return Platform.UNKNOWN


def _variant_field(os: Platform) -> str:
    if os is Platform.WINDOWS:
        return "win"
    if os is Platform.LINUX:
        return "linux"
    # macOS, and the fallback for anything unrecognised
    return "mac"


class PlatformValue(BaseModel, Generic[T]):
    """A setting with one value per operating system.

    Only the variant of the running OS is ever read or written; the other
    two are carried along untouched so settings synced between machines keep
    their values.
    """

    model_config = ConfigDict(populate_by_name=True)

    win: T | None = Field(None, alias="WinValue")
    mac: T | None = Field(None, alias="MacValue")
    linux: T | None = Field(None, alias="LinuxValue")

    def get(self, os: Platform | None = None) -> T | None:
        return resolve_platform_value(self, os or current_platform())

    def set(self, value: T, os: Platform | None = None) -> None:
        assign_platform_value(self, value, os or current_platform())


def resolve_platform_value(value: PlatformValue[T], os: Platform) -> T | None:
    """Return the variant for ``os``; unknown systems read the macOS variant."""
    return getattr(value, _variant_field(os))


def assign_platform_value(value: PlatformValue[T], new: T, os: Platform) -> None:
    """Overwrite only the variant for ``os``."""
    setattr(value, _variant_field(os), new)


def same_for_all(value_type: type[T], value: T) -> PlatformValue[T]:
    """Build a platform value with the same variant on every OS."""
    return PlatformValue[value_type](
        win=copy.deepcopy(value),
        mac=copy.deepcopy(value),
        linux=copy.deepcopy(value),
    )
