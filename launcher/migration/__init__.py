"""Migration of legacy settings files into the settings database."""

from launcher.migration.clipboard import (
    CLIPBOARD_PLUGIN_ID,
    migrate_clipboard_favorites,
)
from launcher.migration.migrator import (
    MigrationResult,
    MigrationStatus,
    Migrator,
)

__all__ = [
    "CLIPBOARD_PLUGIN_ID",
    "MigrationResult",
    "MigrationStatus",
    "Migrator",
    "migrate_clipboard_favorites",
]
