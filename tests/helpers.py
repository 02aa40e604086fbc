"""Test helpers and utilities."""

from __future__ import annotations

import json
from pathlib import Path

from sqlalchemy import create_engine, text

LEGACY_SETTINGS = {
    "MainHotkey": {
        "WinValue": "ctrl+space",
        "MacValue": "option+space",
        "LinuxValue": "ctrl+alt+space",
    },
    "SelectionHotkey": {"WinValue": "", "MacValue": "", "LinuxValue": ""},
    "UsePinYin": True,
    "LangCode": "en_US",
    "ThemeId": "custom-theme",
    "AppWidth": 960,
    "QueryShortcuts": [{"Shortcut": "gh", "Query": "github {0}"}],
    "AIProviders": None,
    "LastQueryMode": "preserve",
}


def write_json(path: Path, data) -> Path:
    """Write ``data`` as JSON, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


CLIPBOARD_TABLE_SQL = """
    CREATE TABLE clipboard_history (
        id TEXT PRIMARY KEY,
        type TEXT NOT NULL,
        content TEXT,
        file_path TEXT,
        icon_data TEXT,
        width INTEGER,
        height INTEGER,
        file_size INTEGER,
        timestamp INTEGER NOT NULL,
        is_favorite BOOLEAN DEFAULT 0,
        created_at DATETIME DEFAULT CURRENT_TIMESTAMP
    )
"""


def make_clipboard_db(path, rows):
    engine = create_engine(f"sqlite:///{path}")
    with engine.begin() as conn:
        conn.execute(text(CLIPBOARD_TABLE_SQL))
        for row in rows:
            conn.execute(
                text(
                    "INSERT INTO clipboard_history "
                    "(id, type, content, file_path, width, height, timestamp, "
                    "is_favorite, created_at) VALUES "
                    "(:id, :type, :content, :file_path, :width, :height, "
                    ":timestamp, :is_favorite, :created_at)"
                ),
                row,
            )
    engine.dispose()


def db_row(item_id, is_favorite=1, timestamp=1700000000000, **overrides):
    row = {
        "id": item_id,
        "type": "text",
        "content": f"content {item_id}",
        "file_path": None,
        "width": None,
        "height": None,
        "timestamp": timestamp,
        "is_favorite": is_favorite,
        "created_at": "2023-11-14 22:13:20",
    }
    row.update(overrides)
    return row


def count_rows(path, where="1 = 1"):
    engine = create_engine(f"sqlite:///{path}")
    with engine.connect() as conn:
        count = conn.execute(
            text(f"SELECT COUNT(*) FROM clipboard_history WHERE {where}")
        ).scalar()
    engine.dispose()
    return count
