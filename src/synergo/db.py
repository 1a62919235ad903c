"""Database initialization and connection management."""
import sqlite3
from pathlib import Path

from synergo.config import DEFAULT_DB_PATH

SCHEMA = """
CREATE TABLE IF NOT EXISTS media (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    description TEXT DEFAULT '',
    src TEXT NOT NULL,
    type TEXT NOT NULL CHECK(type IN ('video', 'photo')),
    tags TEXT DEFAULT '[]',  -- JSON
    annotations TEXT DEFAULT '[]',  -- JSON
    fps INTEGER DEFAULT 30,
    added_at INTEGER NOT NULL,
    updated_at INTEGER NOT NULL,
    source TEXT DEFAULT '',
    publication_date TEXT DEFAULT ''
);

CREATE TABLE IF NOT EXISTS nomenclatures (
    id TEXT PRIMARY KEY,
    label TEXT NOT NULL,
    description TEXT DEFAULT '',
    interpretation TEXT DEFAULT ''
);

CREATE TABLE IF NOT EXISTS review_list (
    media_id TEXT PRIMARY KEY REFERENCES media(id) ON DELETE CASCADE,
    added_at INTEGER NOT NULL
);

CREATE TABLE IF NOT EXISTS quiz_list (
    media_id TEXT PRIMARY KEY REFERENCES media(id) ON DELETE CASCADE,
    added_at INTEGER NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_media_type ON media(type);
CREATE INDEX IF NOT EXISTS idx_media_updated_at ON media(updated_at);
CREATE UNIQUE INDEX IF NOT EXISTS idx_nomenclatures_label
    ON nomenclatures(label COLLATE NOCASE);
"""


def get_connection(db_path: str = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Return a SQLite connection with row factory and foreign keys enabled."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def init_db(db_path: str = DEFAULT_DB_PATH) -> None:
    """Initialize the database, creating all tables if they don't exist."""
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = get_connection(db_path)
    conn.executescript(SCHEMA)
    conn.commit()
    conn.close()
