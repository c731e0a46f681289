"""SQLite database utilities for Content Engine.

Provides connection management and table initialization for the
article index.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path

from .config import settings

# SQL for creating the index tables
_CREATE_TABLES_SQL = """
CREATE TABLE IF NOT EXISTS articles (
    slug TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    description TEXT NOT NULL DEFAULT '',
    date TEXT,
    image TEXT,
    type TEXT,
    draft INTEGER NOT NULL DEFAULT 0,
    source_path TEXT,
    indexed_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS article_categories (
    slug TEXT NOT NULL,
    category TEXT NOT NULL,
    PRIMARY KEY (slug, category),
    FOREIGN KEY (slug) REFERENCES articles(slug) ON DELETE CASCADE
);

CREATE INDEX IF NOT EXISTS idx_articles_date ON articles(date);
CREATE INDEX IF NOT EXISTS idx_article_categories_category
    ON article_categories(category);
"""


def get_connection(db_path: str | None = None) -> sqlite3.Connection:
    """Get a SQLite connection with row factory enabled."""
    path = db_path or settings.database.db_path
    if path != ":memory:":
        Path(path).parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    return conn


def init_db(db_path: str | None = None) -> None:
    """Create all tables if they don't exist."""
    conn = get_connection(db_path)
    try:
        conn.executescript(_CREATE_TABLES_SQL)
        conn.commit()
    finally:
        conn.close()


def create_tables(conn: sqlite3.Connection) -> None:
    """Create all tables on an already-open connection."""
    conn.executescript(_CREATE_TABLES_SQL)
    conn.commit()
