"""SQLite article index.

Keeps a queryable copy of every article's metadata and categories so
category pages and search can be answered without re-reading the content
tree.

Usage:
    index = ArticleIndex(db_path="data/articles.db")
    index.rebuild(load_directory(Path("content")).articles)
    index.articles_in_category("Agent Framework")
"""

from __future__ import annotations

import sqlite3
from datetime import datetime
from typing import Iterable, Optional

from content_engine.articles.models import Article
from content_engine.common.database import create_tables, get_connection
from content_engine.common.logging import setup_logging

from .models import CategorySummary
from .listing import category_slug

logger = setup_logging(module_name="site.index")


class ArticleIndex:
    """Article metadata index backed by SQLite."""

    def __init__(self, db_path: Optional[str] = None):
        self.conn = get_connection(db_path)
        create_tables(self.conn)

    def close(self) -> None:
        self.conn.close()

    def __enter__(self) -> ArticleIndex:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # --- Writes ---

    def rebuild(self, articles: Iterable[Article]) -> int:
        """Replace the whole index with the given articles.

        Returns:
            Number of articles indexed
        """
        now = datetime.now().isoformat(timespec="seconds")
        count = 0
        with self.conn:
            self.conn.execute("DELETE FROM article_categories")
            self.conn.execute("DELETE FROM articles")
            for article in articles:
                self._insert(article, now)
                count += 1
        logger.info("Indexed %d articles", count)
        return count

    def upsert(self, article: Article) -> None:
        """Insert or replace a single article."""
        now = datetime.now().isoformat(timespec="seconds")
        with self.conn:
            self.conn.execute("DELETE FROM articles WHERE slug = ?", (article.slug,))
            self._insert(article, now)

    def _insert(self, article: Article, indexed_at: str) -> None:
        if not article.slug:
            raise ValueError(f"Article '{article.title}' has no slug")
        published = article.published_on
        try:
            self._insert_row(article, published, indexed_at)
        except sqlite3.IntegrityError as e:
            raise ValueError(f"Duplicate slug '{article.slug}' ({article.source_path})") from e
        self.conn.executemany(
            "INSERT INTO article_categories (slug, category) VALUES (?, ?)",
            [(article.slug, category) for category in article.categories],
        )

    def _insert_row(self, article: Article, published, indexed_at: str) -> None:
        self.conn.execute(
            "INSERT INTO articles "
            "(slug, title, description, date, image, type, draft, source_path, indexed_at) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                article.slug,
                article.title,
                article.description,
                published.isoformat() if published else None,
                article.image,
                article.type,
                int(article.draft),
                str(article.source_path) if article.source_path else None,
                indexed_at,
            ),
        )

    # --- Queries ---

    def get(self, slug: str) -> Optional[dict]:
        """Fetch one article row with its categories."""
        row = self.conn.execute(
            "SELECT * FROM articles WHERE slug = ?", (slug,)
        ).fetchone()
        return self._row_to_dict(row) if row else None

    def categories(self, include_drafts: bool = False) -> list[CategorySummary]:
        """Every category with its article count, sorted by name."""
        rows = self.conn.execute(
            "SELECT c.category AS name, COUNT(*) AS count "
            "FROM article_categories c JOIN articles a ON a.slug = c.slug "
            "WHERE a.draft = 0 OR ? "
            "GROUP BY c.category ORDER BY LOWER(c.category)",
            (int(include_drafts),),
        ).fetchall()
        return [
            CategorySummary(name=r["name"], slug=category_slug(r["name"]), count=r["count"])
            for r in rows
        ]

    def articles_in_category(self, category: str, include_drafts: bool = False) -> list[dict]:
        """Articles tagged with ``category``, newest first."""
        rows = self.conn.execute(
            "SELECT a.* FROM articles a "
            "JOIN article_categories c ON a.slug = c.slug "
            "WHERE c.category = ? AND (a.draft = 0 OR ?) "
            "ORDER BY a.date IS NULL, a.date DESC, LOWER(a.title)",
            (category, int(include_drafts)),
        ).fetchall()
        return [self._row_to_dict(r) for r in rows]

    def search(self, term: str, include_drafts: bool = False) -> list[dict]:
        """Case-insensitive substring search over title and description."""
        pattern = f"%{term.lower()}%"
        rows = self.conn.execute(
            "SELECT * FROM articles "
            "WHERE (LOWER(title) LIKE ? OR LOWER(description) LIKE ?) "
            "AND (draft = 0 OR ?) "
            "ORDER BY date IS NULL, date DESC, LOWER(title)",
            (pattern, pattern, int(include_drafts)),
        ).fetchall()
        return [self._row_to_dict(r) for r in rows]

    def count(self) -> int:
        return self.conn.execute("SELECT COUNT(*) FROM articles").fetchone()[0]

    def _row_to_dict(self, row: sqlite3.Row) -> dict:
        data = dict(row)
        data["draft"] = bool(data["draft"])
        data["categories"] = [
            r["category"]
            for r in self.conn.execute(
                "SELECT category FROM article_categories WHERE slug = ? ORDER BY rowid",
                (data["slug"],),
            )
        ]
        return data
