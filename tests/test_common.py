"""Tests for shared common modules: config, logging, database."""

import logging
from pathlib import Path

from content_engine.common.config import Settings
from content_engine.common.database import get_connection, init_db
from content_engine.common.logging import level_for, set_level, setup_logging


class TestSettings:
    def test_defaults(self):
        settings = Settings()
        assert settings.content.notice_levels == ["note", "tip", "info", "warning"]
        assert settings.content.pattern == "**/*.md"
        assert settings.site.base_url == "/"
        assert "title" in settings.content.known_fields

    def test_load_from_yaml(self, tmp_path: Path):
        path = tmp_path / "settings.yaml"
        path.write_text(
            "site:\n  title: Agents Weekly\n  base_url: /blog/\n"
            "content:\n  notice_levels: [info, danger]\n",
            encoding="utf-8",
        )
        settings = Settings.load(path)
        assert settings.site.title == "Agents Weekly"
        assert settings.site.base_url == "/blog/"
        assert settings.content.notice_levels == ["info", "danger"]
        # untouched sections keep their defaults
        assert settings.site.language == "en"

    def test_missing_file_falls_back_to_defaults(self, tmp_path: Path):
        settings = Settings.load(tmp_path / "nope.yaml")
        assert settings.site.title == "AI Engineering Notes"

    def test_environment_overrides(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("CONTENT_DIR", "/srv/content")
        monkeypatch.setenv("OUTPUT_DIR", "/srv/public")
        monkeypatch.setenv("SITE_BASE_URL", "https://example.com/")
        monkeypatch.setenv("ARTICLE_INDEX_DB", "/srv/index.db")
        settings = Settings.load(tmp_path / "nope.yaml")
        assert settings.content.content_dir == "/srv/content"
        assert settings.site.output_dir == "/srv/public"
        assert settings.site.base_url == "https://example.com/"
        assert settings.database.db_path == "/srv/index.db"


class TestLogging:
    def test_setup_logging_is_idempotent(self):
        logger = setup_logging(module_name="test.common.logging")
        again = setup_logging(module_name="test.common.logging")
        assert logger is again
        assert len(logger.handlers) == 1

    def test_level_applied(self):
        logger = setup_logging(level=logging.DEBUG, module_name="test.common.debug")
        assert logger.level == logging.DEBUG

    def test_set_level_reaches_every_logger(self):
        first = setup_logging(module_name="test.common.first")
        second = setup_logging(module_name="test.common.second")
        try:
            set_level(logging.WARNING)
            assert first.level == logging.WARNING
            assert second.handlers[0].level == logging.WARNING
        finally:
            set_level(logging.INFO)
        assert first.level == logging.INFO

    def test_level_for_flags(self):
        assert level_for() == logging.INFO
        assert level_for(verbose=True) == logging.DEBUG
        assert level_for(quiet=True) == logging.WARNING


class TestDatabase:
    def test_init_db_creates_tables(self, tmp_path: Path):
        db_path = str(tmp_path / "test.db")
        init_db(db_path)
        conn = get_connection(db_path)
        try:
            cursor = conn.execute(
                "SELECT name FROM sqlite_master WHERE type='table' ORDER BY name"
            )
            tables = [row["name"] for row in cursor.fetchall()]
            assert "articles" in tables
            assert "article_categories" in tables
        finally:
            conn.close()

    def test_categories_cascade_on_delete(self, tmp_path: Path):
        db_path = str(tmp_path / "test.db")
        init_db(db_path)
        conn = get_connection(db_path)
        try:
            conn.execute(
                "INSERT INTO articles (slug, title, indexed_at) VALUES (?, ?, ?)",
                ("intro", "Intro", "2026-01-01T00:00:00"),
            )
            conn.execute(
                "INSERT INTO article_categories (slug, category) VALUES (?, ?)",
                ("intro", "Microsoft"),
            )
            conn.commit()
            conn.execute("DELETE FROM articles WHERE slug = ?", ("intro",))
            conn.commit()
            remaining = conn.execute("SELECT COUNT(*) FROM article_categories").fetchone()[0]
            assert remaining == 0
        finally:
            conn.close()
