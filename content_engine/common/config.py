"""Project configuration and paths.

Loads settings from config/settings.yaml and environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

# === Paths ===
PROJECT_ROOT = Path(__file__).parent.parent.parent
CONFIG_DIR = PROJECT_ROOT / "config"
CONTENT_DIR = PROJECT_ROOT / "content"
STATIC_DIR = PROJECT_ROOT / "static"
OUTPUT_DIR = PROJECT_ROOT / "public"
DATA_DIR = PROJECT_ROOT / "data"

# Load .env from project root
load_dotenv(PROJECT_ROOT / ".env")


class ContentSettings(BaseModel):
    """Where articles live and what they may contain."""
    content_dir: str = str(CONTENT_DIR)
    static_dir: str = str(STATIC_DIR)
    pattern: str = "**/*.md"
    exclude: list[str] = Field(default_factory=lambda: ["_*"])
    notice_levels: list[str] = Field(
        default_factory=lambda: ["note", "tip", "info", "warning"]
    )
    known_fields: list[str] = Field(
        default_factory=lambda: [
            "title", "date", "image", "description", "draft",
            "categories", "type", "slug", "tags", "author", "weight",
            "lastmod", "aliases",
        ]
    )
    check_images: bool = False


class SiteSettings(BaseModel):
    """Preview site settings."""
    title: str = "AI Engineering Notes"
    base_url: str = "/"
    language: str = "en"
    output_dir: str = str(OUTPUT_DIR)


class DatabaseSettings(BaseModel):
    """Article index database settings."""
    db_path: str = str(DATA_DIR / "articles.db")


class Settings(BaseModel):
    """Top-level application settings."""
    content: ContentSettings = Field(default_factory=ContentSettings)
    site: SiteSettings = Field(default_factory=SiteSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)

    @classmethod
    def load(cls, settings_path: Path | None = None) -> Settings:
        """Load settings from config/settings.yaml, falling back to defaults.

        Environment variables override the file for the handful of paths
        that differ between a laptop and CI.
        """
        settings_path = settings_path or CONFIG_DIR / "settings.yaml"
        data: dict = {}
        if settings_path.exists():
            with open(settings_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        loaded = cls(**data)
        loaded._apply_env()
        return loaded

    def _apply_env(self) -> None:
        if content_dir := os.getenv("CONTENT_DIR"):
            self.content.content_dir = content_dir
        if output_dir := os.getenv("OUTPUT_DIR"):
            self.site.output_dir = output_dir
        if base_url := os.getenv("SITE_BASE_URL"):
            self.site.base_url = base_url
        if db_path := os.getenv("ARTICLE_INDEX_DB"):
            self.database.db_path = db_path


# Singleton settings instance
settings = Settings.load()
