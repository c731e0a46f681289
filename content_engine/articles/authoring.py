"""Authoring helpers: scaffold new articles, maintain the update notice."""

from __future__ import annotations

import re
import unicodedata
from datetime import date
from pathlib import Path
from typing import Iterable, Optional

from content_engine.common.logging import setup_logging

from .frontmatter import serialize_article
from .loader import load_article
from .models import Article, NoticeLevel
from .shortcodes import upsert_notice

logger = setup_logging(module_name="articles.authoring")

LAST_UPDATED_MARKER = "Last updated"
PLACEHOLDER_BODY = "Write the introduction here.\n"
MAX_SLUG_LENGTH = 80


def slugify(text: str) -> str:
    """Lowercase ASCII slug for file names and URLs.

    Args:
        text: Title or category name

    Returns:
        Slug such as "microsoft-agent-framework"; "untitled" if nothing survives
    """
    normalized = unicodedata.normalize("NFKD", text)
    ascii_text = normalized.encode("ascii", "ignore").decode("ascii")
    slug = re.sub(r"[^a-z0-9]+", "-", ascii_text.lower()).strip("-")
    slug = slug[:MAX_SLUG_LENGTH].rstrip("-")
    return slug or "untitled"


def format_update_date(when: date) -> str:
    """e.g. "October 19, 2026"."""
    return f"{when.strftime('%B')} {when.day}, {when.year}"


def new_article(
    content_dir: Path,
    title: str,
    categories: Iterable[str] = (),
    description: str = "",
    draft: bool = True,
    date: Optional[date] = None,
    image: Optional[str] = None,
    type: Optional[str] = None,
    body: str = PLACEHOLDER_BODY,
) -> Path:
    """Write a new article file named after its title.

    New articles start as drafts so they stay out of production listings
    until an author flips the flag.

    Returns:
        Path of the created file

    Raises:
        FileExistsError: if a file with the same slug already exists
    """
    article = Article(
        title=title,
        date=date or _today(),
        image=image,
        description=description,
        categories=list(categories),
        type=type,
        draft=draft,
        body=body,
    )
    slug = slugify(article.title)
    path = content_dir / f"{slug}.md"

    content_dir.mkdir(parents=True, exist_ok=True)
    with open(path, "x", encoding="utf-8") as f:
        f.write(serialize_article(article))

    logger.info("Created %s article: %s", "draft" if draft else "published", path)
    return path


def touch_last_updated(path: Path, when: Optional[date] = None) -> Article:
    """Insert or refresh the "Last updated" info notice of an article file.

    Args:
        path: Article file to rewrite
        when: Update date (defaults to today)

    Returns:
        The updated Article
    """
    article = load_article(path)
    stamp = f"{LAST_UPDATED_MARKER}: {format_update_date(when or _today())}"
    article.body = upsert_notice(
        article.body,
        level=NoticeLevel.INFO.value,
        text=stamp,
        marker=LAST_UPDATED_MARKER,
    )

    with open(path, "w", encoding="utf-8") as f:
        f.write(serialize_article(article))

    logger.info("Updated notice in %s (%s)", path, stamp)
    return article


def _today() -> date:
    return date.today()
