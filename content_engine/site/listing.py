"""Production listing and category index.

Both views drop drafts unless explicitly asked not to, so nothing marked
``draft: true`` reaches a production page.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Iterable, Optional

from content_engine.articles.authoring import slugify
from content_engine.articles.models import Article


def visible(articles: Iterable[Article], include_drafts: bool = False) -> list[Article]:
    """Articles that may appear in a listing."""
    return [a for a in articles if include_drafts or a.is_published]


def production_listing(
    articles: Iterable[Article],
    include_drafts: bool = False,
) -> list[Article]:
    """Published articles, newest first; undated pages go last.

    Articles sharing a date are ordered by title.
    """
    by_title = sorted(visible(articles, include_drafts), key=lambda a: a.title.lower())
    return sorted(
        by_title,
        key=lambda a: (a.published_on is not None, a.published_on or date.min),
        reverse=True,
    )


def category_index(
    articles: Iterable[Article],
    include_drafts: bool = False,
) -> dict[str, list[Article]]:
    """Map each category to the articles tagged with it.

    An article with several categories is listed under each of them.
    Keys are sorted case-insensitively; each list follows
    :func:`production_listing` order.
    """
    groups: dict[str, list[Article]] = defaultdict(list)
    for article in production_listing(articles, include_drafts):
        for category in article.categories:
            groups[category].append(article)
    return {name: groups[name] for name in sorted(groups, key=str.lower)}


def category_slug(name: str) -> str:
    """URL segment for a category page."""
    return slugify(name)


def unique_category_slugs(names: Iterable[str]) -> dict[str, str]:
    """Give every category its own URL segment.

    Distinct names can share a slug ("C" and "C++", "AI" and "ai").
    Names are taken in order and a later name whose slug is already
    taken gets "-2", "-3" and so on appended.
    """
    slugs: dict[str, str] = {}
    taken: set[str] = set()
    for name in names:
        if name in slugs:
            continue
        base = category_slug(name)
        slug, n = base, 2
        while slug in taken:
            slug = f"{base}-{n}"
            n += 1
        slugs[name] = slug
        taken.add(slug)
    return slugs


def group_by_type(
    articles: Iterable[Article],
    include_drafts: bool = False,
) -> dict[Optional[str], list[Article]]:
    """Group by the ``type`` rendering hint (e.g. "featured")."""
    groups: dict[Optional[str], list[Article]] = defaultdict(list)
    for article in production_listing(articles, include_drafts):
        groups[article.type].append(article)
    return dict(groups)
