"""Load Article files from a content directory."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from fnmatch import fnmatch
from pathlib import Path
from typing import Iterable, Iterator

from content_engine.common.logging import setup_logging

from .frontmatter import FrontMatterError, parse_article
from .models import Article

logger = setup_logging(module_name="articles.loader")

BUNDLE_INDEX = "index.md"

# One URL path segment: no separators, no parent references
_SLUG_RE = re.compile(r"^\w[\w.-]*$")


@dataclass
class LoadResult:
    """Articles that loaded, and the files that did not."""
    articles: list[Article] = field(default_factory=list)
    failures: dict[Path, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures


def is_valid_slug(slug: str) -> bool:
    """True if ``slug`` can be used as a single directory name under the site root."""
    return bool(_SLUG_RE.match(slug)) and ".." not in slug


def slug_for_path(path: Path) -> str:
    """Slug implied by a file's location.

    Page bundles (``posts/my-post/index.md``) take the directory name.
    """
    if path.name == BUNDLE_INDEX:
        return path.parent.name
    return path.stem


def iter_content_files(
    content_dir: Path,
    pattern: str = "**/*.md",
    exclude: Iterable[str] = ("_*",),
) -> Iterator[Path]:
    """Yield content files in a stable order, skipping excluded names."""
    excluded = tuple(exclude)
    for path in sorted(content_dir.glob(pattern)):
        if not path.is_file():
            continue
        if any(fnmatch(path.name, pat) for pat in excluded):
            continue
        yield path


def load_article(path: Path) -> Article:
    """Read and parse one content file.

    The ``slug`` front-matter key wins over the file name.

    Raises:
        FrontMatterError: when the file's front matter is unusable, or its
            ``slug`` is not a single path segment
    """
    text = path.read_text(encoding="utf-8")
    article = parse_article(text, source_path=path, slug=slug_for_path(path))
    custom_slug = article.params.get("slug")
    if isinstance(custom_slug, str) and custom_slug.strip():
        custom_slug = custom_slug.strip()
        if not is_valid_slug(custom_slug):
            raise FrontMatterError(
                f"invalid slug {custom_slug!r}: must be a single path segment",
                path=path,
            )
        article.slug = custom_slug
    return article


def load_directory(
    content_dir: Path,
    pattern: str = "**/*.md",
    exclude: Iterable[str] = ("_*",),
    strict: bool = False,
) -> LoadResult:
    """Load every content file under ``content_dir``.

    Args:
        content_dir: Root of the content tree
        pattern: Glob for content files
        exclude: File-name patterns to skip (section index pages by default)
        strict: Raise on the first broken file instead of collecting it

    Returns:
        LoadResult with articles in file order and per-file failures
    """
    if not content_dir.is_dir():
        raise FileNotFoundError(f"Content directory not found: {content_dir}")

    result = LoadResult()
    for path in iter_content_files(content_dir, pattern, exclude):
        try:
            result.articles.append(load_article(path))
        except (FrontMatterError, UnicodeDecodeError) as e:
            if strict:
                raise
            logger.warning("Skipping %s: %s", path, e)
            result.failures[path] = str(e)

    logger.info(
        "Loaded %d articles from %s (%d failed)",
        len(result.articles),
        content_dir,
        len(result.failures),
    )
    return result
