"""
Preview Site Renderer.
Handles Jinja2 page rendering, Markdown conversion and the site build.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Iterable, Optional

import markdown as md
from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup

from content_engine.articles.loader import load_directory
from content_engine.articles.models import Article
from content_engine.articles.shortcodes import expand_notices
from content_engine.common.config import Settings, settings as default_settings
from content_engine.common.logging import setup_logging

from .listing import category_index, category_slug, production_listing, unique_category_slugs
from .models import BuildResult, CategorySummary

logger = setup_logging(module_name="site.renderer")

MARKDOWN_EXTENSIONS = ["tables", "fenced_code", "md_in_html"]


class SiteRenderer:
    """
    Renders article, listing and category pages using Jinja2 templates.

    Usage:
        renderer = SiteRenderer()
        html = renderer.render_article(article)
    """

    def __init__(
        self,
        templates_dir: Optional[Path] = None,
        settings: Optional[Settings] = None,
    ):
        """
        Initialize the renderer.

        Args:
            templates_dir: Path to templates directory.
                          Defaults to ./templates relative to this file.
            settings: Application settings (site title, base URL, notice levels)
        """
        if templates_dir is None:
            templates_dir = Path(__file__).parent / "templates"

        self.templates_dir = templates_dir
        self.settings = settings or default_settings
        # category name -> URL segment, refreshed by category_summaries()
        self.category_slugs: dict[str, str] = {}
        self.env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=select_autoescape(["html", "xml", "jinja2"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.globals["site"] = self._site_context()
        self.env.globals["article_url"] = self.article_url
        self.env.globals["category_url"] = self.category_url
        self.env.filters["markdown_inline"] = self.render_inline

    # --- URLs ---

    @property
    def base_url(self) -> str:
        base = self.settings.site.base_url or "/"
        return base if base.endswith("/") else f"{base}/"

    def article_url(self, article: Article) -> str:
        return f"{self.base_url}posts/{article.slug}/"

    def category_url(self, name: str) -> str:
        slug = self.category_slugs.get(name) or category_slug(name)
        return f"{self.base_url}categories/{slug}/"

    # --- Markdown ---

    def render_body(self, article: Article) -> str:
        """
        Convert an article body to HTML.

        Notice shortcodes become ``<div class="notice notice-<level>">``
        containers before Markdown conversion.

        Raises:
            ShortcodeError: if the body's notices or fences are unbalanced
        """
        expanded = expand_notices(article.body, self.settings.content.notice_levels)
        return md.markdown(expanded, extensions=MARKDOWN_EXTENSIONS)

    def render_inline(self, text: str) -> Markup:
        """Render a short Markdown string (e.g. a description) without the wrapping paragraph."""
        html = md.markdown(text or "")
        match = re.fullmatch(r"<p>(.*)</p>", html, flags=re.DOTALL)
        if match and "<p>" not in match.group(1):
            return Markup(match.group(1))
        return Markup(html)

    # --- Pages ---

    def render_article(self, article: Article) -> str:
        """Render a single article page."""
        template = self.env.get_template("article.html.jinja2")
        return template.render(
            article=article,
            body_html=Markup(self.render_body(article)),
        )

    def render_listing(self, articles: Iterable[Article], include_drafts: bool = False) -> str:
        """Render the home page listing (drafts excluded unless asked)."""
        template = self.env.get_template("listing.html.jinja2")
        return template.render(
            articles=production_listing(articles, include_drafts),
            categories=self.category_summaries(articles, include_drafts),
        )

    def render_category(self, name: str, articles: list[Article]) -> str:
        """Render one category page for already-filtered articles."""
        template = self.env.get_template("category.html.jinja2")
        return template.render(category=name, articles=articles)

    def render_categories(self, summaries: list[CategorySummary]) -> str:
        """Render the category overview page."""
        template = self.env.get_template("categories.html.jinja2")
        return template.render(categories=summaries)

    def category_summaries(
        self,
        articles: Iterable[Article],
        include_drafts: bool = False,
    ) -> list[CategorySummary]:
        """Summaries in index order; also fixes the slugs used by category_url()."""
        index = category_index(articles, include_drafts)
        self.category_slugs = unique_category_slugs(index)
        return [
            CategorySummary(name=name, slug=self.category_slugs[name], count=len(items))
            for name, items in index.items()
        ]

    def _site_context(self) -> dict[str, Any]:
        return {
            "title": self.settings.site.title,
            "base_url": self.base_url,
            "language": self.settings.site.language,
        }


class SiteBuilder:
    """Builds the preview site from a content directory.

    Steps:
    1. Load articles (fail if any file is broken, unless skip_invalid)
    2. Filter drafts
    3. Write home listing, article pages, category overview and category pages
    """

    def __init__(
        self,
        renderer: Optional[SiteRenderer] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or default_settings
        self.renderer = renderer or SiteRenderer(settings=self.settings)

    def build(
        self,
        content_dir: Optional[Path] = None,
        output_dir: Optional[Path] = None,
        include_drafts: bool = False,
        skip_invalid: bool = False,
    ) -> BuildResult:
        """Execute the full build.

        Args:
            content_dir: Article directory (defaults to settings)
            output_dir: Destination directory (defaults to settings)
            include_drafts: Render drafts too (local preview only)
            skip_invalid: Build from the files that load instead of failing

        Returns:
            BuildResult with written pages and counts

        Raises:
            ValueError: if any content file fails to load or two articles share
                a slug, and skip_invalid is False
        """
        content_dir = content_dir or Path(self.settings.content.content_dir)
        output_dir = output_dir or Path(self.settings.site.output_dir)

        logger.info("Step 1: Loading articles from %s...", content_dir)
        loaded = load_directory(
            content_dir,
            pattern=self.settings.content.pattern,
            exclude=self.settings.content.exclude,
        )
        failures = dict(loaded.failures)
        loaded_articles, duplicates = self._drop_duplicate_slugs(loaded.articles)
        failures.update(duplicates)
        if failures and not skip_invalid:
            details = "; ".join(f"{p}: {msg}" for p, msg in failures.items())
            raise ValueError(f"{len(failures)} content file(s) failed to load: {details}")

        result = BuildResult(output_dir=output_dir, failures=failures)

        logger.info("Step 2: Filtering drafts...")
        articles = production_listing(loaded_articles, include_drafts)
        result.drafts_skipped = len(loaded_articles) - len(articles)

        # Category slugs must be settled before any page links to them
        index = category_index(articles, include_drafts=True)
        summaries = self.renderer.category_summaries(articles, include_drafts=True)

        logger.info("Step 3: Rendering %d articles...", len(articles))
        for article in articles:
            page = output_dir / "posts" / article.slug / "index.html"
            self._write(page, self.renderer.render_article(article), result)
            result.articles_rendered += 1

        self._write(
            output_dir / "index.html",
            self.renderer.render_listing(articles, include_drafts=True),
            result,
        )

        self._write(
            output_dir / "categories" / "index.html",
            self.renderer.render_categories(summaries),
            result,
        )
        for name, items in index.items():
            page = output_dir / "categories" / self.renderer.category_slugs[name] / "index.html"
            self._write(page, self.renderer.render_category(name, items), result)
            result.categories[name] = len(items)

        logger.info(
            "Build complete: %d pages, %d drafts skipped",
            result.page_count,
            result.drafts_skipped,
        )
        return result

    @staticmethod
    def _drop_duplicate_slugs(
        articles: list[Article],
    ) -> tuple[list[Article], dict[Path, str]]:
        """Keep the first article per slug; report the others as failures."""
        kept: dict[str, Article] = {}
        duplicates: dict[Path, str] = {}
        for article in articles:
            first = kept.get(article.slug)
            if first is None:
                kept[article.slug] = article
            else:
                duplicates[article.source_path] = (
                    f"slug '{article.slug}' is also used by {first.source_path}"
                )
        return list(kept.values()), duplicates

    def _write(self, path: Path, html: str, result: BuildResult) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(html)
        result.pages_written.append(path)


def build_site(
    content_dir: Optional[Path] = None,
    output_dir: Optional[Path] = None,
    include_drafts: bool = False,
) -> BuildResult:
    """
    Convenience function to build the preview site.

    Args:
        content_dir: Article directory
        output_dir: Destination directory
        include_drafts: Render drafts too

    Returns:
        BuildResult
    """
    return SiteBuilder().build(content_dir, output_dir, include_drafts)
