"""CLI entry point for Content Engine.

Usage:
    # Check every article before pushing
    python -m content_engine.main validate content/
    python -m content_engine.main validate content/ --strict --json

    # Preview build (drafts excluded unless --drafts)
    python -m content_engine.main build --content content --output public

    # Rebuild the SQLite article index
    python -m content_engine.main index --db data/articles.db

    # What would production list?
    python -m content_engine.main list --category "Agent Framework"

    # Authoring
    python -m content_engine.main new "Getting Started with Agents" --category Microsoft
    python -m content_engine.main touch content/getting-started-with-agents.md
"""

from __future__ import annotations

import argparse
import json
import sys
from datetime import date
from pathlib import Path

from content_engine.articles.authoring import new_article, touch_last_updated
from content_engine.articles.frontmatter import FrontMatterError
from content_engine.articles.loader import LoadResult, load_directory
from content_engine.common.config import settings
from content_engine.common.logging import level_for, set_level, setup_logging
from content_engine.site.index import ArticleIndex
from content_engine.site.listing import category_index, production_listing
from content_engine.site.renderer import SiteBuilder
from content_engine.validator import ContentValidator

logger = setup_logging(module_name="content_engine.main")


def _content_dir(args: argparse.Namespace) -> Path:
    return Path(args.content) if args.content else Path(settings.content.content_dir)


def _load(args: argparse.Namespace) -> LoadResult:
    return load_directory(
        _content_dir(args),
        pattern=settings.content.pattern,
        exclude=settings.content.exclude,
    )


def _run_validate(args: argparse.Namespace) -> int:
    validator = ContentValidator(settings.content, strict=args.strict)
    target = Path(args.path) if args.path else Path(settings.content.content_dir)
    if target.is_dir():
        report = validator.validate_directory(target)
    elif target.is_file():
        report = validator.validate_file(target)
    else:
        raise SystemExit(f"Error: {target} does not exist")

    if args.json:
        print(json.dumps(report.to_dict(), ensure_ascii=False, indent=2))
    else:
        for issue in report.issues:
            print(issue)
        print(
            f"\n{report.files_checked} files checked: "
            f"{report.error_count} errors, {report.warning_count} warnings"
        )
    return 0 if report.ok else 1


def _run_build(args: argparse.Namespace) -> int:
    output_dir = Path(args.output) if args.output else Path(settings.site.output_dir)
    builder = SiteBuilder()
    try:
        result = builder.build(
            _content_dir(args),
            output_dir,
            include_drafts=args.drafts,
            skip_invalid=args.skip_invalid,
        )
    except (FileNotFoundError, ValueError) as e:
        logger.error("Build failed: %s", e)
        return 1

    logger.info("=== Build Results: %s ===", result.output_dir)
    logger.info("Articles rendered: %d", result.articles_rendered)
    logger.info("Drafts skipped: %d", result.drafts_skipped)
    for name, count in result.categories.items():
        logger.info("  %s: %d", name, count)
    return 0


def _run_index(args: argparse.Namespace) -> int:
    try:
        loaded = _load(args)
    except FileNotFoundError as e:
        logger.error("Index rebuild failed: %s", e)
        return 1
    with ArticleIndex(db_path=args.db or settings.database.db_path) as index:
        try:
            count = index.rebuild(loaded.articles)
        except ValueError as e:
            logger.error("Index rebuild failed: %s", e)
            return 1
        for category in index.categories():
            logger.info("  %s: %d", category.name, category.count)
    logger.info("Indexed %d articles (%d files skipped)", count, len(loaded.failures))
    return 0 if loaded.ok else 1


def _run_list(args: argparse.Namespace) -> int:
    try:
        loaded = _load(args)
    except FileNotFoundError as e:
        logger.error("Cannot list articles: %s", e)
        return 1
    if args.category:
        articles = category_index(loaded.articles, args.drafts).get(args.category, [])
    else:
        articles = production_listing(loaded.articles, args.drafts)

    for article in articles:
        day = article.published_on.isoformat() if article.published_on else "----------"
        flag = " [draft]" if article.draft else ""
        print(f"{day}  {article.slug}  {article.title}{flag}")
    return 0


def _run_new(args: argparse.Namespace) -> int:
    try:
        path = new_article(
            _content_dir(args),
            title=args.title,
            categories=args.category or [],
            description=args.description,
            draft=not args.publish,
            image=args.image,
            type=args.type,
        )
    except (FileExistsError, ValueError) as e:
        logger.error("Cannot create article: %s", e)
        return 1
    print(path)
    return 0


def _run_touch(args: argparse.Namespace) -> int:
    try:
        when = date.fromisoformat(args.date) if args.date else None
    except ValueError:
        logger.error("Invalid --date %r, expected YYYY-MM-DD", args.date)
        return 1
    try:
        touch_last_updated(Path(args.path), when)
    except (OSError, FrontMatterError) as e:
        logger.error("Cannot update %s: %s", args.path, e)
        return 1
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate, index and preview the articles content tree"
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Warnings and errors only")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("validate", help="Check front matter, shortcodes and fences")
    p.add_argument("path", nargs="?", help="Content directory or single file")
    p.add_argument("--strict", action="store_true", help="Fail on warnings too")
    p.add_argument("--json", action="store_true", help="Print the report as JSON")
    p.set_defaults(func=_run_validate)

    p = sub.add_parser("build", help="Render the preview site")
    p.add_argument("--content", help="Content directory")
    p.add_argument("--output", help="Output directory")
    p.add_argument("--drafts", action="store_true", help="Include draft articles")
    p.add_argument(
        "--skip-invalid",
        action="store_true",
        help="Build from the files that load instead of failing",
    )
    p.set_defaults(func=_run_build)

    p = sub.add_parser("index", help="Rebuild the SQLite article index")
    p.add_argument("--content", help="Content directory")
    p.add_argument("--db", help="Index database path")
    p.set_defaults(func=_run_index)

    p = sub.add_parser("list", help="Show the production listing")
    p.add_argument("--content", help="Content directory")
    p.add_argument("--category", help="Only articles in this category")
    p.add_argument("--drafts", action="store_true", help="Include draft articles")
    p.set_defaults(func=_run_list)

    p = sub.add_parser("new", help="Create a new draft article")
    p.add_argument("title", help="Article title")
    p.add_argument("--content", help="Content directory")
    p.add_argument(
        "--category",
        action="append",
        help="Category (repeat for several)",
    )
    p.add_argument("--description", default="", help="Summary shown in listings")
    p.add_argument("--image", help="Representative image path")
    p.add_argument("--type", help="Rendering hint, e.g. 'featured'")
    p.add_argument("--publish", action="store_true", help="Create with draft: false")
    p.set_defaults(func=_run_new)

    p = sub.add_parser("touch", help="Refresh the 'Last updated' notice")
    p.add_argument("path", help="Article file")
    p.add_argument("--date", help="Update date (YYYY-MM-DD, default today)")
    p.set_defaults(func=_run_touch)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    set_level(level_for(args.verbose, args.quiet))
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
