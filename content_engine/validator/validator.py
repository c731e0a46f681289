"""Content validator: checks article files before the site generator sees them.

Pipeline per file:
1. Split front matter (syntax errors stop here)
2. Field checks: title, description, date, draft, categories, slug, type, image
3. Body checks: non-empty, balanced notice shortcodes, terminated fences
4. Model check: the file must build a valid Article

Across files, duplicate slugs are reported.

Usage:
    validator = ContentValidator()
    report = validator.validate_directory(Path("content"))
"""

from __future__ import annotations

from collections import defaultdict
from pathlib import Path
from typing import Any, Optional

from content_engine.articles.frontmatter import (
    FrontMatterError,
    article_from_mapping,
    front_matter_line_count,
    split_front_matter,
)
from content_engine.articles.loader import is_valid_slug, iter_content_files, slug_for_path
from content_engine.articles.models import parse_date
from content_engine.articles.shortcodes import scan_body
from content_engine.common.config import ContentSettings
from content_engine.common.logging import setup_logging

from .models import Severity, ValidationIssue, ValidationReport

logger = setup_logging(module_name="validator")

# Shortcode problems that only degrade styling
_WARNING_PROBLEMS = {"unknown-level"}


class ContentValidator:
    """Validates article files against the front-matter and body rules.

    Args:
        config: Content settings (notice levels, known fields, image checks)
        strict: Treat warnings as failures in the resulting report
    """

    def __init__(self, config: ContentSettings | None = None, strict: bool = False):
        self.config = config or ContentSettings()
        self.strict = strict

    # --- Public API ---

    def validate_text(self, text: str, path: Optional[Path] = None) -> ValidationReport:
        """Validate the contents of one content file."""
        report = ValidationReport(files_checked=1, strict=self.strict)

        try:
            data, body = split_front_matter(text, path=path)
        except FrontMatterError as e:
            report.issues.append(ValidationIssue(
                path=path, code="front-matter", message=e.message, line=e.line,
            ))
            return report

        report.issues.extend(self._check_fields(data, path))
        report.issues.extend(self._check_body(text, body, path))

        if not report.errors:
            slug = slug_for_path(path) if path else ""
            try:
                article_from_mapping(data, body, source_path=path, slug=slug)
            except FrontMatterError as e:
                report.issues.append(ValidationIssue(
                    path=path, code="front-matter", message=e.message,
                ))

        return report

    def validate_file(self, path: Path) -> ValidationReport:
        """Validate a single content file on disk."""
        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            return ValidationReport(
                issues=[ValidationIssue(
                    path=path, code="encoding", message=f"not valid UTF-8: {e}",
                )],
                files_checked=1,
                strict=self.strict,
            )
        return self.validate_text(text, path=path)

    def validate_directory(self, content_dir: Path) -> ValidationReport:
        """Validate every content file under a directory, plus cross-file rules."""
        if not content_dir.is_dir():
            raise FileNotFoundError(f"Content directory not found: {content_dir}")

        report = ValidationReport(strict=self.strict)
        slugs: dict[str, list[Path]] = defaultdict(list)

        for path in iter_content_files(
            content_dir, self.config.pattern, self.config.exclude
        ):
            report.extend(self.validate_file(path))
            slugs[self._slug_of(path)].append(path)

        for slug, paths in sorted(slugs.items()):
            if len(paths) > 1:
                for dup in paths[1:]:
                    report.issues.append(ValidationIssue(
                        path=dup,
                        code="duplicate-slug",
                        message=f"slug '{slug}' is also used by {paths[0]}",
                    ))

        logger.info(
            "Validated %d files: %d errors, %d warnings",
            report.files_checked,
            report.error_count,
            report.warning_count,
        )
        return report

    # --- Checks ---

    def _check_fields(self, data: dict[str, Any], path: Optional[Path]) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []

        def error(code: str, message: str) -> None:
            issues.append(ValidationIssue(path=path, code=code, message=message))

        def warning(code: str, message: str) -> None:
            issues.append(ValidationIssue(
                path=path, code=code, message=message, severity=Severity.WARNING,
            ))

        title = data.get("title")
        if not isinstance(title, str) or not title.strip():
            error("missing-title", "front matter needs a non-empty 'title' string")

        description = data.get("description")
        if not isinstance(description, str) or not description.strip():
            error("missing-description", "front matter needs a non-empty 'description' string")

        if "date" in data and data["date"] is not None:
            try:
                parse_date(data["date"])
            except (TypeError, ValueError):
                error("invalid-date", f"'date' is not an ISO-8601 date: {data['date']!r}")

        if "draft" in data and not isinstance(data["draft"], bool):
            error("invalid-draft", f"'draft' must be true or false, got {data['draft']!r}")

        if "categories" in data and data["categories"] is not None:
            categories = data["categories"]
            if not isinstance(categories, list):
                error("invalid-categories", "'categories' must be a list of strings")
            else:
                names = []
                for item in categories:
                    if not isinstance(item, str) or not item.strip():
                        error("invalid-categories", f"category {item!r} is not a non-empty string")
                        continue
                    if item.strip() in names:
                        warning("duplicate-category", f"category '{item.strip()}' is listed twice")
                    names.append(item.strip())

        if "slug" in data and data["slug"] is not None:
            slug = data["slug"]
            if not isinstance(slug, str) or not is_valid_slug(slug.strip()):
                error("invalid-slug", f"'slug' must be a single path segment, got {slug!r}")

        if "type" in data and data["type"] is not None and not isinstance(data["type"], str):
            error("invalid-type", f"'type' must be a string, got {data['type']!r}")

        if "image" in data and data["image"] is not None:
            if not isinstance(data["image"], str):
                error("invalid-image", f"'image' must be a path string, got {data['image']!r}")
            elif self.config.check_images and not self._image_exists(data["image"], path):
                warning("missing-image", f"image '{data['image']}' was not found")

        known = set(self.config.known_fields)
        for key in data:
            if key not in known:
                warning("unknown-field", f"unrecognized front-matter key '{key}'")

        return issues

    def _check_body(self, text: str, body: str, path: Optional[Path]) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        if not body.strip():
            issues.append(ValidationIssue(
                path=path, code="empty-body", message="article body is empty",
            ))
            return issues

        offset = front_matter_line_count(text)
        for problem in scan_body(body, self.config.notice_levels).problems:
            severity = (
                Severity.WARNING if problem.code in _WARNING_PROBLEMS else Severity.ERROR
            )
            issues.append(ValidationIssue(
                path=path,
                code=problem.code,
                message=problem.message,
                severity=severity,
                line=problem.line + offset,
            ))
        return issues

    # --- Helpers ---

    def _image_exists(self, image: str, path: Optional[Path]) -> bool:
        if image.startswith(("http://", "https://", "//")):
            return True
        candidates = [Path(self.config.static_dir) / image.lstrip("/")]
        if path is not None:
            candidates.append(path.parent / image)
        return any(c.is_file() for c in candidates)

    def _slug_of(self, path: Path) -> str:
        try:
            data, _ = split_front_matter(path.read_text(encoding="utf-8"), path=path)
        except (FrontMatterError, UnicodeDecodeError):
            return slug_for_path(path)
        custom = data.get("slug")
        if isinstance(custom, str) and custom.strip():
            return custom.strip()
        return slug_for_path(path)
