"""Front-matter codec: YAML block between ``---`` lines, Markdown after.

Usage:
    article = parse_article(path.read_text(encoding="utf-8"), source_path=path)
    text = serialize_article(article)
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from .models import FRONT_MATTER_FIELDS, Article

YAML_DELIMITER = "---"
TOML_DELIMITER = "+++"


class FrontMatterError(ValueError):
    """Raised when a content file's front matter cannot be used."""

    def __init__(
        self,
        message: str,
        path: Optional[Path] = None,
        line: Optional[int] = None,
    ):
        self.message = message
        self.path = path
        self.line = line
        location = str(path) if path else "<text>"
        if line is not None:
            location = f"{location}:{line}"
        super().__init__(f"{location}: {message}")


def _normalize(text: str) -> str:
    if text.startswith("\ufeff"):
        text = text[1:]
    return text.replace("\r\n", "\n").replace("\r", "\n")


def split_front_matter(
    text: str,
    path: Optional[Path] = None,
) -> tuple[dict[str, Any], str]:
    """Split a content file into its front-matter mapping and body.

    Args:
        text: Full file contents
        path: Source path, used in error messages only

    Returns:
        (front matter mapping, Markdown body)

    Raises:
        FrontMatterError: missing/unterminated block, bad YAML, non-mapping
    """
    lines = _normalize(text).split("\n")

    first = lines[0].rstrip() if lines else ""
    if first == TOML_DELIMITER:
        raise FrontMatterError(
            "TOML front matter (+++) is not supported; use YAML (---)",
            path=path,
            line=1,
        )
    if first != YAML_DELIMITER:
        raise FrontMatterError(
            "file must start with a '---' front-matter line", path=path, line=1
        )

    closing = None
    for idx in range(1, len(lines)):
        if lines[idx].rstrip() == YAML_DELIMITER:
            closing = idx
            break
    if closing is None:
        raise FrontMatterError(
            "front matter is not terminated by a '---' line", path=path, line=1
        )

    block = "\n".join(lines[1:closing])
    try:
        data = yaml.safe_load(block)
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        line = mark.line + 2 if mark is not None else None
        problem = getattr(e, "problem", None) or str(e)
        raise FrontMatterError(f"invalid YAML: {problem}", path=path, line=line) from e
    except ValueError as e:
        # e.g. an unquoted timestamp such as 2025-13-45
        raise FrontMatterError(f"invalid value: {e}", path=path) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FrontMatterError(
            f"front matter must be a mapping, got {type(data).__name__}",
            path=path,
            line=2,
        )

    body = "\n".join(lines[closing + 1:]).lstrip("\n")
    return data, body


def front_matter_line_count(text: str) -> int:
    """Number of lines taken by the front matter, delimiters included.

    Used to translate body line numbers into file line numbers. Returns 0
    when the text has no terminated front-matter block.
    """
    lines = _normalize(text).split("\n")
    if not lines or lines[0].rstrip() != YAML_DELIMITER:
        return 0
    for idx in range(1, len(lines)):
        if lines[idx].rstrip() == YAML_DELIMITER:
            offset = idx + 1
            # parse strips blank lines between the block and the body
            while offset < len(lines) and lines[offset] == "":
                offset += 1
            return offset
    return 0


def article_from_mapping(
    data: dict[str, Any],
    body: str,
    source_path: Optional[Path] = None,
    slug: str = "",
) -> Article:
    """Build an Article from a parsed front-matter mapping and body.

    Keys without a dedicated Article field land in ``params``.

    Raises:
        FrontMatterError: when required fields are missing or invalid
    """
    fields = {k: data[k] for k in FRONT_MATTER_FIELDS if k in data}
    params = {k: v for k, v in data.items() if k not in FRONT_MATTER_FIELDS}
    try:
        return Article(
            **fields,
            body=body,
            params=params,
            slug=slug,
            source_path=source_path,
        )
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'article'}: {err['msg']}"
            for err in e.errors()
        )
        raise FrontMatterError(problems, path=source_path) from e


def parse_article(
    text: str,
    source_path: Optional[Path] = None,
    slug: str = "",
) -> Article:
    """Parse a full content file into an Article."""
    data, body = split_front_matter(text, path=source_path)
    return article_from_mapping(data, body, source_path=source_path, slug=slug)


def dump_front_matter(data: dict[str, Any]) -> str:
    """Serialize a mapping as a delimited YAML front-matter block."""
    block = yaml.safe_dump(
        data,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
        width=1000,
    )
    return f"{YAML_DELIMITER}\n{block}{YAML_DELIMITER}\n"


def serialize_article(article: Article) -> str:
    """Render an Article back to file contents."""
    body = article.body.lstrip("\n")
    if not body.endswith("\n"):
        body += "\n"
    return f"{dump_front_matter(article.to_front_matter())}\n{body}"
