"""Data models for articles.

An Article is one content file: YAML front matter plus a Markdown body.
"""

from __future__ import annotations

import datetime as dt
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import BaseModel, Field, field_validator

# Front-matter keys in the order they are written back out.
FRONT_MATTER_FIELDS = (
    "title",
    "date",
    "image",
    "description",
    "draft",
    "categories",
    "type",
)


class NoticeLevel(str, Enum):
    """Admonition levels understood by the notice shortcode."""
    NOTE = "note"
    TIP = "tip"
    INFO = "info"
    WARNING = "warning"


def parse_date(value: Any) -> Optional[Union[datetime, date]]:
    """Coerce a front-matter date value.

    YAML already yields ``date``/``datetime`` for unquoted timestamps;
    quoted strings are parsed as ISO-8601 here. A trailing ``Z`` is
    accepted as UTC.
    """
    if value is None or isinstance(value, (date, datetime)):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if len(text) == 10:
            return date.fromisoformat(text)
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        return datetime.fromisoformat(text.replace(" ", "T", 1))
    raise ValueError(f"Unsupported date value: {value!r}")


class Article(BaseModel):
    """A single content file."""

    title: str
    date: Optional[Union[dt.datetime, dt.date]] = None
    image: Optional[str] = None
    description: str = ""
    categories: list[str] = Field(default_factory=list)
    type: Optional[str] = None
    draft: bool = False
    body: str

    # Front-matter keys without a dedicated field, kept verbatim
    params: dict[str, Any] = Field(default_factory=dict)

    # Not front matter: derived from where the file lives
    slug: str = ""
    source_path: Optional[Path] = None

    @field_validator("title")
    @classmethod
    def _title_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("title must not be empty")
        return v.strip()

    @field_validator("body")
    @classmethod
    def _body_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("body must not be empty")
        return v

    @field_validator("date", mode="before")
    @classmethod
    def _coerce_date(cls, v: Any) -> Any:
        return parse_date(v)

    @field_validator("description", mode="before")
    @classmethod
    def _description_default(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("categories", mode="before")
    @classmethod
    def _normalize_categories(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, str):
            v = [v]
        if not isinstance(v, (list, tuple, set, frozenset)):
            return v
        seen: list[str] = []
        for item in v:
            if not isinstance(item, str):
                raise ValueError(f"category must be a string, got {item!r}")
            name = item.strip()
            if name and name not in seen:
                seen.append(name)
        return seen

    # --- Derived views ---

    @property
    def is_published(self) -> bool:
        return not self.draft

    @property
    def category_set(self) -> frozenset[str]:
        return frozenset(self.categories)

    @property
    def published_on(self) -> Optional[date]:
        """Publication date without a time component."""
        if isinstance(self.date, datetime):
            return self.date.date()
        return self.date

    def to_front_matter(self) -> dict[str, Any]:
        """Ordered front-matter mapping, omitting unset optionals."""
        data: dict[str, Any] = {"title": self.title}
        if self.date is not None:
            if isinstance(self.date, datetime):
                data["date"] = self.date.isoformat()
            else:
                data["date"] = self.date
        if self.image is not None:
            data["image"] = self.image
        data["description"] = self.description
        data["draft"] = self.draft
        data["categories"] = list(self.categories)
        if self.type is not None:
            data["type"] = self.type
        for key, value in self.params.items():
            if key not in data:
                data[key] = value
        return data
