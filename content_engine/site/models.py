"""Data models for the site package."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class BuildResult:
    """Result of building the preview site."""
    output_dir: Path
    pages_written: list[Path] = field(default_factory=list)
    articles_rendered: int = 0
    drafts_skipped: int = 0
    categories: dict[str, int] = field(default_factory=dict)  # name -> article count
    failures: dict[Path, str] = field(default_factory=dict)

    @property
    def page_count(self) -> int:
        return len(self.pages_written)

    def to_dict(self) -> dict:
        return {
            "output_dir": str(self.output_dir),
            "page_count": self.page_count,
            "articles_rendered": self.articles_rendered,
            "drafts_skipped": self.drafts_skipped,
            "categories": self.categories,
            "failures": {str(k): v for k, v in self.failures.items()},
        }


@dataclass
class CategorySummary:
    """A category and how many published articles carry it."""
    name: str
    slug: str
    count: int
