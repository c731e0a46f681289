"""Shared test fixtures for Content Engine."""

import shutil
import sys
from pathlib import Path

import pytest

# Ensure the package is importable without installation
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from content_engine.articles.models import Article
from content_engine.common.config import ContentSettings, DatabaseSettings, Settings, SiteSettings


SAMPLE_ARTICLE = """---
title: Building Agents with Microsoft Agent Framework
date: 2025-10-06
image: /images/agents.png
description: A practical tour of the agent SDK.
draft: false
categories: ["Microsoft", "Agent Framework"]
---

{{< notice "info" >}}
Last updated: October 20, 2025
{{< /notice >}}

Agents wrap a chat client with instructions and tools.

```python
agent = client.create_agent(name="Joker", instructions="Tell jokes.")
```
"""


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the sample content directory shipped with the repo."""
    return PROJECT_ROOT / "fixtures" / "content"


@pytest.fixture
def sample_article_text() -> str:
    """Return a well-formed article file."""
    return SAMPLE_ARTICLE


@pytest.fixture
def content_dir(tmp_path, fixtures_dir) -> Path:
    """Copy the sample content tree into a temporary directory."""
    target = tmp_path / "content"
    shutil.copytree(fixtures_dir, target)
    return target


@pytest.fixture
def test_settings(tmp_path, content_dir) -> Settings:
    """Settings pointing every path at the temporary directory."""
    return Settings(
        content=ContentSettings(
            content_dir=str(content_dir),
            static_dir=str(tmp_path / "static"),
        ),
        site=SiteSettings(
            title="Test Site",
            base_url="/",
            output_dir=str(tmp_path / "public"),
        ),
        database=DatabaseSettings(db_path=str(tmp_path / "articles.db")),
    )


@pytest.fixture
def make_article():
    """Factory for Article objects with sensible defaults."""

    def _make(**overrides) -> Article:
        data = {
            "title": "Sample Article",
            "date": "2025-10-06",
            "description": "A sample article.",
            "categories": ["Microsoft"],
            "draft": False,
            "body": "Body text.\n",
            "slug": "sample-article",
        }
        data.update(overrides)
        return Article(**data)

    return _make
