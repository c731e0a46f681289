# Site Module
# Production listing, category index, preview rendering and the article index

from .index import ArticleIndex
from .listing import (
    category_index,
    category_slug,
    group_by_type,
    production_listing,
    unique_category_slugs,
)
from .models import BuildResult, CategorySummary
from .renderer import SiteBuilder, SiteRenderer, build_site

__all__ = [
    "ArticleIndex",
    "BuildResult",
    "CategorySummary",
    "SiteBuilder",
    "SiteRenderer",
    "build_site",
    "category_index",
    "category_slug",
    "group_by_type",
    "production_listing",
    "unique_category_slugs",
]
