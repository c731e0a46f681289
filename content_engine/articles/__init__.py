# Articles Module
# Article model, front-matter codec, shortcode scanning, loading and authoring

from .authoring import new_article, slugify, touch_last_updated
from .frontmatter import (
    FrontMatterError,
    dump_front_matter,
    parse_article,
    serialize_article,
    split_front_matter,
)
from .loader import LoadResult, load_article, load_directory
from .models import Article, NoticeLevel
from .shortcodes import ScanResult, ShortcodeError, expand_notices, scan_body

__all__ = [
    "Article",
    "FrontMatterError",
    "LoadResult",
    "NoticeLevel",
    "ScanResult",
    "ShortcodeError",
    "dump_front_matter",
    "expand_notices",
    "load_article",
    "load_directory",
    "new_article",
    "parse_article",
    "scan_body",
    "serialize_article",
    "slugify",
    "split_front_matter",
    "touch_last_updated",
]
