# Content Engine
"""
Tooling for the AI engineering articles site:
- Article model and front-matter codec
- Notice shortcode and code-fence scanning
- Content validation
- Production listing, category index, preview rendering
- SQLite article index
"""

__version__ = "0.3.0"
