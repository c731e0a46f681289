# Validator Module
"""
Content validation for article files: front-matter fields, dates, draft
flag, categories, balanced notice shortcodes and terminated code fences.
"""

from .models import Severity, ValidationIssue, ValidationReport
from .validator import ContentValidator

__all__ = [
    "ContentValidator",
    "Severity",
    "ValidationIssue",
    "ValidationReport",
]
