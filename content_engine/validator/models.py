"""Data models for the content validator."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional


class Severity(str, Enum):
    """How bad an issue is."""
    ERROR = "error"
    WARNING = "warning"


@dataclass
class ValidationIssue:
    """A single problem found in a content file."""
    path: Optional[Path]
    code: str  # e.g. missing-title, unclosed-notice, invalid-date
    message: str
    severity: Severity = Severity.ERROR
    line: Optional[int] = None  # 1-based, file-relative

    @property
    def location(self) -> str:
        where = str(self.path) if self.path else "<text>"
        return f"{where}:{self.line}" if self.line else where

    def to_dict(self) -> dict:
        return {
            "path": str(self.path) if self.path else None,
            "line": self.line,
            "code": self.code,
            "severity": self.severity.value,
            "message": self.message,
        }

    def __str__(self) -> str:
        return f"{self.location}: {self.severity.value}: [{self.code}] {self.message}"


@dataclass
class ValidationReport:
    """Outcome of validating one or more content files."""
    issues: list[ValidationIssue] = field(default_factory=list)
    files_checked: int = 0
    strict: bool = False

    @property
    def errors(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == Severity.WARNING]

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def warning_count(self) -> int:
        return len(self.warnings)

    @property
    def ok(self) -> bool:
        """No errors (and, in strict mode, no warnings either)."""
        if self.strict:
            return not self.issues
        return not self.errors

    def codes(self) -> list[str]:
        return [i.code for i in self.issues]

    def extend(self, other: ValidationReport) -> None:
        self.issues.extend(other.issues)
        self.files_checked += other.files_checked

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "files_checked": self.files_checked,
            "error_count": self.error_count,
            "warning_count": self.warning_count,
            "issues": [i.to_dict() for i in self.issues],
        }
