"""Notice shortcode and code-fence scanning.

Article bodies use Hugo-style callouts:

    {{< notice "info" >}}
    Agents need a model client before they can run.
    {{< /notice >}}

The scanner walks the body line by line, skips fenced code blocks (sample
code may legitimately show shortcode syntax), pairs every opening notice
with its closing tag, and reports anything unbalanced with a 1-based line
number relative to the body.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, Optional

from .models import NoticeLevel

DEFAULT_LEVELS = tuple(level.value for level in NoticeLevel)

_OPEN_RE = re.compile(
    r"\{\{(?P<open>[<%])\s*notice\b(?P<args>[^}]*?)\s*(?P<close>[>%])\}\}"
)
_CLOSE_RE = re.compile(r"\{\{[<%]\s*/\s*notice\s*[>%]\}\}")
_FENCE_RE = re.compile(r"^(?P<indent> {0,3})(?P<fence>`{3,}|~{3,})(?P<info>.*)$")

# Problems that make a body impossible to render
STRUCTURAL_PROBLEMS = frozenset(
    {"unclosed-notice", "unexpected-close", "nested-notice", "unterminated-fence"}
)


class ShortcodeError(ValueError):
    """Raised when a body cannot be expanded because its shortcodes are unbalanced."""

    def __init__(self, problems: list[ShortcodeProblem]):
        self.problems = problems
        summary = "; ".join(f"line {p.line}: {p.message}" for p in problems)
        super().__init__(summary)


@dataclass
class Notice:
    """One balanced notice block."""
    level: str
    start_line: int  # line of the opening tag
    end_line: int  # line of the closing tag
    content: str
    start: int = 0  # offset of the opening tag in the body
    end: int = 0  # offset just past the closing tag


@dataclass
class ShortcodeProblem:
    """Something wrong with the body's shortcodes or fences."""
    code: str  # unclosed-notice | unexpected-close | nested-notice | unknown-level | unterminated-fence
    message: str
    line: int


@dataclass
class CodeFence:
    """A fenced code block span (closing line is None when unterminated)."""
    start_line: int
    end_line: Optional[int]
    fence: str
    info: str = ""


@dataclass
class ScanResult:
    """Everything the scanner found in a body."""
    notices: list[Notice] = field(default_factory=list)
    fences: list[CodeFence] = field(default_factory=list)
    problems: list[ShortcodeProblem] = field(default_factory=list)

    @property
    def balanced(self) -> bool:
        return not any(p.code in STRUCTURAL_PROBLEMS for p in self.problems)


def _parse_level(args: str) -> str:
    args = args.strip()
    if not args:
        return ""
    first = args[0]
    if first in ("'", '"'):
        end = args.find(first, 1)
        return args[1:end] if end != -1 else args[1:]
    return args.split()[0]


def _tags_outside_fences(body: str) -> tuple[list[tuple[str, re.Match, int, int]], list[CodeFence]]:
    """Find notice tags in prose, ignoring fenced code.

    Returns (tags, fences) where each tag is (kind, match, line, line_offset).
    """
    tags: list[tuple[str, re.Match, int, int]] = []
    fences: list[CodeFence] = []
    current: Optional[CodeFence] = None
    offset = 0

    for lineno, line in enumerate(body.split("\n"), start=1):
        fence_match = _FENCE_RE.match(line)
        if current is not None:
            if fence_match:
                marker = fence_match.group("fence")
                if (
                    marker[0] == current.fence[0]
                    and len(marker) >= len(current.fence)
                    and not fence_match.group("info").strip()
                ):
                    current.end_line = lineno
                    current = None
        elif fence_match and not (
            fence_match.group("fence")[0] == "`" and "`" in fence_match.group("info")
        ):
            current = CodeFence(
                start_line=lineno,
                end_line=None,
                fence=fence_match.group("fence"),
                info=fence_match.group("info").strip(),
            )
            fences.append(current)
        else:
            found = [("open", m) for m in _OPEN_RE.finditer(line)]
            found += [("close", m) for m in _CLOSE_RE.finditer(line)]
            found.sort(key=lambda item: item[1].start())
            tags.extend((kind, m, lineno, offset) for kind, m in found)
        offset += len(line) + 1

    return tags, fences


def scan_body(body: str, known_levels: Iterable[str] = DEFAULT_LEVELS) -> ScanResult:
    """Pair notice tags and check fences.

    Args:
        body: Markdown body (front matter already removed)
        known_levels: Accepted notice levels

    Returns:
        ScanResult with balanced notices, fences and any problems
    """
    levels = {level.lower() for level in known_levels}
    result = ScanResult()
    tags, result.fences = _tags_outside_fences(body)

    open_tag: Optional[tuple[str, re.Match, int, int]] = None

    for kind, match, lineno, line_offset in tags:
        if kind == "open":
            if match.group("open") == "<" and match.group("close") != ">":
                continue
            if match.group("open") == "%" and match.group("close") != "%":
                continue
            level = _parse_level(match.group("args"))
            if open_tag is not None:
                result.problems.append(ShortcodeProblem(
                    code="nested-notice",
                    message=f"notice opened inside the notice from line {open_tag[2]}",
                    line=lineno,
                ))
                continue
            if not level:
                result.problems.append(ShortcodeProblem(
                    code="unknown-level",
                    message="notice has no level",
                    line=lineno,
                ))
            elif level.lower() not in levels:
                result.problems.append(ShortcodeProblem(
                    code="unknown-level",
                    message=f"unknown notice level '{level}' (expected one of: {', '.join(sorted(levels))})",
                    line=lineno,
                ))
            open_tag = (level, match, lineno, line_offset)
        else:
            if open_tag is None:
                result.problems.append(ShortcodeProblem(
                    code="unexpected-close",
                    message="closing notice tag without an opening tag",
                    line=lineno,
                ))
                continue
            level, open_match, open_line, open_offset = open_tag
            start = open_offset + open_match.start()
            content_start = open_offset + open_match.end()
            content_end = line_offset + match.start()
            result.notices.append(Notice(
                level=level,
                start_line=open_line,
                end_line=lineno,
                content=body[content_start:content_end].strip("\n"),
                start=start,
                end=line_offset + match.end(),
            ))
            open_tag = None

    if open_tag is not None:
        result.problems.append(ShortcodeProblem(
            code="unclosed-notice",
            message=f"notice '{open_tag[0]}' is never closed",
            line=open_tag[2],
        ))

    for fence in result.fences:
        if fence.end_line is None:
            result.problems.append(ShortcodeProblem(
                code="unterminated-fence",
                message=f"code block opened with {fence.fence} is never closed",
                line=fence.start_line,
            ))

    result.problems.sort(key=lambda p: p.line)
    return result


def expand_notices(body: str, known_levels: Iterable[str] = DEFAULT_LEVELS) -> str:
    """Turn notice blocks into HTML containers for the Markdown renderer.

    The container carries ``markdown="1"`` so Python-Markdown's
    ``md_in_html`` extension renders the notice content as Markdown.

    Raises:
        ShortcodeError: if the body's notices or fences are unbalanced
    """
    result = scan_body(body, known_levels)
    if not result.balanced:
        raise ShortcodeError(
            [p for p in result.problems if p.code in STRUCTURAL_PROBLEMS]
        )

    parts: list[str] = []
    cursor = 0
    for notice in result.notices:
        level = re.sub(r"[^a-z0-9-]", "", notice.level.lower()) or "note"
        parts.append(body[cursor:notice.start])
        parts.append(
            f'\n\n<div class="notice notice-{level}" markdown="1">\n\n'
            f"{notice.content}\n\n</div>\n\n"
        )
        cursor = notice.end
    parts.append(body[cursor:])
    return "".join(parts)


def format_notice(level: str, text: str) -> str:
    """Render a notice shortcode block."""
    return f'{{{{< notice "{level}" >}}}}\n{text.strip()}\n{{{{< /notice >}}}}'


def upsert_notice(body: str, level: str, text: str, marker: str) -> str:
    """Replace the first ``level`` notice starting with ``marker``, or prepend one.

    Notices of other levels are left alone even when their text matches.

    Args:
        body: Markdown body
        level: Notice level for the new block
        text: Notice content
        marker: Prefix identifying the notice to replace (e.g. "Last updated")

    Returns:
        Updated body
    """
    block = format_notice(level, text)
    for notice in scan_body(body, known_levels=[level]).notices:
        if notice.level.lower() == level.lower() and notice.content.strip().startswith(marker):
            return body[:notice.start] + block + body[notice.end:]
    rest = body.lstrip("\n")
    return f"{block}\n\n{rest}"
