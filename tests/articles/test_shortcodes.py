"""Tests for notice shortcode and code-fence scanning."""

import pytest

from content_engine.articles.shortcodes import (
    ShortcodeError,
    expand_notices,
    format_notice,
    scan_body,
    upsert_notice,
)

BALANCED = """Intro.

{{< notice "info" >}}
Agents need a model client.
{{< /notice >}}
"""


def _codes(result):
    return [p.code for p in result.problems]


class TestScanBody:
    def test_balanced_notice(self):
        result = scan_body(BALANCED)
        assert result.balanced
        assert result.problems == []
        assert len(result.notices) == 1
        notice = result.notices[0]
        assert notice.level == "info"
        assert notice.start_line == 3
        assert notice.end_line == 5
        assert notice.content == "Agents need a model client."

    def test_every_open_has_a_close(self):
        body = BALANCED + "\n{{< notice \"tip\" >}}\nTwo\n{{< /notice >}}\n"
        result = scan_body(body)
        assert result.balanced
        assert [n.level for n in result.notices] == ["info", "tip"]

    def test_unclosed_notice(self):
        result = scan_body('Text\n{{< notice "warning" >}}\nNever closed\n')
        assert _codes(result) == ["unclosed-notice"]
        assert result.problems[0].line == 2
        assert not result.balanced

    def test_unexpected_close(self):
        result = scan_body("Text\n{{< /notice >}}\n")
        assert _codes(result) == ["unexpected-close"]
        assert result.problems[0].line == 2

    def test_nested_notice(self):
        body = (
            '{{< notice "info" >}}\n'
            '{{< notice "tip" >}}\n'
            "inner\n"
            "{{< /notice >}}\n"
            "{{< /notice >}}\n"
        )
        result = scan_body(body)
        assert "nested-notice" in _codes(result)
        assert "unexpected-close" in _codes(result)
        assert not result.balanced

    def test_unknown_level_is_not_structural(self):
        result = scan_body('{{< notice "danger" >}}\nx\n{{< /notice >}}\n')
        assert _codes(result) == ["unknown-level"]
        assert result.balanced
        assert result.notices[0].level == "danger"

    def test_custom_levels(self):
        result = scan_body(
            '{{< notice "danger" >}}\nx\n{{< /notice >}}\n',
            known_levels=["danger"],
        )
        assert result.problems == []

    def test_missing_level(self):
        result = scan_body("{{< notice >}}\nx\n{{< /notice >}}\n")
        assert _codes(result) == ["unknown-level"]
        assert "no level" in result.problems[0].message

    def test_unquoted_and_percent_forms(self):
        body = "{{< notice tip >}}\na\n{{< /notice >}}\n{{% notice note %}}\nb\n{{% /notice %}}\n"
        result = scan_body(body)
        assert result.problems == []
        assert [n.level for n in result.notices] == ["tip", "note"]

    def test_inline_notice(self):
        result = scan_body('{{< notice "note" >}}Short{{< /notice >}}')
        assert result.notices[0].content == "Short"
        assert result.notices[0].start_line == result.notices[0].end_line == 1

    def test_shortcodes_inside_fences_are_ignored(self):
        body = (
            "Example markup:\n"
            "```markdown\n"
            '{{< notice "info" >}}\n'
            "```\n"
        )
        result = scan_body(body)
        assert result.problems == []
        assert result.notices == []
        assert len(result.fences) == 1
        assert result.fences[0].info == "markdown"

    def test_notice_may_contain_code(self):
        body = '{{< notice "tip" >}}\n```python\nprint("hi")\n```\n{{< /notice >}}\n'
        result = scan_body(body)
        assert result.balanced
        assert "print" in result.notices[0].content

    def test_unterminated_fence(self):
        result = scan_body("Text\n```python\nprint(1)\n")
        assert _codes(result) == ["unterminated-fence"]
        assert result.problems[0].line == 2

    def test_shorter_fence_does_not_close(self):
        result = scan_body("````\ncode\n```\n")
        assert _codes(result) == ["unterminated-fence"]

    def test_tilde_fence_ignores_backticks(self):
        result = scan_body("~~~\n```\n~~~\n")
        assert result.problems == []
        assert result.fences[0].end_line == 3


class TestExpandNotices:
    def test_expands_to_markdown_container(self):
        html = expand_notices(BALANCED)
        assert '<div class="notice notice-info" markdown="1">' in html
        assert "Agents need a model client." in html
        assert "</div>" in html
        assert "{{<" not in html

    def test_fenced_shortcodes_left_alone(self):
        body = "```\n{{< notice \"info\" >}}\n```\n"
        assert expand_notices(body) == body

    def test_unbalanced_raises(self):
        with pytest.raises(ShortcodeError) as exc:
            expand_notices('{{< notice "info" >}}\nopen forever\n')
        assert exc.value.problems[0].code == "unclosed-notice"

    def test_unknown_level_still_expands(self):
        html = expand_notices('{{< notice "Danger" >}}\nx\n{{< /notice >}}\n')
        assert "notice-danger" in html


class TestUpsertNotice:
    def test_format_notice(self):
        assert format_notice("info", "Hi") == '{{< notice "info" >}}\nHi\n{{< /notice >}}'

    def test_replaces_existing_marker(self):
        body = '{{< notice "info" >}}\nLast updated: October 20, 2025\n{{< /notice >}}\n\nText\n'
        updated = upsert_notice(body, "info", "Last updated: October 19, 2026", "Last updated")
        assert "October 19, 2026" in updated
        assert "October 20, 2025" not in updated
        assert updated.count("Last updated") == 1
        assert updated.endswith("\n\nText\n")

    def test_prepends_when_missing(self):
        updated = upsert_notice("Text\n", "info", "Last updated: today", "Last updated")
        assert updated.startswith('{{< notice "info" >}}\nLast updated: today\n')
        assert updated.endswith("\n\nText\n")

    def test_other_notices_untouched(self):
        body = '{{< notice "warning" >}}\nPreview API\n{{< /notice >}}\n'
        updated = upsert_notice(body, "info", "Last updated: today", "Last updated")
        assert "Preview API" in updated
        assert updated.count("{{< /notice >}}") == 2

    def test_marker_in_other_level_is_not_replaced(self):
        body = '{{< notice "warning" >}}\nLast updated: before the API freeze\n{{< /notice >}}\n'
        updated = upsert_notice(body, "info", "Last updated: today", "Last updated")
        assert '{{< notice "warning" >}}\nLast updated: before the API freeze' in updated
        assert updated.startswith('{{< notice "info" >}}\nLast updated: today\n')
