"""
Tests for parameter sources (flags and properties files).

These tests verify:
1. name=value assignments are split at the first '='
2. The properties subset: comments, separators, continuations
3. Malformed input is reported with its location
"""

import pytest

from paramdispatch.errors import SourceFormatError
from paramdispatch.sources import (
    load_properties,
    merge_sources,
    parse_assignments,
    parse_properties,
)


# =============================================================================
# ASSIGNMENTS
# =============================================================================

class TestAssignments:
    """Test command-line style name=value parsing."""

    def test_simple_assignments(self):
        assert parse_assignments(["a=1", "b=two"]) == {"a": "1", "b": "two"}

    def test_value_may_contain_separator(self):
        assert parse_assignments(["expr=x=y"]) == {"expr": "x=y"}

    def test_empty_value_allowed(self):
        assert parse_assignments(["flag="]) == {"flag": ""}

    def test_later_assignment_wins(self):
        assert parse_assignments(["a=1", "a=2"]) == {"a": "2"}

    @pytest.mark.parametrize("item", ["novalue", "=1", "  =1"])
    def test_malformed_assignment(self, item):
        """Items without '=' or without a name are rejected."""
        with pytest.raises(SourceFormatError) as exc_info:
            parse_assignments([item])
        assert exc_info.value.text == item
        assert exc_info.value.line_number is None


# =============================================================================
# PROPERTIES
# =============================================================================

class TestProperties:
    """Test the properties-file subset."""

    def test_separators(self):
        """'=', ':' and whitespace all separate key from value."""
        text = "a = 1\nb: 2\nc 3\nd=4\n"
        assert parse_properties(text) == {"a": "1", "b": "2", "c": "3", "d": "4"}

    def test_comments_and_blank_lines_skipped(self):
        text = "# comment\n\n! another\n   \nkey=value\n"
        assert parse_properties(text) == {"key": "value"}

    def test_key_without_value(self):
        assert parse_properties("lonely\n") == {"lonely": ""}

    def test_value_keeps_inner_separators(self):
        assert parse_properties("url = http://host:80/a=b") == {"url": "http://host:80/a=b"}

    def test_continuation_lines_joined(self):
        """A trailing backslash continues the value on the next line."""
        text = "description = first \\\n    second \\\n    third\nnext=1\n"
        assert parse_properties(text) == {
            "description": "first second third",
            "next": "1",
        }

    def test_comment_does_not_continue(self):
        text = "# ends with backslash \\\nkey=value\n"
        assert parse_properties(text) == {"key": "value"}

    def test_malformed_line_reports_location(self):
        """A line with no key is reported with source and line number."""
        with pytest.raises(SourceFormatError) as exc_info:
            parse_properties("a=1\n=2\n", source="run.properties")
        assert exc_info.value.source == "run.properties"
        assert exc_info.value.line_number == 2
        assert "run.properties:2" in str(exc_info.value)

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "run.properties"
        path.write_text("maxSteps=100\nverbose: true\n", encoding="utf-8")
        assert load_properties(path) == {"maxSteps": "100", "verbose": "true"}

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_properties(tmp_path / "absent.properties")


class TestMerge:
    """Test merging of several sources."""

    def test_later_sources_win(self):
        merged = merge_sources({"a": "1", "b": "1"}, {"b": "2"}, {"c": "3"})
        assert merged == {"a": "1", "b": "2", "c": "3"}

    def test_no_sources(self):
        assert merge_sources() == {}
