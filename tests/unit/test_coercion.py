"""Unit tests for safe coercion passes."""

import pytest

from lumen.contexts.modeling.non_conforming import NonConformingCollector
from lumen.utils.coercion import (
    json_type_name,
    safe_array,
    safe_number,
    safe_object,
    safe_string,
    safe_visible,
)


@pytest.mark.unit
@pytest.mark.parametrize(
    "value, expected",
    [
        (None, "null"),
        (True, "boolean"),
        (3, "number"),
        (2.5, "number"),
        ("x", "string"),
        ([1], "array"),
        ({"a": 1}, "object"),
    ],
)
def test_json_type_name(value, expected):
    """Python values are named by their JSON type."""
    assert json_type_name(value) == expected


@pytest.mark.unit
class TestSafeString:
    """safe_string coercion and recording."""

    def test_string_passes_through_unrecorded(self):
        """A string is returned as-is."""
        collector = NonConformingCollector()
        assert safe_string("hello", collector, "work", "[0].name") == "hello"
        assert not collector.has_issues

    def test_none_is_silent(self):
        """Absent values default to "" without a record."""
        collector = NonConformingCollector()
        assert safe_string(None, collector) == ""
        assert not collector.has_issues

    def test_number_becomes_text_and_is_recorded(self):
        """Numbers keep their JSON text form."""
        collector = NonConformingCollector()
        assert safe_string(2024, collector, "awards", "[0].date") == "2024"
        assert safe_string(4.0, collector) == "4"
        assert safe_string(True, collector) == "true"

        first = collector.invalid_fields[0]
        assert (first.section, first.field, first.value) == ("awards", "[0].date", 2024)
        assert first.reason == "expected string, got number"
        assert len(collector.invalid_fields) == 3

    def test_object_becomes_empty_and_value_is_kept(self):
        """Structured values are emptied but preserved in the record."""
        collector = NonConformingCollector()
        assert safe_string({"first": "Jane"}, collector, "basics", "name") == ""
        assert collector.invalid_fields[0].value == {"first": "Jane"}
        assert collector.invalid_fields[0].reason == "expected string, got object"

    def test_without_collector(self):
        """Coercion works without anyone recording."""
        assert safe_string(["a"]) == ""


@pytest.mark.unit
class TestSafeArray:
    """safe_array coercion and recording."""

    def test_list_is_copied(self):
        """A new list is returned."""
        original = ["a", "b"]
        result = safe_array(original)
        assert result == original
        assert result is not original

    def test_scalar_is_recorded(self):
        """A scalar where an array belongs becomes [] plus a record."""
        collector = NonConformingCollector()
        assert safe_array("oops", collector, "work", "[0].highlights") == []
        assert collector.invalid_fields[0].reason == "expected array, got string"

    def test_none_is_silent(self):
        """null means "not provided"."""
        collector = NonConformingCollector()
        assert safe_array(None, collector) == []
        assert not collector.has_issues


@pytest.mark.unit
class TestOtherKinds:
    """safe_object, safe_visible, safe_number."""

    def test_safe_object(self):
        """Non-objects become {} and are recorded."""
        collector = NonConformingCollector()
        assert safe_object({"a": 1}, collector) == {"a": 1}
        assert safe_object([1], collector, "basics", "location") == {}
        assert collector.invalid_fields[0].reason == "expected object, got array"

    def test_safe_visible_defaults_to_true(self):
        """Only False hides; junk is recorded and shown."""
        collector = NonConformingCollector()
        assert safe_visible(None, collector) is True
        assert safe_visible(False, collector) is False
        assert not collector.has_issues
        assert safe_visible("false", collector, "work", "[0].visible") is True
        assert collector.invalid_fields[0].reason == "expected boolean, got string"

    def test_safe_number(self):
        """Numbers and numeric strings are accepted; anything else falls back."""
        collector = NonConformingCollector()
        assert safe_number(12, 60, collector) == 12
        assert safe_number("24", 60, collector) == 24
        assert safe_number(None, 60, collector) == 60
        assert not collector.has_issues
        assert safe_number("big", 60, collector, "icon", "size") == 60
        assert safe_number(True, 60, collector) == 60
        assert len(collector.invalid_fields) == 2

    @pytest.mark.parametrize(
        "value", ["nan", "inf", "-Infinity", "1e400", float("nan"), float("inf")]
    )
    def test_safe_number_rejects_non_finite(self, value):
        """NaN and infinities fall back to the default and are recorded."""
        collector = NonConformingCollector()
        assert safe_number(value, 60, collector, "icon", "size") == 60
        assert [f.reason for f in collector.invalid_fields] == ["expected finite number"]
