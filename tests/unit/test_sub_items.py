"""Unit tests for sub-item resolution (plain strings vs tagged objects)."""

import pytest

from lumen.contexts.modeling import sub_items
from lumen.contexts.modeling.sub_items import PlainItem, TaggedItem


@pytest.mark.unit
class TestAccessors:
    """text(), is_visible(), to_tagged(), to_plain() over both forms."""

    def test_plain_item_is_always_visible(self):
        """A bare string has no way to be hidden."""
        item = PlainItem("Shipped v2")
        assert sub_items.text(item) == "Shipped v2"
        assert sub_items.is_visible(item) is True

    def test_tagged_item_visibility(self):
        """Only visible=False hides a tagged item."""
        assert sub_items.is_visible(TaggedItem("a")) is True
        assert sub_items.is_visible(TaggedItem("a", visible=False)) is False

    def test_to_tagged_keeps_text_and_marks_visible(self):
        """Canonicalizing a plain string does not alter its text."""
        tagged = sub_items.to_tagged(PlainItem("  spaced text  "))
        assert tagged == TaggedItem("  spaced text  ", visible=True)

    def test_to_tagged_is_identity_for_tagged(self):
        """A tagged item keeps its own visibility."""
        item = TaggedItem("hidden", visible=False)
        assert sub_items.to_tagged(item) == item

    def test_to_plain_drops_visibility_only(self):
        """Visibility is dropped, never merged into the text."""
        assert sub_items.to_plain(TaggedItem("x", visible=False)) == "x"
        assert sub_items.to_plain(PlainItem("y")) == "y"


@pytest.mark.unit
class TestRawForms:
    """from_raw() / to_raw() for the editor JSON shapes."""

    def test_string_becomes_plain(self):
        """Legacy strings resolve to PlainItem."""
        assert sub_items.from_raw("Python", "keywords") == PlainItem("Python")

    def test_highlight_object_uses_content_key(self):
        """Highlights keep their text under "content"."""
        item = sub_items.from_raw({"content": "Led team", "visible": False}, "highlights")
        assert item == TaggedItem("Led team", visible=False)

    def test_keyword_object_uses_name_key(self):
        """Keywords, courses and roles keep their text under "name"."""
        assert sub_items.from_raw({"name": "Go"}, "keywords") == TaggedItem("Go", visible=True)

    def test_text_key_is_accepted_as_fallback(self):
        """A generic {"text": ...} object is understood for any kind."""
        assert sub_items.from_raw({"text": "Intro", "visible": True}, "courses") == TaggedItem(
            "Intro"
        )

    def test_non_boolean_visible_counts_as_visible(self):
        """Only an explicit False hides."""
        assert sub_items.from_raw({"name": "x", "visible": "no"}, "roles").visible is True

    @pytest.mark.parametrize("value", [None, 3, ["a"], {"name": 5}, {"other": "x"}])
    def test_unresolvable_values_return_none(self, value):
        """Anything that is neither form is left to the caller."""
        assert sub_items.from_raw(value, "keywords") is None

    def test_to_raw_plain_stays_string(self):
        """PlainItem serializes as a bare string."""
        assert sub_items.to_raw(PlainItem("a"), "highlights") == "a"

    def test_to_raw_tagged_uses_kind_key(self):
        """TaggedItem serializes with the kind's text key."""
        assert sub_items.to_raw(TaggedItem("a", False), "highlights") == {
            "content": "a",
            "visible": False,
        }
        assert sub_items.to_raw(TaggedItem("b"), "courses") == {"name": "b", "visible": True}
