"""Unit tests for the visibility restoration decoder."""

import pytest

from lumen.contexts.interchange.decoder import (
    decode,
    decode_document,
    flag_at,
    resolve_visibility,
    sub_item_record,
)
from lumen.contexts.modeling.sub_items import TaggedItem


def _payload():
    return {
        "basics": {"name": "Jane", "profiles": [{"network": "GitHub"}, {"network": "X"}]},
        "work": [
            {"name": "Acme", "highlights": ["a", "b", "c"]},
            {"name": "Globex", "highlights": ["d"]},
        ],
        "skills": [{"name": "Python", "keywords": ["asyncio"]}],
    }


@pytest.mark.unit
@pytest.mark.parametrize(
    "flags, index, expected",
    [
        ([True, False], 1, False),
        ([True, False], 0, True),
        ([False], 3, True),
        (None, 0, True),
        ("false", 0, True),
        ([None, "no", 0], 2, True),
    ],
)
def test_flag_at_defaults_to_visible(flags, index, expected):
    """Only an explicit False inside the array hides."""
    assert flag_at(flags, index) is expected


@pytest.mark.unit
def test_sub_item_record_accepts_both_key_types():
    """String keys (JSON) and integer keys resolve the same way."""
    assert sub_item_record({"1": {"highlights": [False]}}, 1) == {"highlights": [False]}
    assert sub_item_record({1: {"highlights": [False]}}, 1) == {"highlights": [False]}
    assert sub_item_record({"1": "junk"}, 1) == {}
    assert sub_item_record(None, 0) == {}


@pytest.mark.unit
class TestDecode:
    """decode() over complete and partial side channels."""

    def test_explicit_flags(self):
        """Flags land on the matching entries and sub-items."""
        extensions = {
            "visibility": {
                "sections": {"skills": False},
                "items": {"profiles": [True, False], "work": [True, False]},
                "subItems": {"work": {"0": {"highlights": [True, False, True]}}},
            }
        }
        model = decode(_payload(), extensions)

        assert [p.visible for p in model.basics.profiles] == [True, False]
        assert [w.visible for w in model.work] == [True, False]
        assert model.work[0].highlights == [
            TaggedItem("a"),
            TaggedItem("b", visible=False),
            TaggedItem("c"),
        ]
        assert model.section_visibility["skills"] is False
        assert model.section_visibility["work"] is True

    def test_missing_visibility_means_all_visible(self):
        """An empty side channel decodes to a fully visible model."""
        model = decode(_payload(), {})
        assert all(w.visible for w in model.work)
        assert all(p.visible for p in model.basics.profiles)
        assert model.work[1].highlights == [TaggedItem("d")]
        assert all(model.section_visibility.values())

    def test_short_arrays_default_remaining_entries(self):
        """Entries past the end of a flag array are visible."""
        extensions = {
            "visibility": {
                "items": {"work": [False]},
                "subItems": {"work": {"0": {"highlights": [False]}}},
            }
        }
        model = decode(_payload(), extensions)
        assert [w.visible for w in model.work] == [False, True]
        assert [h.visible for h in model.work[0].highlights] == [False, True, True]

    def test_integer_index_keys(self):
        """Records keyed by int decode like string keys."""
        extensions = {"visibility": {"subItems": {"skills": {0: {"keywords": [False]}}}}}
        model = decode(_payload(), extensions)
        assert model.skills[0].keywords == [TaggedItem("asyncio", visible=False)]

    def test_state_comes_from_extensions(self):
        """Summaries, icon and preserved data are read from the extensions."""
        extensions = {
            "summaries": [{"id": "a", "target": "Acme", "summary": "s", "createdAt": "x"}],
            "activeSummaryId": "a",
            "icon": {"data": "i", "position": {"top": 1, "right": 2}, "size": 30},
            "nonConforming": {"invalidFields": [], "parsingErrors": ["kept"]},
        }
        model = decode(_payload(), extensions)
        assert model.summaries[0].target == "Acme"
        assert model.active_summary_id == "a"
        assert (model.icon.top, model.icon.right, model.icon.size) == (1, 2, 30)
        assert model.non_conforming.parsing_errors == ["kept"]
        assert model.non_conforming.has_original_data is False

    def test_payload_does_not_smuggle_state(self):
        """State keys inside the payload are ignored in favor of the extensions."""
        payload = _payload()
        payload["sectionVisibility"] = {"work": False}
        payload["activeSummaryId"] = "from-payload"
        model = decode(payload, {})
        assert model.section_visibility["work"] is True
        assert model.active_summary_id is None

    def test_inputs_are_not_aliased(self):
        """The model shares nothing with the payload."""
        payload = _payload()
        payload["projects"] = [{"name": "p", "repository": {"url": "x"}}]
        model = decode(payload, {})
        payload["projects"][0]["repository"]["url"] = "changed"
        assert model.projects[0].extras == {"repository": {"url": "x"}}

    def test_clean_payload_records_nothing(self):
        """Well-formed content decodes without a non-conforming record."""
        model = decode(_payload(), {"visibility": {"items": {"work": [True, False]}}})
        assert model.non_conforming is None


@pytest.mark.unit
class TestDecodeAlignment:
    """Flags follow payload positions even when an element cannot be held."""

    def test_stray_entry_does_not_shift_flags(self):
        """A non-object entry is kept for review; the next entry keeps its own flag."""
        payload = {"basics": {}, "work": ["stray", {"name": "A"}]}
        model = decode(payload, {"visibility": {"items": {"work": [True, False]}}})

        assert [(w.name, w.visible) for w in model.work] == [("A", False)]
        invalid = model.non_conforming.invalid_fields[0]
        assert (invalid.section, invalid.field, invalid.value) == ("work", "[0]", "stray")
        assert invalid.reason == "expected object, got string"
        assert model.non_conforming.original_data == payload

    def test_stray_profile_does_not_shift_flags(self):
        """Profiles are aligned the same way."""
        payload = {"basics": {"profiles": [None, {"network": "X"}]}}
        model = decode(payload, {"visibility": {"items": {"profiles": [True, False]}}})

        assert [p.visible for p in model.basics.profiles] == [False]
        assert model.non_conforming.invalid_fields[0].field == "[0]"

    def test_null_sub_item_does_not_shift_flags(self):
        """A sub-item without text is recorded; the one after it stays hidden."""
        payload = {"basics": {}, "work": [{"name": "A", "highlights": [None, "B"]}]}
        extensions = {
            "visibility": {"subItems": {"work": {"0": {"highlights": [True, False]}}}}
        }
        model = decode(payload, extensions)

        assert model.work[0].highlights == [TaggedItem("B", visible=False)]
        invalid = model.non_conforming.invalid_fields[0]
        assert (invalid.field, invalid.value) == ("[0].highlights[0]", None)
        assert invalid.reason == "expected string or object, got null"

    def test_number_sub_item_keeps_its_flag(self):
        """Scalars become text under their own flag."""
        payload = {"basics": {}, "skills": [{"name": "Py", "keywords": [3, "b"]}]}
        extensions = {"visibility": {"subItems": {"skills": {"0": {"keywords": [False]}}}}}
        model = decode(payload, extensions)

        assert model.skills[0].keywords == [TaggedItem("3", visible=False), TaggedItem("b")]
        assert model.non_conforming.invalid_fields[0].reason == "expected string, got number"

    def test_new_findings_merge_with_stored_record(self):
        """The stored record keeps its original data; new findings are appended."""
        extensions = {
            "nonConforming": {
                "invalidFields": [],
                "parsingErrors": ["earlier"],
                "originalData": {"from": "import"},
            }
        }
        model = decode({"basics": {}, "awards": [7]}, extensions)

        record = model.non_conforming
        assert record.parsing_errors == ["earlier"]
        assert record.original_data == {"from": "import"}
        assert [f.section for f in record.invalid_fields] == ["awards"]

    @pytest.mark.parametrize(
        "stored", [{"invalidFields": 5}, {"parsingErrors": 7}, {"parsingErrors": "oops"}]
    )
    def test_malformed_stored_record_never_raises(self, stored):
        """Non-array parts of the stored record are reported, not iterated."""
        model = decode(_payload(), {"nonConforming": stored})

        record = model.non_conforming
        assert record.parsing_errors == []
        key, value = next(iter(stored.items()))
        assert [(f.section, f.field, f.value) for f in record.invalid_fields] == [
            ("nonConforming", key, value)
        ]


@pytest.mark.unit
class TestDecodeDocument:
    """Whole documents."""

    def test_decode_document(self):
        """A whole document splits into payload and extensions."""
        document = dict(_payload())
        document["$schema"] = "s"
        document["$extensions"] = {"visibility": {"items": {"work": [False, False]}}}
        model = decode_document(document)
        assert [w.visible for w in model.work] == [False, False]
        assert model.extras == {}


@pytest.mark.unit
class TestResolveVisibility:
    """Fully explicit visibility for equivalence checks."""

    def test_sparse_and_explicit_forms_resolve_equal(self):
        """Omitted arrays and all-True arrays mean the same thing."""
        explicit = {
            "sections": {"work": True},
            "items": {"profiles": [True, True], "work": [True, True], "skills": [True]},
            "subItems": {
                "work": {"0": {"highlights": [True, True, True]}, "1": {"highlights": [True]}},
                "skills": {"0": {"keywords": [True]}},
            },
        }
        assert resolve_visibility(_payload(), {}) == resolve_visibility(_payload(), explicit)

    def test_resolved_shape(self):
        """Every non-empty section and sub-collection is spelled out."""
        resolved = resolve_visibility(_payload(), {"items": {"work": [True, False]}})
        assert resolved["items"] == {
            "profiles": [True, True],
            "work": [True, False],
            "skills": [True],
        }
        assert resolved["subItems"]["work"]["0"] == {"highlights": [True, True, True]}
        assert "volunteer" not in resolved["items"]
        assert resolved["sections"]["basics"] is True
