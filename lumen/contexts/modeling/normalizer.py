"""
Canonical Model Normalizer

Turns arbitrary, partial or malformed JSON-shaped input (stored editor state,
fetched templates, uploaded files) into a fully-populated ResumeModel.

Rules applied everywhere:
- Strings go through safe_string, arrays through safe_array, objects through
  safe_object (see lumen.utils.coercion). Wrong types become empty defaults
  and are recorded; null and absent values are silently defaulted.
- visible defaults to True; only an explicit False hides an entry.
- Non-object elements of a section list are skipped and recorded.
- Keys outside the known entry shape are kept in the entry's extras.
- sectionVisibility is overlaid on the full default map.

Whatever was recorded is attached as model.non_conforming together with a deep
copy of the input, merged with any nonConformingData the input already had.
normalize() never raises for JSON-shaped input.
"""

import copy
from typing import Any, Dict, List, Optional, Type

from lumen.contexts.modeling import sub_items
from lumen.contexts.modeling.defaults import (
    DEFAULT_ICON_POSITION,
    DEFAULT_ICON_SIZE,
    get_default_section_visibility,
)
from lumen.contexts.modeling.logger import log_normalization_summary
from lumen.contexts.modeling.non_conforming import NonConformingCollector, NonConformingData
from lumen.contexts.modeling.resume_model import (
    SECTION_ENTRY_TYPES,
    Basics,
    ImageSettings,
    Location,
    NamedSummary,
    Profile,
    ResumeEntry,
    ResumeModel,
)
from lumen.contexts.modeling.sub_items import SubItem
from lumen.utils.coercion import (
    json_type_name,
    safe_array,
    safe_number,
    safe_object,
    safe_string,
    safe_visible,
)

# Top-level keys handled explicitly (everything else lands in model.extras)
MODEL_KEYS = frozenset(
    {
        "basics",
        "sectionVisibility",
        "nonConformingData",
        "meta",
        "summaries",
        "activeSummaryId",
        "icon",
        "photo",
        *SECTION_ENTRY_TYPES,
    }
)

# Document-level markers that never belong to the model
DOCUMENT_KEYS = frozenset({"$schema", "$extensions"})


def _record(
    collector: Optional[NonConformingCollector], section: str, field: str, value: Any, reason: str
) -> None:
    if collector is not None:
        collector.record(section, field, value, reason)


def normalize(raw: Any) -> ResumeModel:
    """
    Produce a fully-populated canonical model from arbitrary input.

    Args:
        raw: Parsed JSON value (normally a dict; anything else yields an empty
             model with the value recorded)

    Returns:
        New ResumeModel. Its non_conforming field is set when anything in the
        input did not fit.

    Example:
        >>> model = normalize({"work": [{"name": "Acme", "visible": False}]})
        >>> model.work[0].visible
        False
        >>> model.section_visibility["work"]
        True
    """
    collector = NonConformingCollector()

    if isinstance(raw, dict):
        data = raw
    else:
        if raw is not None:
            _record(collector, "root", "", raw, f"expected object, got {json_type_name(raw)}")
        data = {}

    model = build_model(data, collector)

    existing = NonConformingData.from_dict(data.get("nonConformingData"), collector)
    if existing is None and data.get("nonConformingData") is not None:
        _record(
            collector,
            "nonConformingData",
            "",
            data["nonConformingData"],
            f"expected object, got {json_type_name(data['nonConformingData'])}",
        )

    found = collector.build(original_data=raw)
    model.non_conforming = found.merged_with(existing) if found is not None else existing

    log_normalization_summary(model)
    return model


def build_model(
    data: Dict[str, Any], collector: Optional[NonConformingCollector] = None
) -> ResumeModel:
    """
    Build every part of the model except non_conforming from an input object.

    Without a collector the same coercions apply but nothing is recorded.
    """
    model = ResumeModel(
        basics=normalize_basics(data.get("basics"), collector),
        section_visibility=_normalize_section_visibility(
            data.get("sectionVisibility"), collector
        ),
        meta=_normalize_meta(data.get("meta"), collector),
        summaries=_normalize_summaries(data.get("summaries"), collector),
        active_summary_id=_optional_string(
            data.get("activeSummaryId"), collector, "activeSummaryId"
        ),
        icon=_normalize_image(data.get("icon"), collector, "icon"),
        photo=_normalize_image(data.get("photo"), collector, "photo"),
        extras={
            key: copy.deepcopy(value)
            for key, value in data.items()
            if key not in MODEL_KEYS and key not in DOCUMENT_KEYS
        },
    )
    for section, entry_type in SECTION_ENTRY_TYPES.items():
        entries = normalize_entries(data.get(section), entry_type, section, collector)
        setattr(model, section, entries)
    return model


def normalize_entries(
    value: Any,
    entry_type: Type[ResumeEntry],
    section: str,
    collector: Optional[NonConformingCollector] = None,
) -> List[ResumeEntry]:
    """
    Normalize one section list.

    Non-object elements are skipped; the record keeps their original index.
    """
    entries = []
    for index, element in enumerate(safe_array(value, collector, section, section)):
        if not isinstance(element, dict):
            _record(
                collector,
                section,
                f"[{index}]",
                element,
                f"expected object, got {json_type_name(element)}",
            )
            continue
        entries.append(normalize_entry(element, entry_type, section, index, collector))
    return entries


def normalize_entry(
    value: Dict[str, Any],
    entry_type: Type[ResumeEntry],
    section: str,
    index: int,
    collector: Optional[NonConformingCollector] = None,
) -> ResumeEntry:
    """Normalize one entry object of a section."""
    prefix = f"[{index}]"

    strings: Dict[str, Optional[str]] = {}
    for _, key in entry_type.STRING_FIELDS:
        strings[key] = safe_string(value.get(key), collector, section, f"{prefix}.{key}")
    for _, key in entry_type.OPTIONAL_STRING_FIELDS:
        if value.get(key) is not None:
            strings[key] = safe_string(value[key], collector, section, f"{prefix}.{key}")

    lists = {}
    for kind in entry_type.SUB_ITEM_FIELDS:
        field_path = f"{prefix}.{kind}"
        lists[kind] = _normalize_sub_items(value.get(kind), kind, collector, section, field_path)

    extras = {
        key: copy.deepcopy(item)
        for key, item in value.items()
        if key not in entry_type.known_keys()
    }
    visible = safe_visible(value.get("visible"), collector, section, f"{prefix}.visible")
    return entry_type.build(strings, lists, visible=visible, extras=extras)


def _normalize_sub_items(
    value: Any,
    kind: str,
    collector: Optional[NonConformingCollector],
    section: str,
    field_path: str,
) -> List[SubItem]:
    items = []
    for index, raw_item in enumerate(safe_array(value, collector, section, field_path)):
        item = _normalize_sub_item(raw_item, kind, collector, section, f"{field_path}[{index}]")
        if item is not None:
            items.append(item)
    return items


def _normalize_sub_item(
    value: Any,
    kind: str,
    collector: Optional[NonConformingCollector],
    section: str,
    field_path: str,
) -> Optional[SubItem]:
    """
    Resolve one raw sub-item.

    Strings and tagged objects resolve directly. Numbers and booleans become
    plain text (recorded). Objects without any text key, nulls and nested
    arrays are dropped (recorded, so the value survives for review).
    """
    item = sub_items.from_raw(value, kind)
    if item is not None:
        if isinstance(value, dict):
            safe_visible(value.get("visible"), collector, section, f"{field_path}.visible")
        return item

    if isinstance(value, dict):
        raw_text = sub_items.lookup_text(value, kind)
        if raw_text is None:
            _record(collector, section, field_path, value, "expected text in sub-item object")
            return None
        item_text = safe_string(raw_text, collector, section, field_path)
        visible = safe_visible(value.get("visible"), collector, section, f"{field_path}.visible")
        return sub_items.tag(item_text, visible)

    if isinstance(value, (bool, int, float)):
        return sub_items.PlainItem(text=safe_string(value, collector, section, field_path))

    _record(
        collector,
        section,
        field_path,
        value,
        f"expected string or object, got {json_type_name(value)}",
    )
    return None


def normalize_basics(value: Any, collector: Optional[NonConformingCollector] = None) -> Basics:
    raw = safe_object(value, collector, "basics", "basics")

    strings = {
        attribute: safe_string(raw.get(key), collector, "basics", key)
        for attribute, key in Basics.STRING_FIELDS
    }
    extras = {
        key: copy.deepcopy(item) for key, item in raw.items() if key not in Basics.known_keys()
    }
    return Basics(
        location=_normalize_location(raw.get("location"), collector),
        profiles=normalize_entries(raw.get("profiles"), Profile, "profiles", collector),
        extras=extras,
        **strings,
    )


def _normalize_location(value: Any, collector: Optional[NonConformingCollector]) -> Location:
    raw = safe_object(value, collector, "basics", "location")
    known = {key for _, key in Location.STRING_FIELDS}

    strings = {
        attribute: safe_string(raw.get(key), collector, "basics", f"location.{key}")
        for attribute, key in Location.STRING_FIELDS
    }
    extras = {key: copy.deepcopy(item) for key, item in raw.items() if key not in known}
    return Location(extras=extras, **strings)


def _normalize_section_visibility(
    value: Any, collector: Optional[NonConformingCollector]
) -> Dict[str, bool]:
    visibility = get_default_section_visibility()
    for section, flag in safe_object(value, collector, "sectionVisibility", "").items():
        visibility[section] = safe_visible(flag, collector, "sectionVisibility", section)
    return visibility


def _normalize_meta(
    value: Any, collector: Optional[NonConformingCollector]
) -> Optional[Dict[str, Any]]:
    if value is None:
        return None
    if not isinstance(value, dict):
        _record(collector, "meta", "", value, f"expected object, got {json_type_name(value)}")
        return None
    return copy.deepcopy(value)


def _optional_string(
    value: Any, collector: Optional[NonConformingCollector], section: str
) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        _record(collector, section, "", value, f"expected string, got {json_type_name(value)}")
        return None
    return value


def _normalize_summaries(
    value: Any, collector: Optional[NonConformingCollector]
) -> List[NamedSummary]:
    summaries = []
    for index, raw in enumerate(safe_array(value, collector, "summaries", "summaries")):
        if not isinstance(raw, dict):
            _record(
                collector,
                "summaries", f"[{index}]", raw, f"expected object, got {json_type_name(raw)}"
            )
            continue

        last_used = raw.get("lastUsed")
        summaries.append(
            NamedSummary(
                id=safe_string(raw.get("id"), collector, "summaries", f"[{index}].id"),
                target=safe_string(raw.get("target"), collector, "summaries", f"[{index}].target"),
                summary=safe_string(
                    raw.get("summary"), collector, "summaries", f"[{index}].summary"
                ),
                created_at=safe_string(
                    raw.get("createdAt"), collector, "summaries", f"[{index}].createdAt"
                ),
                last_used=(
                    None
                    if last_used is None
                    else safe_string(last_used, collector, "summaries", f"[{index}].lastUsed")
                ),
            )
        )
    return summaries


def _normalize_image(
    value: Any, collector: Optional[NonConformingCollector], section: str
) -> Optional[ImageSettings]:
    """
    Read icon/photo placement.

    Migrates the legacy size shape {"width", "height"} to a single number
    (width, else height, else the default size).
    """
    if value is None:
        return None
    if not isinstance(value, dict):
        _record(collector, section, "", value, f"expected object, got {json_type_name(value)}")
        return None

    position = safe_object(value.get("position"), collector, section, "position")
    size = value.get("size")
    if isinstance(size, dict):
        size = size.get("width") or size.get("height") or DEFAULT_ICON_SIZE

    return ImageSettings(
        data=safe_string(value.get("data"), collector, section, "data"),
        top=safe_number(
            position.get("top"), DEFAULT_ICON_POSITION["top"], collector, section, "position.top"
        ),
        right=safe_number(
            position.get("right"),
            DEFAULT_ICON_POSITION["right"],
            collector,
            section,
            "position.right",
        ),
        size=safe_number(size, DEFAULT_ICON_SIZE, collector, section, "size"),
    )
