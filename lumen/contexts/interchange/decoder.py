"""
Visibility Restoration Decoder

Inverse of the encoder: rebuilds a canonical model from a clean payload and
its visibility side channel. Every flag that is missing, out of range or not a
boolean resolves to visible. Sub-items come back as TaggedItem carrying their
resolved visibility.

Flags are matched to content by position in the payload arrays. Payload
values the model cannot hold (a string where an entry object belongs, a null
sub-item) are recorded in non_conforming rather than dropped, and never shift
the flags of their neighbours.

decode() assumes classify() has already accepted the document; it defaults
liberally rather than failing.
"""

import copy
from typing import Any, Dict, List, Type

from lumen.contexts.interchange.logger import _log_debug, _log_warning
from lumen.contexts.interchange.schema import split_document
from lumen.contexts.modeling import sub_items
from lumen.contexts.modeling.non_conforming import NonConformingCollector, NonConformingData
from lumen.contexts.modeling.normalizer import MODEL_KEYS, build_model
from lumen.contexts.modeling.resume_model import (
    SECTION_ENTRY_TYPES,
    Profile,
    ResumeEntry,
    ResumeModel,
)

# Payload keys that describe model state rather than content; in an extended
# document that state lives in $extensions
_STATE_KEYS = MODEL_KEYS - {"basics", "meta", *SECTION_ENTRY_TYPES}


def flag_at(flags: Any, index: int) -> bool:
    """
    Visibility at one index of a flag array.

    Absent arrays, out-of-range indexes and non-boolean values all resolve to True.
    """
    if not isinstance(flags, list) or not 0 <= index < len(flags):
        return True
    return flags[index] is not False


def sub_item_record(section_records: Any, index: int) -> Dict[str, Any]:
    """Sub-item flags for one item; accepts string or integer index keys."""
    if not isinstance(section_records, dict):
        return {}
    record = section_records.get(str(index), section_records.get(index))
    return record if isinstance(record, dict) else {}


def _inline_sub_item(value: Any, kind: str, visible: bool) -> Any:
    """Pair one raw sub-item with its flag. Values without text are left as they are."""
    if isinstance(value, dict):
        if sub_items.lookup_text(value, kind) is None:
            return value
        return {**value, "visible": visible}
    if isinstance(value, (str, bool, int, float)):
        return {sub_items.text_key(kind): value, "visible": visible}
    return value


def _inline_visibility(
    value: Any, entry_type: Type[ResumeEntry], item_flags: Any, section_records: Any = None
) -> Any:
    """
    Write resolved flags into a raw section list, by position in that list.

    Flags are attached before normalization so that elements the normalizer
    skips cannot shift the flags of the elements after them.
    """
    if not isinstance(value, list):
        return value

    inlined = []
    for index, element in enumerate(value):
        if not isinstance(element, dict):
            inlined.append(element)
            continue
        entry = dict(element)
        entry["visible"] = flag_at(item_flags, index)
        record = sub_item_record(section_records, index)
        for kind in entry_type.SUB_ITEM_FIELDS:
            raw_items = entry.get(kind)
            if isinstance(raw_items, list):
                entry[kind] = [
                    _inline_sub_item(raw, kind, flag_at(record.get(kind), position))
                    for position, raw in enumerate(raw_items)
                ]
        inlined.append(entry)
    return inlined


def _section_map(mapping: Any, key: str) -> Any:
    return mapping.get(key) if isinstance(mapping, dict) else None


def decode(payload: Dict[str, Any], extensions: Dict[str, Any]) -> ResumeModel:
    """
    Rebuild a canonical model from (clean payload, extensions).

    Args:
        payload: Clean JSON Resume payload
        extensions: The "$extensions" object of an accepted document

    Returns:
        New ResumeModel sharing nothing with the inputs

    Example:
        >>> model = decode(payload, extensions)
        >>> model.work[1].visible
        False
    """
    extensions = extensions if isinstance(extensions, dict) else {}
    visibility = extensions.get("visibility")
    visibility = visibility if isinstance(visibility, dict) else {}
    item_flags = visibility.get("items")
    records = visibility.get("subItems")

    data = copy.deepcopy({key: value for key, value in payload.items() if key not in _STATE_KEYS})
    if isinstance(data.get("basics"), dict) and "profiles" in data["basics"]:
        data["basics"]["profiles"] = _inline_visibility(
            data["basics"].get("profiles"), Profile, _section_map(item_flags, "profiles")
        )
    for section, entry_type in SECTION_ENTRY_TYPES.items():
        if section in data:
            data[section] = _inline_visibility(
                data[section],
                entry_type,
                _section_map(item_flags, section),
                _section_map(records, section),
            )
    data["sectionVisibility"] = visibility.get("sections")
    for key in ("summaries", "activeSummaryId", "icon", "photo"):
        data[key] = extensions.get(key)

    collector = NonConformingCollector()
    model = build_model(data, collector)

    existing = NonConformingData.from_dict(
        extensions.get("nonConforming"), collector, section="nonConforming"
    )
    found = collector.build(original_data=payload)
    if found is not None:
        _log_warning(f"{len(found.invalid_fields)} value(s) kept for manual review while decoding")
    model.non_conforming = existing.merged_with(found) if existing is not None else found

    _log_debug(
        "Decoded model ("
        + ", ".join(f"{section}={len(entries)}" for section, entries in model.iter_sections())
        + ")"
    )
    return model


def decode_document(document: Dict[str, Any]) -> ResumeModel:
    """Decode a whole extended document (see decode())."""
    payload, extensions = split_document(document)
    return decode(payload, extensions)


def resolve_visibility(payload: Dict[str, Any], visibility: Any) -> Dict[str, Any]:
    """
    Expand a visibility block into fully explicit form for a given payload.

    Every section gets a flag, every non-empty section an item array matching
    its content length, and every item with sub-items a record with one flag
    per sub-item. Two visibility blocks are equivalent under the defaulting
    rule exactly when their resolved forms are equal.
    """
    visibility = visibility if isinstance(visibility, dict) else {}
    item_flags = visibility.get("items")
    records = visibility.get("subItems")

    resolved_items: Dict[str, List[bool]] = {}
    resolved_records: Dict[str, Dict[str, Dict[str, List[bool]]]] = {}

    basics = payload.get("basics")
    profiles = basics.get("profiles") if isinstance(basics, dict) else None
    if isinstance(profiles, list) and profiles:
        resolved_items["profiles"] = [
            flag_at(_section_map(item_flags, "profiles"), index) for index in range(len(profiles))
        ]

    for section, entry_type in SECTION_ENTRY_TYPES.items():
        content = payload.get(section)
        if not isinstance(content, list) or not content:
            continue
        section_flags = _section_map(item_flags, section)
        resolved_items[section] = [flag_at(section_flags, index) for index in range(len(content))]

        section_records = {}
        for index, element in enumerate(content):
            if not isinstance(element, dict):
                continue
            record = sub_item_record(_section_map(records, section), index)
            resolved = {
                kind: [flag_at(record.get(kind), pos) for pos in range(len(element[kind]))]
                for kind in entry_type.SUB_ITEM_FIELDS
                if isinstance(element.get(kind), list) and element[kind]
            }
            if resolved:
                section_records[str(index)] = resolved
        if section_records:
            resolved_records[section] = section_records

    sections = build_model({"sectionVisibility": visibility.get("sections")}).section_visibility
    return {
        "sections": sections,
        "items": resolved_items,
        "subItems": resolved_records,
    }
