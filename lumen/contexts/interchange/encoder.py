"""
Visibility Extraction Encoder

Splits a canonical model into a clean JSON Resume payload and a visibility
side channel:

    payload:    every "visible" field stripped, sub-items reduced to plain text
    extensions: visibility.sections  - section -> bool (copied verbatim)
                visibility.items     - section -> [bool, ...] in content order
                visibility.subItems  - section -> {"<item index>": {kind: [bool, ...]}}

Item arrays are omitted for empty sections and sub-item arrays for empty
sub-collections; an item with no sub-items gets no record at all. Decoding
treats all of these as "visible", so nothing is lost.

Encoding is total over any ResumeModel and never shares mutable state with it.
"""

import copy
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from omegaconf import DictConfig

from lumen.contexts.interchange.logger import _log_debug
from lumen.contexts.interchange.schema import (
    BACKUP_FORMAT,
    CURRENT_SCHEMA_VERSION,
    EXTENDED_SCHEMA_KEY,
    EXTENSIONS_KEY,
    JSON_SCHEMA_KEY,
    SCHEMA_VERSION_KEY,
)
from lumen.contexts.modeling import sub_items
from lumen.contexts.modeling.resume_model import Basics, ResumeEntry, ResumeModel
from lumen.utils.config import load_settings
from lumen.utils.timestamp import utc_iso


@dataclass
class EncodedResume:
    """Result of encode(): the two halves of an extended document."""

    payload: Dict[str, Any]
    extensions: Dict[str, Any]
    schema_url: Optional[str] = None

    def to_document(self) -> Dict[str, Any]:
        """Assemble the extended document ($schema, payload fields, $extensions)."""
        document: Dict[str, Any] = {}
        if self.schema_url:
            document[JSON_SCHEMA_KEY] = self.schema_url
        document.update(copy.deepcopy(self.payload))
        document[EXTENSIONS_KEY] = copy.deepcopy(self.extensions)
        return document


def clean_entry(entry: ResumeEntry) -> Dict[str, Any]:
    """JSON Resume form of one entry: no visibility, sub-items as plain strings."""
    data = copy.deepcopy(entry.extras)
    data.update(entry.string_values())
    for kind, items in entry.sub_item_lists().items():
        data[kind] = [sub_items.to_plain(item) for item in items]
    return data


def clean_basics(basics: Basics) -> Dict[str, Any]:
    data = basics.to_dict()
    data["profiles"] = [clean_entry(profile) for profile in basics.profiles]
    return data


def build_payload(model: ResumeModel) -> Dict[str, Any]:
    """
    Clean JSON Resume payload for a model.

    Every section is present (possibly empty); meta and top-level extras are
    carried when the model has them.
    """
    payload: Dict[str, Any] = {"basics": clean_basics(model.basics)}
    for section, entries in model.iter_sections():
        payload[section] = [clean_entry(entry) for entry in entries]
    if model.meta is not None:
        payload["meta"] = copy.deepcopy(model.meta)
    for key, value in model.extras.items():
        payload.setdefault(key, copy.deepcopy(value))
    return payload


def _sub_item_record(entry: ResumeEntry) -> Dict[str, List[bool]]:
    return {
        kind: [sub_items.is_visible(item) for item in items]
        for kind, items in entry.sub_item_lists().items()
        if items
    }


def build_visibility(model: ResumeModel) -> Dict[str, Any]:
    """The visibility side channel for a model."""
    items: Dict[str, List[bool]] = {}
    records: Dict[str, Dict[str, Dict[str, List[bool]]]] = {}

    if model.basics.profiles:
        items["profiles"] = [profile.visible for profile in model.basics.profiles]

    for section, entries in model.iter_sections():
        if not entries:
            continue
        items[section] = [entry.visible for entry in entries]

        section_records = {}
        for index, entry in enumerate(entries):
            record = _sub_item_record(entry)
            if record:
                section_records[str(index)] = record
        if section_records:
            records[section] = section_records

    return {
        "sections": dict(model.section_visibility),
        "items": items,
        "subItems": records,
    }


def build_backup_metadata(
    settings: DictConfig, exported_at: Optional[datetime] = None
) -> Dict[str, Any]:
    return {
        "exportedAt": utc_iso(exported_at),
        "exportedBy": settings.backup.exported_by,
        "appVersion": settings.backup.app_version,
        "format": BACKUP_FORMAT,
        "preservesVisibility": True,
        "preservesAppData": True,
    }


def encode(
    model: ResumeModel,
    exported_at: Optional[datetime] = None,
    settings: Optional[DictConfig] = None,
) -> EncodedResume:
    """
    Split a canonical model into (clean payload, extensions).

    Args:
        model: Canonical model (left untouched)
        exported_at: Backup timestamp (default: now)
        settings: Settings from load_settings() (default: loaded on demand)

    Returns:
        EncodedResume whose payload and extensions share nothing with the model

    Example:
        >>> encoded = encode(model)
        >>> encoded.extensions["visibility"]["items"]["work"]
        [True, False]
        >>> document = encoded.to_document()
    """
    settings = settings if settings is not None else load_settings()

    extensions: Dict[str, Any] = {
        SCHEMA_VERSION_KEY: CURRENT_SCHEMA_VERSION,
        EXTENDED_SCHEMA_KEY: settings.backup.extended_schema_url,
        "visibility": build_visibility(model),
        "backup": build_backup_metadata(settings, exported_at),
    }
    if model.non_conforming is not None:
        extensions["nonConforming"] = model.non_conforming.to_dict()
    if model.summaries:
        extensions["summaries"] = [summary.to_dict() for summary in model.summaries]
    if model.active_summary_id is not None:
        extensions["activeSummaryId"] = model.active_summary_id
    if model.icon is not None:
        extensions["icon"] = model.icon.to_dict()
    if model.photo is not None:
        extensions["photo"] = model.photo.to_dict()

    _log_debug(
        f"Encoded model: {len(extensions['visibility']['items'])} item array(s), "
        f"{len(extensions['visibility']['subItems'])} section(s) with sub-item flags"
    )
    return EncodedResume(
        payload=build_payload(model),
        extensions=extensions,
        schema_url=settings.export.json_resume_schema_url,
    )
