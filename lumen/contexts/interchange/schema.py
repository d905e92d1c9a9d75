"""
Extended document format and schema version validation.

An extended (backup) document is a clean JSON Resume payload plus a reserved
"$extensions" object:

    {
      "$schema": "<JSON Resume schema URL>",
      "basics": {...}, "work": [...], ...,
      "$extensions": {
        "$schemaVersion": "1.1.0",
        "$extendedSchema": "<extended schema URL>",
        "visibility": {"sections": {...}, "items": {...}, "subItems": {...}},
        "backup": {"exportedAt": ..., "format": "extended", ...},
        "nonConforming": {...}
      }
    }

classify() decides whether a candidate is in this format at all, whether its
version is supported, and collects structural errors and warnings. Only a
report with can_decode set may be handed to the decoder.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Type

from lumen.contexts.modeling import sub_items
from lumen.contexts.modeling.defaults import ITEM_VISIBILITY_SECTIONS, SECTION_NAMES
from lumen.contexts.modeling.resume_model import SECTION_ENTRY_TYPES, Profile, ResumeEntry
from lumen.utils.coercion import json_type_name

EXTENSIONS_KEY = "$extensions"
JSON_SCHEMA_KEY = "$schema"
SCHEMA_VERSION_KEY = "$schemaVersion"
EXTENDED_SCHEMA_KEY = "$extendedSchema"

CURRENT_SCHEMA_VERSION = "1.1.0"
# Exact-match list; no range semantics
SUPPORTED_SCHEMA_VERSIONS = ("1.0.0", "1.1.0")

BACKUP_FORMAT = "extended"


@dataclass
class ValidationReport:
    """
    Outcome of classify().

    is_extended_format=False is a routing signal ("try another importer"),
    not a failure, and comes with no errors.
    """

    is_extended_format: bool
    is_valid: bool
    is_supported: bool
    schema_version: Optional[str] = None
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def can_decode(self) -> bool:
        """True only for a well-formed document of a supported version."""
        return self.is_extended_format and self.is_valid and self.is_supported


def is_extended_format(candidate: Any) -> bool:
    """True when the candidate carries the "$extensions" marker."""
    return isinstance(candidate, dict) and EXTENSIONS_KEY in candidate


def is_supported_version(version: Any) -> bool:
    return isinstance(version, str) and version in SUPPORTED_SCHEMA_VERSIONS


def split_document(document: Dict[str, Any]) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """
    Separate an extended document into (clean payload, extensions).

    The payload is a shallow copy without the "$schema" and "$extensions" keys.
    A non-object extensions value yields an empty dict.
    """
    payload = {
        key: value
        for key, value in document.items()
        if key not in (EXTENSIONS_KEY, JSON_SCHEMA_KEY)
    }
    extensions = document.get(EXTENSIONS_KEY)
    return payload, extensions if isinstance(extensions, dict) else {}


def classify(candidate: Any) -> ValidationReport:
    """
    Inspect a parsed document before any restore is attempted.

    Errors (document must not be decoded):
    - "$extensions" is not an object, or lacks a string "$schemaVersion"
    - "$schemaVersion" is not in SUPPORTED_SCHEMA_VERSIONS
    - visibility.sections, visibility.items or backup missing or not objects
    - "basics" missing or not an object; a section present but not an array

    Warnings (decoding still safe, defaults apply):
    - visibility.subItems missing
    - visibility arrays whose length differs from their content arrays
    - non-boolean visibility flags
    - unexpected backup.format / preservesVisibility values
    - payload entries that are not objects, and sub-items without text
      (decode keeps them in non_conforming)
    - nonConforming parts of the wrong type

    Args:
        candidate: Parsed JSON value

    Returns:
        ValidationReport

    Example:
        >>> report = classify({"basics": {}, "$extensions": {"$schemaVersion": "999.0.0"}})
        >>> report.is_supported, report.can_decode
        (False, False)
    """
    if not isinstance(candidate, dict):
        return ValidationReport(
            is_extended_format=False,
            is_valid=False,
            is_supported=False,
            errors=[f"Invalid data: expected object, got {json_type_name(candidate)}"],
        )

    if EXTENSIONS_KEY not in candidate:
        return ValidationReport(is_extended_format=False, is_valid=False, is_supported=False)

    extensions = candidate[EXTENSIONS_KEY]
    if not isinstance(extensions, dict):
        return ValidationReport(
            is_extended_format=True,
            is_valid=False,
            is_supported=False,
            errors=[f"$extensions must be an object, got {json_type_name(extensions)}"],
        )

    schema_version = extensions.get(SCHEMA_VERSION_KEY)
    if not isinstance(schema_version, str) or not schema_version:
        return ValidationReport(
            is_extended_format=True,
            is_valid=False,
            is_supported=False,
            errors=[f"Missing $extensions.{SCHEMA_VERSION_KEY}"],
        )

    errors: List[str] = []
    warnings: List[str] = []

    is_supported = is_supported_version(schema_version)
    if not is_supported:
        errors.append(
            f"Unsupported schema version: {schema_version}. "
            f"Supported: {', '.join(SUPPORTED_SCHEMA_VERSIONS)}"
        )

    _check_payload(candidate, errors, warnings)
    _check_visibility(candidate, extensions.get("visibility"), errors, warnings)
    _check_backup(extensions.get("backup"), errors, warnings)

    _check_non_conforming(extensions, warnings)
    if "summaries" in extensions and not isinstance(extensions["summaries"], list):
        warnings.append("$extensions.summaries is not an array and will be ignored")

    return ValidationReport(
        is_extended_format=True,
        is_valid=not errors,
        is_supported=is_supported,
        schema_version=schema_version,
        errors=errors,
        warnings=warnings,
    )


def _check_payload(candidate: Dict[str, Any], errors: List[str], warnings: List[str]) -> None:
    basics = candidate.get("basics")
    if "basics" not in candidate:
        errors.append("Missing required JSON Resume property: basics")
    elif not isinstance(basics, dict):
        errors.append(f"basics should be an object, got {json_type_name(basics)}")
    else:
        _check_entries("basics.profiles", basics.get("profiles"), Profile, warnings)

    for section, entry_type in SECTION_ENTRY_TYPES.items():
        value = candidate.get(section)
        if value is not None and not isinstance(value, list):
            errors.append(f"{section} should be an array, got {json_type_name(value)}")
        else:
            _check_entries(section, value, entry_type, warnings)


def _check_entries(
    path: str, entries: Any, entry_type: Type[ResumeEntry], warnings: List[str]
) -> None:
    """Warn about payload values the model cannot hold; they are kept for review on decode."""
    if not isinstance(entries, list):
        return
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            warnings.append(
                f"{path}[{index}] is not an object ({json_type_name(entry)}); "
                "it will be kept for manual review"
            )
            continue
        for kind in entry_type.SUB_ITEM_FIELDS:
            items = entry.get(kind)
            if items is None:
                continue
            if not isinstance(items, list):
                warnings.append(
                    f"{path}[{index}].{kind} is not an array ({json_type_name(items)}); "
                    "it will be kept for manual review"
                )
                continue
            for position, item in enumerate(items):
                if sub_items.from_raw(item, kind) is None:
                    warnings.append(
                        f"{path}[{index}].{kind}[{position}] has no text "
                        f"({json_type_name(item)}); it will be kept for manual review"
                    )


def _content_length(candidate: Dict[str, Any], section: str) -> Optional[int]:
    """Length of a section's content array, or None when it isn't an array."""
    if section == "profiles":
        basics = candidate.get("basics")
        content = basics.get("profiles") if isinstance(basics, dict) else None
    else:
        content = candidate.get(section)
    if content is None:
        return 0
    return len(content) if isinstance(content, list) else None


def _check_flags(
    path: str, flags: Any, expected_length: Optional[int], warnings: List[str]
) -> None:
    if not isinstance(flags, list):
        warnings.append(f"{path} is not an array; entries default to visible")
        return
    if expected_length is not None and len(flags) != expected_length:
        warnings.append(
            f"{path} has {len(flags)} flag(s) for {expected_length} item(s); "
            "missing entries default to visible"
        )
    if any(not isinstance(flag, bool) for flag in flags):
        warnings.append(f"{path} contains non-boolean flags; they default to visible")


def _check_visibility(
    candidate: Dict[str, Any], visibility: Any, errors: List[str], warnings: List[str]
) -> None:
    if not isinstance(visibility, dict):
        errors.append("Missing $extensions.visibility")
        return

    sections = visibility.get("sections")
    if not isinstance(sections, dict):
        errors.append("Missing $extensions.visibility.sections")
    else:
        for section, flag in sections.items():
            if not isinstance(flag, bool):
                warnings.append(
                    f"visibility.sections.{section} is not a boolean; defaults to visible"
                )

    items = visibility.get("items")
    if not isinstance(items, dict):
        errors.append("Missing $extensions.visibility.items")
    else:
        for section, flags in items.items():
            if section not in ITEM_VISIBILITY_SECTIONS:
                warnings.append(f"visibility.items.{section} refers to an unknown section")
                continue
            _check_flags(
                f"visibility.items.{section}", flags, _content_length(candidate, section), warnings
            )

    sub_items = visibility.get("subItems")
    if sub_items is None:
        warnings.append("Missing $extensions.visibility.subItems - sub-items default to visible")
    elif not isinstance(sub_items, dict):
        warnings.append(
            "$extensions.visibility.subItems is not an object; sub-items default to visible"
        )
    else:
        for section, records in sub_items.items():
            _check_sub_item_records(candidate, section, records, warnings)


def _check_sub_item_records(
    candidate: Dict[str, Any], section: str, records: Any, warnings: List[str]
) -> None:
    path = f"visibility.subItems.{section}"
    content = candidate.get(section)
    if section not in SECTION_NAMES or not isinstance(content, list):
        warnings.append(f"{path} has no matching content array")
        return
    if not isinstance(records, dict):
        warnings.append(f"{path} is not an object; sub-items default to visible")
        return

    for index_key, record in records.items():
        try:
            index = int(index_key)
        except (TypeError, ValueError):
            warnings.append(f"{path} has a non-numeric item index: {index_key!r}")
            continue
        if not 0 <= index < len(content) or not isinstance(content[index], dict):
            warnings.append(f"{path}.{index_key} has no matching item")
            continue
        if not isinstance(record, dict):
            warnings.append(f"{path}.{index_key} is not an object")
            continue
        for kind, flags in record.items():
            sub_content = content[index].get(kind)
            expected = len(sub_content) if isinstance(sub_content, list) else None
            _check_flags(f"{path}.{index_key}.{kind}", flags, expected, warnings)


def _check_backup(backup: Any, errors: List[str], warnings: List[str]) -> None:
    if not isinstance(backup, dict):
        errors.append("Missing $extensions.backup")
        return
    if backup.get("format") != BACKUP_FORMAT:
        warnings.append(
            f"Unexpected backup.format {backup.get('format')!r}; expected {BACKUP_FORMAT!r}"
        )
    if backup.get("preservesVisibility") is not True:
        warnings.append("backup.preservesVisibility is not true")


def _check_non_conforming(extensions: Dict[str, Any], warnings: List[str]) -> None:
    if "nonConforming" not in extensions:
        return
    record = extensions["nonConforming"]
    if not isinstance(record, dict):
        warnings.append("$extensions.nonConforming is not an object and will be ignored")
        return
    for key in ("invalidFields", "parsingErrors"):
        value = record.get(key)
        if value is not None and not isinstance(value, list):
            warnings.append(
                f"$extensions.nonConforming.{key} is not an array ({json_type_name(value)}); "
                "it will be kept for manual review"
            )
