"""
Non-conforming data preservation.

Collects everything that did not fit the canonical model during normalization
or import: field-level type mismatches, raw text that could not be parsed, and
the original input. The record is attached to the model for manual review and
carried untouched by the codec. Nothing here acts on the data.
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from lumen.utils.coercion import json_type_name, safe_array, safe_string


class _Missing:
    """Marks "no original data captured", as distinct from a captured JSON null."""

    def __repr__(self) -> str:
        return "<missing>"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


_MISSING = _Missing()


def _record(collector, section: str, field: str, value: Any, reason: str) -> None:
    if collector is not None:
        collector.record(section, field, value, reason)


@dataclass
class InvalidField:
    """One value that failed type expectations."""

    section: str
    field: str
    value: Any
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "section": self.section,
            "field": self.field,
            "value": copy.deepcopy(self.value),
            "reason": self.reason,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InvalidField":
        return cls(
            section=str(data.get("section", "")),
            field=str(data.get("field", "")),
            value=copy.deepcopy(data.get("value")),
            reason=str(data.get("reason", "")),
        )


@dataclass
class NonConformingData:
    """
    Content preserved for manual review.

    Attributes:
        raw_text: Original text when it could not be parsed at all
        invalid_fields: Field-level type mismatches
        parsing_errors: Parse and validation messages
        original_data: Deep copy of the input that produced the invalid fields
    """

    raw_text: Optional[str] = None
    invalid_fields: List[InvalidField] = field(default_factory=list)
    parsing_errors: List[str] = field(default_factory=list)
    original_data: Any = _MISSING

    @property
    def has_original_data(self) -> bool:
        return self.original_data is not _MISSING

    @property
    def issue_count(self) -> int:
        """Number of problems a reviewer has to look at."""
        return len(self.invalid_fields) + len(self.parsing_errors)

    def to_dict(self) -> Dict[str, Any]:
        """JSON form (camelCase keys, absent parts omitted)."""
        data: Dict[str, Any] = {}
        if self.raw_text is not None:
            data["rawText"] = self.raw_text
        data["invalidFields"] = [invalid.to_dict() for invalid in self.invalid_fields]
        data["parsingErrors"] = list(self.parsing_errors)
        if self.has_original_data:
            data["originalData"] = copy.deepcopy(self.original_data)
        return data

    @classmethod
    def from_dict(
        cls,
        data: Any,
        collector: Optional["NonConformingCollector"] = None,
        section: str = "nonConformingData",
    ) -> Optional["NonConformingData"]:
        """
        Read the JSON form. Lenient: malformed parts are dropped to defaults.

        Args:
            data: Stored record (camelCase keys)
            collector: Optional collector told about parts that were dropped
            section: Section name used for those records

        Returns:
            The record, or None when data is not an object
        """
        if not isinstance(data, dict):
            return None

        raw_text = data.get("rawText")
        if raw_text is not None and not isinstance(raw_text, str):
            _record(
                collector,
                section,
                "rawText",
                raw_text,
                f"expected string, got {json_type_name(raw_text)}",
            )
            raw_text = None

        invalid_fields = []
        stored_fields = safe_array(data.get("invalidFields"), collector, section, "invalidFields")
        for index, entry in enumerate(stored_fields):
            if not isinstance(entry, dict):
                _record(
                    collector,
                    section,
                    f"invalidFields[{index}]",
                    entry,
                    f"expected object, got {json_type_name(entry)}",
                )
                continue
            invalid_fields.append(InvalidField.from_dict(entry))

        parsing_errors = []
        stored_errors = safe_array(data.get("parsingErrors"), collector, section, "parsingErrors")
        for index, message in enumerate(stored_errors):
            message_text = safe_string(message, collector, section, f"parsingErrors[{index}]")
            if message_text:
                parsing_errors.append(message_text)

        return cls(
            raw_text=raw_text,
            invalid_fields=invalid_fields,
            parsing_errors=parsing_errors,
            original_data=(
                copy.deepcopy(data["originalData"]) if "originalData" in data else _MISSING
            ),
        )

    def merged_with(self, other: Optional["NonConformingData"]) -> "NonConformingData":
        """
        Combine two records into a new one; self wins on raw_text and original_data.
        """
        if other is None:
            return copy.deepcopy(self)
        return NonConformingData(
            raw_text=self.raw_text if self.raw_text is not None else other.raw_text,
            invalid_fields=copy.deepcopy(self.invalid_fields + other.invalid_fields),
            parsing_errors=self.parsing_errors + other.parsing_errors,
            original_data=copy.deepcopy(
                self.original_data if self.has_original_data else other.original_data
            ),
        )


class NonConformingCollector:
    """
    Accumulates non-conforming findings during one normalization or import.

    Example:
        collector = NonConformingCollector()
        collector.record("work", "[0].highlights", "oops", "expected array, got string")
        record = collector.build(original_data=raw)
    """

    def __init__(self):
        self.invalid_fields: List[InvalidField] = []
        self.parsing_errors: List[str] = []
        self.raw_text: Optional[str] = None

    def record(self, section: str, field: str, value: Any, reason: str) -> None:
        """Append one invalid field. The value is deep-copied so later edits can't alter it."""
        self.invalid_fields.append(
            InvalidField(section=section, field=field, value=copy.deepcopy(value), reason=reason)
        )

    def record_error(self, message: str) -> None:
        """Append a parse or validation message."""
        self.parsing_errors.append(message)

    def record_parse_failure(self, raw_text: str, message: str) -> None:
        """Capture input that could not be parsed as structured data at all."""
        self.raw_text = raw_text
        self.parsing_errors.append(message)

    @property
    def has_issues(self) -> bool:
        return bool(self.invalid_fields or self.parsing_errors or self.raw_text is not None)

    def build(self, original_data: Any = _MISSING) -> Optional[NonConformingData]:
        """
        Produce the record, or None when nothing was collected.

        Args:
            original_data: Input to keep alongside the findings (deep-copied)
        """
        if not self.has_issues:
            return None
        return NonConformingData(
            raw_text=self.raw_text,
            invalid_fields=list(self.invalid_fields),
            parsing_errors=list(self.parsing_errors),
            original_data=copy.deepcopy(original_data),
        )
