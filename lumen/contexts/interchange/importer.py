"""
Import entry points.

Two paths take raw text in:

- import_resume(): the general path. Routes by shape (extended backup, HR
  Open, JSON Resume) and always produces a usable model. Problems are reported
  as errors/warnings and kept in model.non_conforming; text that isn't JSON at
  all yields an empty model holding the raw text.
- restore_backup() / restore(): the strict path for extended backups only. A
  document that classify() rejects is never decoded.
"""

import copy
import json
from dataclasses import dataclass, field
from typing import Any, List, Optional

from lumen.contexts.interchange.decoder import decode_document
from lumen.contexts.interchange.exceptions import (
    InvalidBackupError,
    UnsupportedSchemaVersionError,
)
from lumen.contexts.interchange.hr_open import convert_hr_open, is_hr_open
from lumen.contexts.interchange.logger import (
    _log_debug,
    _log_error,
    log_import_result,
    log_validation_report,
)
from lumen.contexts.interchange.schema import (
    SUPPORTED_SCHEMA_VERSIONS,
    classify,
    is_extended_format,
    split_document,
)
from lumen.contexts.modeling.defaults import (
    DEFAULT_ICON_POSITION,
    DEFAULT_ICON_SIZE,
    PHOTO_ICON_OFFSET,
    SECTION_NAMES,
)
from lumen.contexts.modeling.non_conforming import NonConformingCollector, NonConformingData
from lumen.contexts.modeling.normalizer import normalize
from lumen.contexts.modeling.resume_model import ImageSettings, ResumeModel
from lumen.utils.coercion import json_type_name

# Values of ImportResult.source_format
SOURCE_EXTENDED = "extended"
SOURCE_JSON_RESUME = "json_resume"
SOURCE_HR_OPEN = "hr_open"
SOURCE_UNPARSABLE = "unparsable"

NOT_A_BACKUP_MESSAGE = "Not a backup file - use regular import for JSON Resume or HR Open formats"


@dataclass
class ImportResult:
    """Result from import_resume(). model is always usable."""

    model: ResumeModel
    source_format: str
    has_errors: bool = False
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    schema_version: Optional[str] = None


@dataclass
class BackupImportResult:
    """Result from restore_backup(). model is None unless the restore succeeded."""

    model: Optional[ResumeModel]
    is_valid: bool
    is_extended: bool
    schema_version: Optional[str] = None
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


def parse_failure_model(raw_text: str, message: str) -> ResumeModel:
    """Empty model that keeps unparsable input for manual review."""
    collector = NonConformingCollector()
    collector.record_parse_failure(raw_text, message)
    return ResumeModel(non_conforming=collector.build())


def _attach_errors(model: ResumeModel, errors: List[str], original: Any) -> None:
    record = NonConformingData(parsing_errors=list(errors), original_data=copy.deepcopy(original))
    model.non_conforming = record.merged_with(model.non_conforming)


def _json_resume_errors(parsed: Any) -> List[str]:
    if not isinstance(parsed, dict):
        return [
            "Invalid resume format. Expected JSON Resume or HR Open format "
            f"(got {json_type_name(parsed)})."
        ]
    if not isinstance(parsed.get("basics"), dict):
        return ["Invalid resume format. Expected JSON Resume or HR Open format (missing basics)."]
    for section in SECTION_NAMES:
        value = parsed.get(section)
        if value is not None and not isinstance(value, list):
            return [f"Invalid resume format. {section} must be an array if present."]
    return []


def map_photo_from_image(model: ResumeModel) -> None:
    """
    Place a non-blank basics.image as the photo, beside the icon.

    Leaves an existing photo alone. A whitespace-only image is cleared.
    """
    if not model.basics.image.strip():
        model.basics.image = ""
        return
    if model.photo is not None:
        return

    top = model.icon.top if model.icon else DEFAULT_ICON_POSITION["top"]
    right = model.icon.right if model.icon else DEFAULT_ICON_POSITION["right"]
    model.photo = ImageSettings(
        data=model.basics.image,
        top=top,
        right=right + PHOTO_ICON_OFFSET,
        size=DEFAULT_ICON_SIZE,
    )


def _import_extended(parsed: Any) -> ImportResult:
    report = classify(parsed)
    log_validation_report(report)

    if report.can_decode:
        return ImportResult(
            model=decode_document(parsed),
            source_format=SOURCE_EXTENDED,
            warnings=list(report.warnings),
            schema_version=report.schema_version,
        )

    # Rejected backup: keep the content as a plain payload, never decode it
    payload, _ = split_document(parsed)
    model = normalize(payload)
    _attach_errors(model, report.errors, parsed)
    return ImportResult(
        model=model,
        source_format=SOURCE_EXTENDED,
        has_errors=True,
        errors=list(report.errors),
        warnings=list(report.warnings),
        schema_version=report.schema_version,
    )


def import_parsed(parsed: Any) -> ImportResult:
    """
    Import an already-parsed JSON value.

    Args:
        parsed: Result of json.loads()

    Returns:
        ImportResult (never raises for JSON-shaped input)
    """
    if is_extended_format(parsed):
        return _import_extended(parsed)

    if is_hr_open(parsed):
        _log_debug("Detected HR Open format, converting")
        return ImportResult(
            model=convert_hr_open(parsed),
            source_format=SOURCE_HR_OPEN,
            warnings=["Successfully converted from HR Open format"],
        )

    errors = _json_resume_errors(parsed)
    model = normalize(parsed)
    map_photo_from_image(model)

    invalid_count = len(model.non_conforming.invalid_fields) if model.non_conforming else 0
    if errors:
        _attach_errors(model, errors, parsed)
    if invalid_count:
        errors.append(
            f"{invalid_count} field(s) did not match the expected types "
            "and were kept for manual review"
        )

    return ImportResult(
        model=model,
        source_format=SOURCE_JSON_RESUME,
        has_errors=bool(errors),
        errors=errors,
    )


def import_resume(raw_text: str) -> ImportResult:
    """
    Import raw text from any supported source.

    Args:
        raw_text: File or storage contents

    Returns:
        ImportResult. On a parse failure source_format is "unparsable" and the
        model is empty with non_conforming.raw_text set to the input.

    Example:
        >>> result = import_resume("{ invalid json }")
        >>> result.has_errors, result.model.non_conforming.raw_text
        (True, '{ invalid json }')
    """
    try:
        parsed = json.loads(raw_text)
    except ValueError as exc:
        message = f"Invalid JSON: {exc}"
        result = ImportResult(
            model=parse_failure_model(raw_text, message),
            source_format=SOURCE_UNPARSABLE,
            has_errors=True,
            errors=[message],
        )
    else:
        result = import_parsed(parsed)

    log_import_result(result)
    return result


def restore(document: Any) -> ResumeModel:
    """
    Strictly restore a parsed extended backup.

    Args:
        document: Parsed extended document

    Returns:
        Decoded ResumeModel

    Raises:
        UnsupportedSchemaVersionError: If the declared version is not supported
        InvalidBackupError: If the document is not an extended backup or is malformed
    """
    report = classify(document)
    log_validation_report(report)

    if not report.is_extended_format:
        raise InvalidBackupError(NOT_A_BACKUP_MESSAGE, report.errors, report.warnings)
    if report.schema_version is not None and not report.is_supported:
        raise UnsupportedSchemaVersionError(
            report.schema_version, SUPPORTED_SCHEMA_VERSIONS, report.errors, report.warnings
        )
    if not report.is_valid:
        raise InvalidBackupError("Invalid backup document", report.errors, report.warnings)

    return decode_document(document)


def restore_backup(raw_text: str) -> BackupImportResult:
    """
    Restore raw text as an extended backup, reporting failures instead of raising.

    Returns:
        BackupImportResult with a model only when the document was accepted
    """
    try:
        parsed = json.loads(raw_text)
    except ValueError as exc:
        _log_error(f"Restore failed: invalid JSON ({exc})")
        return BackupImportResult(model=None, is_valid=False, is_extended=False, errors=[str(exc)])

    report = classify(parsed)
    log_validation_report(report)

    if not report.is_extended_format:
        _log_error(f"Restore failed: {NOT_A_BACKUP_MESSAGE}")
        return BackupImportResult(
            model=None, is_valid=False, is_extended=False, errors=[NOT_A_BACKUP_MESSAGE]
        )

    if not report.can_decode:
        _log_error(f"Restore failed: {'; '.join(report.errors)}")
        return BackupImportResult(
            model=None,
            is_valid=False,
            is_extended=True,
            schema_version=report.schema_version,
            errors=list(report.errors),
            warnings=list(report.warnings),
        )

    return BackupImportResult(
        model=decode_document(parsed),
        is_valid=True,
        is_extended=True,
        schema_version=report.schema_version,
        warnings=list(report.warnings),
    )
