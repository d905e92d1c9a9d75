"""
Export entry points.

A canonical model goes in, JSON text comes out:
- export_json_resume(): clean JSON Resume payload (no visibility metadata)
- export_backup(): extended document that restores the model exactly
- export_hr_open(): HR Open document with visible content only

generate_export_filename() builds consistent names for all of them:

    first-last-resume[-target][-variant]-YYYY-MM-DD[-HHMMSS].ext
"""

import json
import re
from datetime import datetime, timezone
from typing import Any, Optional

from omegaconf import DictConfig

from lumen.contexts.interchange.encoder import build_payload, encode
from lumen.contexts.interchange.hr_open import from_model
from lumen.contexts.interchange.logger import _log_debug
from lumen.contexts.modeling.resume_model import ResumeModel
from lumen.contexts.modeling.summaries import active_summary
from lumen.utils.config import load_settings


def _dump(document: Any, settings: DictConfig) -> str:
    return json.dumps(document, indent=settings.export.indent, ensure_ascii=False)


def export_json_resume(model: ResumeModel, settings: Optional[DictConfig] = None) -> str:
    """Clean JSON Resume text for a model."""
    settings = settings if settings is not None else load_settings()
    return _dump(build_payload(model), settings)


def export_backup(
    model: ResumeModel,
    exported_at: Optional[datetime] = None,
    settings: Optional[DictConfig] = None,
) -> str:
    """
    Extended backup text for a model.

    Args:
        model: Canonical model
        exported_at: Backup timestamp (default: now)
        settings: Settings from load_settings() (default: loaded on demand)

    Returns:
        JSON text of the extended document
    """
    settings = settings if settings is not None else load_settings()
    document = encode(model, exported_at=exported_at, settings=settings).to_document()
    _log_debug(f"Backup document built (schema {document['$extensions']['$schemaVersion']})")
    return _dump(document, settings)


def export_hr_open(model: ResumeModel, settings: Optional[DictConfig] = None) -> str:
    """HR Open text for a model (visible content only)."""
    settings = settings if settings is not None else load_settings()
    return _dump(from_model(model), settings)


def sanitize_filename_part(value: str) -> str:
    """
    Lowercase, keep only [a-z0-9-], collapse whitespace and hyphen runs.

    Example:
        >>> sanitize_filename_part("Senior Engineer @ Acme!")
        'senior-engineer-acme'
    """
    value = re.sub(r"[^a-z0-9\s-]", "", value.lower())
    value = re.sub(r"\s+", "-", value)
    value = re.sub(r"-+", "-", value)
    return value.strip("-")


def generate_export_filename(
    model: ResumeModel,
    extension: str,
    variant: Optional[str] = None,
    include_time: bool = False,
    timestamp: Optional[datetime] = None,
) -> str:
    """
    Build an export filename from the résumé owner's name and active target.

    Args:
        model: Canonical model (basics.name and the active summary are used)
        extension: File extension without the dot
        variant: Optional label such as "backup"
        include_time: Append HHMMSS after the date
        timestamp: Moment to stamp (default: now, UTC)

    Returns:
        Filename like "jane-doe-resume-acme-backup-2025-01-31-142530.json"
    """
    moment = timestamp if timestamp is not None else datetime.now(timezone.utc)

    name_parts = (model.basics.name or "resume").split()
    first_name = sanitize_filename_part(name_parts[0] if name_parts else "unknown")
    last_name = sanitize_filename_part(name_parts[-1]) if len(name_parts) > 1 else ""

    parts = [f"{first_name}-{last_name}" if last_name else first_name, "resume"]

    summary = active_summary(model)
    if summary is not None and summary.target.strip():
        target = sanitize_filename_part(summary.target.strip())
        if target:
            parts.append(target)

    if variant:
        variant_part = sanitize_filename_part(variant)
        if variant_part:
            parts.append(variant_part)

    parts.append(moment.strftime("%Y-%m-%d"))
    if include_time:
        parts.append(moment.strftime("%H%M%S"))

    return f"{'-'.join(parts)}.{extension}"
