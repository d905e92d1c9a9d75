"""
Named summary helpers.

A résumé can keep several summaries, each written for a target role or
company. Targets are compared case-insensitively.
"""

import dataclasses
from datetime import datetime, timezone
from typing import List, Optional

from lumen.contexts.modeling.resume_model import NamedSummary, ResumeModel
from lumen.utils.timestamp import parse_iso

_EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)


def _last_touched(summary: NamedSummary) -> datetime:
    return parse_iso(summary.last_used or summary.created_at) or _EPOCH


def deduplicate_summaries(summaries: List[NamedSummary]) -> List[NamedSummary]:
    """
    Collapse summaries sharing a target (case-insensitive) into one.

    The most recently used (or created) summary wins, but the target keeps the
    casing of the first occurrence. First-occurrence order is preserved.

    Args:
        summaries: Summaries in stored order

    Returns:
        New list with one summary per target
    """
    unique = {}
    for summary in summaries:
        key = summary.target.lower()
        existing = unique.get(key)
        if existing is None:
            unique[key] = summary
        elif _last_touched(summary) > _last_touched(existing):
            unique[key] = dataclasses.replace(summary, target=existing.target)
    return list(unique.values())


def upsert_summary(model: ResumeModel, summary: NamedSummary) -> ResumeModel:
    """
    Add a summary, or replace the one with the same target, and make it active.

    A replaced summary keeps its original id. Returns a new model.
    """
    updated = model.copy()
    key = summary.target.lower()
    for index, existing in enumerate(updated.summaries):
        if existing.target.lower() == key:
            updated.summaries[index] = dataclasses.replace(summary, id=existing.id)
            updated.active_summary_id = existing.id
            return updated

    updated.summaries.append(dataclasses.replace(summary))
    updated.active_summary_id = summary.id
    return updated


def active_summary(model: ResumeModel) -> Optional[NamedSummary]:
    """The summary referenced by active_summary_id, if any."""
    if model.active_summary_id is None:
        return None
    for summary in model.summaries:
        if summary.id == model.active_summary_id:
            return summary
    return None
