"""
Modeling Context

Responsibilities:
- Defines the canonical résumé model (visibility inline on every entry and sub-item)
- Resolves the plain-string / tagged-object sub-item duality
- Normalizes arbitrary input into a fully-populated model
- Preserves non-conforming input for manual review

Owns: Canonical model types, normalization, non-conforming data records
Never: Serializes documents or decides which import path applies
"""

from lumen.contexts.modeling.non_conforming import (
    InvalidField,
    NonConformingCollector,
    NonConformingData,
)
from lumen.contexts.modeling.normalizer import normalize
from lumen.contexts.modeling.resume_model import (
    SECTION_ENTRY_TYPES,
    Basics,
    ImageSettings,
    NamedSummary,
    ResumeEntry,
    ResumeModel,
)
from lumen.contexts.modeling.sub_items import PlainItem, TaggedItem
from lumen.contexts.modeling.summaries import active_summary, deduplicate_summaries

__all__ = [
    # Normalization
    "normalize",
    # Model types
    "ResumeModel",
    "ResumeEntry",
    "Basics",
    "ImageSettings",
    "NamedSummary",
    "SECTION_ENTRY_TYPES",
    "PlainItem",
    "TaggedItem",
    # Non-conforming data
    "InvalidField",
    "NonConformingCollector",
    "NonConformingData",
    # Named summaries
    "active_summary",
    "deduplicate_summaries",
]
