"""
Sub-item resolution.

Highlights, keywords, roles and courses arrive either as bare strings (legacy
and imported data) or as tagged objects carrying a visibility flag (editor
data). In the canonical model both forms are explicit variants:

    PlainItem(text)             - a bare string, always visible
    TaggedItem(text, visible)   - text paired with its own visibility

This module is the only place that tells the two forms apart. Everything else
goes through text(), is_visible(), to_tagged() and to_plain().
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from lumen.contexts.modeling.defaults import SUB_ITEM_TEXT_KEYS

# Keys searched (in order) for the text of a tagged object, after the kind's own key
FALLBACK_TEXT_KEYS = ("text", "content", "name")


@dataclass(frozen=True)
class PlainItem:
    """Bare-string sub-item. Always visible."""

    text: str


@dataclass(frozen=True)
class TaggedItem:
    """Sub-item text paired with its visibility."""

    text: str
    visible: bool = True


SubItem = Union[PlainItem, TaggedItem]


def text(item: SubItem) -> str:
    """Text of either form."""
    return item.text


def is_visible(item: SubItem) -> bool:
    """True unless the item is tagged with visible=False."""
    if isinstance(item, TaggedItem):
        return item.visible is not False
    return True


def to_tagged(item: SubItem) -> TaggedItem:
    """Canonicalize either form into a TaggedItem, preserving text and visibility."""
    if isinstance(item, TaggedItem):
        return item
    return TaggedItem(text=item.text, visible=True)


def to_plain(item: SubItem) -> str:
    """Drop visibility and return the text only."""
    return item.text


def tag(item_text: str, visible: bool = True) -> TaggedItem:
    """Build a tagged sub-item from plain text and a resolved visibility."""
    return TaggedItem(text=item_text, visible=visible is not False)


def text_key(kind: str) -> str:
    """JSON key holding the text of a tagged sub-item of this kind."""
    return SUB_ITEM_TEXT_KEYS.get(kind, "name")


def lookup_text(mapping: Dict[str, Any], kind: str) -> Any:
    """
    Find the raw text value of a tagged object.

    Looks at the kind's own key first ("content" for highlights, "name" for the
    rest), then the fallbacks. Returns None when no key is present.
    """
    for key in (text_key(kind),) + FALLBACK_TEXT_KEYS:
        if key in mapping:
            return mapping[key]
    return None


def from_raw(value: Any, kind: str) -> Optional[SubItem]:
    """
    Read a raw JSON sub-item.

    Strings become PlainItem; objects become TaggedItem when their text is a
    string. Returns None for anything else so the caller can decide how to
    coerce and record it.

    Args:
        value: Raw JSON value (str or dict)
        kind: Sub-item kind ("highlights", "courses", "keywords", "roles")

    Returns:
        The resolved sub-item, or None if the value is in neither form
    """
    if isinstance(value, str):
        return PlainItem(text=value)
    if isinstance(value, dict):
        raw_text = lookup_text(value, kind)
        if isinstance(raw_text, str):
            return TaggedItem(text=raw_text, visible=value.get("visible") is not False)
    return None


def to_raw(item: SubItem, kind: str) -> Union[str, Dict[str, Any]]:
    """
    Write a sub-item in its editor JSON form.

    PlainItem stays a bare string; TaggedItem becomes {"content"|"name": text, "visible": bool}.
    """
    if isinstance(item, TaggedItem):
        return {text_key(kind): item.text, "visible": item.visible}
    return item.text
