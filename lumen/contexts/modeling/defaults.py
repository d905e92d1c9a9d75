"""
Default values for the LUMEN canonical résumé model.

Provides shared constants used by:
- normalizer.py (fill missing sections and visibility)
- the interchange context (encode/decode in a fixed section order)

Default maps are handed out as copies; nothing here is mutated at runtime.
"""

from typing import Dict

# List sections in JSON Resume order
SECTION_NAMES = (
    "work",
    "volunteer",
    "education",
    "skills",
    "projects",
    "awards",
    "certificates",
    "publications",
    "languages",
    "interests",
    "references",
)

# Every key a section visibility map must carry
VISIBILITY_SECTIONS = ("basics",) + SECTION_NAMES

# Item-level visibility is also tracked for basics.profiles
ITEM_VISIBILITY_SECTIONS = ("profiles",) + SECTION_NAMES

# Sub-item kind -> key holding the text in the tagged object form
SUB_ITEM_TEXT_KEYS = {
    "highlights": "content",
    "courses": "name",
    "keywords": "name",
    "roles": "name",
}

# Icon/photo fallbacks (pixels)
DEFAULT_ICON_POSITION = {"top": 20, "right": 20}
DEFAULT_ICON_SIZE = 60
# Photo sits this far left of the icon when mapped from basics.image
PHOTO_ICON_OFFSET = 80


def get_default_section_visibility() -> Dict[str, bool]:
    """Full section visibility map with every known section visible."""
    return {section: True for section in VISIBILITY_SECTIONS}
