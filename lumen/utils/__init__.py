"""
Shared utilities for LUMEN.

Common functionality used across contexts:
- Safe coercion of JSON-shaped input
- Settings resolution
- Logger setup
- Timestamps
"""

from lumen.utils.coercion import json_type_name, safe_array, safe_object, safe_string
from lumen.utils.timestamp import now, now_exact, utc_iso

__all__ = [
    "json_type_name",
    "safe_array",
    "safe_object",
    "safe_string",
    "now",
    "now_exact",
    "utc_iso",
]
