"""
LUMEN - Lossless Unified Model Export/Normalization

A résumé data toolkit that keeps per-item visibility intact while moving
content between the editor's canonical model and portable JSON documents.

Architecture:
- Modeling Context: Canonical résumé model, sub-item resolution, normalization
- Interchange Context: Visibility codec, backup schema validation, import/export
"""

__version__ = "0.1.0"
