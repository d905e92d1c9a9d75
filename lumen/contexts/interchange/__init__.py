"""
Interchange Context

Responsibilities:
- Encodes canonical models into clean JSON Resume payloads plus a visibility side channel
- Decodes extended (backup) documents back into canonical models
- Validates extended documents and their schema version before any restore
- Routes raw text to the right importer (extended, HR Open, JSON Resume)
- Imports LinkedIn data export archives
- Produces export documents and filenames

Owns: Wire formats, schema versions, import/export entry points
Never: Edits résumé content or decides what should be visible
"""

from lumen.contexts.interchange.decoder import decode, decode_document, resolve_visibility
from lumen.contexts.interchange.encoder import EncodedResume, encode
from lumen.contexts.interchange.exceptions import (
    InvalidBackupError,
    UnsupportedSchemaVersionError,
)
from lumen.contexts.interchange.exporter import (
    export_backup,
    export_hr_open,
    export_json_resume,
    generate_export_filename,
)
from lumen.contexts.interchange.hr_open import convert_hr_open
from lumen.contexts.interchange.importer import (
    BackupImportResult,
    ImportResult,
    import_resume,
    restore,
    restore_backup,
)
from lumen.contexts.interchange.linkedin import LinkedInImportResult, import_linkedin_export
from lumen.contexts.interchange.schema import (
    CURRENT_SCHEMA_VERSION,
    SUPPORTED_SCHEMA_VERSIONS,
    ValidationReport,
    classify,
)

__all__ = [
    # Codec
    "encode",
    "EncodedResume",
    "decode",
    "decode_document",
    "resolve_visibility",
    # Validation
    "classify",
    "ValidationReport",
    "CURRENT_SCHEMA_VERSION",
    "SUPPORTED_SCHEMA_VERSIONS",
    # Import
    "import_resume",
    "ImportResult",
    "restore",
    "restore_backup",
    "BackupImportResult",
    "convert_hr_open",
    "import_linkedin_export",
    "LinkedInImportResult",
    "InvalidBackupError",
    "UnsupportedSchemaVersionError",
    # Export
    "export_json_resume",
    "export_backup",
    "export_hr_open",
    "generate_export_filename",
]
