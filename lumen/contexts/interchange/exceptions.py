"""Custom exceptions for the interchange context's strict restore path."""

from typing import List, Optional, Sequence


class InvalidBackupError(ValueError):
    """
    Exception raised when a document cannot be restored as an extended backup.

    Attributes:
        message: Error description
        errors: Validation errors that blocked the restore
        warnings: Soft issues found alongside them
    """

    def __init__(
        self,
        message: str,
        errors: Optional[List[str]] = None,
        warnings: Optional[List[str]] = None,
    ):
        self.message = message
        self.errors = list(errors or [])
        self.warnings = list(warnings or [])

        parts = [message]
        for error in self.errors:
            parts.append(f"  - {error}")

        super().__init__("\n".join(parts))


class UnsupportedSchemaVersionError(InvalidBackupError):
    """
    Exception raised when an extended document declares a schema version this
    build cannot read.

    Attributes:
        schema_version: Version found in the document
        supported_versions: Versions accepted (exact match)
    """

    def __init__(
        self,
        schema_version: str,
        supported_versions: Sequence[str],
        errors: Optional[List[str]] = None,
        warnings: Optional[List[str]] = None,
    ):
        self.schema_version = schema_version
        self.supported_versions = tuple(supported_versions)
        super().__init__(
            f"Cannot restore backup with schema version {schema_version!r}",
            errors=errors,
            warnings=warnings,
        )
