"""
Interchange context logger.

Provides logging interface for the interchange context with automatic [codec] prefix.
All interchange modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from lumen.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[codec]"


def setup_interchange_logger(log_dir: Path, phase: str = "export") -> Path:
    """
    Setup logger for the interchange context.

    Args:
        log_dir: Directory for this session
        phase: Phase name for provenance ("import", "export", "restore", ...)

    Returns:
        Path to log file

    Example:
        from lumen.contexts.interchange.logger import setup_interchange_logger, _log_info

        log_file = setup_interchange_logger(log_dir, phase="restore")
        _log_info("Restoring backup...")
    """
    return _setup_logger(
        context_name="codec",
        log_dir=log_dir,
        extra_provenance={"Phase": phase},
    )


# Wrapper functions with automatic [codec] prefix


def _log_info(message: str) -> None:
    """Log info message with [codec] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [codec] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [codec] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [codec] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [codec] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level interchange helpers


def log_validation_report(report) -> None:
    """
    Log a ValidationReport from classify().

    Errors go out at WARNING (the caller decides whether they are fatal),
    warnings at DEBUG.
    """
    if not report.is_extended_format:
        _log_debug("Document is not in extended format")
        return

    _log_debug(
        f"Extended document v{report.schema_version} "
        f"(valid={report.is_valid}, supported={report.is_supported})"
    )
    for error in report.errors:
        _log_warning(f"  {error}")
    for warning in report.warnings:
        _log_debug(f"  {warning}")


def log_import_result(result) -> None:
    """
    Log an ImportResult from import_resume().

    Args:
        result: ImportResult
    """
    if result.source_format == "unparsable":
        _log_error(f"Import failed: {'; '.join(result.errors)}")
        return

    issues = result.model.non_conforming.issue_count if result.model.non_conforming else 0
    if result.has_errors:
        _log_warning(
            f"Imported {result.source_format} document with {len(result.errors)} error(s), "
            f"{issues} item(s) kept for manual review"
        )
    else:
        _log_success(f"Imported {result.source_format} document")
    for warning in result.warnings:
        _log_debug(f"  {warning}")


def log_export(kind: str, filename: str = None) -> None:
    """Log a finished export."""
    if filename:
        _log_success(f"Exported {kind}: {filename}")
    else:
        _log_success(f"Exported {kind}")
