"""
Modeling context logger.

Provides logging interface for the modeling context with automatic [model] prefix.
All modeling modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from lumen.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[model]"


def setup_modeling_logger(log_dir: Path, phase: str = "normalize") -> Path:
    """
    Setup logger for the modeling context.

    Args:
        log_dir: Directory for this session
        phase: Phase name for provenance

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="model",
        log_dir=log_dir,
        extra_provenance={"Phase": phase},
    )


# Wrapper functions with automatic [model] prefix


def _log_info(message: str) -> None:
    """Log info message with [model] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [model] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [model] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [model] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [model] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level modeling helpers


def log_normalization_summary(model) -> None:
    """
    Log what a normalization produced.

    Args:
        model: ResumeModel returned by normalize()
    """
    counts = ", ".join(
        f"{section}={len(entries)}" for section, entries in model.iter_sections() if entries
    )
    _log_debug(f"Normalized model ({counts or 'no entries'})")

    record = model.non_conforming
    if record is None:
        return
    if record.invalid_fields:
        _log_warning(f"{len(record.invalid_fields)} invalid field(s) kept for manual review")
        for invalid in record.invalid_fields:
            _log_debug(f"  {invalid.section}{_path(invalid.field)}: {invalid.reason}")
    if record.raw_text is not None:
        _log_warning("Input could not be parsed; raw text kept for manual review")


def _path(field: str) -> str:
    if not field:
        return ""
    return field if field.startswith("[") else f".{field}"
