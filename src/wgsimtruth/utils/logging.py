"""Centralized logging utilities for wgsimtruth.

Provides a single place to configure logging and fetch namespaced loggers.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional


LOGGER_NAMESPACE = "wgsimtruth"

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
CONSOLE_FORMAT = "%(levelname)s: %(message)s"

# Log rotation settings
DEFAULT_MAX_BYTES = 10 * 1024 * 1024  # 10 MB
DEFAULT_BACKUP_COUNT = 5


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = DEFAULT_BACKUP_COUNT,
) -> None:
    """Configure logging for the 'wgsimtruth' namespace.

    Args:
        level: Logging level for the application logger
        log_file: Optional path for log file output
        max_bytes: Maximum size per log file before rotation (default: 10MB)
        backup_count: Number of backup files to keep (default: 5)

    Notes:
        - Root logger kept at WARNING to suppress third-party noise
        - Console handler uses concise format; file handler (if any) is detailed at DEBUG
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.WARNING)

    app_logger = logging.getLogger(LOGGER_NAMESPACE)
    app_logger.setLevel(level)
    # Avoid duplicate logs if called multiple times
    for h in list(app_logger.handlers):
        app_logger.removeHandler(h)

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    app_logger.addHandler(console)

    if log_file:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                log_file,
                maxBytes=max_bytes,
                backupCount=backup_count,
            )
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(DEFAULT_FORMAT))
            app_logger.addHandler(file_handler)
            # File handler wants DEBUG records even when the console is quieter
            app_logger.setLevel(logging.DEBUG)
        except OSError as e:
            import warnings
            warnings.warn(f"Failed to create log file {log_file}: {e}")

    # Do not propagate to root to avoid double-printing
    app_logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Return a namespaced logger under 'wgsimtruth' root."""
    base = logging.getLogger(LOGGER_NAMESPACE)
    return base.getChild(name)


def level_from_verbosity(verbose: int, default: int = logging.WARNING) -> int:
    """Map a -v count to a logging level (-v INFO, -vv DEBUG)."""
    if verbose >= 2:
        return logging.DEBUG
    if verbose == 1:
        return logging.INFO
    return default


class LogTemplates:
    """Standard log message templates shared across modules."""

    # Module lifecycle
    MODULE_START = "Starting {name}"
    MODULE_SUCCESS = "{name} completed in {duration:.2f}s"

    # Files
    FILE_CREATED = "Created output file: {path} ({size:,} bytes)"
    GENOME_LOADED = "Loaded genome with {count:,} contigs ({size:,} bp) from {path}"

    # Per-read diagnostics
    DECODE_FAILURE = "Skipping read {read_id}: {error}"

    # Evaluation statistics
    EVALUATION_STATS = (
        "Evaluated {evaluated:,} of {total:,} records: {aligned:,} aligned, "
        "{misaligned:,} misaligned ({percent:.2f}% correct)"
    )
    SKIPPED_STATS = "Skipped {unmapped:,} unmapped, {low_mapq:,} low-MAPQ, {failures:,} undecodable"
