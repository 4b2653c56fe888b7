"""Configuration management for the expense tracker.

This module centralizes all configuration values including paths,
file names, logging defaults and environment variable overrides.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

# Base project root - assumes this file is in expense_tracker/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

# Data directories
DATA_DIR = Path(os.getenv("EXPENSE_TRACKER_DATA_DIR", _PROJECT_ROOT / "data"))
EXPORTS_DIR = DATA_DIR / "exports"

# Persisted files
EXPENSE_FILENAME = "expenses.txt"
BACKUP_FILENAME = "expenses_backup.txt"
BUDGET_FILENAME = "budgets.json"

EXPENSE_FILE = DATA_DIR / EXPENSE_FILENAME
BACKUP_FILE = DATA_DIR / BACKUP_FILENAME
BUDGET_FILE = DATA_DIR / BUDGET_FILENAME

LOG_LEVEL = os.getenv("EXPENSE_TRACKER_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def ensure_data_directories() -> None:
    """Create all required data directories if they don't exist."""
    for directory in [DATA_DIR, EXPORTS_DIR]:
        directory.mkdir(parents=True, exist_ok=True)


def ensure_directory(path: Path) -> Path:
    """Ensure a directory exists, creating it if necessary.

    Args:
        path: The directory path to ensure exists

    Returns:
        The path object (for chaining)

    Raises:
        OSError: If the directory cannot be created
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for the app and command-line scripts."""
    logging.basicConfig(
        level=getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO),
        format=LOG_FORMAT,
    )
