"""Budget storage and file I/O operations.

Budgets are a flat mapping of category name to a non-negative limit.
They live in their own versioned JSON document, independent of the
expense file, and are rewritten wholesale on every change.
"""

from __future__ import annotations

import json
import logging
import math
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional

from .config import BUDGET_FILE, ensure_directory

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1


class BudgetStorage:
    """Handles budget file storage operations."""

    def __init__(self, path: Optional[Path] = None):
        """Initialize budget storage.

        Args:
            path: Optional custom budget file.
                  Defaults to BUDGET_FILE from config.
        """
        self.path = Path(path) if path is not None else BUDGET_FILE

    def load(self) -> Dict[str, float]:
        """Load the budget mapping from disk.

        Returns:
            Dictionary mapping category names to budget limits.  A missing
            file gives an empty mapping; so does an unreadable or corrupt
            one, after logging a warning.

        Note:
            Entries that are not non-negative numbers are skipped.
        """
        if not self.path.exists():
            return {}

        try:
            with self.path.open('r', encoding='utf-8') as handle:
                data = json.load(handle)
        except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
            logger.warning("Could not load budgets from %s: %s", self.path, e)
            return {}

        if not isinstance(data, dict):
            logger.warning("Ignoring budget file %s: unexpected document type", self.path)
            return {}

        version = data.get('version', FORMAT_VERSION)
        if version != FORMAT_VERSION:
            logger.warning("Ignoring budget file %s: unsupported version %r", self.path, version)
            return {}

        entries = data.get('budgets') or {}
        if not isinstance(entries, dict):
            return {}

        budgets: Dict[str, float] = {}
        for category, value in entries.items():
            try:
                amount = float(value)
            except (ValueError, TypeError):
                continue
            if not math.isfinite(amount) or amount < 0:
                continue
            budgets[str(category)] = amount
        return budgets

    def save(self, budgets: Dict[str, float]) -> None:
        """Save the budget mapping to disk.

        Args:
            budgets: Dictionary mapping category names to budget amounts

        Raises:
            OSError: If the file cannot be written
        """
        payload = {
            'version': FORMAT_VERSION,
            'budgets': {k: float(v) for k, v in budgets.items()},
            'saved_at': datetime.now().isoformat(timespec='seconds'),
        }

        ensure_directory(self.path.parent)
        try:
            with self.path.open('w', encoding='utf-8') as handle:
                json.dump(payload, handle, indent=2, sort_keys=True, ensure_ascii=False)
        except OSError as e:
            raise OSError(f"Failed to save budgets to {self.path}: {e}") from e
