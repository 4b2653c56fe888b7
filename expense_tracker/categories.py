"""Static catalog of known expense categories.

Categories are stored on expenses as free-form text.  The catalog is
only consulted for display purposes: unknown names resolve to
``Other`` instead of being rejected.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional

_NON_LETTERS = re.compile(r"[^a-zA-Z ]")


@dataclass(frozen=True)
class CategoryInfo:
    name: str
    icon: str

    @property
    def display_with_icon(self) -> str:
        return f"{self.icon} {self.name}"

    def __str__(self) -> str:
        return self.name


FOOD = CategoryInfo("Food", "🍔")
TRANSPORT = CategoryInfo("Transport", "🚗")
BILLS = CategoryInfo("Bills", "💡")
ENTERTAINMENT = CategoryInfo("Entertainment", "🎬")
SHOPPING = CategoryInfo("Shopping", "🛍️")
HEALTHCARE = CategoryInfo("Healthcare", "⚕️")
EDUCATION = CategoryInfo("Education", "📚")
HOUSING = CategoryInfo("Housing", "🏠")
SAVINGS = CategoryInfo("Savings", "💰")
PERSONAL = CategoryInfo("Personal", "👤")
OTHER = CategoryInfo("Other", "📦")

# Declaration order drives every selection list in the UI.
CATEGORIES: tuple[CategoryInfo, ...] = (
    FOOD,
    TRANSPORT,
    BILLS,
    ENTERTAINMENT,
    SHOPPING,
    HEALTHCARE,
    EDUCATION,
    HOUSING,
    SAVINGS,
    PERSONAL,
    OTHER,
)

_BY_NAME = {category.name.lower(): category for category in CATEGORIES}


def resolve(name: Optional[str]) -> CategoryInfo:
    """Return the catalog entry for ``name`` (case-insensitive), or ``Other``."""
    if name is None or not name.strip():
        return OTHER
    return _BY_NAME.get(name.strip().lower(), OTHER)


def all_names() -> List[str]:
    return [category.name for category in CATEGORIES]


def all_display_names() -> List[str]:
    """Return ``"icon name"`` labels in declaration order."""
    return [category.display_with_icon for category in CATEGORIES]


def strip_icon_to_name(label: Optional[str]) -> str:
    """Turn an icon-prefixed label back into a bare category name.

    Example:
        >>> strip_icon_to_name("🍔 Food")
        'Food'
        >>> strip_icon_to_name("📦")
        'Other'
    """
    if label is None:
        return OTHER.name
    cleaned = _NON_LETTERS.sub("", label).strip()
    return cleaned if cleaned else OTHER.name
