"""
Lookup resolution of (category, code) pairs against a Code Catalog.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..catalog_loader import CodeCatalog


UNKNOWN_NAME = "Unknown"
UNKNOWN_CATEGORY = "Unknown category"
UNKNOWN_CODE = "Unknown code"


@dataclass(frozen=True)
class Resolution:
    """Display data for one decoded segment."""
    name: str
    position: str
    description: str
    known_category: bool = True
    known_code: bool = True


def resolve(catalog: CodeCatalog, category: str, code: str) -> Resolution:
    """
    Resolve a code within a category to its descriptive text.

    Unknown categories resolve to an "Unknown" placeholder that keeps the raw
    category token as its position; unknown codes keep the category's name and
    position with an "Unknown code" description.
    """
    definition = catalog.get(category)
    if definition is None:
        return Resolution(
            name=UNKNOWN_NAME,
            position=category,
            description=UNKNOWN_CATEGORY,
            known_category=False,
            known_code=False,
        )

    description = definition.describe(code)
    if description is None:
        return Resolution(
            name=definition.name,
            position=definition.position,
            description=UNKNOWN_CODE,
            known_code=False,
        )

    return Resolution(
        name=definition.name,
        position=definition.position,
        description=description,
    )
