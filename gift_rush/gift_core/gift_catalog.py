"""
Gift Catalog
============

Maps each gift category to its display attributes, loaded once from
gift_templates.json and read-only afterwards.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Iterator, Optional, Tuple

logger = logging.getLogger(__name__)


class GiftCategory(Enum):
    """Closed set of gift categories."""
    RED = 0
    GREEN = 1
    BLUE = 2
    YELLOW = 3
    PURPLE = 4


# Used when a category has no template
FALLBACK_COLOR: Tuple[int, int, int] = (180, 180, 180)


@dataclass(frozen=True)
class GiftTemplate:
    """Display attributes of a gift category."""
    category: GiftCategory
    display_name: str
    color: Tuple[int, int, int]

    def __repr__(self) -> str:
        return f"GiftTemplate({self.category.name}: {self.display_name})"


def fallback_template(category: GiftCategory) -> GiftTemplate:
    """Template returned for categories missing from the catalog."""
    return GiftTemplate(
        category=category,
        display_name=category.name.title(),
        color=FALLBACK_COLOR
    )


class GiftCatalog:
    """
    Read-only lookup from gift category to template.

    Lookups never fail: absent categories resolve to a grey fallback
    template named after the category.
    """

    def __init__(self, templates: Optional[Dict[GiftCategory, GiftTemplate]] = None):
        self._templates: Dict[GiftCategory, GiftTemplate] = dict(templates or {})

    def __len__(self) -> int:
        return len(self._templates)

    def __contains__(self, category: GiftCategory) -> bool:
        return category in self._templates

    def __getitem__(self, category: GiftCategory) -> GiftTemplate:
        return self.get(category)

    def __iter__(self) -> Iterator[GiftTemplate]:
        return iter(self._templates.values())

    def get(self, category: GiftCategory) -> GiftTemplate:
        """Get the template for a category, or the fallback template."""
        template = self._templates.get(category)
        if template is None:
            return fallback_template(category)
        return template

    def color_of(self, category: GiftCategory) -> Tuple[int, int, int]:
        return self.get(category).color

    def name_of(self, category: GiftCategory) -> str:
        return self.get(category).display_name

    @property
    def is_empty(self) -> bool:
        return not self._templates


def _parse_template(entry: dict) -> GiftTemplate:
    """Parse one template entry from JSON."""
    color = entry["color"]
    if len(color) != 3:
        raise ValueError(f"Color must have 3 values [R, G, B], got {color}")
    return GiftTemplate(
        category=GiftCategory[str(entry["category"]).upper()],
        display_name=str(entry.get("name", entry["category"])),
        color=(int(color[0]), int(color[1]), int(color[2]))
    )


def load_templates(path: Optional[str] = None) -> GiftCatalog:
    """
    Load gift templates from JSON.

    A missing or malformed file yields an empty catalog, so gameplay goes on
    with fallback colors. Entries with unknown categories are skipped.

    Args:
        path: Path to gift_templates.json. If None, uses default location.

    Returns:
        GiftCatalog instance.
    """
    if path is None:
        path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)),
            "gift_templates.json"
        )

    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except (OSError, ValueError) as exc:
        logger.warning("Could not read gift templates from %s (%s); using empty catalog", path, exc)
        return GiftCatalog()

    if not isinstance(raw, list):
        logger.warning("Gift templates in %s must be a list; using empty catalog", path)
        return GiftCatalog()

    templates: Dict[GiftCategory, GiftTemplate] = {}
    for entry in raw:
        try:
            template = _parse_template(entry)
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Skipping malformed gift template %r: %s", entry, exc)
            continue
        templates[template.category] = template

    logger.debug("Loaded %d gift templates from %s", len(templates), path)
    return GiftCatalog(templates)


# Module-level singleton
_cached_catalog: Optional[GiftCatalog] = None


def get_catalog(path: Optional[str] = None) -> GiftCatalog:
    """
    Get the gift catalog singleton.

    Args:
        path: Optional templates path. If None, uses cached or default catalog.

    Returns:
        GiftCatalog instance.
    """
    global _cached_catalog
    if _cached_catalog is None or path is not None:
        _cached_catalog = load_templates(path)
    return _cached_catalog
