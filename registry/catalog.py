"""
Indicator & Calculation Catalog

Indicators say where a series comes from (source type + source config).
Calculations are named formulas over indicators. Both are loaded from a
JSON catalog file; slugs are matched case-insensitively because formulas
refer to indicators by their uppercase identifier.
"""

import json
import logging
import os
import re
from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional

from config import config

logger = logging.getLogger(__name__)

OUTPUT_TYPES = ('series', 'value', 'indicator')


def normalize_slug(slug: str) -> str:
    """Lowercase, with anything outside [a-z0-9_-] collapsed to '_'."""
    return re.sub(r'[^a-z0-9_\-]+', '_', (slug or '').strip().lower()).strip('_')


@dataclass
class IndicatorInfo:
    """A source series that formulas can reference."""

    slug: str
    name: str
    source_type: str
    source_config: dict = field(default_factory=dict)
    description: str = ''
    is_active: bool = True

    def __post_init__(self):
        self.slug = normalize_slug(self.slug)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class CalculationInfo:
    """A saved formula and the indicators it needs."""

    slug: str
    name: str
    formula: str
    indicators: List[str] = field(default_factory=list)
    output_type: str = 'series'
    description: str = ''
    is_active: bool = True

    def __post_init__(self):
        self.slug = normalize_slug(self.slug)
        self.indicators = [normalize_slug(s) for s in self.indicators]
        if self.output_type not in OUTPUT_TYPES:
            self.output_type = 'series'

    def to_dict(self) -> dict:
        return asdict(self)


class CatalogRegistry:
    """Lookup of indicators and calculations by slug."""

    def __init__(self):
        self._indicators: Dict[str, IndicatorInfo] = {}
        self._calculations: Dict[str, CalculationInfo] = {}
        self._loaded = False

    @property
    def loaded(self) -> bool:
        return self._loaded

    def load(self, path: Optional[str] = None) -> None:
        """Load the catalog JSON file. Missing files leave the catalog empty."""
        path = path or config.catalog_path
        if not os.path.exists(path):
            logger.warning(f"Catalog file not found at {path}")
            self._loaded = True
            return

        with open(path) as f:
            data = json.load(f)

        for item in data.get('indicators', []):
            self.register_indicator(IndicatorInfo(**item))
        for item in data.get('calculations', []):
            self.register_calculation(CalculationInfo(**item))

        self._loaded = True
        logger.info(
            f"Loaded {len(self._indicators)} indicators and "
            f"{len(self._calculations)} calculations from {path}"
        )

    def register_indicator(self, indicator: IndicatorInfo) -> None:
        self._indicators[indicator.slug] = indicator

    def register_calculation(self, calculation: CalculationInfo) -> None:
        self._calculations[calculation.slug] = calculation

    def get_indicator(self, slug: str) -> Optional[IndicatorInfo]:
        indicator = self._indicators.get(normalize_slug(slug))
        if indicator and indicator.is_active:
            return indicator
        return None

    def get_calculation(self, slug: str) -> Optional[CalculationInfo]:
        calculation = self._calculations.get(normalize_slug(slug))
        if calculation and calculation.is_active:
            return calculation
        return None

    def list_indicators(self, limit: int = 100, offset: int = 0) -> List[IndicatorInfo]:
        active = [i for i in self._indicators.values() if i.is_active]
        return active[max(0, offset):max(0, offset) + max(1, limit)]

    def list_calculations(self, limit: int = 100, offset: int = 0) -> List[CalculationInfo]:
        active = [c for c in self._calculations.values() if c.is_active]
        return active[max(0, offset):max(0, offset) + max(1, limit)]

    def clear(self) -> None:
        self._indicators.clear()
        self._calculations.clear()
        self._loaded = False


# Global registry instance
registry = CatalogRegistry()
