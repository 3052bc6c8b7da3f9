"""Registry module - Indicator and calculation catalog."""

from .catalog import CatalogRegistry, IndicatorInfo, CalculationInfo, normalize_slug, registry

__all__ = ['CatalogRegistry', 'IndicatorInfo', 'CalculationInfo', 'normalize_slug', 'registry']
