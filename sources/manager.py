"""
Data Source Manager - Routes indicators to the adapter for their source type.

Provides one interface for fetching any catalog indicator, with caching of
the full upstream series and date-range filtering on the way out.
"""

import logging
from typing import Dict, List, Optional

from .base import DataSource, SeriesData
from .fred import FREDSource
from .world_bank import WorldBankSource
from .dbnomics import DBnomicsSource
from .eurostat import EurostatSource
from .universal_csv import UniversalCSVSource
from .manual import ManualSource
from cache import CacheManager, cache_manager
from processing.temporal import filter_data_by_dates
from registry import IndicatorInfo

logger = logging.getLogger(__name__)


class DataSourceManager:
    """
    Routes indicators to data sources.

    Handles caching and date filtering.
    """

    def __init__(self, sources: Optional[List[DataSource]] = None, cache: Optional[CacheManager] = None):
        self._sources: Dict[str, DataSource] = {}
        self._cache = cache or cache_manager
        if sources is None:
            self._initialize_sources()
        else:
            for source in sources:
                self.register(source)

    def _initialize_sources(self):
        """Initialize all built-in data sources."""
        source_classes = [
            FREDSource,
            WorldBankSource,
            DBnomicsSource,
            EurostatSource,
            UniversalCSVSource,
            ManualSource,
        ]

        for cls in source_classes:
            try:
                self.register(cls())
            except Exception as e:
                logger.error(f"{cls.__name__}: failed to initialize - {e}")

    def register(self, source: DataSource) -> None:
        self._sources[source.source_type] = source
        logger.info(f"{source.name}: {'available' if source.available else 'not available'}")

    def get_source(self, source_type: str) -> Optional[DataSource]:
        """Find the data source that handles a source type."""
        source = self._sources.get(source_type)
        if source and source.supports(source_type):
            return source
        return None

    def fetch_sync(self, indicator: IndicatorInfo, start_date: Optional[str] = None,
                   end_date: Optional[str] = None) -> SeriesData:
        """
        Fetch an indicator's series, using the cache if possible.

        Args:
            indicator: Catalog entry to fetch
            start_date: Optional inclusive lower bound (YYYY-MM-DD)
            end_date: Optional inclusive upper bound (YYYY-MM-DD)

        Returns:
            SeriesData keyed by the indicator slug
        """
        cached = self._cache.get_data(indicator.source_type, indicator.source_config)
        if cached:
            dates, values, info = cached
            result = SeriesData(id=indicator.slug, dates=dates, values=values, info=info)
        else:
            source = self.get_source(indicator.source_type)
            if not source:
                return SeriesData.failed(
                    indicator.slug, f"No data source found for type '{indicator.source_type}'"
                )

            fetched = source.fetch_sync(indicator.source_config)
            if not fetched.is_valid:
                logger.warning(f"Fetch failed for {indicator.slug}: {fetched.error or 'no data'}")
                return SeriesData(
                    id=indicator.slug, dates=[], values=[], info=fetched.info,
                    error=fetched.error or f"No data for {indicator.slug}",
                )

            self._cache.set_data(indicator.source_type, indicator.source_config,
                                 fetched.dates, fetched.values, fetched.info)
            result = SeriesData(id=indicator.slug, dates=fetched.dates, values=fetched.values, info=fetched.info)

        dates, values = filter_data_by_dates(result.dates, result.values, start_date, end_date)
        info = dict(result.info, name=result.info.get('name') or indicator.name)
        return SeriesData(id=indicator.slug, dates=dates, values=values, info=info)

    def available_sources(self) -> dict:
        """Status of all registered data sources."""
        return {source_type: source.available for source_type, source in self._sources.items()}


# Global instance
source_manager = DataSourceManager()
