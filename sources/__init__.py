"""Data sources module - Unified interface for all data providers."""

from .base import DataSource, SeriesData, SourceError
from .fred import FREDSource
from .world_bank import WorldBankSource
from .dbnomics import DBnomicsSource
from .eurostat import EurostatSource
from .universal_csv import UniversalCSVSource
from .manual import ManualSource
from .manager import DataSourceManager, source_manager

__all__ = [
    'DataSource',
    'SeriesData',
    'SourceError',
    'FREDSource',
    'WorldBankSource',
    'DBnomicsSource',
    'EurostatSource',
    'UniversalCSVSource',
    'ManualSource',
    'DataSourceManager',
    'source_manager',
]
