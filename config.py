"""
Derived Series Service - Centralized Configuration

All environment variables, constants, and settings in one place.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


DEFAULT_CATALOG_PATH = str(Path(__file__).parent / 'catalog.json')


@dataclass
class Config:
    """Application configuration loaded from environment."""

    # API Keys
    fred_api_key: Optional[str] = None

    # Cache settings
    data_cache_ttl: int = 1800         # 30 minutes
    max_cache_size: int = 5000

    # HTTP settings
    http_timeout: float = 20.0
    user_agent: str = 'derived-series/1.0'

    # Formula settings
    formula_max_depth: int = 64
    formula_test_points: int = 100    # trailing points per indicator in test runs

    # Catalog of indicators and calculations
    catalog_path: str = DEFAULT_CATALOG_PATH

    # Logging
    log_level: str = 'INFO'

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        return cls(
            fred_api_key=os.environ.get('FRED_API_KEY'),

            # Allow override via env
            data_cache_ttl=int(os.environ.get('DATA_CACHE_TTL', 1800)),
            max_cache_size=int(os.environ.get('MAX_CACHE_SIZE', 5000)),
            http_timeout=float(os.environ.get('HTTP_TIMEOUT', 20.0)),
            formula_max_depth=int(os.environ.get('FORMULA_MAX_DEPTH', 64)),
            formula_test_points=int(os.environ.get('FORMULA_TEST_POINTS', 100)),
            catalog_path=os.environ.get('CATALOG_PATH', DEFAULT_CATALOG_PATH),
            log_level=os.environ.get('LOG_LEVEL', 'INFO').upper(),
        )


# Global config instance
config = Config.from_env()



# Eurostat geo codes tried in order when a dataset has a geography dimension
PREFERRED_EUROSTAT_GEO = ['EU27_2020', 'EA20', 'EA19', 'EU28', 'EU27', 'EA18', 'EA17', 'EU', 'EA']
