"""
Abstract interface for all data sources.

Every adapter turns one indicator's source configuration into the same
normalized shape: ascending dates with float-or-None values. Failures are
reported in SeriesData.error instead of being raised.
"""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx

from config import config

# Module-level connection pool shared by all adapters
_sync_client: Optional[httpx.Client] = None

def get_sync_client() -> httpx.Client:
    """Get or create the shared HTTP client with connection pooling."""
    global _sync_client
    if _sync_client is None or _sync_client.is_closed:
        _sync_client = httpx.Client(
            timeout=config.http_timeout,
            follow_redirects=True,
            headers={'User-Agent': config.user_agent},
            limits=httpx.Limits(
                max_keepalive_connections=10,
                max_connections=20,
                keepalive_expiry=30.0
            )
        )
    return _sync_client

class SourceError(Exception):
    """Raised inside adapters; turned into SeriesData.error at the boundary."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code

@dataclass
class SeriesData:
    """Result from fetching a data series."""

    id: str
    dates: List[str]
    values: List[Optional[float]]
    info: dict = field(default_factory=dict)
    error: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        """Check if data was fetched successfully."""
        return self.error is None and len(self.dates) > 0 and len(self.values) > 0

    @property
    def latest(self) -> Optional[float]:
        """Most recent non-missing value."""
        for value in reversed(self.values):
            if value is not None:
                return value
        return None

    @property
    def latest_date(self) -> Optional[str]:
        return self.dates[-1] if self.dates else None

    def to_series(self) -> List[tuple]:
        """The (date, value) pairs consumed by the formula engine."""
        return list(zip(self.dates, self.values))

    @classmethod
    def failed(cls, series_id: str, error: str) -> "SeriesData":
        return cls(id=series_id, dates=[], values=[], error=error)

    @classmethod
    def from_pairs(cls, series_id: str, pairs: List[tuple], info: Optional[dict] = None) -> "SeriesData":
        """Build from (date, value) pairs, sorted ascending with later duplicates winning."""
        by_date: Dict[str, Optional[float]] = {}
        for d, v in pairs:
            by_date[d] = v
        ordered = sorted(by_date.items())
        return cls(
            id=series_id,
            dates=[d for d, _ in ordered],
            values=[v for _, v in ordered],
            info=info or {},
        )

class DataSource(ABC):
    """Abstract base class for data sources."""

    #: Value of IndicatorInfo.source_type this adapter serves
    source_type: str = ''
    retries: int = 2

    def __init__(self, client: Optional[httpx.Client] = None):
        self._client = client

    @property
    def client(self) -> httpx.Client:
        return self._client or get_sync_client()

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name of this data source."""
        pass

    @property
    def available(self) -> bool:
        return True

    def supports(self, source_type: str) -> bool:
        return source_type == self.source_type

    @abstractmethod
    def fetch_sync(self, source_config: dict) -> SeriesData:
        """
        Fetch the full series described by a source configuration.

        Args:
            source_config: Adapter-specific settings from the catalog

        Returns:
            SeriesData with ascending dates, values and metadata
        """
        pass

    def get(self, url: str, params: Optional[Dict[str, Any]] = None, retries: Optional[int] = None,
            accept: str = 'application/json') -> httpx.Response:
        """
        GET with a couple of retries on transport errors and 5xx/429.

        Raises SourceError when the provider keeps failing or answers non-2xx.
        """
        if retries is None:
            retries = self.retries
        last_error = None
        for attempt in range(retries + 1):
            try:
                response = self.client.get(url, params=params, headers={'Accept': accept})
            except httpx.TimeoutException:
                last_error = f"Timeout fetching from {self.name}"
            except httpx.HTTPError as e:
                last_error = f"{self.name} fetch failed: {e}"
            else:
                if response.status_code == 429 or response.status_code >= 500:
                    last_error = f"{self.name} HTTP error: {response.status_code}"
                elif not 200 <= response.status_code < 300:
                    raise SourceError(f"{self.name} HTTP error: {response.status_code}", response.status_code)
                else:
                    return response

            if attempt < retries:
                time.sleep(0.25 * (attempt + 1))

        raise SourceError(last_error or f"{self.name} fetch failed")

    def get_json(self, url: str, params: Optional[Dict[str, Any]] = None, retries: Optional[int] = None) -> Any:
        response = self.get(url, params=params, retries=retries)
        try:
            return response.json()
        except ValueError:
            raise SourceError(f"{self.name}: invalid JSON response")
