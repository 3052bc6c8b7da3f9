"""
FRED Data Source - Federal Reserve Economic Data

source_config: {"series_id": "GDP"}
"""

import logging
from typing import Optional

import httpx

from .base import DataSource, SeriesData, SourceError
from .periods import normalize_period, to_number
from config import config

logger = logging.getLogger(__name__)


class FREDSource(DataSource):
    """Data source for FRED (Federal Reserve Economic Data)."""

    BASE_URL = "https://api.stlouisfed.org/fred"
    source_type = 'fred'

    def __init__(self, api_key: Optional[str] = None, client: Optional[httpx.Client] = None):
        super().__init__(client)
        self._api_key = api_key or config.fred_api_key

    @property
    def name(self) -> str:
        return "FRED"

    @property
    def available(self) -> bool:
        return bool(self._api_key)

    def fetch_sync(self, source_config: dict) -> SeriesData:
        series_id = str(source_config.get('series_id', '')).strip().upper()
        if not series_id:
            return SeriesData.failed('', "FRED: series_id is required")
        if not self._api_key:
            return SeriesData.failed(series_id, "FRED API key not configured")

        obs_params = {
            'series_id': series_id,
            'api_key': self._api_key,
            'file_type': 'json',
            'sort_order': 'asc',
        }

        try:
            # FRED returns 400 for unknown series
            try:
                obs_data = self.get_json(f"{self.BASE_URL}/series/observations", params=obs_params)
            except SourceError as e:
                if e.status_code == 400:
                    return SeriesData.failed(
                        series_id, f"Bad request for series '{series_id}'. The series ID may not exist."
                    )
                raise

            if 'error_message' in obs_data:
                return SeriesData.failed(series_id, f"FRED API error: {obs_data['error_message']}")

            observations = obs_data.get('observations')
            if not isinstance(observations, list):
                return SeriesData.failed(series_id, "No observations in FRED response.")

            pairs = []
            for obs in observations:
                if not isinstance(obs, dict):
                    continue
                obs_date = normalize_period(obs.get('date'))
                if obs_date is None:
                    continue
                # FRED marks missing observations with "."
                pairs.append((obs_date, to_number(obs.get('value'))))

            info = self._fetch_info(series_id)
            return SeriesData.from_pairs(series_id, pairs, info)

        except SourceError as e:
            return SeriesData.failed(series_id, str(e))
        except Exception as e:
            return SeriesData.failed(series_id, f"Error fetching {series_id}: {str(e)}")

    def _fetch_info(self, series_id: str) -> dict:
        """Series metadata; failures only cost the labels."""
        info = {'name': series_id, 'unit': '', 'frequency': '', 'source': 'FRED'}
        params = {'series_id': series_id, 'api_key': self._api_key, 'file_type': 'json'}
        try:
            info_data = self.get_json(f"{self.BASE_URL}/series", params=params, retries=0)
        except SourceError as e:
            logger.info(f"FRED info endpoint unavailable for {series_id}: {e}")
            return info

        if 'error_message' in info_data:
            logger.info(f"FRED info endpoint error for {series_id}: {info_data['error_message']}")
            return info

        series_info = info_data.get('seriess', [{}])[0] if info_data.get('seriess') else {}
        info.update({
            'name': series_info.get('title', series_id),
            'unit': series_info.get('units', ''),
            'frequency': series_info.get('frequency', ''),
            'seasonal_adjustment': series_info.get('seasonal_adjustment_short', ''),
            'last_updated': series_info.get('last_updated', ''),
        })
        return info
