"""
World Bank Data Source - Development indicators (annual).

source_config: {"country_code": "US", "indicator_code": "NY.GDP.MKTP.CD"}

The API answers with a [metadata, rows] pair, newest year first.
"""

from datetime import datetime
from typing import Optional
from urllib.parse import quote

import httpx

from .base import DataSource, SeriesData, SourceError
from .periods import normalize_period, to_number


class WorldBankSource(DataSource):
    """Data source for the World Bank indicators API."""

    BASE_URL = "https://api.worldbank.org/v2"
    source_type = 'world_bank'
    FIRST_YEAR = 1960

    def __init__(self, client: Optional[httpx.Client] = None):
        super().__init__(client)

    @property
    def name(self) -> str:
        return "World Bank"

    def fetch_sync(self, source_config: dict) -> SeriesData:
        country = str(source_config.get('country_code', '')).strip()
        indicator = str(source_config.get('indicator_code', '')).strip()
        series_id = f"{country}/{indicator}"
        if not country or not indicator:
            return SeriesData.failed(series_id, "World Bank: country_code and indicator_code are required")

        url = f"{self.BASE_URL}/country/{quote(country)}/indicator/{quote(indicator)}"
        params = {
            'format': 'json',
            'per_page': 1000,
            'date': f"{self.FIRST_YEAR}:{datetime.now().year}",
        }

        try:
            data = self.get_json(url, params=params)
            if not isinstance(data, list) or len(data) < 2:
                # Errors come back as [{"message": [...]}]
                if isinstance(data, list) and data and isinstance(data[0], dict) and 'message' in data[0]:
                    messages = data[0]['message']
                    text = messages[0].get('value') if messages and isinstance(messages[0], dict) else messages
                    return SeriesData.failed(series_id, f"World Bank API error: {text}")
                return SeriesData.failed(series_id, "Invalid World Bank API response format.")

            rows = data[1]
            if not isinstance(rows, list):
                return SeriesData.failed(series_id, "No observations in World Bank response.")

            pairs = []
            name = indicator
            for row in rows:
                if not isinstance(row, dict) or 'date' not in row:
                    continue
                obs_date = normalize_period(row.get('date'))
                if obs_date is None:
                    continue
                pairs.append((obs_date, to_number(row.get('value'))))
                name = (row.get('indicator') or {}).get('value', name)

            info = {
                'name': name,
                'country': country,
                'frequency': 'Annual',
                'source': 'World Bank',
            }
            return SeriesData.from_pairs(series_id, pairs, info)

        except SourceError as e:
            return SeriesData.failed(series_id, str(e))
        except Exception as e:
            return SeriesData.failed(series_id, f"Error fetching {series_id}: {str(e)}")
