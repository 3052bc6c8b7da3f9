"""
DBnomics Data Source - International economic data.

source_config: {"series_id": "IMF/CPI/A.FR.PCPIEC_WT"}   (PROVIDER/DATASET/SERIES)

DBnomics v22 returns each series with parallel `period` and `value` lists;
missing observations are the string "NA".
"""

from typing import Optional

import httpx

from .base import DataSource, SeriesData, SourceError
from .periods import normalize_period, to_number


class DBnomicsSource(DataSource):
    """Data source for DBnomics."""

    BASE_URL = "https://api.db.nomics.world/v22"
    source_type = 'dbnomics'

    def __init__(self, client: Optional[httpx.Client] = None):
        super().__init__(client)

    @property
    def name(self) -> str:
        return "DBnomics"

    def fetch_sync(self, source_config: dict) -> SeriesData:
        series_id = str(source_config.get('series_id', '')).strip().strip('/')
        if series_id.count('/') != 2:
            return SeriesData.failed(series_id, "DBnomics: series_id must look like PROVIDER/DATASET/SERIES")

        params = {'series_ids': series_id, 'observations': 1, 'format': 'json'}

        try:
            data = self.get_json(f"{self.BASE_URL}/series", params=params)
            if not isinstance(data, dict):
                return SeriesData.failed(series_id, "DBnomics invalid JSON response.")
            if data.get('errors'):
                return SeriesData.failed(series_id, f"DBnomics API error: {data['errors']}")

            node = data.get('series')
            # Either {"series": {"docs": [...]}} or {"series": [...]}
            if isinstance(node, dict):
                docs = node.get('docs', [])
            elif isinstance(node, list):
                docs = node
            else:
                docs = []
            if not docs:
                return SeriesData.failed(series_id, "DBnomics: series not found.")

            doc = docs[0]
            periods = doc.get('period', []) or []
            values = doc.get('value', []) or []

            pairs = []
            for period, value in zip(periods, values):
                obs_date = normalize_period(period)
                if obs_date is None:
                    continue
                pairs.append((obs_date, to_number(value)))

            if not pairs:
                return SeriesData.failed(series_id, "DBnomics: no observations parsed.")

            info = {
                'name': doc.get('series_name') or doc.get('series_code', series_id),
                'provider': doc.get('provider_code', ''),
                'dataset': doc.get('dataset_name') or doc.get('dataset_code', ''),
                'frequency': doc.get('@frequency', ''),
                'source': 'DBnomics',
            }
            return SeriesData.from_pairs(series_id, pairs, info)

        except SourceError as e:
            return SeriesData.failed(series_id, str(e))
        except Exception as e:
            return SeriesData.failed(series_id, f"Error fetching {series_id}: {str(e)}")
