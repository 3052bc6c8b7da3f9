"""
Eurostat Data Source - European statistics in JSON-stat.

source_config: {"dataset_code": "prc_hicp_manr", "query": "geo=EA&coicop=CP00"}

The dissemination API returns a JSON-stat cube. One series is read out of
it by walking the time dimension while every other dimension stays fixed
at its first category, except geography, which prefers an EU/euro-area
aggregate unless the query already chose a country.
"""

from typing import Dict, List, Optional
from urllib.parse import quote

import httpx

from .base import DataSource, SeriesData, SourceError
from .periods import normalize_period, to_number
from config import PREFERRED_EUROSTAT_GEO


def _category_positions(dimension: dict) -> Dict[str, int]:
    """category.index as {code: position}; JSON-stat allows a list too."""
    index = (dimension.get('category') or {}).get('index')
    if isinstance(index, dict):
        return {str(code): int(pos) for code, pos in index.items()}
    if isinstance(index, list):
        return {str(code): pos for pos, code in enumerate(index)}
    labels = (dimension.get('category') or {}).get('label')
    if isinstance(labels, dict):
        return {str(code): pos for pos, code in enumerate(labels)}
    return {}


def _find_time_dimension(ids: List[str], dimensions: dict) -> int:
    for i, dim_id in enumerate(ids):
        if dim_id.lower() == 'time':
            return i
    for i, dim_id in enumerate(ids):
        label = str((dimensions.get(dim_id) or {}).get('label', '')).lower()
        if 'time' in label:
            return i
    return len(ids) - 1


def parse_jsonstat(payload: dict, query: str = '') -> List[tuple]:
    """Extract (date, value) pairs for one series from a JSON-stat dataset."""
    for key in ('value', 'dimension', 'id', 'size'):
        if key not in payload:
            raise SourceError("Eurostat: unexpected JSON-stat shape.")

    ids = [str(i) for i in payload['id']]
    sizes = [int(s) for s in payload['size']]
    dimensions = payload['dimension']
    values = payload['value']

    time_index = _find_time_dimension(ids, dimensions)
    time_positions = _category_positions(dimensions.get(ids[time_index]) or {})
    if not time_positions:
        raise SourceError("Eurostat: time dimension category missing.")

    # Row-major strides
    strides = [0] * len(sizes)
    stride = 1
    for i in range(len(sizes) - 1, -1, -1):
        strides[i] = stride
        stride *= sizes[i]

    query_lower = (query or '').lower()
    fixed = [0] * len(sizes)
    for i, dim_id in enumerate(ids):
        if i == time_index:
            continue
        if 'geo' in dim_id.lower() and 'geo=' not in query_lower:
            positions = _category_positions(dimensions.get(dim_id) or {})
            for code in PREFERRED_EUROSTAT_GEO:
                if code in positions:
                    fixed[i] = positions[code]
                    break

    pairs = []
    for label, t_pos in sorted(time_positions.items(), key=lambda item: item[1]):
        linear = sum(
            (t_pos if i == time_index else fixed[i]) * strides[i]
            for i in range(len(sizes))
        )
        # Dense list or sparse {"<linear index>": value}
        if isinstance(values, list):
            raw = values[linear] if linear < len(values) else None
        else:
            raw = values.get(str(linear))

        obs_date = normalize_period(label)
        if obs_date is None:
            continue
        pairs.append((obs_date, to_number(raw)))

    return pairs


class EurostatSource(DataSource):
    """Data source for Eurostat's dissemination API."""

    BASE_URL = "https://ec.europa.eu/eurostat/api/dissemination/statistics/1.0/data"
    source_type = 'eurostat'

    def __init__(self, client: Optional[httpx.Client] = None):
        super().__init__(client)

    @property
    def name(self) -> str:
        return "Eurostat"

    def fetch_sync(self, source_config: dict) -> SeriesData:
        dataset = str(source_config.get('dataset_code', '')).strip()
        query = str(source_config.get('query', '') or '').strip().lstrip('?')
        series_id = f"{dataset}?{query}" if query else dataset
        if not dataset:
            return SeriesData.failed(series_id, "Eurostat: dataset_code is required.")

        url = f"{self.BASE_URL}/{quote(dataset)}"
        if query:
            url = f"{url}?{query}"

        try:
            payload = self.get_json(url)
            if not isinstance(payload, dict):
                return SeriesData.failed(series_id, "Eurostat invalid JSON response.")

            pairs = parse_jsonstat(payload, query)
            if not pairs:
                return SeriesData.failed(series_id, "Eurostat: no observations parsed.")

            info = {
                'name': payload.get('label', dataset),
                'dataset': dataset,
                'updated': payload.get('updated', ''),
                'source': 'Eurostat',
            }
            return SeriesData.from_pairs(series_id, pairs, info)

        except SourceError as e:
            return SeriesData.failed(series_id, str(e))
        except Exception as e:
            return SeriesData.failed(series_id, f"Error fetching {series_id}: {str(e)}")
