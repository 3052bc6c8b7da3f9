"""
Manual Data Source - Points kept directly in the catalog.

source_config: {"points": [["2024-01-01", 1.5], ["2024-02-01", null], ...]}
"""

from .base import DataSource, SeriesData
from .periods import normalize_period, to_number


class ManualSource(DataSource):
    """Series typed in by hand; no network access."""

    source_type = 'manual'

    @property
    def name(self) -> str:
        return "Manual"

    def fetch_sync(self, source_config: dict) -> SeriesData:
        points = source_config.get('points')
        if not isinstance(points, list):
            return SeriesData.failed('manual', "Manual: points must be a list of [date, value] pairs")

        pairs = []
        for point in points:
            if not isinstance(point, (list, tuple)) or len(point) < 2:
                continue
            obs_date = normalize_period(point[0])
            if obs_date is None:
                continue
            pairs.append((obs_date, to_number(point[1])))

        return SeriesData.from_pairs('manual', pairs, {'source': 'Manual'})
