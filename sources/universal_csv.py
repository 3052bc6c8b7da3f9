"""
Universal CSV Data Source - Any CSV URL on the internet.

source_config:
    {
        "csv_url": "https://example.com/data.csv",   # required
        "date_col": "date" | 0,                      # optional, header name or index
        "value_col": "value" | 1,                    # optional, header name or index
        "delimiter": ",",                            # optional, sniffed when absent
        "skip_rows": 0                               # optional, rows before the header
    }
"""

import io
from typing import Any, Optional

import httpx
import pandas as pd

from .base import DataSource, SeriesData, SourceError
from .periods import normalize_period, to_number

DATE_HINTS = ('date', 'time', 'period', 'year', 'month', 'day')
VALUE_HINTS = ('value', 'close', 'price', 'obs', 'amount')


def _resolve_column(frame: pd.DataFrame, spec: Any) -> Optional[str]:
    """Column by header name (case-insensitive) or zero-based index."""
    if spec is None or spec == '':
        return None
    if isinstance(spec, int) or (isinstance(spec, str) and spec.strip().isdigit()):
        index = int(spec)
        if 0 <= index < len(frame.columns):
            return frame.columns[index]
        raise SourceError(f"Universal CSV: column index {index} out of range")
    for column in frame.columns:
        if str(column).strip().lower() == str(spec).strip().lower():
            return column
    raise SourceError(f"Universal CSV: column '{spec}' not found")


def _guess_date_column(frame: pd.DataFrame) -> str:
    for column in frame.columns:
        if any(hint in str(column).lower() for hint in DATE_HINTS):
            return column
    return frame.columns[0]


def _guess_value_column(frame: pd.DataFrame, date_col: str) -> str:
    candidates = [c for c in frame.columns if c != date_col]
    if not candidates:
        raise SourceError("Universal CSV: need at least two columns")
    for column in candidates:
        if any(hint in str(column).lower() for hint in VALUE_HINTS):
            return column
    for column in candidates:
        if pd.api.types.is_numeric_dtype(frame[column]):
            return column
    return candidates[0]


def parse_csv(text: str, source_config: dict) -> list:
    """Read (date, value) pairs out of CSV text."""
    delimiter = source_config.get('delimiter') or None
    skip_rows = max(0, int(source_config.get('skip_rows', 0) or 0))

    try:
        frame = pd.read_csv(
            io.StringIO(text),
            sep=delimiter,
            engine='python',
            skiprows=skip_rows,
            skip_blank_lines=True,
            dtype=str,
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError, ValueError) as e:
        raise SourceError(f"Universal CSV: invalid content ({e})")

    if frame.empty or len(frame.columns) < 2:
        raise SourceError("Universal CSV: no data rows")

    # Read as str to keep dates intact; numeric detection needs real dtypes
    typed = frame.copy()
    for column in typed.columns:
        converted = pd.to_numeric(typed[column], errors='coerce')
        if converted.notna().sum() == typed[column].notna().sum():
            typed[column] = converted

    date_col = _resolve_column(frame, source_config.get('date_col')) or _guess_date_column(frame)
    value_col = _resolve_column(frame, source_config.get('value_col')) or _guess_value_column(typed, date_col)

    pairs = []
    for raw_date, raw_value in zip(frame[date_col], frame[value_col]):
        obs_date = normalize_period(raw_date if isinstance(raw_date, str) else None)
        if obs_date is None:
            continue
        pairs.append((obs_date, to_number(raw_value)))
    return pairs


class UniversalCSVSource(DataSource):
    """Data source for arbitrary CSV files."""

    source_type = 'universal_csv'

    def __init__(self, client: Optional[httpx.Client] = None):
        super().__init__(client)

    @property
    def name(self) -> str:
        return "Universal CSV"

    def fetch_sync(self, source_config: dict) -> SeriesData:
        url = str(source_config.get('csv_url', '')).strip()
        if not url:
            return SeriesData.failed('', "Universal CSV: csv_url is required.")

        try:
            response = self.get(url, accept='text/csv,application/octet-stream')
            if not response.text.strip():
                return SeriesData.failed(url, "Universal CSV: empty body.")

            pairs = parse_csv(response.text, source_config)
            if not pairs:
                return SeriesData.failed(url, "Universal CSV: no observations parsed.")

            return SeriesData.from_pairs(url, pairs, {'name': url, 'source': 'CSV'})

        except SourceError as e:
            return SeriesData.failed(url, str(e))
        except Exception as e:
            return SeriesData.failed(url, f"Error fetching {url}: {str(e)}")
