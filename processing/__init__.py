"""Processing module - Date filtering and result formatting."""

from .temporal import filter_data_by_dates, normalize_date_bound
from .formatter import format_result, format_series

__all__ = [
    'filter_data_by_dates',
    'normalize_date_bound',
    'format_result',
    'format_series',
]
