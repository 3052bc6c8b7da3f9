"""
Temporal Filtering - Restrict series to a date range.

Range bounds may be given loosely ("2019", "2019-06", "June 2019"); they
are normalized to YYYY-MM-DD before comparing, and both ends are inclusive.
"""

from datetime import datetime
from typing import List, Optional, Tuple

from dateutil import parser as date_parser


def normalize_date_bound(value: Optional[str]) -> Optional[str]:
    """
    Normalize a user supplied range bound to YYYY-MM-DD.

    Returns None for empty input. Raises ValueError when the text is not a date.
    """
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    if text.isdigit() and len(text) == 4:
        return f"{text}-01-01"
    parsed = date_parser.parse(text, default=datetime(2000, 1, 1))
    return parsed.strftime('%Y-%m-%d')


def filter_data_by_dates(
    dates: list,
    values: list,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None
) -> Tuple[List[str], list]:
    """
    Filter data to a specific date range.

    Args:
        dates: List of date strings (YYYY-MM-DD)
        values: List of corresponding values
        start_date: Start date (inclusive)
        end_date: End date (inclusive)

    Returns:
        Tuple of (filtered_dates, filtered_values)
    """
    if not start_date and not end_date:
        return list(dates), list(values)

    filtered_dates = []
    filtered_values = []

    for date, value in zip(dates, values):
        if start_date and date < start_date:
            continue
        if end_date and date > end_date:
            continue
        filtered_dates.append(date)
        filtered_values.append(value)

    return filtered_dates, filtered_values
