"""
Period & value normalization shared by the source adapters.

Providers label observations as years, quarters, months, semesters, weeks
or full dates. Everything is mapped to the first day of the period in
YYYY-MM-DD form so series from different providers line up.
"""

import math
import re
from datetime import date, datetime
from typing import Any, Optional

from dateutil import parser as date_parser

_YEAR_RE = re.compile(r'^(\d{4})$')
_QUARTER_RE = re.compile(r'^(\d{4})[-\s]?Q([1-4])$', re.IGNORECASE)
_MONTH_RE = re.compile(r'^(\d{4})[-M/]?(\d{1,2})$', re.IGNORECASE)
_SEMESTER_RE = re.compile(r'^(\d{4})[-\s]?[SH]([12])$', re.IGNORECASE)
_WEEK_RE = re.compile(r'^(\d{4})[-\s]?W(\d{1,2})$', re.IGNORECASE)
_DATE_RE = re.compile(r'^(\d{4})-(\d{2})-(\d{2})')

_MISSING = {'', '.', 'na', 'n/a', 'nan', 'null', 'none', '-', '..', ':'}


def normalize_period(label: Any) -> Optional[str]:
    """Map a period label to YYYY-MM-DD, or None if it cannot be read."""
    if label is None:
        return None
    if isinstance(label, datetime):
        return label.strftime('%Y-%m-%d')
    if isinstance(label, date):
        return label.isoformat()

    text = str(label).strip()
    if not text:
        return None

    if match := _YEAR_RE.match(text):
        return f"{match.group(1)}-01-01"

    if match := _QUARTER_RE.match(text):
        month = (int(match.group(2)) - 1) * 3 + 1
        return f"{match.group(1)}-{month:02d}-01"

    if match := _SEMESTER_RE.match(text):
        month = 1 if match.group(2) == '1' else 7
        return f"{match.group(1)}-{month:02d}-01"

    if match := _WEEK_RE.match(text):
        week = int(match.group(2))
        if 1 <= week <= 53:
            try:
                return date.fromisocalendar(int(match.group(1)), week, 1).isoformat()
            except ValueError:
                return None

    if match := _MONTH_RE.match(text):
        month = int(match.group(2))
        if 1 <= month <= 12:
            return f"{match.group(1)}-{month:02d}-01"

    if match := _DATE_RE.match(text):
        try:
            return date(int(match.group(1)), int(match.group(2)), int(match.group(3))).isoformat()
        except ValueError:
            return None

    try:
        parsed = date_parser.parse(text, default=datetime(2000, 1, 1))
    except (ValueError, OverflowError):
        return None
    return parsed.strftime('%Y-%m-%d')


def to_number(value: Any) -> Optional[float]:
    """Read a provider value; missing markers and junk become None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
        return None if math.isnan(number) or math.isinf(number) else number

    text = str(value).strip()
    if text.lower() in _MISSING:
        return None

    text = text.replace('%', '')
    if ',' in text and '.' in text:
        text = text.replace(',', '')
    elif ',' in text:
        text = text.replace(',', '.')

    try:
        number = float(text)
    except ValueError:
        return None
    return None if math.isnan(number) or math.isinf(number) else number
