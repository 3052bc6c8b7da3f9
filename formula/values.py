"""
Value types flowing through the formula engine.

An evaluated expression is either a Scalar (float) or a Series: an ordered
list of (date, value) pairs, dates as YYYY-MM-DD strings, value None when
the observation is missing.
"""

import re
from numbers import Real
from typing import Any, List, Optional, Sequence, Tuple, Union

from .errors import InvalidPeriods, WrongArgumentKind

Point = Tuple[str, Optional[float]]
Series = List[Point]
Value = Union[float, Series]

# Same shapes PHP's is_numeric accepts for decimal strings
NUMERIC_RE = re.compile(r'^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$')


def is_numeric_string(text: str) -> bool:
    return bool(NUMERIC_RE.match(text))


def is_number(value: Any) -> bool:
    """True for real numbers and numeric strings, never for bools."""
    if isinstance(value, bool):
        return False
    if isinstance(value, Real):
        return True
    if isinstance(value, str):
        return is_numeric_string(value)
    return False


def is_scalar(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def is_series(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def require_series(value: Any, function: str, position: int) -> Sequence:
    if not is_series(value):
        raise WrongArgumentKind(function, position, 'series')
    return value


def require_periods(value: Any, function: str, position: int = 2) -> int:
    """Coerce a periods argument the way intval() does; it must end up positive."""
    if not is_scalar(value):
        raise WrongArgumentKind(function, position, 'number')
    periods = int(value)
    if periods <= 0:
        raise InvalidPeriods(function)
    return periods


def extract_values(series: Any, function: str = 'series', position: int = 1) -> List[float]:
    """
    Pull the numeric values out of a series.

    Points that are not (date, value) shaped or whose value is missing or
    non-numeric are dropped, so the result is NOT index-aligned with the
    series once anything has been filtered.
    """
    require_series(series, function, position)

    values = []
    for point in series:
        if isinstance(point, (list, tuple)) and len(point) >= 2 and is_number(point[1]):
            values.append(float(point[1]))
    return values


def date_at(series: Sequence, index: int) -> Optional[str]:
    """Date of the point at a position in the original series."""
    point = series[index]
    if isinstance(point, (list, tuple)) and point:
        return point[0]
    return None
