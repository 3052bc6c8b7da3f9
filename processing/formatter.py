"""
Result Formatter - Prepare formula results for JSON consumers.

Charts and the formula test endpoint both receive the same payload:
a scalar or a list of [date, value] points.
"""

import math
from typing import Any, Dict, List, Optional

from formula.values import is_scalar


def _clean(value: Any) -> Optional[float]:
    """JSON has no NaN or infinity; those become null."""
    if value is None:
        return None
    number = float(value)
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def format_series(series: list) -> List[list]:
    return [[point[0], _clean(point[1])] for point in series]


def format_result(value: Any) -> Dict[str, Any]:
    """
    Shape an evaluation result for the API.

    Returns:
        {'type': 'scalar', 'value': x} or
        {'type': 'series', 'points': n, 'series': [[date, value], ...]}
    """
    if is_scalar(value):
        return {'type': 'scalar', 'value': _clean(value)}

    series = format_series(value)
    return {
        'type': 'series',
        'points': len(series),
        'series': series,
    }
