"""
Advanced statistics - correlation and trend line.
"""

from typing import List

import numpy as np

from .values import Series, Value, date_at, extract_values, require_series


def func_correlation(params: List[Value]) -> float:
    """
    Pearson correlation of two series.

    The series are matched by trailing position, not by date: both are cut
    to the last min(len1, len2) values, so leading values of the longer
    series never count.
    """
    values1 = extract_values(params[0], 'CORRELATION', 1)
    values2 = extract_values(params[1], 'CORRELATION', 2)

    n = min(len(values1), len(values2))
    if n < 2:
        return 0.0

    x = np.asarray(values1[-n:], dtype=float)
    y = np.asarray(values2[-n:], dtype=float)

    dx = x - x.sum() / n
    dy = y - y.sum() / n

    numerator = float(np.dot(dx, dy))
    denominator = float(np.sqrt(np.dot(dx, dx) * np.dot(dy, dy)))
    if denominator == 0:
        return 0.0

    return numerator / denominator


def func_regression(params: List[Value]) -> Series:
    """Least-squares line against x = 1..n, one fitted point per value."""
    series = require_series(params[0], 'REGRESSION', 1)
    values = extract_values(series, 'REGRESSION')

    n = len(values)
    if n < 2:
        return []

    x = np.arange(1, n + 1, dtype=float)
    y = np.asarray(values, dtype=float)

    sum_x = x.sum()
    sum_y = y.sum()
    sum_xy = np.dot(x, y)
    sum_x2 = np.dot(x, x)

    slope = (n * sum_xy - sum_x * sum_y) / (n * sum_x2 - sum_x * sum_x)
    intercept = (sum_y - slope * sum_x) / n

    fitted = slope * x + intercept
    return [(date_at(series, i), float(value)) for i, value in enumerate(fitted)]
