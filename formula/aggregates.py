"""
Aggregate functions - collapse a series to a single number.

Missing and non-numeric points are ignored. An empty series aggregates
to 0 rather than NaN.
"""

from typing import List

import numpy as np

from .values import Value, extract_values


def func_sum(params: List[Value]) -> float:
    values = extract_values(params[0], 'SUM')
    return float(np.sum(values)) if values else 0.0


def func_avg(params: List[Value]) -> float:
    values = extract_values(params[0], 'AVG')
    if not values:
        return 0.0
    return float(np.mean(values))


def func_min(params: List[Value]) -> float:
    values = extract_values(params[0], 'MIN')
    if not values:
        return 0.0
    return float(np.min(values))


def func_max(params: List[Value]) -> float:
    values = extract_values(params[0], 'MAX')
    if not values:
        return 0.0
    return float(np.max(values))


def func_count(params: List[Value]) -> float:
    """Number of valid data points, not total rows."""
    return float(len(extract_values(params[0], 'COUNT')))
