"""
Technical indicators - series in, series out.

Every indicator takes (series, periods). Values come from the numeric points
of the series; each output point takes the date found at the same position
in the series as passed in.
"""

from typing import List

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from .values import Series, Value, date_at, extract_values, require_periods, require_series


def func_roc(params: List[Value]) -> Series:
    """Rate of change in percent. Points whose look-back value is 0 are left out."""
    series = require_series(params[0], 'ROC', 1)
    periods = require_periods(params[1], 'ROC')

    values = extract_values(series, 'ROC')
    if len(values) <= periods:
        return []

    arr = np.asarray(values, dtype=float)
    current = arr[periods:]
    previous = arr[:-periods]

    result = []
    for offset, (cur, prev) in enumerate(zip(current, previous)):
        if prev == 0:
            continue
        roc = (cur - prev) / prev * 100
        result.append((date_at(series, offset + periods), float(roc)))
    return result


def func_ma(params: List[Value]) -> Series:
    """Simple moving average over a trailing window."""
    series = require_series(params[0], 'MA', 1)
    periods = require_periods(params[1], 'MA')

    values = extract_values(series, 'MA')
    if len(values) < periods:
        return []

    windows = sliding_window_view(np.asarray(values, dtype=float), periods)
    means = windows.sum(axis=1) / periods

    return [
        (date_at(series, i + periods - 1), float(mean))
        for i, mean in enumerate(means)
    ]


def func_rsi(params: List[Value]) -> Series:
    """
    Relative Strength Index.

    Average gain and average loss are plain means over each window of
    `periods` changes, recomputed from scratch for every window. This is
    not Wilder's smoothed RSI, so values differ from most charting packages.
    """
    series = require_series(params[0], 'RSI', 1)
    periods = require_periods(params[1], 'RSI')

    values = extract_values(series, 'RSI')
    if len(values) <= periods:
        return []

    changes = np.diff(np.asarray(values, dtype=float))
    gains = np.where(changes > 0, changes, 0.0)
    losses = np.where(changes < 0, -changes, 0.0)

    avg_gains = sliding_window_view(gains, periods).sum(axis=1) / periods
    avg_losses = sliding_window_view(losses, periods).sum(axis=1) / periods

    result = []
    for k, (avg_gain, avg_loss) in enumerate(zip(avg_gains, avg_losses)):
        if avg_loss == 0:
            rsi = 100.0
        else:
            rs = avg_gain / avg_loss
            rsi = 100 - (100 / (1 + rs))
        # changes[i] sits between values[i] and values[i + 1]
        i = k + periods - 1
        result.append((date_at(series, i + 1), float(rsi)))
    return result


def func_momentum(params: List[Value]) -> Series:
    """Difference between each value and the value `periods` points earlier."""
    series = require_series(params[0], 'MOMENTUM', 1)
    periods = require_periods(params[1], 'MOMENTUM')

    values = extract_values(series, 'MOMENTUM')
    if len(values) <= periods:
        return []

    arr = np.asarray(values, dtype=float)
    momentum = arr[periods:] - arr[:-periods]

    return [
        (date_at(series, i + periods), float(value))
        for i, value in enumerate(momentum)
    ]
