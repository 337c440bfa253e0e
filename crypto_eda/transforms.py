from __future__ import annotations

"""
Series transforms used to look for a stationary representation of prices.

- First difference: x_t - x_{t-k}.
- Log transform and log difference (log returns).
- Simple percentage change.
- Trailing moving averages and rolling mean/std.
"""

import numpy as np
import pandas as pd

__all__ = [
    "first_difference",
    "log_transform",
    "log_difference",
    "percentage_change",
    "lag",
    "moving_average",
    "rolling_statistics",
    "reconstruct_from_difference",
    "build_transform_panel",
]


def _base_name(series: pd.Series, default: str = "x") -> str:
    return str(series.name) if series.name is not None else default


def first_difference(series: pd.Series, periods: int = 1) -> pd.Series:
    """
    x_t - x_{t-periods}. The first ``periods`` values are NaN.
    """
    if periods < 1:
        raise ValueError(f"periods must be >= 1, got {periods}.")
    diff = series.diff(periods)
    diff.name = f"{_base_name(series)}_diff{periods if periods > 1 else ''}"
    return diff


def log_transform(series: pd.Series) -> pd.Series:
    """
    Natural log of a strictly positive series.
    """
    if (series.dropna() <= 0).any():
        raise ValueError("log_transform requires strictly positive values.")
    out = np.log(series)
    out.name = f"{_base_name(series)}_log"
    return out


def log_difference(series: pd.Series) -> pd.Series:
    """
    log(x_t) - log(x_{t-1}), i.e. daily log returns.
    """
    out = log_transform(series).diff()
    out.name = f"{_base_name(series)}_log_return"
    return out


def percentage_change(series: pd.Series) -> pd.Series:
    """
    (x_t / x_{t-1}) - 1.
    """
    out = series.pct_change(fill_method=None)
    out.name = f"{_base_name(series)}_pct_change"
    return out


def lag(series: pd.Series, periods: int = 1) -> pd.Series:
    out = series.shift(periods)
    out.name = f"{_base_name(series)}_lag{periods}"
    return out


def moving_average(
    series: pd.Series,
    window: int,
    min_periods: int | None = None,
) -> pd.Series:
    """
    Simple trailing moving average over ``window`` observations.

    By default the first ``window - 1`` values are NaN.
    """
    if window < 1:
        raise ValueError(f"window must be >= 1, got {window}.")
    ma = series.rolling(window=window, min_periods=min_periods or window).mean()
    ma.name = f"{_base_name(series)}_ma{window}"
    return ma


def rolling_statistics(series: pd.Series, window: int) -> pd.DataFrame:
    """
    Rolling mean and standard deviation, the usual visual stationarity check.
    """
    if window < 2:
        raise ValueError(f"window must be >= 2 for a rolling std, got {window}.")
    roll = series.rolling(window=window, min_periods=window)
    return pd.DataFrame(
        {"rolling_mean": roll.mean(), "rolling_std": roll.std()},
        index=series.index,
    )


def reconstruct_from_difference(diff: pd.Series, initial_value: float) -> pd.Series:
    """
    Invert a first difference: x_0 = initial_value, x_t = x_0 + sum(diff_1..diff_t).

    The first element of ``diff`` is ignored (it is NaN for a first
    difference), so ``reconstruct_from_difference(first_difference(x), x[0])``
    returns ``x``.
    """
    steps = diff.copy()
    if len(steps):
        steps.iloc[0] = 0.0
    out = steps.fillna(0.0).cumsum() + float(initial_value)
    out.name = "reconstructed"
    return out


def build_transform_panel(close: pd.Series) -> pd.DataFrame:
    """
    Put the candidate representations of the close price side by side:
    ``level``, ``log_level``, ``diff`` and ``log_diff``.
    """
    panel = pd.DataFrame(
        {
            "level": close,
            "log_level": log_transform(close),
            "diff": first_difference(close),
            "log_diff": log_difference(close),
        },
        index=close.index,
    )
    panel.index.name = close.index.name
    return panel
