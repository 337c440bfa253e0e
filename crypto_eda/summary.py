from __future__ import annotations

"""
Descriptive checks on the cleaned daily price table.

Nothing here repairs the data: missing values and calendar gaps are
reported so that the reader can judge whether the later stationarity
checks are trustworthy.
"""

from typing import Any, Dict

import numpy as np
import pandas as pd

from .config import EXPECTED_FREQ

__all__ = [
    "summary_statistics",
    "missing_value_report",
    "check_daily_continuity",
]


def summary_statistics(prices: pd.DataFrame) -> pd.DataFrame:
    """
    ``describe()`` of the numeric columns with skewness and excess kurtosis
    appended as extra rows.
    """
    numeric = prices.select_dtypes(include=[np.number]).dropna(axis=1, how="all")
    if numeric.empty:
        raise ValueError("No numeric columns to summarise.")

    stats = numeric.describe()
    stats.loc["skew"] = numeric.skew()
    stats.loc["kurtosis"] = numeric.kurt()
    return stats


def missing_value_report(prices: pd.DataFrame) -> pd.DataFrame:
    """
    Count and percentage of missing values per column, most incomplete first.
    """
    n_rows = len(prices)
    n_missing = prices.isna().sum()
    pct = n_missing / n_rows * 100.0 if n_rows else n_missing.astype(float) * np.nan
    report = pd.DataFrame({"n_missing": n_missing.astype(int), "pct_missing": pct})
    report.index.name = "column"
    return report.sort_values("n_missing", ascending=False, kind="stable")


def check_daily_continuity(
    prices: pd.DataFrame,
    freq: str = EXPECTED_FREQ,
) -> Dict[str, Any]:
    """
    Check the one-row-per-day invariant of the price table.

    Returns a dict with the observed row count, the date span, how many rows
    a gap-free calendar would have, the missing dates and the number of
    duplicated dates.
    """
    if not isinstance(prices.index, pd.DatetimeIndex):
        raise TypeError("prices must have a DatetimeIndex to check continuity.")

    idx = prices.index
    n_duplicates = int(idx.duplicated().sum())

    if len(idx) == 0:
        return {
            "n_rows": 0,
            "start": None,
            "end": None,
            "n_expected": 0,
            "n_missing_days": 0,
            "missing_days": [],
            "n_duplicate_dates": 0,
        }

    expected = pd.date_range(idx.min(), idx.max(), freq=freq)
    missing_days = expected.difference(idx.unique())

    return {
        "n_rows": int(len(idx)),
        "start": idx.min(),
        "end": idx.max(),
        "n_expected": int(len(expected)),
        "n_missing_days": int(len(missing_days)),
        "missing_days": list(missing_days),
        "n_duplicate_dates": n_duplicates,
    }
