from __future__ import annotations

"""
Informal modeling recommendations.

Turns the numbers produced by ``stationarity`` into short plain-English
notes. These are heuristics for choosing a starting model, not model
selection.
"""

from typing import List, Optional

import pandas as pd

from .stationarity import significant_lags

__all__ = ["suggest_differencing_order", "recommend_models"]


def _is_stationary(report: pd.DataFrame, transform: str) -> Optional[bool]:
    if transform not in report.index:
        return None
    verdict = report.loc[transform, "verdict"]
    if verdict == "stationary":
        return True
    if verdict == "non-stationary":
        return False
    if verdict == "untested":
        return None
    # Inconclusive: fall back to the ADF decision alone
    return bool(report.loc[transform, "adf_stationary"])


def suggest_differencing_order(report: pd.DataFrame, prefer_log: bool = True) -> Optional[int]:
    """
    Smallest differencing order ``d`` that looks stationary.

    Returns 0 when the (log) level already passes, 1 when the (log) first
    difference passes, and ``None`` when neither does or the series were
    too short to test.
    """
    level_key, diff_key = ("log_level", "log_diff") if prefer_log else ("level", "diff")
    if _is_stationary(report, level_key):
        return 0
    if _is_stationary(report, diff_key):
        return 1
    return None


def recommend_models(
    report: pd.DataFrame,
    returns_acf: Optional[pd.DataFrame] = None,
    squared_acf: Optional[pd.DataFrame] = None,
    max_ar_lag: int = 5,
) -> List[str]:
    """
    Build a list of modeling recommendations from a stationarity report and,
    optionally, the ACF of log returns and of squared log returns.
    """
    notes: List[str] = []

    level_ok = _is_stationary(report, "level")
    log_diff_ok = _is_stationary(report, "log_diff")
    diff_ok = _is_stationary(report, "diff")

    if level_ok is None and log_diff_ok is None:
        notes.append(
            "Too few observations for unit-root tests (ADF/KPSS); "
            "collect a longer price history before drawing stationarity conclusions."
        )
    elif level_ok:
        notes.append(
            "Price levels already look stationary; a model on levels (e.g. ARMA) is a reasonable start."
        )
    elif level_ok is False:
        notes.append(
            "Price levels are non-stationary (trend / unit root); do not fit ARMA models to raw prices."
        )

    d = suggest_differencing_order(report)
    if d == 1:
        notes.append(
            "One difference of the log price is enough: model log returns, or use ARIMA(p, 1, q) on log prices."
        )
    elif d is None and log_diff_ok is False:
        notes.append(
            "Neither log level nor log returns pass both tests; check for structural breaks before modeling."
        )

    if diff_ok and log_diff_ok is False:
        notes.append("Raw price differences pass but log returns do not; consider modeling dollar changes.")
    elif diff_ok and log_diff_ok and "diff" in report.index and "var_ratio" in report.columns:
        ratio_raw = report.loc["diff", "var_ratio"]
        ratio_log = report.loc["log_diff", "var_ratio"]
        if pd.notna(ratio_raw) and pd.notna(ratio_log) and abs(ratio_raw - 1) > abs(ratio_log - 1):
            notes.append(
                "Raw differences have a drifting variance that the log transform stabilises; prefer log returns."
            )

    if returns_acf is not None:
        lags = significant_lags(returns_acf)
        short = [lag for lag in lags if lag <= max_ar_lag]
        if not lags:
            notes.append(
                "No significant autocorrelation in log returns: they are close to white noise, "
                "so a random walk is a hard baseline to beat."
            )
        elif short:
            notes.append(
                f"Significant short-lag autocorrelation at lag(s) {short}; try AR terms up to p={max(short)}."
            )
        else:
            notes.append(
                f"Only isolated long-lag autocorrelation at lag(s) {lags}; likely noise or seasonality, "
                "not a strong AR structure."
            )

    if squared_acf is not None:
        if significant_lags(squared_acf):
            notes.append(
                "Squared log returns are autocorrelated (volatility clustering); "
                "consider a GARCH-type model for the variance."
            )
        else:
            notes.append("No evidence of volatility clustering in squared log returns.")

    return notes
