from __future__ import annotations

import inspect
import warnings
from typing import Optional, Sequence, Tuple

import numpy as np
import pandas as pd
from scipy import stats
from statsmodels.stats.diagnostic import acorr_ljungbox
from statsmodels.tools.sm_exceptions import InterpolationWarning
from statsmodels.tsa.stattools import acf, adfuller, kpss

from .config import ACF_NLAGS, ALPHA
from .transforms import build_transform_panel, first_difference


# Below this many observations the unit-root tests are not run
MIN_OBS = 50

# Newer statsmodels warns unless the tuple return of acf is requested explicitly
_ACF_KWARGS = {"result_object": False} if "result_object" in inspect.signature(acf).parameters else {}


def _numeric_columns(frame: pd.DataFrame) -> list[str]:
    return [c for c in frame.columns if np.issubdtype(frame[c].dtype, np.number)]


def compute_acf(
    series: pd.Series,
    nlags: int = ACF_NLAGS,
    alpha: float = ALPHA,
) -> pd.DataFrame:
    """
    Sample autocorrelation function with confidence intervals.

    Returns a DataFrame indexed by ``lag`` (0..nlags) with columns:
    - ``acf``: autocorrelation at that lag (1.0 at lag 0).
    - ``lower`` / ``upper``: Bartlett confidence interval from statsmodels.
    - ``band``: half-width of the white-noise band, z_{1-alpha/2} / sqrt(n).
    - ``significant``: ``|acf| > band`` (always False at lag 0).

    NaNs are dropped before the computation and ``nlags`` is clipped to
    ``n - 1``.
    """
    values = series.dropna().to_numpy(dtype=float)
    n = len(values)
    if n < 3:
        raise ValueError(f"Need at least 3 observations to compute an ACF, got {n}.")
    if nlags < 1:
        raise ValueError(f"nlags must be >= 1, got {nlags}.")

    nlags = min(nlags, n - 1)
    acf_values, confint = acf(values, nlags=nlags, alpha=alpha, fft=True, **_ACF_KWARGS)

    band = stats.norm.ppf(1.0 - alpha / 2.0) / np.sqrt(n)
    out = pd.DataFrame(
        {
            "acf": acf_values,
            "lower": confint[:, 0],
            "upper": confint[:, 1],
            "band": band,
        },
        index=pd.RangeIndex(0, nlags + 1, name="lag"),
    )
    out["significant"] = out["acf"].abs() > out["band"]
    out.loc[0, "significant"] = False
    return out


def significant_lags(acf_frame: pd.DataFrame) -> list[int]:
    """Lags (excluding 0) whose autocorrelation falls outside the band."""
    return [int(lag) for lag in acf_frame.index[acf_frame["significant"].to_numpy(dtype=bool)] if lag != 0]


def ljung_box(
    series: pd.Series,
    lags: Sequence[int] = (10, 20),
) -> pd.DataFrame:
    """
    Ljung-Box test for joint autocorrelation up to each lag in ``lags``.

    Columns: ``lb_stat``, ``lb_pvalue``; index: ``lag``.
    """
    values = series.dropna()
    usable = [int(lag) for lag in lags if 0 < lag < len(values)]
    if not usable:
        raise ValueError(f"Series of length {len(values)} too short for lags {list(lags)!r}.")
    result = acorr_ljungbox(values, lags=usable)
    result.index.name = "lag"
    return result


def run_adf_tests(
    features: pd.DataFrame,
    feature_cols: Optional[Sequence[str]] = None,
    alpha: float = ALPHA,
    verbose: bool = True,
) -> pd.DataFrame:
    """
    Run Augmented Dickey-Fuller tests across a set of columns.

    The null hypothesis is a unit root, so ``p_value <= alpha`` flags the
    column as stationary. Returns a DataFrame with test statistics,
    p-values, and stationarity flags.
    """
    if feature_cols is None:
        feature_cols = _numeric_columns(features)

    records = []
    for col in feature_cols:
        series = features[col].dropna()
        if len(series) < MIN_OBS:
            records.append(
                {
                    "feature": col,
                    "n_obs": len(series),
                    "adf_stat": np.nan,
                    "p_value": np.nan,
                    "stationary": False,
                    "note": "too few observations",
                }
            )
            continue

        adf_stat, p_value, usedlag, nobs, crit_vals, icbest = adfuller(series.values, autolag="AIC")

        records.append(
            {
                "feature": col,
                "n_obs": int(nobs),
                "adf_stat": float(adf_stat),
                "p_value": float(p_value),
                "stationary": bool(p_value <= alpha),
                "note": "",
            }
        )

    report = pd.DataFrame.from_records(records).set_index("feature").sort_values("p_value")

    if verbose:
        print("=== ADF Stationarity Report ===")
        print(report[["n_obs", "adf_stat", "p_value", "stationary"]])
        print("=== End of ADF report ===")

    return report


def run_kpss_tests(
    features: pd.DataFrame,
    feature_cols: Optional[Sequence[str]] = None,
    alpha: float = ALPHA,
    regression: str = "c",
    verbose: bool = True,
) -> pd.DataFrame:
    """
    Run KPSS tests across a set of columns.

    KPSS reverses the ADF hypotheses: the null is (level) stationarity, so
    ``p_value > alpha`` flags the column as stationary. statsmodels only
    tabulates p-values in [0.01, 0.1]; values outside are clipped to the
    boundary and the interpolation warning is silenced.
    """
    if feature_cols is None:
        feature_cols = _numeric_columns(features)

    records = []
    for col in feature_cols:
        series = features[col].dropna()
        if len(series) < MIN_OBS:
            records.append(
                {
                    "feature": col,
                    "n_obs": len(series),
                    "kpss_stat": np.nan,
                    "p_value": np.nan,
                    "stationary": False,
                    "note": "too few observations",
                }
            )
            continue

        with warnings.catch_warnings():
            warnings.filterwarnings("ignore", category=InterpolationWarning)
            kpss_stat, p_value, n_lags, crit_vals = kpss(series.values, regression=regression, nlags="auto")

        records.append(
            {
                "feature": col,
                "n_obs": len(series),
                "kpss_stat": float(kpss_stat),
                "p_value": float(p_value),
                "stationary": bool(p_value > alpha),
                "note": "",
            }
        )

    report = pd.DataFrame.from_records(records).set_index("feature")

    if verbose:
        print("=== KPSS Stationarity Report ===")
        print(report[["n_obs", "kpss_stat", "p_value", "stationary"]])
        print("=== End of KPSS report ===")

    return report


def _half_sample_drift(series: pd.Series) -> Tuple[float, float]:
    """
    Compare the two halves of a series: standardised mean shift and the
    variance ratio (second half over first half).
    """
    values = series.dropna()
    if len(values) < 4:
        return np.nan, np.nan
    mid = len(values) // 2
    first, second = values.iloc[:mid], values.iloc[mid:]
    scale = values.std()
    mean_shift = (second.mean() - first.mean()) / scale if scale > 0 else np.nan
    var_first = first.var()
    var_ratio = second.var() / var_first if var_first > 0 else np.nan
    return float(mean_shift), float(var_ratio)


def _verdict(adf_ok: bool, kpss_ok: bool, tested: bool = True) -> str:
    if not tested:
        return "untested"
    if adf_ok and kpss_ok:
        return "stationary"
    if not adf_ok and not kpss_ok:
        return "non-stationary"
    return "inconclusive"


def stationarity_report(
    close: pd.Series,
    nlags: int = ACF_NLAGS,
    alpha: float = ALPHA,
    verbose: bool = True,
) -> pd.DataFrame:
    """
    Compare level, log level, first difference and log difference of a
    close-price series.

    One row per transform with ADF and KPSS p-values and flags, the lag-1
    autocorrelation, the number of significant ACF lags up to ``nlags``,
    the half-sample mean shift and variance ratio, and a combined
    ``verdict`` (``stationary`` / ``non-stationary`` / ``inconclusive``).
    Transforms too short for ADF or KPSS get the verdict ``untested``.
    """
    panel = build_transform_panel(close)
    adf_report = run_adf_tests(panel, alpha=alpha, verbose=verbose)
    kpss_report = run_kpss_tests(panel, alpha=alpha, verbose=verbose)

    rows = []
    for col in panel.columns:
        series = panel[col]
        try:
            acf_frame = compute_acf(series, nlags=nlags, alpha=alpha)
            acf_lag1 = float(acf_frame["acf"].iloc[1])
            n_sig = len(significant_lags(acf_frame))
        except ValueError:
            acf_lag1, n_sig = np.nan, 0
        mean_shift, var_ratio = _half_sample_drift(series)
        adf_ok = bool(adf_report.loc[col, "stationary"])
        kpss_ok = bool(kpss_report.loc[col, "stationary"])
        tested = pd.notna(adf_report.loc[col, "p_value"]) and pd.notna(kpss_report.loc[col, "p_value"])
        rows.append(
            {
                "transform": col,
                "adf_p_value": adf_report.loc[col, "p_value"],
                "adf_stationary": adf_ok,
                "kpss_p_value": kpss_report.loc[col, "p_value"],
                "kpss_stationary": kpss_ok,
                "acf_lag1": acf_lag1,
                "n_significant_lags": n_sig,
                "mean_shift": mean_shift,
                "var_ratio": var_ratio,
                "verdict": _verdict(adf_ok, kpss_ok, tested),
            }
        )

    report = pd.DataFrame.from_records(rows).set_index("transform")

    if verbose:
        print("=== Stationarity summary by transform ===")
        print(report[["adf_p_value", "kpss_p_value", "acf_lag1", "verdict"]])
        print("=== End of stationarity summary ===")

    return report


def difference_and_retest(
    features: pd.DataFrame,
    adf_report: pd.DataFrame,
    alpha: float = ALPHA,
    suffix: str = "_diff",
    verbose: bool = True,
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    For any column failing the ADF test, apply a first difference and
    re-run the ADF.

    Returns:
    - A new DataFrame including the differenced columns.
    - A second ADF report for the differenced columns only (empty when
      every column already passed).
    """
    non_stationary = adf_report[~adf_report["stationary"].astype(bool)]
    if non_stationary.empty:
        if verbose:
            print("All series appear stationary at the specified alpha; no differencing applied.")
        return features.copy(), pd.DataFrame()

    new_features = features.copy()
    diff_cols = []
    for name in non_stationary.index:
        diff_col_name = f"{name}{suffix}"
        new_features[diff_col_name] = first_difference(features[name])
        diff_cols.append(diff_col_name)

    if verbose:
        print("Re-running ADF tests on first-differenced series...")
    diff_report = run_adf_tests(new_features, feature_cols=diff_cols, alpha=alpha, verbose=verbose)

    return new_features, diff_report
