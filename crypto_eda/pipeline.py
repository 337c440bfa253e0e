from __future__ import annotations

"""
End-to-end stationarity EDA for one coin.

load -> clean -> summary statistics -> price plot -> differences -> plots
-> ACF -> stationarity tests -> recommendations

Results are returned as an :class:`EdaResult`; with ``save=True`` the
tables go to ``<output_dir>/data/processed`` and the figures to
``<output_dir>/figures``.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

from .config import (
    ACF_NLAGS,
    ALPHA,
    BASE_DIR,
    COIN_TICKERS,
    FIGURES_DIR,
    MA_WINDOW,
    PROCESSED_DATA_DIR,
    ROLLING_WINDOW,
)
from .data.fetch import fetch_crypto_prices
from .data.io import save_dataframe
from .data.loader import load_price_csv
from .recommend import recommend_models
from .stationarity import compute_acf, ljung_box, stationarity_report
from .summary import check_daily_continuity, missing_value_report, summary_statistics
from .transforms import build_transform_panel
from .visualize import (
    plot_acf_bars,
    plot_price_with_moving_average,
    plot_return_distribution,
    plot_rolling_statistics,
    plot_series,
    plot_transform_panel,
)


@dataclass
class EdaResult:
    """Everything computed by :func:`run_eda`."""

    coin: str
    prices: pd.DataFrame
    summary: pd.DataFrame
    missing: pd.DataFrame
    continuity: Dict[str, Any]
    panel: pd.DataFrame
    report: pd.DataFrame
    acf_level: pd.DataFrame
    acf_returns: pd.DataFrame
    acf_squared_returns: pd.DataFrame
    ljung_box_returns: pd.DataFrame
    recommendations: List[str] = field(default_factory=list)
    artifacts: Dict[str, Path] = field(default_factory=dict)


def _print_section(title: str, body: Any) -> None:
    print(f"=== {title} ===")
    print(body)
    print(f"=== End of {title.lower()} ===")


def _save_tables(result: EdaResult, processed_dir: Path) -> Dict[str, Path]:
    tables = {
        "summary": result.summary,
        "missing_values": result.missing,
        "transforms": result.panel,
        "stationarity_report": result.report,
        "acf_level": result.acf_level,
        "acf_log_returns": result.acf_returns,
        "acf_squared_log_returns": result.acf_squared_returns,
        "ljung_box_log_returns": result.ljung_box_returns,
    }
    paths: Dict[str, Path] = {}
    for name, table in tables.items():
        path = processed_dir / f"{result.coin}_{name}.csv"
        paths[name] = save_dataframe(table, kind="processed", name=name, path_override=path)

    notes_path = processed_dir / f"{result.coin}_recommendations.txt"
    notes_path.write_text("\n".join(f"- {note}" for note in result.recommendations) + "\n")
    paths["recommendations"] = notes_path
    return paths


def _save_figures(
    result: EdaResult,
    figures_dir: Path,
    ma_window: int,
    rolling_window: int,
) -> Dict[str, Path]:
    coin = result.coin
    returns = result.panel["log_diff"]
    paths = {
        "price": figures_dir / f"{coin}_price_ma{ma_window}.png",
        "transforms": figures_dir / f"{coin}_transforms.png",
        "diff": figures_dir / f"{coin}_first_difference.png",
        "log_returns": figures_dir / f"{coin}_log_returns.png",
        "rolling_level": figures_dir / f"{coin}_rolling_level.png",
        "rolling_returns": figures_dir / f"{coin}_rolling_log_returns.png",
        "acf_level": figures_dir / f"{coin}_acf_level.png",
        "acf_returns": figures_dir / f"{coin}_acf_log_returns.png",
        "acf_squared_returns": figures_dir / f"{coin}_acf_squared_log_returns.png",
        "return_distribution": figures_dir / f"{coin}_return_distribution.png",
    }

    plot_price_with_moving_average(
        result.prices,
        window=ma_window,
        title=f"{coin.upper()} close price",
        output_path=paths["price"],
    )
    plot_transform_panel(result.panel, output_path=paths["transforms"])
    plot_series(
        result.panel["diff"],
        title=f"{coin.upper()} first difference of close",
        ylabel="USD",
        output_path=paths["diff"],
    )
    plot_series(
        returns,
        title=f"{coin.upper()} daily log returns",
        ylabel="log return",
        output_path=paths["log_returns"],
    )
    plot_rolling_statistics(result.panel["level"], window=rolling_window, output_path=paths["rolling_level"])
    plot_rolling_statistics(returns, window=rolling_window, output_path=paths["rolling_returns"])
    plot_acf_bars(result.acf_level, title="ACF of close price", output_path=paths["acf_level"])
    plot_acf_bars(result.acf_returns, title="ACF of log returns", output_path=paths["acf_returns"])
    plot_acf_bars(
        result.acf_squared_returns,
        title="ACF of squared log returns",
        output_path=paths["acf_squared_returns"],
    )
    plot_return_distribution(returns, output_path=paths["return_distribution"])
    return paths


def run_eda(
    prices: pd.DataFrame,
    coin: str = "btc",
    nlags: int = ACF_NLAGS,
    ma_window: int = MA_WINDOW,
    rolling_window: int = ROLLING_WINDOW,
    alpha: float = ALPHA,
    output_dir: Optional[Path] = None,
    save: bool = True,
    verbose: bool = True,
) -> EdaResult:
    """
    Run the full stationarity EDA on a cleaned daily price table.

    Parameters
    ----------
    prices:
        Output of :func:`data.loader.load_price_csv` or
        :func:`data.fetch.fetch_crypto_prices`.
    coin:
        Label used in file names and plot titles.
    nlags, alpha:
        ACF depth and significance level for all tests.
    ma_window, rolling_window:
        Moving-average window for the price plot and rolling-stat window.
    output_dir:
        Root for ``data/processed/`` and ``figures/`` outputs. Defaults to
        ``config.PROCESSED_DATA_DIR`` and ``config.FIGURES_DIR``.
    save:
        If False, nothing is written to disk.
    """
    if "close" not in prices.columns:
        raise KeyError("Expected a 'close' column in prices.")
    if not isinstance(prices.index, pd.DatetimeIndex):
        raise TypeError("prices must have a DatetimeIndex.")

    close = prices["close"].dropna()
    if close.empty:
        raise ValueError("Close price series is empty after dropping missing values.")

    summary = summary_statistics(prices)
    missing = missing_value_report(prices)
    continuity = check_daily_continuity(prices)
    if verbose:
        print(
            f"Loaded {continuity['n_rows']} rows for {coin} "
            f"({continuity['start']:%Y-%m-%d} to {continuity['end']:%Y-%m-%d}); "
            f"{continuity['n_missing_days']} missing calendar day(s), "
            f"{continuity['n_duplicate_dates']} duplicated date(s)."
        )
        _print_section("Summary statistics", summary)
        _print_section("Missing values", missing)

    panel = build_transform_panel(close)
    returns = panel["log_diff"]

    report = stationarity_report(close, nlags=nlags, alpha=alpha, verbose=verbose)
    acf_level = compute_acf(close, nlags=nlags, alpha=alpha)
    acf_returns = compute_acf(returns, nlags=nlags, alpha=alpha)
    acf_squared = compute_acf(returns**2, nlags=nlags, alpha=alpha)
    max_lb_lag = min(nlags, len(returns.dropna()) - 1)
    lb_lags = [lag for lag in (10, 20) if lag <= max_lb_lag] or ([max_lb_lag] if max_lb_lag > 0 else [])
    if lb_lags:
        lb = ljung_box(returns, lags=lb_lags)
    else:
        lb = pd.DataFrame(columns=["lb_stat", "lb_pvalue"], index=pd.Index([], name="lag"))

    recommendations = recommend_models(report, returns_acf=acf_returns, squared_acf=acf_squared)

    result = EdaResult(
        coin=coin,
        prices=prices,
        summary=summary,
        missing=missing,
        continuity=continuity,
        panel=panel,
        report=report,
        acf_level=acf_level,
        acf_returns=acf_returns,
        acf_squared_returns=acf_squared,
        ljung_box_returns=lb,
        recommendations=recommendations,
    )

    if verbose:
        _print_section("Ljung-Box test on log returns", lb)
        print("=== Modeling recommendations ===")
        for note in recommendations:
            print(f"- {note}")
        print("=== End of modeling recommendations ===")

    if save:
        if output_dir is None:
            processed_dir, figures_dir, root = PROCESSED_DATA_DIR, FIGURES_DIR, BASE_DIR
        else:
            root = Path(output_dir)
            processed_dir, figures_dir = root / "data" / "processed", root / "figures"
        result.artifacts.update(_save_tables(result, processed_dir))
        result.artifacts.update(_save_figures(result, figures_dir, ma_window, rolling_window))
        if verbose:
            print(f"Saved {len(result.artifacts)} artifacts under {root}")

    return result


def run_eda_from_csv(path: str | Path, coin: Optional[str] = None, **kwargs) -> EdaResult:
    """
    Load a daily price CSV and run :func:`run_eda` on it. The coin label
    defaults to the file stem.
    """
    path = Path(path)
    prices = load_price_csv(path)
    return run_eda(prices, coin=coin or path.stem.lower(), **kwargs)


def run_eda_from_yahoo(
    coin: str = "btc",
    start: Optional[str] = None,
    end: Optional[str] = None,
    auto_save: bool = True,
    **kwargs,
) -> EdaResult:
    """
    Download a coin by logical name (see ``COIN_TICKERS``) and run
    :func:`run_eda` on it. ``auto_save`` controls whether the raw download
    is kept under ``data/raw``.
    """
    if coin not in COIN_TICKERS:
        raise KeyError(f"Unknown coin logical name: {coin!r}")
    prices = fetch_crypto_prices(
        COIN_TICKERS[coin],
        start=start,
        end=end,
        auto_save=auto_save,
        save_name=f"{coin}_daily",
    )
    return run_eda(prices, coin=coin, **kwargs)
