from __future__ import annotations

from pathlib import Path
from typing import Optional

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns
from scipy import stats

from .config import MA_WINDOW, ROLLING_WINDOW
from .transforms import moving_average, rolling_statistics


PLOT_STYLE = "whitegrid"


def _subplots(*args, **kwargs):
    """``plt.subplots`` with the seaborn axes style applied to the new axes."""
    with sns.axes_style(PLOT_STYLE):
        return plt.subplots(*args, **kwargs)


def _save_and_close(fig: plt.Figure, output_path: Optional[Path]) -> None:
    fig.tight_layout()
    if output_path is not None:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(output_path, dpi=200)
    plt.close(fig)


def plot_price_with_moving_average(
    prices: pd.DataFrame,
    window: int = MA_WINDOW,
    price_col: str = "close",
    title: str = "Close price",
    output_path: Optional[Path] = None,
) -> None:
    """
    Close price with its trailing moving average overlaid, on a linear and a
    log scale.
    """
    if price_col not in prices.columns:
        raise KeyError(f"Expected price column {price_col!r} in prices.")

    close = prices[price_col]
    ma = moving_average(close, window=window)

    fig, axes = _subplots(2, 1, figsize=(12, 7), sharex=True)
    for ax, scale in zip(axes, ("linear", "log")):
        ax.plot(close.index, close.to_numpy(), color="black", linewidth=1.0, label="Close")
        ax.plot(ma.index, ma.to_numpy(), color="tab:orange", linewidth=1.5, label=f"{window}d MA")
        ax.set_yscale(scale)
        ax.set_ylabel(f"USD ({scale})")
        ax.legend(loc="upper left")
    axes[0].set_title(title)
    axes[-1].set_xlabel("Date")

    _save_and_close(fig, output_path)


def plot_series(
    series: pd.Series,
    title: str,
    ylabel: str = "",
    output_path: Optional[Path] = None,
) -> None:
    """
    Single line plot with a zero line when the series changes sign.
    """
    fig, ax = _subplots(figsize=(12, 4))
    ax.plot(series.index, series.to_numpy(), color="tab:blue", linewidth=0.8)
    values = series.dropna()
    if len(values) and values.min() < 0 < values.max():
        ax.axhline(0.0, color="grey", linestyle="--", linewidth=0.8)
    ax.set_title(title)
    ax.set_ylabel(ylabel)
    ax.set_xlabel("Date")
    _save_and_close(fig, output_path)


def plot_transform_panel(
    panel: pd.DataFrame,
    output_path: Optional[Path] = None,
) -> None:
    """
    2x2 grid: level, log level, first difference, log difference.
    """
    titles = {
        "level": "Close (level)",
        "log_level": "log(Close)",
        "diff": "First difference",
        "log_diff": "Log difference (log return)",
    }
    missing = [c for c in titles if c not in panel.columns]
    if missing:
        raise KeyError(f"Transform panel is missing columns: {missing!r}")

    fig, axes = _subplots(2, 2, figsize=(14, 8), sharex=True)
    for ax, (col, title) in zip(axes.ravel(), titles.items()):
        ax.plot(panel.index, panel[col].to_numpy(), linewidth=0.8)
        ax.set_title(title)
    for ax in axes[-1]:
        ax.set_xlabel("Date")

    _save_and_close(fig, output_path)


def plot_acf_bars(
    acf_frame: pd.DataFrame,
    title: str = "Autocorrelation",
    output_path: Optional[Path] = None,
) -> None:
    """
    Stem plot of an ACF frame from :func:`stationarity.compute_acf` with the
    white-noise band shaded.
    """
    lags = acf_frame.index.to_numpy()
    values = acf_frame["acf"].to_numpy()
    band = float(acf_frame["band"].iloc[0])

    fig, ax = _subplots(figsize=(10, 4))
    ax.vlines(lags, 0.0, values, color="tab:blue", linewidth=1.5)
    colors = np.where(acf_frame["significant"].to_numpy(), "tab:red", "tab:blue")
    ax.scatter(lags, values, color=colors, s=15, zorder=3)
    ax.fill_between(lags, -band, band, color="grey", alpha=0.2)
    ax.axhline(0.0, color="black", linewidth=0.8)
    ax.set_ylim(min(-1.05, values.min() - 0.05), 1.05)
    ax.set_title(title)
    ax.set_xlabel("Lag (days)")
    ax.set_ylabel("ACF")

    _save_and_close(fig, output_path)


def plot_rolling_statistics(
    series: pd.Series,
    window: int = ROLLING_WINDOW,
    title: Optional[str] = None,
    output_path: Optional[Path] = None,
) -> None:
    """
    Series with its rolling mean and rolling standard deviation.
    """
    roll = rolling_statistics(series, window=window)

    fig, ax = _subplots(figsize=(12, 4))
    ax.plot(series.index, series.to_numpy(), color="lightgrey", linewidth=0.8, label="Series")
    ax.plot(roll.index, roll["rolling_mean"].to_numpy(), color="tab:blue", label=f"{window}d mean")
    ax.plot(roll.index, roll["rolling_std"].to_numpy(), color="tab:red", label=f"{window}d std")
    ax.set_title(title or f"Rolling mean and std ({window}d)")
    ax.set_xlabel("Date")
    ax.legend(loc="upper left")

    _save_and_close(fig, output_path)


def plot_return_distribution(
    returns: pd.Series,
    title: str = "Distribution of daily log returns",
    output_path: Optional[Path] = None,
) -> None:
    """
    Histogram with KDE of returns, with a normal density of the same mean and
    std for comparison.
    """
    values = returns.dropna()
    if values.empty:
        raise ValueError("No non-missing returns to plot.")

    fig, ax = _subplots(figsize=(8, 5))
    sns.histplot(values, bins=80, stat="density", kde=True, ax=ax, color="tab:blue")

    mu, sigma = values.mean(), values.std()
    if sigma > 0:
        grid = np.linspace(values.min(), values.max(), 200)
        normal_pdf = stats.norm.pdf(grid, loc=mu, scale=sigma)
        ax.plot(grid, normal_pdf, color="tab:red", linestyle="--", label="Normal fit")
        ax.legend(loc="upper right")
    ax.set_title(title)
    ax.set_xlabel("Log return")

    _save_and_close(fig, output_path)
