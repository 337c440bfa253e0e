from __future__ import annotations

from typing import Dict, Sequence

import pandas as pd
import yfinance as yf

from ..config import COIN_TICKERS, END_DATE, START_DATE
from .io import save_dataframe
from .loader import clean_price_columns


def _flatten_yf_columns(raw: pd.DataFrame) -> pd.DataFrame:
    """
    Drop the ticker level that recent yfinance versions add even for a
    single symbol, leaving ``Open``/``High``/``Low``/``Close``/``Volume``.
    """
    if isinstance(raw.columns, pd.MultiIndex):
        raw = raw.copy()
        raw.columns = raw.columns.get_level_values(0)
    return raw


def fetch_crypto_prices(
    ticker: str,
    start: str | None = None,
    end: str | None = None,
    auto_save: bool = True,
    save_name: str | None = None,
) -> pd.DataFrame:
    """
    Download daily OHLCV prices for a coin from Yahoo Finance.

    Returns the cleaned daily schema used across the project. Yahoo does not
    publish market capitalisation, so ``market_cap`` is all-NaN.

    Parameters
    ----------
    ticker:
        Yahoo Finance ticker symbol (e.g. ``"BTC-USD"``).
    start, end:
        Date range strings in ``YYYY-MM-DD`` format. Defaults to the
        project-level ``START_DATE`` / ``END_DATE`` when omitted.
    auto_save:
        If True, persist the cleaned table to ``data/raw``.
    save_name:
        Optional base filename (without extension) to use when saving. If
        omitted, derives a name from the ticker symbol.
    """
    start_ = start or START_DATE
    end_ = end or END_DATE

    try:
        raw = yf.download(ticker, start=start_, end=end_, progress=False, auto_adjust=False)
    except Exception as exc:
        raise RuntimeError(f"Download failed for ticker {ticker}.") from exc

    if raw is None or raw.empty:
        raise ValueError(f"No data returned for ticker {ticker} between {start_} and {end_}.")

    raw = _flatten_yf_columns(raw)
    if "Close" not in raw.columns:
        raise KeyError("Expected a 'Close' column in downloaded data.")

    raw = raw.rename_axis("date").reset_index()
    df = clean_price_columns(raw)

    if auto_save:
        base_name = save_name or f"{ticker.replace('-', '_').lower()}_daily"
        save_dataframe(df, kind="raw", name=base_name, fmt="csv")

    return df


def fetch_named_coins(
    names: Sequence[str] = ("btc",),
    start: str | None = None,
    end: str | None = None,
    auto_save: bool = True,
) -> Dict[str, pd.DataFrame]:
    """
    Fetch one or more coins by logical name as defined in ``COIN_TICKERS``.

    Returns a mapping from logical name (e.g. ``"btc"``) to daily price tables.
    """
    missing = [name for name in names if name not in COIN_TICKERS]
    if missing:
        raise KeyError(f"Unknown coin logical name(s): {missing!r}")

    out: Dict[str, pd.DataFrame] = {}
    for name in names:
        out[name] = fetch_crypto_prices(
            ticker=COIN_TICKERS[name],
            start=start,
            end=end,
            auto_save=auto_save,
            save_name=f"{name}_daily",
        )
    return out
