from __future__ import annotations

"""
Read and clean daily cryptocurrency price tables.

Exports from different providers label the same fields differently, e.g.
``timestamp`` vs ``date``, ``close (USD)`` vs ``close`` or
``4a. close (USD)`` in Alpha Vantage dumps. Everything is mapped onto the
schema in ``config``: a ``date`` index plus ``open``/``high``/``low``/
``close``/``volume``/``market_cap`` float columns.
"""

import re
from pathlib import Path

import numpy as np
import pandas as pd

from ..config import OPTIONAL_COLUMNS, PRICE_COLUMNS, REQUIRED_COLUMNS

__all__ = [
    "normalise_column_name",
    "clean_price_columns",
    "load_price_csv",
]


COLUMN_ALIASES: dict[str, str] = {
    "timestamp": "date",
    "time": "date",
    "day": "date",
    "datetime": "date",
    "timeopen": "date",
    "snapped_at": "date",
    "marketcap": "market_cap",
    "mcap": "market_cap",
    "total_volume": "volume",
    "volume_from": "volume",
}

_NUMBERING_PREFIX = re.compile(r"^\d+[a-z]?\.\s*")
_CURRENCY_SUFFIX = re.compile(r"[\s_]*\(?(usd|usdt)\)?$")


def normalise_column_name(name: str) -> str:
    """
    Map a provider column label onto the project schema name.

    >>> normalise_column_name("4a. close (USD)")
    'close'
    >>> normalise_column_name("Market Cap (USD)")
    'market_cap'
    """
    label = str(name).strip().lower()
    label = _NUMBERING_PREFIX.sub("", label)
    label = _CURRENCY_SUFFIX.sub("", label)
    label = re.sub(r"[\s\-]+", "_", label.strip())
    return COLUMN_ALIASES.get(label, label)


def _parse_dates(values: pd.Series) -> pd.Series:
    if pd.api.types.is_numeric_dtype(values):
        # Epoch timestamps: milliseconds if the magnitude says so
        unit = "ms" if values.abs().max() > 1e11 else "s"
        parsed = pd.to_datetime(values, unit=unit, utc=True, errors="coerce")
    else:
        parsed = pd.to_datetime(values, utc=True, errors="coerce")
    return parsed.dt.tz_convert(None).dt.normalize()


def clean_price_columns(raw: pd.DataFrame) -> pd.DataFrame:
    """
    Standardise a raw price table to the daily schema.

    - Renames provider columns via :func:`normalise_column_name`.
    - Keeps only known columns and coerces them to floats.
    - Parses dates, drops unparsable rows, sorts chronologically and keeps
      the first row for any duplicated date.
    - Adds missing optional columns (``volume``, ``market_cap``) as NaN.
    """
    if raw.empty:
        raise ValueError("Received empty price table.")

    df = raw.copy()
    if df.index.name is not None and str(df.index.name).lower() in ("date", "timestamp"):
        df = df.reset_index()
    df.columns = [normalise_column_name(c) for c in df.columns]
    df = df.loc[:, ~df.columns.duplicated(keep="first")]

    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise KeyError(f"Missing required price columns: {missing!r}")

    for col in OPTIONAL_COLUMNS:
        if col not in df.columns:
            df[col] = np.nan

    value_cols = list(PRICE_COLUMNS) + list(OPTIONAL_COLUMNS)
    out = df[["date"] + value_cols].copy()
    out["date"] = _parse_dates(out["date"])
    out = out.dropna(subset=["date"])
    for col in value_cols:
        out[col] = pd.to_numeric(out[col], errors="coerce").astype(float)

    out = out.set_index("date").sort_index()
    out = out[~out.index.duplicated(keep="first")]
    out.index.name = "date"

    if out.empty:
        raise ValueError("No rows with a parsable date in price table.")

    return out


def load_price_csv(path: str | Path, **read_kwargs) -> pd.DataFrame:
    """
    Read a daily price CSV and return it in the cleaned schema.

    ``read_kwargs`` are passed to :func:`pandas.read_csv` (e.g. ``sep``).
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Price CSV not found at {path}.")

    raw = pd.read_csv(path, **read_kwargs)
    return clean_price_columns(raw)
