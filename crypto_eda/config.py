from __future__ import annotations

from pathlib import Path
from typing import Literal


def resolve_base_dir(package_root: Path) -> Path:
    """
    Project root for data and figure outputs: the source checkout when the
    package runs from one, otherwise the current working directory (e.g. when
    installed into site-packages).
    """
    if (package_root / "pyproject.toml").exists():
        return package_root
    return Path.cwd()


# Base paths
BASE_DIR: Path = resolve_base_dir(Path(__file__).resolve().parents[1])
DATA_DIR: Path = BASE_DIR / "data"
RAW_DATA_DIR: Path = DATA_DIR / "raw"
INTERIM_DATA_DIR: Path = DATA_DIR / "interim"
PROCESSED_DATA_DIR: Path = DATA_DIR / "processed"
FIGURES_DIR: Path = BASE_DIR / "figures"


# Default date range for downloads
START_DATE: str = "2018-01-01"
END_DATE: str = "2024-12-31"


# Logical names mapped to Yahoo Finance tickers
COIN_TICKERS: dict[str, str] = {
    "btc": "BTC-USD",
    "eth": "ETH-USD",
    "ltc": "LTC-USD",
    "xrp": "XRP-USD",
    "sol": "SOL-USD",
}


# Column schema of the cleaned daily price table (index is ``date``)
PRICE_COLUMNS: tuple[str, ...] = ("open", "high", "low", "close")
REQUIRED_COLUMNS: tuple[str, ...] = ("date",) + PRICE_COLUMNS
OPTIONAL_COLUMNS: tuple[str, ...] = ("volume", "market_cap")


# Analysis defaults
ACF_NLAGS: int = 40
MA_WINDOW: int = 30
ROLLING_WINDOW: int = 30
ALPHA: float = 0.05
# Crypto trades every calendar day
EXPECTED_FREQ: str = "D"


DataKind = Literal["raw", "interim", "processed"]


def get_data_path(
    kind: DataKind,
    name: str,
    fmt: str = "csv",
) -> Path:
    """
    Resolve a path within the data directory.

    Parameters
    ----------
    kind:
        One of ``"raw"``, ``"interim"``, or ``"processed"``.
    name:
        Base file name without extension.
    fmt:
        File extension / format (e.g. ``"csv"``, ``"parquet"``).
    """
    if kind == "raw":
        base = RAW_DATA_DIR
    elif kind == "interim":
        base = INTERIM_DATA_DIR
    elif kind == "processed":
        base = PROCESSED_DATA_DIR
    else:
        raise ValueError(f"Unknown data kind: {kind!r}")

    return base / f"{name}.{fmt}"
