from __future__ import annotations

from pathlib import Path
from typing import Optional

import pandas as pd

from ..config import DataKind, get_data_path


SUPPORTED_FORMATS = ("csv", "parquet")


def _resolve_path(
    kind: DataKind,
    name: str,
    fmt: str,
    path_override: Optional[Path],
) -> Path:
    if fmt not in SUPPORTED_FORMATS:
        raise ValueError(f"Unsupported format: {fmt!r}")
    if path_override is not None:
        return Path(path_override)
    return get_data_path(kind, name, fmt)


def save_dataframe(
    df: pd.DataFrame,
    kind: DataKind,
    name: str,
    fmt: str = "csv",
    index: bool = True,
    path_override: Optional[Path] = None,
    **kwargs,
) -> Path:
    """
    Save a DataFrame to disk under the standard data directory structure.

    Parameters
    ----------
    df:
        DataFrame to save.
    kind:
        One of ``"raw"``, ``"interim"``, or ``"processed"``.
    name:
        Base filename without extension.
    fmt:
        File format: ``"csv"`` or ``"parquet"`` (default: ``"csv"``).
    index:
        Whether to write the index to disk (default: True).
    path_override:
        Optional explicit path to use instead of the standard location.
    kwargs:
        Passed through to the underlying pandas IO function.
    """
    path = _resolve_path(kind, name, fmt, path_override)
    path.parent.mkdir(parents=True, exist_ok=True)

    if fmt == "csv":
        kwargs.setdefault("date_format", "%Y-%m-%d")
        df.to_csv(path, index=index, **kwargs)
    else:
        df.to_parquet(path, index=index, **kwargs)

    return path


def load_dataframe(
    kind: DataKind,
    name: str,
    fmt: str = "csv",
    path_override: Optional[Path] = None,
    parse_dates: bool = True,
    index_col: int | str | None = 0,
    **kwargs,
) -> pd.DataFrame:
    """
    Load a DataFrame from the standard data directory structure.

    Parameters mirror :func:`save_dataframe`. ``parse_dates`` and
    ``index_col`` only apply to CSV files.
    """
    path = _resolve_path(kind, name, fmt, path_override)
    if not path.exists():
        raise FileNotFoundError(path)

    if fmt == "csv":
        if parse_dates:
            kwargs.setdefault("parse_dates", True)
        if index_col is not None:
            kwargs.setdefault("index_col", index_col)
        return pd.read_csv(path, **kwargs)

    return pd.read_parquet(path, **kwargs)
