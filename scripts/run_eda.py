from __future__ import annotations

"""
Command-line entry point for the stationarity EDA.

Either reads a daily price CSV (``--csv``) or downloads a coin from Yahoo
Finance (``--coin``), then:
- Prints summary statistics, missing values and calendar gaps.
- Runs ADF/KPSS/ACF checks on level, log level, difference and log difference.
- Prints modeling recommendations.
- Writes tables to <output-dir>/data/processed and figures to <output-dir>/figures.
"""

import argparse
from pathlib import Path

from crypto_eda.config import ACF_NLAGS, ALPHA, BASE_DIR, COIN_TICKERS, MA_WINDOW, ROLLING_WINDOW
from crypto_eda.pipeline import run_eda_from_csv, run_eda_from_yahoo


def main() -> None:
    parser = argparse.ArgumentParser(description="Stationarity EDA for daily crypto prices.")
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--csv",
        type=str,
        default=None,
        help="Path to a daily price CSV (timestamp, open, high, low, close, volume, market_cap).",
    )
    source.add_argument(
        "--coin",
        type=str,
        choices=sorted(COIN_TICKERS),
        default="btc",
        help="Logical coin name to download from Yahoo Finance when --csv is not given.",
    )
    parser.add_argument("--label", type=str, default=None, help="Coin label for outputs when using --csv.")
    parser.add_argument("--start", type=str, default=None, help="Download start date (YYYY-MM-DD).")
    parser.add_argument("--end", type=str, default=None, help="Download end date (YYYY-MM-DD).")
    parser.add_argument("--nlags", type=int, default=ACF_NLAGS, help="Number of ACF lags.")
    parser.add_argument("--ma-window", type=int, default=MA_WINDOW, help="Moving-average window (days).")
    parser.add_argument(
        "--rolling-window",
        type=int,
        default=ROLLING_WINDOW,
        help="Window for rolling mean/std plots (days).",
    )
    parser.add_argument("--alpha", type=float, default=ALPHA, help="Significance level for all tests.")
    parser.add_argument(
        "--output-dir",
        type=str,
        default=str(BASE_DIR),
        help="Root directory for data/processed and figures outputs.",
    )
    parser.add_argument("--no-save", action="store_true", help="Print results without writing files.")

    args = parser.parse_args()

    options = dict(
        nlags=args.nlags,
        ma_window=args.ma_window,
        rolling_window=args.rolling_window,
        alpha=args.alpha,
        output_dir=Path(args.output_dir),
        save=not args.no_save,
    )

    if args.csv is not None:
        run_eda_from_csv(args.csv, coin=args.label, **options)
    else:
        run_eda_from_yahoo(args.coin, start=args.start, end=args.end, **options)


if __name__ == "__main__":
    main()
