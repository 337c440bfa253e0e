from __future__ import annotations

"""
Download daily prices for one or more coins and save them to data/raw.
"""

import argparse

from crypto_eda.config import COIN_TICKERS, END_DATE, START_DATE
from crypto_eda.data.fetch import fetch_named_coins


def main() -> None:
    parser = argparse.ArgumentParser(description="Download daily crypto prices from Yahoo Finance.")
    parser.add_argument(
        "coins",
        nargs="*",
        default=["btc"],
        help=f"Logical coin names ({', '.join(sorted(COIN_TICKERS))}).",
    )
    parser.add_argument("--start", type=str, default=START_DATE, help="Start date (YYYY-MM-DD).")
    parser.add_argument("--end", type=str, default=END_DATE, help="End date (YYYY-MM-DD).")
    args = parser.parse_args()

    frames = fetch_named_coins(args.coins, start=args.start, end=args.end, auto_save=True)
    for name, df in frames.items():
        print(f"{name}: {len(df)} rows, {df.index.min():%Y-%m-%d} to {df.index.max():%Y-%m-%d}")


if __name__ == "__main__":
    main()
