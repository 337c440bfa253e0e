from __future__ import annotations

import unittest

import numpy as np
import pandas as pd

from crypto_eda.summary import check_daily_continuity, missing_value_report, summary_statistics


class TestSummary(unittest.TestCase):
    def setUp(self) -> None:
        dates = pd.date_range("2021-01-01", periods=10, freq="D", name="date")
        self.prices = pd.DataFrame(
            {
                "close": np.arange(1.0, 11.0),
                "volume": [1.0, np.nan, 3.0, np.nan, 5.0, 6.0, 7.0, 8.0, 9.0, 10.0],
                "market_cap": np.nan,
            },
            index=dates,
        )

    def test_summary_statistics_adds_shape_rows(self) -> None:
        stats = summary_statistics(self.prices)
        self.assertIn("skew", stats.index)
        self.assertIn("kurtosis", stats.index)
        # All-NaN columns are left out
        self.assertNotIn("market_cap", stats.columns)
        self.assertAlmostEqual(stats.loc["mean", "close"], 5.5)
        self.assertAlmostEqual(stats.loc["skew", "close"], 0.0)

    def test_missing_value_report(self) -> None:
        report = missing_value_report(self.prices)
        self.assertEqual(report.index[0], "market_cap")
        self.assertEqual(report.loc["market_cap", "n_missing"], 10)
        self.assertEqual(report.loc["volume", "n_missing"], 2)
        self.assertAlmostEqual(report.loc["volume", "pct_missing"], 20.0)
        self.assertEqual(report.loc["close", "n_missing"], 0)

    def test_continuity_reports_gaps(self) -> None:
        gappy = self.prices.drop(index=[pd.Timestamp("2021-01-04"), pd.Timestamp("2021-01-07")])
        result = check_daily_continuity(gappy)
        self.assertEqual(result["n_rows"], 8)
        self.assertEqual(result["n_expected"], 10)
        self.assertEqual(result["n_missing_days"], 2)
        self.assertEqual(result["missing_days"], [pd.Timestamp("2021-01-04"), pd.Timestamp("2021-01-07")])
        self.assertEqual(result["n_duplicate_dates"], 0)

    def test_continuity_counts_duplicates(self) -> None:
        dup = pd.concat([self.prices, self.prices.iloc[[3]]]).sort_index()
        result = check_daily_continuity(dup)
        self.assertEqual(result["n_duplicate_dates"], 1)
        self.assertEqual(result["n_missing_days"], 0)

    def test_continuity_requires_datetime_index(self) -> None:
        with self.assertRaises(TypeError):
            check_daily_continuity(self.prices.reset_index())


if __name__ == "__main__":
    unittest.main()
