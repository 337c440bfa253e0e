from __future__ import annotations

import unittest

import numpy as np
import pandas as pd

from crypto_eda import stationarity as st


def _trending_prices(n: int = 600, seed: int = 42) -> pd.Series:
    dates = pd.date_range("2019-01-01", periods=n, freq="D")
    rng = np.random.default_rng(seed)
    log_ret = rng.normal(0.003, 0.02, size=n)
    return pd.Series(20000 * np.exp(np.cumsum(log_ret)), index=dates, name="close")


def _ar1(n: int = 1000, phi: float = 0.8, seed: int = 7) -> pd.Series:
    rng = np.random.default_rng(seed)
    eps = rng.normal(size=n)
    x = np.zeros(n)
    for t in range(1, n):
        x[t] = phi * x[t - 1] + eps[t]
    return pd.Series(x, index=pd.date_range("2019-01-01", periods=n, freq="D"))


class TestComputeAcf(unittest.TestCase):
    def test_lag_zero_is_one_and_not_significant(self) -> None:
        out = st.compute_acf(_ar1(), nlags=20)
        self.assertEqual(list(out.index), list(range(21)))
        self.assertAlmostEqual(out.loc[0, "acf"], 1.0)
        self.assertFalse(out.loc[0, "significant"])

    def test_ar1_lag_one_matches_coefficient(self) -> None:
        out = st.compute_acf(_ar1(phi=0.8), nlags=10)
        self.assertAlmostEqual(out.loc[1, "acf"], 0.8, delta=0.06)
        self.assertTrue(out.loc[1, "significant"])
        self.assertIn(1, st.significant_lags(out))

    def test_band_is_white_noise_width(self) -> None:
        series = _ar1(n=400)
        out = st.compute_acf(series, nlags=5, alpha=0.05)
        self.assertAlmostEqual(out["band"].iloc[0], 1.959964 / np.sqrt(400), places=5)
        self.assertTrue((out["lower"] <= out["acf"]).all())
        self.assertTrue((out["upper"] >= out["acf"]).all())

    def test_nans_dropped_and_nlags_clipped(self) -> None:
        series = pd.Series([np.nan, 1.0, 2.0, 1.5, 3.0, 2.5])
        out = st.compute_acf(series, nlags=40)
        self.assertEqual(out.index.max(), 4)

    def test_too_short_raises(self) -> None:
        with self.assertRaises(ValueError):
            st.compute_acf(pd.Series([1.0, 2.0]))


class TestUnitRootTests(unittest.TestCase):
    def setUp(self) -> None:
        self.close = _trending_prices()
        self.frame = pd.DataFrame(
            {
                "level": self.close,
                "log_diff": np.log(self.close).diff(),
            }
        )

    def test_adf_flags_trend_and_returns(self) -> None:
        report = st.run_adf_tests(self.frame, verbose=False)
        self.assertFalse(report.loc["level", "stationary"])
        self.assertTrue(report.loc["log_diff", "stationary"])
        self.assertLess(report.loc["log_diff", "p_value"], 0.01)

    def test_kpss_rejects_trending_level(self) -> None:
        report = st.run_kpss_tests(self.frame, verbose=False)
        self.assertFalse(report.loc["level", "stationary"])
        self.assertLessEqual(report.loc["level", "p_value"], 0.05)

    def test_short_series_are_noted_not_tested(self) -> None:
        short = self.frame.iloc[:20]
        adf = st.run_adf_tests(short, verbose=False)
        kpss = st.run_kpss_tests(short, verbose=False)
        self.assertTrue(adf["p_value"].isna().all())
        self.assertTrue((kpss["note"] == "too few observations").all())

    def test_difference_and_retest(self) -> None:
        adf = st.run_adf_tests(self.frame, verbose=False)
        features, diff_report = st.difference_and_retest(self.frame, adf, verbose=False)
        self.assertIn("level_diff", features.columns)
        self.assertEqual(list(diff_report.index), ["level_diff"])

    def test_ljung_box(self) -> None:
        lb = st.ljung_box(_ar1(), lags=(5, 10))
        self.assertEqual(list(lb.index), [5, 10])
        self.assertTrue((lb["lb_pvalue"] < 0.01).all())
        with self.assertRaises(ValueError):
            st.ljung_box(pd.Series([1.0, 2.0, 3.0]), lags=(10,))


class TestStationarityReport(unittest.TestCase):
    def test_short_series_are_untested(self) -> None:
        report = st.stationarity_report(_trending_prices(n=30), nlags=10, verbose=False)
        self.assertTrue(report["kpss_p_value"].isna().all())
        self.assertEqual(set(report["verdict"]), {"untested"})
        self.assertTrue(report["acf_lag1"].notna().all())

    def test_report_has_one_row_per_transform(self) -> None:
        report = st.stationarity_report(_trending_prices(), nlags=20, verbose=False)
        self.assertEqual(list(report.index), ["level", "log_level", "diff", "log_diff"])
        self.assertEqual(report.loc["level", "verdict"], "non-stationary")
        self.assertTrue(report.loc["log_diff", "adf_stationary"])
        self.assertGreater(report.loc["level", "acf_lag1"], 0.9)
        self.assertLess(abs(report.loc["log_diff", "acf_lag1"]), 0.2)
        self.assertTrue(set(report["verdict"]) <= {"stationary", "non-stationary", "inconclusive"})


if __name__ == "__main__":
    unittest.main()
