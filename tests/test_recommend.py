from __future__ import annotations

import unittest

import pandas as pd

from crypto_eda.recommend import recommend_models, suggest_differencing_order


def _report(verdicts: dict[str, str], var_ratio: dict[str, float] | None = None) -> pd.DataFrame:
    var_ratio = var_ratio or {}
    rows = []
    for name, verdict in verdicts.items():
        rows.append(
            {
                "transform": name,
                "adf_stationary": verdict != "non-stationary",
                "verdict": verdict,
                "var_ratio": var_ratio.get(name, 1.0),
            }
        )
    return pd.DataFrame.from_records(rows).set_index("transform")


def _acf(significant_lags: list[int], nlags: int = 10) -> pd.DataFrame:
    lags = pd.RangeIndex(0, nlags + 1, name="lag")
    return pd.DataFrame({"significant": [lag in significant_lags for lag in lags]}, index=lags)


TYPICAL = {
    "level": "non-stationary",
    "log_level": "non-stationary",
    "diff": "stationary",
    "log_diff": "stationary",
}


class TestRecommend(unittest.TestCase):
    def test_differencing_order(self) -> None:
        self.assertEqual(suggest_differencing_order(_report(TYPICAL)), 1)
        self.assertEqual(suggest_differencing_order(_report({**TYPICAL, "log_level": "stationary"})), 0)
        self.assertIsNone(suggest_differencing_order(_report({**TYPICAL, "log_diff": "non-stationary"})))

    def test_inconclusive_falls_back_to_adf(self) -> None:
        report = _report({**TYPICAL, "log_diff": "inconclusive"})
        self.assertEqual(suggest_differencing_order(report), 1)

    def test_typical_crypto_recommendations(self) -> None:
        notes = recommend_models(_report(TYPICAL), returns_acf=_acf([]), squared_acf=_acf([1, 2, 3]))
        text = " ".join(notes)
        self.assertIn("non-stationary", text)
        self.assertIn("log returns", text)
        self.assertIn("white noise", text)
        self.assertIn("GARCH", text)

    def test_short_lag_autocorrelation_suggests_ar_order(self) -> None:
        notes = recommend_models(_report(TYPICAL), returns_acf=_acf([1, 3, 9]))
        self.assertTrue(any("p=3" in note for note in notes))

    def test_variance_drift_prefers_log_returns(self) -> None:
        report = _report(TYPICAL, var_ratio={"diff": 6.0, "log_diff": 1.1})
        notes = recommend_models(report)
        self.assertTrue(any("stabilises" in note for note in notes))

    def test_untested_series_give_no_stationarity_claims(self) -> None:
        untested = {name: "untested" for name in TYPICAL}
        report = _report(untested)
        self.assertIsNone(suggest_differencing_order(report))
        notes = recommend_models(report, returns_acf=_acf([]))
        self.assertTrue(notes[0].startswith("Too few observations"))
        self.assertFalse(any("non-stationary" in note or "structural breaks" in note for note in notes))
        self.assertTrue(any("white noise" in note for note in notes))

    def test_without_acf_inputs(self) -> None:
        notes = recommend_models(_report(TYPICAL))
        self.assertFalse(any("GARCH" in note for note in notes))
        self.assertGreaterEqual(len(notes), 2)


if __name__ == "__main__":
    unittest.main()
