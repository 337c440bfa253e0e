from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest import mock

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
from matplotlib.colors import to_rgba  # noqa: E402
import numpy as np  # noqa: E402
import pandas as pd  # noqa: E402

from crypto_eda import visualize as viz  # noqa: E402
from crypto_eda.stationarity import compute_acf  # noqa: E402
from crypto_eda.transforms import build_transform_panel  # noqa: E402


class TestVisualize(unittest.TestCase):
    def setUp(self) -> None:
        dates = pd.date_range("2021-01-01", periods=120, freq="D", name="date")
        rng = np.random.default_rng(42)
        close = 30000 * np.exp(np.cumsum(rng.normal(0, 0.03, size=len(dates))))
        self.prices = pd.DataFrame({"close": close}, index=dates)
        self.panel = build_transform_panel(self.prices["close"])
        self.tmp = tempfile.TemporaryDirectory()
        self.out_dir = Path(self.tmp.name) / "figures"

    def tearDown(self) -> None:
        self.tmp.cleanup()

    def test_each_plot_writes_a_file_and_closes_figure(self) -> None:
        returns = self.panel["log_diff"]
        calls = {
            "price.png": lambda p: viz.plot_price_with_moving_average(self.prices, window=10, output_path=p),
            "series.png": lambda p: viz.plot_series(returns, title="Log returns", output_path=p),
            "panel.png": lambda p: viz.plot_transform_panel(self.panel, output_path=p),
            "acf.png": lambda p: viz.plot_acf_bars(compute_acf(returns, nlags=15), output_path=p),
            "rolling.png": lambda p: viz.plot_rolling_statistics(returns, window=10, output_path=p),
            "dist.png": lambda p: viz.plot_return_distribution(returns, output_path=p),
        }
        for name, plot in calls.items():
            with self.subTest(plot=name):
                path = self.out_dir / name
                plot(path)
                self.assertTrue(path.exists())
                self.assertEqual(plt.get_fignums(), [])

    def test_plot_without_output_path_does_not_write(self) -> None:
        viz.plot_series(self.prices["close"], title="Close")
        self.assertFalse(self.out_dir.exists())

    def test_missing_columns_raise(self) -> None:
        with self.assertRaises(KeyError):
            viz.plot_price_with_moving_average(self.prices.rename(columns={"close": "price"}))
        with self.assertRaises(KeyError):
            viz.plot_transform_panel(self.panel.drop(columns=["diff"]))

    def test_axes_use_seaborn_style(self) -> None:
        fig, ax = viz._subplots()
        try:
            self.assertEqual(to_rgba(ax.spines["left"].get_edgecolor()), to_rgba(".8"))
        finally:
            plt.close(fig)

    def test_distribution_overlays_normal_density(self) -> None:
        returns = self.panel["log_diff"]
        with mock.patch.object(viz.stats.norm, "pdf", wraps=viz.stats.norm.pdf) as pdf:
            viz.plot_return_distribution(returns)
        fits = [call.kwargs for call in pdf.call_args_list if "loc" in call.kwargs]
        self.assertEqual(len(fits), 1)
        self.assertAlmostEqual(fits[0]["loc"], returns.mean())
        self.assertAlmostEqual(fits[0]["scale"], returns.std())

    def test_empty_returns_raise(self) -> None:
        with self.assertRaises(ValueError):
            viz.plot_return_distribution(pd.Series([np.nan, np.nan]))


if __name__ == "__main__":
    unittest.main()
