"""
Exploratory stationarity analysis for daily cryptocurrency prices.

Subpackages and modules:
- ``data``: reading, cleaning, downloading and persisting price tables.
- ``summary``: descriptive statistics and missing-value checks.
- ``transforms``: differencing, log transforms and moving averages.
- ``stationarity``: ACF, Ljung-Box, ADF and KPSS diagnostics.
- ``recommend``: informal modeling recommendations from the diagnostics.
- ``visualize``: line, ACF and distribution plots.
- ``pipeline``: the end-to-end EDA run.
"""

__version__ = "0.1.0"
