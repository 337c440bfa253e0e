"""
Data access and persistence utilities.

Modules here read and clean daily price tables from CSV, optionally
download them from Yahoo Finance, and read/write datasets to disk.
"""

from __future__ import annotations
