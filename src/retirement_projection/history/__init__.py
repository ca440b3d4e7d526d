# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Historical S&P 500 annual returns.

Provides the embedded 1926-2024 table, the remote feed loader that falls
back to it, and descriptive statistics over a return history.
"""

from .returns_table import EMBEDDED_RETURNS, EMBEDDED_YEARS
from .fetcher import (
    DataFetchError,
    ReturnHistory,
    ReturnStatistics,
    embedded_history,
    fetch_historical_returns,
    load_historical_returns,
    parse_history_payload,
)

__all__ = [
    'EMBEDDED_RETURNS',
    'EMBEDDED_YEARS',
    'DataFetchError',
    'ReturnHistory',
    'ReturnStatistics',
    'embedded_history',
    'fetch_historical_returns',
    'load_historical_returns',
    'parse_history_payload',
]
