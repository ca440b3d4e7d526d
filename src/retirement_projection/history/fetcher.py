# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Historical S&P 500 return retrieval with embedded fallback.

The remote feed returns a JSON array of ``{"year": int, "totalReturn": pct}``
objects, newest year first. load_historical_returns() tries the feed
directly, then through a CORS proxy, and finally falls back to the embedded
1926-2024 table. It never raises on a retrieval failure.
"""

import math
import sys
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple
from urllib.parse import quote

import pandas as pd
import requests

from .. import settings
from ..montecarlo.results import mean, sample_std
from .returns_table import EMBEDDED_RETURNS, EMBEDDED_YEARS

SOURCE_REMOTE = "remote"
SOURCE_PROXY = "proxy"
SOURCE_EMBEDDED = "embedded"


class DataFetchError(Exception):
    """Raised when the historical return feed cannot be retrieved or parsed."""


@dataclass(frozen=True)
class ReturnStatistics:
    """Descriptive statistics of an annual return series.

    Attributes:
        num_years: Number of returns in the series
        mean: Arithmetic mean return as decimal
        std: Sample standard deviation as decimal
        newest_year: Most recent year in the series
        oldest_year: Earliest year in the series
    """
    num_years: int
    mean: float
    std: float
    newest_year: int
    oldest_year: int


@dataclass(frozen=True)
class ReturnHistory:
    """Annual returns, newest year first.

    Attributes:
        years: Calendar years, newest first
        returns: Annual total returns as decimals, aligned with years
        source: Where the data came from ("remote", "proxy" or "embedded")
    """
    years: Tuple[int, ...]
    returns: Tuple[float, ...]
    source: str

    def __post_init__(self):
        if len(self.years) != len(self.returns):
            raise ValueError(
                f"years and returns differ in length: {len(self.years)} != {len(self.returns)}"
            )

    def __len__(self) -> int:
        return len(self.returns)

    @property
    def is_fallback(self) -> bool:
        return self.source == SOURCE_EMBEDDED

    def recent(self, num_years: int) -> 'ReturnHistory':
        """Get the most recent num_years of the history."""
        if num_years < 1:
            raise ValueError(f"num_years must be at least 1: {num_years}")
        return ReturnHistory(self.years[:num_years], self.returns[:num_years], self.source)

    def return_for(self, year: int) -> float:
        """Get the return of a calendar year.

        Raises:
            KeyError: If the year is not in the history
        """
        try:
            return self.returns[self.years.index(year)]
        except ValueError:
            raise KeyError(year) from None

    def statistics(self) -> ReturnStatistics:
        """Mean and sample standard deviation of the series."""
        if not self.returns:
            raise ValueError("Cannot describe an empty return history")
        return ReturnStatistics(
            num_years=len(self.returns),
            mean=mean(self.returns),
            std=sample_std(self.returns),
            newest_year=self.years[0],
            oldest_year=self.years[-1],
        )

    def to_series(self) -> pd.Series:
        """Get the returns as a Series indexed by year, newest first."""
        return pd.Series(self.returns, index=pd.Index(self.years, name='Year'), name='Return')


def embedded_history() -> ReturnHistory:
    """The embedded 1926-2024 table as a ReturnHistory."""
    return ReturnHistory(EMBEDDED_YEARS, EMBEDDED_RETURNS, SOURCE_EMBEDDED)


def parse_history_payload(payload: Any) -> Tuple[Tuple[int, ...], Tuple[float, ...]]:
    """Convert the feed's JSON body into (years, decimal returns).

    Raises:
        DataFetchError: If the payload is not a non-empty list of valid entries
    """
    if not isinstance(payload, list) or not payload:
        raise DataFetchError("History payload must be a non-empty JSON array")

    years: List[int] = []
    returns: List[float] = []
    for idx, item in enumerate(payload):
        if not isinstance(item, dict):
            raise DataFetchError(f"History entry {idx} is not an object")
        year = item.get("year")
        total_return = item.get("totalReturn")
        if isinstance(year, bool) or not isinstance(year, (int, float)) or not float(year).is_integer():
            raise DataFetchError(f"History entry {idx} has invalid year: {year!r}")
        if isinstance(total_return, bool):
            raise DataFetchError(
                f"History entry {idx} has invalid totalReturn: {total_return!r}"
            )
        if not isinstance(total_return, (int, float)):
            try:
                total_return = float(total_return)
            except (TypeError, ValueError):
                raise DataFetchError(
                    f"History entry {idx} has invalid totalReturn: {total_return!r}"
                ) from None
        if not math.isfinite(total_return):
            raise DataFetchError(f"History entry {idx} has non-finite totalReturn")
        years.append(int(year))
        # Feed reports percentages
        returns.append(float(total_return) / 100.0)

    return tuple(years), tuple(returns)


def fetch_historical_returns(url: str,
                             timeout: float = 10.0,
                             session: Optional[requests.Session] = None) -> Tuple[Tuple[int, ...], Tuple[float, ...]]:
    """Fetch and parse the history feed from one URL.

    Args:
        url: Feed URL
        timeout: Request timeout in seconds
        session: Optional requests session to issue the request with

    Returns:
        Tuple of (years, decimal returns), newest first

    Raises:
        DataFetchError: On network error, non-2xx status or malformed body
    """
    http = session or requests
    try:
        response = http.get(url, timeout=timeout)
    except requests.RequestException as exc:
        raise DataFetchError(f"Failed to reach {url}: {exc}") from exc

    if not 200 <= response.status_code < 300:
        raise DataFetchError(f"HTTP error from {url}: status {response.status_code}")

    try:
        payload = response.json()
    except ValueError as exc:
        raise DataFetchError(f"Malformed JSON from {url}") from exc

    return parse_history_payload(payload)


def proxied_url(proxy_url: str, target_url: str) -> str:
    """Build the CORS proxy URL for a target."""
    return proxy_url + quote(target_url, safe="")


def load_historical_returns(url: Optional[str] = None,
                            proxy_url: Optional[str] = None,
                            timeout: Optional[float] = None,
                            enabled: Optional[bool] = None,
                            session: Optional[requests.Session] = None) -> ReturnHistory:
    """Load the return history, falling back to the embedded table.

    Attempts, in order: the feed URL, the feed through the proxy (skipped
    when proxy_url is empty), the embedded table. Arguments left as None
    use the values from settings.

    Returns:
        ReturnHistory tagged with the source it came from
    """
    url = settings.HISTORY_URL if url is None else url
    proxy_url = settings.HISTORY_PROXY_URL if proxy_url is None else proxy_url
    timeout = settings.history_fetch_timeout() if timeout is None else timeout
    enabled = settings.HISTORY_FETCH_ENABLED if enabled is None else enabled

    if not enabled or not url:
        return embedded_history()

    attempts = [(SOURCE_REMOTE, url)]
    if proxy_url:
        attempts.append((SOURCE_PROXY, proxied_url(proxy_url, url)))

    for source, attempt_url in attempts:
        try:
            years, returns = fetch_historical_returns(attempt_url, timeout=timeout, session=session)
        except DataFetchError as exc:
            print(f"Warning: historical data fetch ({source}) failed: {exc}",
                  file=sys.stderr, flush=True)
            continue
        print(f"Loaded {len(returns)} years of historical returns ({source})",
              file=sys.stderr, flush=True)
        return ReturnHistory(years, returns, source)

    print("Using embedded historical returns (1926-2024)", file=sys.stderr, flush=True)
    return embedded_history()
