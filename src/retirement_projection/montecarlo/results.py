# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Monte Carlo simulation results aggregation and analysis.

This module provides the StatsAggregator which reduces many trials into
per-year statistics, the AggregateResult it produces, and the descriptive
statistics helpers shared with the historical return analysis.

Percentiles use nearest-rank indexing on the ascending sort:
``sorted[floor(n * p / 100)]`` (zero-indexed, clamped to the last element).
This is not linear interpolation, so the 50th percentile of [1..100] is 51.
"""

import math
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple
import numpy as np
import pandas as pd

from .path_simulator import Trial

DEFAULT_PERCENTILES = (5, 50, 95)


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean. Raises ValueError for an empty sequence."""
    if len(values) == 0:
        raise ValueError("mean requires at least one value")
    return float(np.mean(np.asarray(values, dtype=float)))


def sample_std(values: Sequence[float]) -> float:
    """Sample standard deviation with Bessel's correction.

    Returns 0.0 when fewer than two values are given.
    """
    if len(values) < 2:
        return 0.0
    return float(np.std(np.asarray(values, dtype=float), ddof=1))


def percentile_index(n: int, p: float) -> int:
    """Index of the p-th percentile in an ascending sequence of length n."""
    if n < 1:
        raise ValueError("percentile requires at least one value")
    if not 0 <= p <= 100:
        raise ValueError(f"Percentile must be between 0 and 100: {p}")
    return min(math.floor(n * p / 100), n - 1)


def percentile(values: Sequence[float], p: float) -> float:
    """Nearest-rank percentile of unsorted values."""
    ordered = sorted(values)
    return ordered[percentile_index(len(ordered), p)]


@dataclass(frozen=True)
class AggregateResult:
    """Per-year statistics of ending balances across all trials.

    Attributes:
        years: Year indices (1-based)
        num_trials: Number of trials aggregated
        mean: Mean ending balance per year
        std: Sample standard deviation of ending balance per year
        median: 50th percentile ending balance per year
        percentiles: Mapping of percentile level to per-year values
        mean_withdrawal: Mean amount withdrawn per year
        success_rate: Fraction of trials whose balance never reached zero
        final_balances: Ending balance of every trial in the last year
    """
    years: Tuple[int, ...]
    num_trials: int
    mean: Tuple[float, ...]
    std: Tuple[float, ...]
    median: Tuple[float, ...]
    percentiles: Dict[float, Tuple[float, ...]]
    mean_withdrawal: Tuple[float, ...]
    success_rate: float
    final_balances: Tuple[float, ...]

    def get_percentile(self, p: float) -> List[float]:
        """Get the per-year values of one percentile band.

        Raises:
            ValueError: If the percentile was not computed
        """
        if p not in self.percentiles:
            available = sorted(self.percentiles)
            raise ValueError(f"Percentile {p} not computed. Available: {available}")
        return list(self.percentiles[p])

    def to_dataframe(self) -> pd.DataFrame:
        """Get the statistics as a DataFrame with years as index."""
        data = {
            'Mean': self.mean,
            'Std Dev': self.std,
            'Median': self.median,
        }
        for p in sorted(self.percentiles):
            data[f"P{p:g}"] = self.percentiles[p]
        data['Mean Withdrawal'] = self.mean_withdrawal
        df = pd.DataFrame(data)
        df['Year'] = self.years
        return df.set_index('Year')

    def __repr__(self) -> str:
        return (f"AggregateResult(num_trials={self.num_trials}, "
                f"num_years={len(self.years)})")


class StatsAggregator:
    """Reduces a list of trials into an AggregateResult.

    The reduction only sums, sorts and indexes, so the order in which trials
    are supplied does not affect the output.

    Example:
        >>> trials = MonteCarloEngine().run(config)
        >>> result = StatsAggregator().aggregate(trials)
        >>> print(result.median[-1], result.success_rate)
    """

    def __init__(self, percentiles: Sequence[float] = DEFAULT_PERCENTILES):
        for p in percentiles:
            if not 0 <= p <= 100:
                raise ValueError(f"Percentile must be between 0 and 100: {p}")
        self.percentiles = tuple(percentiles)

    def aggregate(self, trials: Sequence[Trial]) -> AggregateResult:
        """Compute per-year statistics across trials.

        Args:
            trials: Trials of equal length

        Returns:
            AggregateResult for the supplied trials

        Raises:
            ValueError: If trials is empty or trial lengths differ
        """
        if len(trials) == 0:
            raise ValueError("Cannot aggregate an empty list of trials")

        num_years = len(trials[0])
        if any(len(trial) != num_years for trial in trials):
            raise ValueError("All trials must cover the same number of years")

        n = len(trials)
        # Shape (num_trials, num_years)
        balances = np.array([trial.balances for trial in trials], dtype=float)
        withdrawals = np.array([trial.withdrawals for trial in trials], dtype=float)
        ordered = np.sort(balances, axis=0)

        means = balances.mean(axis=0)
        if n > 1:
            stds = balances.std(axis=0, ddof=1)
        else:
            stds = np.zeros(num_years)

        bands = {
            p: tuple(float(v) for v in ordered[percentile_index(n, p)])
            for p in self.percentiles
        }
        median = tuple(float(v) for v in ordered[percentile_index(n, 50)])

        survived = sum(1 for trial in trials if not trial.depleted)

        return AggregateResult(
            years=tuple(result.year for result in trials[0]),
            num_trials=n,
            mean=tuple(float(v) for v in means),
            std=tuple(float(v) for v in stds),
            median=median,
            percentiles=bands,
            mean_withdrawal=tuple(float(v) for v in withdrawals.mean(axis=0)),
            success_rate=survived / n,
            final_balances=tuple(float(v) for v in balances[:, -1]),
        )
