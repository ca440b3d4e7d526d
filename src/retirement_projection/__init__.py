# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Retirement Projection Engine

Monte Carlo projections of a retirement portfolio under Geometric Brownian
Motion, with percentage or inflation-adjusted fixed withdrawals, percentile
bands across trials, and historical S&P 500 return statistics.

Example usage:
    from retirement_projection import (
        SimulationConfig, FixedInflationWithdrawal, MonteCarloEngine
    )

    config = SimulationConfig(
        initial_balance=1_000_000, drift=0.07, volatility=0.15,
        horizon_years=30,
        withdrawal_policy=FixedInflationWithdrawal(40_000, 0.025),
        num_trials=10_000, random_seed=42,
    )
    result = MonteCarloEngine().simulate(config)
    df = result.to_dataframe()
"""

from .montecarlo import (
    SimulationConfig,
    ConfigError,
    NormalSampler,
    WithdrawalPolicy,
    PercentageWithdrawal,
    FixedInflationWithdrawal,
    PathSimulator,
    YearResult,
    Trial,
    MonteCarloEngine,
    StatsAggregator,
    AggregateResult,
)
from .history import (
    DataFetchError,
    ReturnHistory,
    embedded_history,
    load_historical_returns,
)

__version__ = "0.1.0"

__all__ = [
    'SimulationConfig',
    'ConfigError',
    'NormalSampler',
    'WithdrawalPolicy',
    'PercentageWithdrawal',
    'FixedInflationWithdrawal',
    'PathSimulator',
    'YearResult',
    'Trial',
    'MonteCarloEngine',
    'StatsAggregator',
    'AggregateResult',
    'DataFetchError',
    'ReturnHistory',
    'embedded_history',
    'load_historical_returns',
]
