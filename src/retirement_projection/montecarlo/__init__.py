# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Monte Carlo simulation module for retirement portfolio projections.

This module simulates portfolio balances under Geometric Brownian Motion with
percentage or inflation-adjusted fixed withdrawals, and reduces the trials
into per-year percentile bands.
"""

from .config import SimulationConfig, ConfigError
from .sampler import NormalSampler, UniformSource
from .withdrawal import WithdrawalPolicy, PercentageWithdrawal, FixedInflationWithdrawal
from .path_simulator import PathSimulator, YearResult, Trial
from .simulator import MonteCarloEngine
from .results import StatsAggregator, AggregateResult, mean, sample_std, percentile

__all__ = [
    'SimulationConfig',
    'ConfigError',
    'NormalSampler',
    'UniformSource',
    'WithdrawalPolicy',
    'PercentageWithdrawal',
    'FixedInflationWithdrawal',
    'PathSimulator',
    'YearResult',
    'Trial',
    'MonteCarloEngine',
    'StatsAggregator',
    'AggregateResult',
    'mean',
    'sample_std',
    'percentile',
]
