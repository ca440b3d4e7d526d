# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Single-trial portfolio path simulation.

This module provides the PathSimulator class which evolves one portfolio
balance under Geometric Brownian Motion with annual steps, applying the
configured withdrawal policy once withdrawals become active.
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .config import SimulationConfig
from .sampler import NormalSampler

# One year per step
TIME_STEP = 1.0


@dataclass(frozen=True)
class YearResult:
    """Outcome of one simulated year.

    Attributes:
        year: 1-based year index
        balance: Ending balance after withdrawal, never negative
        withdrawal: Amount actually withdrawn, capped at balance_before_withdrawal
        balance_before_withdrawal: Balance after growth, before withdrawal
        log_return: Log-return increment drawn for the year
    """
    year: int
    balance: float
    withdrawal: float
    balance_before_withdrawal: float
    log_return: float


@dataclass(frozen=True)
class Trial:
    """One simulated balance trajectory."""
    index: int
    years: Tuple[YearResult, ...]

    def __len__(self) -> int:
        return len(self.years)

    def __iter__(self):
        return iter(self.years)

    def __getitem__(self, idx) -> YearResult:
        return self.years[idx]

    @property
    def balances(self) -> List[float]:
        return [y.balance for y in self.years]

    @property
    def withdrawals(self) -> List[float]:
        return [y.withdrawal for y in self.years]

    @property
    def final_balance(self) -> float:
        return self.years[-1].balance

    @property
    def depletion_year(self) -> Optional[int]:
        """First year the balance reached zero, or None if it never did."""
        for result in self.years:
            if result.balance == 0.0:
                return result.year
        return None

    @property
    def depleted(self) -> bool:
        return self.depletion_year is not None


class PathSimulator:
    """Simulates one portfolio trajectory under GBM with withdrawals.

    Each year:
    1. Draw z from the sampler
    2. Grow the balance by exp((mu - sigma^2/2) dt + sigma sqrt(dt) z)
    3. If withdrawals are active, take min(request, balance) from the policy
    4. Record the YearResult

    Example:
        >>> config = SimulationConfig(100_000, 0.07, 0.15, horizon_years=30,
        ...                           withdrawal_policy=PercentageWithdrawal(0.04))
        >>> trial = PathSimulator().simulate(config, NormalSampler.from_seed(1))
        >>> print(trial.final_balance)
    """

    def simulate(self,
                 config: SimulationConfig,
                 sampler: NormalSampler,
                 trial_index: int = 0) -> Trial:
        """Run one trial.

        Args:
            config: Simulation parameters
            sampler: Source of standard-normal draws private to this trial
            trial_index: Index recorded on the returned Trial

        Returns:
            Trial with one YearResult per simulated year
        """
        drift_term = (config.drift - 0.5 * config.volatility ** 2) * TIME_STEP
        diffusion_scale = config.volatility * math.sqrt(TIME_STEP)

        policy = config.withdrawal_policy
        state = policy.initial_state() if policy is not None else 0.0
        years_active = 0

        balance = float(config.initial_balance)
        years = []

        for year in range(1, config.horizon_years + 1):
            z = sampler.sample()
            log_return = drift_term + diffusion_scale * z
            balance_before = balance * math.exp(log_return)

            withdrawal = 0.0
            if policy is not None and year >= config.withdrawal_start_year:
                requested, state = policy.request(balance_before, years_active, state)
                years_active += 1
                withdrawal = min(requested, balance_before)
                balance = max(0.0, balance_before - withdrawal)
            else:
                balance = balance_before

            years.append(YearResult(
                year=year,
                balance=balance,
                withdrawal=withdrawal,
                balance_before_withdrawal=balance_before,
                log_return=log_return,
            ))

        return Trial(index=trial_index, years=tuple(years))
