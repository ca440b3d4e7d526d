# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Withdrawal policies for the decumulation phase.

A policy turns the pre-withdrawal balance of an active year into a nominal
withdrawal request. Any running state a policy needs (such as the
inflation-adjusted amount) is an explicit accumulator: the simulator obtains
the starting value from initial_state(), passes it to request() and keeps
the returned value for the next year. Policies themselves are immutable and
can be shared by any number of trials.
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Tuple

from .config import ConfigError


class WithdrawalPolicy(ABC):
    """Base class for withdrawal policies."""

    def initial_state(self) -> float:
        """Accumulator value at the start of a trial."""
        return 0.0

    @abstractmethod
    def request(self,
                balance_before: float,
                years_active: int,
                state: float) -> Tuple[float, float]:
        """Compute the nominal withdrawal request for one active year.

        Args:
            balance_before: Portfolio value after growth, before withdrawal
            years_active: Active years elapsed before this one (0 on the
                first withdrawal year)
            state: Accumulator returned for the previous active year, or
                initial_state() on the first

        Returns:
            Tuple of (requested amount, accumulator for the next year)
        """


@dataclass(frozen=True)
class PercentageWithdrawal(WithdrawalPolicy):
    """Withdraw a fixed fraction of the current balance every year.

    Attributes:
        rate: Fraction of the pre-withdrawal balance, in [0, 1]
    """
    rate: float

    def __post_init__(self):
        if not 0.0 <= self.rate <= 1.0:
            raise ConfigError(f"Withdrawal rate must be between 0 and 1: {self.rate}")

    def request(self, balance_before, years_active, state):
        return balance_before * self.rate, state


@dataclass(frozen=True)
class FixedInflationWithdrawal(WithdrawalPolicy):
    """Withdraw a fixed amount that grows with inflation.

    The first active year withdraws initial_amount unchanged; each later
    active year first escalates the running amount by (1 + inflation_rate).

    Attributes:
        initial_amount: First-year withdrawal. Must be positive.
        inflation_rate: Annual escalation as decimal (e.g., 0.025 for 2.5%)
    """
    initial_amount: float
    inflation_rate: float = 0.0

    def __post_init__(self):
        if not math.isfinite(self.initial_amount) or self.initial_amount <= 0:
            raise ConfigError(
                f"Initial withdrawal amount must be positive: {self.initial_amount}"
            )
        # (1 + r) must stay positive or escalated requests flip sign
        if not math.isfinite(self.inflation_rate) or self.inflation_rate <= -1.0:
            raise ConfigError(
                f"Inflation rate must be greater than -1: {self.inflation_rate}"
            )

    def initial_state(self) -> float:
        return float(self.initial_amount)

    def request(self, balance_before, years_active, state):
        amount = state
        if years_active > 0:
            amount = amount * (1 + self.inflation_rate)
        return amount, amount

    def nominal_amount(self, years_active: int) -> float:
        """Closed-form request after years_active escalations."""
        return self.initial_amount * (1 + self.inflation_rate) ** years_active
