# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""Configuration for Monte Carlo portfolio simulations."""

import math
import numbers
from dataclasses import dataclass
from typing import Optional, Sequence, TYPE_CHECKING

if TYPE_CHECKING:
    from .withdrawal import WithdrawalPolicy


class ConfigError(ValueError):
    """Raised when a simulation configuration is invalid."""


@dataclass(frozen=True)
class SimulationConfig:
    """Parameters for one batch of GBM portfolio trials.

    Attributes:
        initial_balance: Starting portfolio value. Must be positive.
        drift: Annual drift (mu) as decimal (e.g., 0.10 for 10%)
        volatility: Annual volatility (sigma) as decimal. Must be >= 0.
        horizon_years: Number of simulated years. Must be positive.
        withdrawal_policy: Policy consulted each active year. None disables
            withdrawals.
        withdrawal_start_year: First year (1-based) in which withdrawals are
            taken. Default 1.
        num_trials: Number of independent trials to run. Default 1000.
        random_seed: Optional seed for reproducible results. Default None.
    """
    initial_balance: float
    drift: float
    volatility: float
    horizon_years: int
    withdrawal_policy: Optional['WithdrawalPolicy'] = None
    withdrawal_start_year: int = 1
    num_trials: int = 1000
    random_seed: Optional[int] = None

    def __post_init__(self):
        for name in ("initial_balance", "drift", "volatility"):
            value = getattr(self, name)
            if (isinstance(value, bool) or not isinstance(value, numbers.Real)
                    or not math.isfinite(value)):
                raise ConfigError(f"{name} must be a finite number: {value!r}")
        for name in ("horizon_years", "withdrawal_start_year", "num_trials"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Integral):
                raise ConfigError(f"{name} must be an integer: {value!r}")

        if self.initial_balance <= 0:
            raise ConfigError(f"initial_balance must be positive: {self.initial_balance}")
        if self.volatility < 0:
            raise ConfigError(f"Volatility cannot be negative: {self.volatility}")
        if self.horizon_years < 1:
            raise ConfigError(f"horizon_years must be at least 1: {self.horizon_years}")
        if self.withdrawal_start_year < 1:
            raise ConfigError(
                f"withdrawal_start_year must be at least 1: {self.withdrawal_start_year}"
            )
        if self.num_trials < 1:
            raise ConfigError("num_trials must be at least 1")

    @property
    def withdrawals_enabled(self) -> bool:
        return self.withdrawal_policy is not None

    @classmethod
    def from_return_history(cls,
                            returns: Sequence[float],
                            initial_balance: float,
                            horizon_years: int,
                            **kwargs) -> 'SimulationConfig':
        """Build a config whose drift and volatility come from a return series.

        Drift is the arithmetic mean of the annual returns and volatility
        their sample standard deviation.

        Args:
            returns: Annual returns as decimals (e.g., 0.2502 for 25.02%)
            initial_balance: Starting portfolio value
            horizon_years: Number of simulated years
            **kwargs: Remaining SimulationConfig fields

        Raises:
            ConfigError: If the series is empty or the resulting config is invalid
        """
        from .results import mean, sample_std

        if len(returns) == 0:
            raise ConfigError("Cannot derive drift and volatility from an empty return series")

        return cls(
            initial_balance=initial_balance,
            drift=mean(returns),
            volatility=sample_std(returns),
            horizon_years=horizon_years,
            **kwargs,
        )
