# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Integration tests for Monte Carlo simulation.

These tests verify:
1. Balance invariants hold on every year of every stochastic trial
2. Withdrawal policies behave as specified on stochastic paths
3. The simulated distribution converges to its analytical moments
"""

import math
import unittest
import numpy as np

from ..montecarlo.config import SimulationConfig
from ..montecarlo.sampler import NormalSampler
from ..montecarlo.withdrawal import PercentageWithdrawal, FixedInflationWithdrawal
from ..montecarlo.results import StatsAggregator, sample_std
from ..montecarlo.simulator import MonteCarloEngine


class TestBalanceInvariants(unittest.TestCase):
    """Balance invariants across many stochastic trials."""

    @classmethod
    def setUpClass(cls):
        # Aggressive withdrawals on a volatile portfolio so many trials deplete
        cls.config = SimulationConfig(
            initial_balance=100_000,
            drift=0.05,
            volatility=0.30,
            horizon_years=30,
            withdrawal_policy=FixedInflationWithdrawal(12_000, 0.03),
            withdrawal_start_year=2,
            num_trials=500,
            random_seed=7,
        )
        cls.trials = MonteCarloEngine().run(cls.config)

    def test_some_trials_deplete(self):
        """The scenario exercises the depletion path."""
        self.assertTrue(any(t.depleted for t in self.trials))

    def test_balances_never_negative(self):
        for trial in self.trials:
            for result in trial:
                self.assertGreaterEqual(result.balance, 0.0)
                self.assertGreaterEqual(result.withdrawal, 0.0)

    def test_zero_balance_is_absorbing(self):
        """Once a trial hits zero it stays at zero."""
        for trial in self.trials:
            depletion = trial.depletion_year
            if depletion is None:
                continue
            for result in trial:
                if result.year > depletion:
                    self.assertEqual(result.balance, 0.0)
                    self.assertEqual(result.withdrawal, 0.0)

    def test_withdrawal_never_exceeds_balance(self):
        for trial in self.trials:
            for result in trial:
                self.assertLessEqual(result.withdrawal, result.balance_before_withdrawal)

    def test_fixed_inflation_schedule_on_stochastic_paths(self):
        """Actual withdrawal is min(A (1 + r)^(k - s), balance before withdrawal)."""
        start = self.config.withdrawal_start_year
        for trial in self.trials[:50]:
            for result in trial:
                if result.year < start:
                    self.assertEqual(result.withdrawal, 0.0)
                    continue
                nominal = 12_000 * 1.03 ** (result.year - start)
                expected = min(nominal, result.balance_before_withdrawal)
                self.assertAlmostEqual(result.withdrawal, expected, places=6)

    def test_success_rate_matches_trials(self):
        result = StatsAggregator().aggregate(self.trials)
        survived = sum(1 for t in self.trials if not t.depleted)
        self.assertAlmostEqual(result.success_rate, survived / len(self.trials))


class TestPercentagePolicyOnStochasticPaths(unittest.TestCase):
    """Percentage withdrawals on random paths."""

    def test_withdrawal_is_rate_times_balance(self):
        config = SimulationConfig(
            initial_balance=500_000,
            drift=0.06,
            volatility=0.18,
            horizon_years=25,
            withdrawal_policy=PercentageWithdrawal(0.05),
            withdrawal_start_year=6,
            num_trials=100,
            random_seed=3,
        )
        for trial in MonteCarloEngine().run(config):
            for result in trial:
                if result.year < 6:
                    self.assertEqual(result.withdrawal, 0.0)
                else:
                    self.assertAlmostEqual(
                        result.withdrawal, result.balance_before_withdrawal * 0.05
                    )
                self.assertGreater(result.balance, 0.0)


class TestStatisticalConvergence(unittest.TestCase):
    """Convergence of simulated moments (tolerance tests)."""

    def test_gbm_moments(self):
        """Mean of S1 ~ S0 exp(mu); mean log-return ~ mu - sigma^2 / 2."""
        s0, mu, sigma = 100.0, 0.10, 0.20
        config = SimulationConfig(s0, mu, sigma, horizon_years=1,
                                  num_trials=100_000, random_seed=2024)
        trials = MonteCarloEngine().run(config)

        finals = np.array([t.final_balance for t in trials])
        expected_mean = s0 * math.exp(mu)
        self.assertLess(abs(finals.mean() - expected_mean) / expected_mean, 0.02)

        log_returns = np.log(finals / s0)
        self.assertLess(abs(log_returns.mean() - (mu - 0.5 * sigma ** 2)), 0.01)

    def test_box_muller_distribution(self):
        """Moments and coverage of 100,000 Box-Muller draws."""
        sampler = NormalSampler.from_seed(12345)
        draws = np.array([sampler.sample() for _ in range(100_000)])

        self.assertLess(abs(draws.mean()), 0.01)
        self.assertLess(abs(sample_std(draws) - 1.0), 0.01)
        within_1 = np.mean(np.abs(draws) <= 1.0) * 100
        within_2 = np.mean(np.abs(draws) <= 2.0) * 100
        self.assertLess(abs(within_1 - 68.3), 2.0)
        self.assertLess(abs(within_2 - 95.4), 1.0)

    def test_vectorised_draws_match_distribution(self):
        draws = NormalSampler.from_seed(99).sample_many(100_000)
        self.assertLess(abs(draws.mean()), 0.01)
        self.assertLess(abs(draws.std(ddof=1) - 1.0), 0.01)

    def test_median_tracks_log_drift(self):
        """Median of S_T ~ S0 exp((mu - sigma^2/2) T) without withdrawals."""
        s0, mu, sigma, years = 1_000.0, 0.07, 0.15, 10
        config = SimulationConfig(s0, mu, sigma, horizon_years=years,
                                  num_trials=20_000, random_seed=5)
        result = MonteCarloEngine().simulate(config)
        expected_median = s0 * math.exp((mu - 0.5 * sigma ** 2) * years)
        self.assertLess(abs(result.median[-1] - expected_median) / expected_median, 0.03)


if __name__ == '__main__':
    unittest.main()
