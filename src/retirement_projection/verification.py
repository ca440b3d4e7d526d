# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Verification suite for the projection engine.

Each check runs a small, known scenario through the engine and compares the
outcome with its analytical expectation. Checks return CheckResult objects;
rendering them is left to the report module.
"""

import math
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from .history import ReturnHistory, load_historical_returns
from .montecarlo import (
    FixedInflationWithdrawal,
    MonteCarloEngine,
    NormalSampler,
    PathSimulator,
    PercentageWithdrawal,
    SimulationConfig,
    percentile,
    sample_std,
)

# Sections of the report
SECTION_MONTE_CARLO = "Monte Carlo calculation"
SECTION_HISTORICAL = "Historical data statistics"
SECTION_DATA_SOURCE = "Historical data source"


@dataclass(frozen=True)
class CheckResult:
    """Outcome of one verification check.

    Attributes:
        name: Short description of what was checked
        section: Report section the check belongs to
        passed: Whether the outcome met its expectation. None for
            informational checks with no pass criterion.
        details: Named values (expected, actual, error, ...) for the report
        rows: Optional per-year or per-item rows for the report
    """
    name: str
    section: str
    passed: Optional[bool]
    details: Dict[str, float] = field(default_factory=dict)
    rows: List[Dict[str, float]] = field(default_factory=list)


def _deterministic_config(initial_balance, growth, horizon_years, **kwargs):
    # Zero volatility turns GBM into fixed growth of exp(drift) per year
    return SimulationConfig(
        initial_balance=initial_balance,
        drift=math.log(growth),
        volatility=0.0,
        horizon_years=horizon_years,
        num_trials=1,
        **kwargs,
    )


def _year_rows(trial) -> List[Dict[str, float]]:
    rows = []
    for result in trial:
        before = result.balance_before_withdrawal
        rows.append({
            'year': result.year,
            'balance': result.balance,
            'withdrawal': result.withdrawal,
            'rate': result.withdrawal / before if before > 0 else 0.0,
        })
    return rows


def check_gbm_convergence(num_trials: int = 100_000,
                          seed: Optional[int] = None,
                          initial_balance: float = 100.0,
                          drift: float = 0.10,
                          volatility: float = 0.20) -> CheckResult:
    """Mean one-year balance should approach S0 * exp(mu); mean log-return mu - sigma^2/2."""
    config = SimulationConfig(
        initial_balance=initial_balance,
        drift=drift,
        volatility=volatility,
        horizon_years=1,
        num_trials=num_trials,
        random_seed=seed,
    )
    trials = MonteCarloEngine().run(config)

    mean_value = sum(trial.final_balance for trial in trials) / num_trials
    expected_mean = initial_balance * math.exp(drift)
    mean_error = abs(mean_value - expected_mean) / expected_mean

    mean_log_return = sum(math.log(trial.final_balance / initial_balance)
                          for trial in trials) / num_trials
    expected_log_return = drift - 0.5 * volatility ** 2
    log_error = abs(mean_log_return - expected_log_return)

    return CheckResult(
        name="Geometric Brownian Motion",
        section=SECTION_MONTE_CARLO,
        passed=mean_error < 0.02 and log_error < 0.01,
        details={
            'expected_mean': expected_mean,
            'actual_mean': mean_value,
            'mean_error_pct': mean_error * 100,
            'expected_log_return': expected_log_return,
            'actual_log_return': mean_log_return,
            'log_return_error': log_error,
        },
    )


def check_percentage_withdrawal() -> CheckResult:
    """4% of balance from year 3 on at 10% deterministic growth."""
    config = _deterministic_config(
        100_000, 1.10, 5,
        withdrawal_policy=PercentageWithdrawal(0.04),
        withdrawal_start_year=3,
    )
    trial = PathSimulator().simulate(config, NormalSampler.from_seed(0))

    expected_year3 = 121_000 * 1.10 * (1 - 0.04)
    actual_year3 = trial[2].balance
    return CheckResult(
        name="Percentage-based withdrawal",
        section=SECTION_MONTE_CARLO,
        passed=abs(actual_year3 - expected_year3) < 1,
        details={'expected_year3': expected_year3, 'actual_year3': actual_year3},
        rows=_year_rows(trial),
    )


def check_fixed_withdrawal_with_inflation() -> CheckResult:
    """40,000 escalating at 2.5% from year 2 on a 1,000,000 portfolio."""
    policy = FixedInflationWithdrawal(40_000, 0.025)
    config = _deterministic_config(
        1_000_000, 1.10, 5,
        withdrawal_policy=policy,
        withdrawal_start_year=2,
    )
    trial = PathSimulator().simulate(config, NormalSampler.from_seed(0))

    expected_year3 = policy.nominal_amount(1)
    actual_year3 = trial[2].withdrawal
    return CheckResult(
        name="Fixed withdrawal with inflation",
        section=SECTION_MONTE_CARLO,
        passed=abs(actual_year3 - expected_year3) < 1,
        details={'expected_year3_withdrawal': expected_year3,
                 'actual_year3_withdrawal': actual_year3},
        rows=_year_rows(trial),
    )


def check_withdrawal_limit(portfolio_value: float = 30_000,
                           requested: float = 40_000) -> CheckResult:
    """A request larger than the portfolio takes the whole portfolio and no more."""
    config = SimulationConfig(
        initial_balance=portfolio_value,
        drift=0.0,
        volatility=0.0,
        horizon_years=1,
        withdrawal_policy=FixedInflationWithdrawal(requested),
        num_trials=1,
    )
    result = PathSimulator().simulate(config, NormalSampler.from_seed(0))[0]
    return CheckResult(
        name="Withdrawal limit",
        section=SECTION_MONTE_CARLO,
        passed=result.withdrawal == portfolio_value and result.balance == 0.0,
        details={'portfolio': portfolio_value,
                 'requested': requested,
                 'actual_withdrawal': result.withdrawal,
                 'ending_balance': result.balance},
    )


def check_percentiles() -> CheckResult:
    """Nearest-rank percentiles of 1..100."""
    data = list(range(1, 101))
    p5, p50, p95 = (percentile(data, p) for p in (5, 50, 95))
    return CheckResult(
        name="Percentile calculations",
        section=SECTION_MONTE_CARLO,
        passed=p5 <= 6 and p50 in (50, 51) and p95 >= 95,
        details={'p5': p5, 'p50': p50, 'p95': p95},
    )


def check_compound_returns(initial: float = 10_000,
                           annual_return: float = 0.17,
                           years: int = 30) -> CheckResult:
    """Discrete versus continuous compounding over a long horizon."""
    discrete = initial * (1 + annual_return) ** years
    continuous = initial * math.exp(annual_return * years)
    config = _deterministic_config(initial, 1 + annual_return, years)
    simulated = PathSimulator().simulate(config, NormalSampler.from_seed(0)).final_balance
    expected_multiple = (1 + annual_return) ** years
    return CheckResult(
        name="Compound returns",
        section=SECTION_MONTE_CARLO,
        passed=abs(simulated / initial - expected_multiple) < 0.1,
        details={'discrete': discrete,
                 'continuous': continuous,
                 'simulated': simulated,
                 'multiple': simulated / initial},
    )


def check_box_muller(num_samples: int = 100_000, seed: Optional[int] = None) -> CheckResult:
    """Moments and coverage of the Box-Muller sampler."""
    sampler = NormalSampler.from_seed(seed)
    samples = [sampler.sample() for _ in range(num_samples)]

    sample_mean = sum(samples) / num_samples
    std_dev = sample_std(samples)
    within_1 = sum(1 for z in samples if abs(z) <= 1) / num_samples * 100
    within_2 = sum(1 for z in samples if abs(z) <= 2) / num_samples * 100

    return CheckResult(
        name="Box-Muller transform",
        section=SECTION_MONTE_CARLO,
        passed=(abs(sample_mean) < 0.01
                and abs(std_dev - 1) < 0.01
                and abs(within_1 - 68.3) < 2
                and abs(within_2 - 95.4) < 1),
        details={'mean': sample_mean,
                 'std': std_dev,
                 'within_1_sigma_pct': within_1,
                 'within_2_sigma_pct': within_2},
    )


def describe_history(history: ReturnHistory, recent_years: Optional[int] = None) -> CheckResult:
    """Mean and sample standard deviation of the full or trailing history."""
    window = history.recent(recent_years) if recent_years else history
    stats = window.statistics()
    if recent_years:
        name = f"Recent {stats.num_years} years ({stats.oldest_year}-{stats.newest_year})"
        rows = [{'year': year, 'return': ret} for year, ret in zip(window.years, window.returns)]
    else:
        name = f"Full history ({stats.oldest_year}-{stats.newest_year})"
        rows = []
    return CheckResult(
        name=name,
        section=SECTION_HISTORICAL,
        passed=None,
        details={'num_years': stats.num_years, 'mean': stats.mean, 'std': stats.std},
        rows=rows,
    )


def check_history_source(history: ReturnHistory) -> CheckResult:
    """Report where the history came from and its boundary years."""
    return CheckResult(
        name=f"Loaded from {history.source}",
        section=SECTION_DATA_SOURCE,
        passed=len(history) > 0,
        details={'num_years': len(history),
                 'newest_year': history.years[0],
                 'newest_return': history.returns[0],
                 'oldest_year': history.years[-1],
                 'oldest_return': history.returns[-1]},
    )


def run_verification(seed: Optional[int] = None,
                     history: Optional[ReturnHistory] = None,
                     loader: Callable[[], ReturnHistory] = load_historical_returns) -> List[CheckResult]:
    """Run every check.

    Args:
        seed: Seed for the stochastic checks. None draws fresh entropy.
        history: Return history to describe. If None, calls loader once.
        loader: Function that loads the history

    Returns:
        List of CheckResult in report order
    """
    if history is None:
        history = loader()

    return [
        check_gbm_convergence(seed=seed),
        check_percentage_withdrawal(),
        check_fixed_withdrawal_with_inflation(),
        check_withdrawal_limit(),
        check_percentiles(),
        check_compound_returns(),
        check_box_muller(seed=seed),
        describe_history(history),
        describe_history(history, recent_years=15),
        check_history_source(history),
    ]
