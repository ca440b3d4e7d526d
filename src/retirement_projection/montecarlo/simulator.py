# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Monte Carlo simulation orchestrator.

This module provides the MonteCarloEngine class which runs many independent
portfolio trials, each with its own random stream.
"""

from typing import List, Optional, Sequence
import numpy as np

from .config import SimulationConfig
from .path_simulator import PathSimulator, Trial
from .results import AggregateResult, StatsAggregator, DEFAULT_PERCENTILES
from .sampler import NormalSampler


class MonteCarloEngine:
    """Runs independent GBM trials and aggregates them.

    Every trial draws from a private generator spawned from
    ``numpy.random.SeedSequence(config.random_seed)``. Trial i therefore
    depends only on the seed and i: the same seed reproduces every trial, and
    no two trials share generator state.

    The workflow:
    1. Spawn one child seed per trial
    2. Simulate each trial with its own NormalSampler
    3. Optionally reduce the trials with StatsAggregator

    Example:
        >>> config = SimulationConfig(1_000_000, 0.07, 0.15, horizon_years=30,
        ...                           withdrawal_policy=PercentageWithdrawal(0.04),
        ...                           num_trials=5000, random_seed=42)
        >>> result = MonteCarloEngine().simulate(config)
        >>> print(f"Success rate: {result.success_rate:.1%}")
    """

    def __init__(self, path_simulator: Optional[PathSimulator] = None):
        """Initialize the engine.

        Args:
            path_simulator: Simulator used for every trial. If None, uses
                           a default PathSimulator.
        """
        self.path_simulator = path_simulator or PathSimulator()

    def _trial_seeds(self, config: SimulationConfig) -> List[np.random.SeedSequence]:
        return np.random.SeedSequence(config.random_seed).spawn(config.num_trials)

    def run(self, config: SimulationConfig) -> List[Trial]:
        """Run all trials.

        Args:
            config: Simulation parameters

        Returns:
            List of config.num_trials trials, in index order
        """
        trials = []
        for trial_idx, seed in enumerate(self._trial_seeds(config)):
            sampler = NormalSampler(np.random.default_rng(seed))
            trials.append(self.path_simulator.simulate(config, sampler, trial_idx))
        return trials

    def run_trial(self, config: SimulationConfig, trial_index: int) -> Trial:
        """Run a single trial exactly as run() would produce it.

        Useful for debugging or detailed analysis of a single path. Only
        reproducible when config.random_seed is set.

        Args:
            config: Simulation parameters
            trial_index: Index of the trial within the batch

        Returns:
            The Trial at trial_index
        """
        if not 0 <= trial_index < config.num_trials:
            raise IndexError(
                f"trial_index {trial_index} out of range for {config.num_trials} trials"
            )
        seed = np.random.SeedSequence(config.random_seed).spawn(trial_index + 1)[-1]
        sampler = NormalSampler(np.random.default_rng(seed))
        return self.path_simulator.simulate(config, sampler, trial_index)

    def simulate(self,
                 config: SimulationConfig,
                 percentiles: Sequence[float] = DEFAULT_PERCENTILES) -> AggregateResult:
        """Run all trials and aggregate them.

        Returns:
            AggregateResult over config.num_trials trials
        """
        return StatsAggregator(percentiles).aggregate(self.run(config))
