# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Standard-normal variate generation.

This module provides the NormalSampler class which turns an injected uniform
random source into N(0, 1) draws using the Box-Muller transform.
"""

import math
from typing import Optional, Protocol
import numpy as np


class UniformSource(Protocol):
    """Anything that yields floats uniformly distributed on [0, 1).

    numpy.random.Generator satisfies this protocol.
    """

    def random(self) -> float:
        ...


class NormalSampler:
    """Generates standard-normal variates via the Box-Muller transform.

    Each call to sample() consumes two uniform draws u1, u2 and returns
    ``sqrt(-2 ln u1) * cos(2 pi u2)``. The sine twin is discarded. A u1 of
    exactly zero is redrawn so the logarithm is always defined.

    Example:
        >>> sampler = NormalSampler.from_seed(42)
        >>> z = sampler.sample()
        >>> zs = sampler.sample_many(1000)
    """

    def __init__(self, uniform_source: UniformSource):
        """Initialize the sampler.

        Args:
            uniform_source: Object whose random() method returns floats in [0, 1)
        """
        self.uniform_source = uniform_source

    @classmethod
    def from_seed(cls, seed: Optional[int] = None) -> 'NormalSampler':
        """Create a sampler backed by numpy's default generator."""
        return cls(np.random.default_rng(seed))

    def _nonzero_uniform(self) -> float:
        u = self.uniform_source.random()
        while u == 0.0:
            u = self.uniform_source.random()
        return u

    def sample(self) -> float:
        """Draw one value from N(0, 1)."""
        u1 = self._nonzero_uniform()
        u2 = self.uniform_source.random()
        return math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)

    def sample_many(self, n: int) -> np.ndarray:
        """Draw n values from N(0, 1).

        Uses the same transform as sample(), vectorised when the uniform
        source is a numpy Generator.

        Args:
            n: Number of draws

        Returns:
            numpy array of shape (n,)
        """
        if n < 0:
            raise ValueError(f"n must be non-negative: {n}")
        if not isinstance(self.uniform_source, np.random.Generator):
            return np.array([self.sample() for _ in range(n)])

        u1 = self.uniform_source.random(n)
        # Redraw exact zeros before taking the log
        zeros = u1 == 0.0
        while zeros.any():
            u1[zeros] = self.uniform_source.random(int(zeros.sum()))
            zeros = u1 == 0.0
        u2 = self.uniform_source.random(n)
        return np.sqrt(-2.0 * np.log(u1)) * np.cos(2.0 * np.pi * u2)
