"""
Random variate generation for offer splits.

Beta variates are built from two Gamma draws (Marsaglia-Tsang squeeze
method), which in turn sit on a Box-Muller normal sampler. Every draw
consumes a single uniform source owned by the sampler, so two samplers never
share random state.
"""

from __future__ import annotations

import math
from typing import Optional, Protocol

import numpy as np

from .errors import SamplingError


DEFAULT_MAX_ITERATIONS = 10_000


class UniformSource(Protocol):
    """Anything with ``random() -> float`` in [0, 1): numpy Generators, ``random.Random``."""

    def random(self) -> float: ...


class RandomSampler:
    """Beta(alpha, beta) sampler driven by an injectable uniform source.

    The sampler does not validate its parameters. Callers are expected to
    clamp shape parameters to a small positive value before calling.
    """

    def __init__(
        self,
        rng: Optional[UniformSource] = None,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
    ) -> None:
        self.rng = rng if rng is not None else np.random.default_rng()
        self.max_iterations = max_iterations

    @classmethod
    def from_seed(
        cls, seed: Optional[int], max_iterations: int = DEFAULT_MAX_ITERATIONS
    ) -> "RandomSampler":
        return cls(np.random.default_rng(seed), max_iterations=max_iterations)

    def uniform(self) -> float:
        return float(self.rng.random())

    def _open_uniform(self) -> float:
        # (0, 1]: safe for log()
        return 1.0 - self.uniform()

    def normal01(self) -> float:
        """Standard normal variate via the Box-Muller transform."""
        u = self._open_uniform()
        v = self._open_uniform()
        return math.sqrt(-2.0 * math.log(u)) * math.cos(2.0 * math.pi * v)

    def gamma(self, shape: float) -> float:
        """Gamma(shape, 1) variate.

        Shapes below one are boosted: ``Gamma(1 + k) * U ** (1 / k)``.

        Raises:
            SamplingError: if no candidate is accepted within
                ``max_iterations`` attempts.
        """
        if shape < 1:
            u = self.uniform()
            return self.gamma(1.0 + shape) * u ** (1.0 / shape)

        d = shape - 1.0 / 3.0
        c = 1.0 / math.sqrt(9.0 * d)
        for _ in range(self.max_iterations):
            x = self.normal01()
            v = 1.0 + c * x
            if v <= 0:
                continue
            v = v * v * v
            u = self._open_uniform()
            if u < 1.0 - 0.0331 * (x * x) * (x * x):
                return d * v
            if math.log(u) < 0.5 * x * x + d * (1.0 - v + math.log(v)):
                return d * v

        raise SamplingError(
            f"Gamma sampler did not converge for shape={shape} "
            f"after {self.max_iterations} iterations"
        )

    def beta(self, alpha: float, beta_param: float) -> float:
        """Beta(alpha, beta_param) variate as ``X / (X + Y)`` of two Gamma draws."""
        x = self.gamma(alpha)
        y = self.gamma(beta_param)
        total = x + y
        if total <= 0:
            raise SamplingError(
                f"Degenerate Gamma draws for alpha={alpha}, beta={beta_param}"
            )
        return x / total
