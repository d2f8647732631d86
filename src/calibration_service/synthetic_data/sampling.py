"""
Sampling from statistical distributions

This module contains utilities for sampling from scipy.stats distributions
selected by name from a registry.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol

import numpy as np
from numpy.random import Generator
from numpy.typing import NDArray
from scipy import stats

from calibration_service.core.utils import get_rng


class FrozenRV(Protocol):
    def rvs(
        self, size: Any, random_state: Any
    ) -> NDArray[np.floating[Any]]: ...


@dataclass
class ScipyDistribution:
    """
    Wrapper for a frozen scipy.stats distribution.

    Examples:
        >>> dist = ScipyDistribution(stats.norm(loc=0, scale=1))
    """

    dist: FrozenRV

    def sample(self, n: int, rng: Generator) -> NDArray[np.float64]:
        samples: NDArray[np.float64] = np.asarray(
            self.dist.rvs(size=n, random_state=rng), dtype=np.float64
        )
        return samples


DistributionGenerator = Callable[..., ScipyDistribution]


class SamplerRegistry:
    def __init__(self) -> None:
        self._samplers: dict[str, DistributionGenerator] = {}

    def register(
        self, name: str
    ) -> Callable[[DistributionGenerator], DistributionGenerator]:
        def decorator(
            func: DistributionGenerator,
        ) -> DistributionGenerator:
            self._samplers[name] = func
            return func

        return decorator

    def get_sampler(
        self, name: str, params: dict[str, float | None]
    ) -> ScipyDistribution:
        if name not in self._samplers:
            raise ValueError(f"Sampler {name} not registered")
        return self._samplers[name](**params)

    @property
    def names(self) -> list[str]:
        return sorted(self._samplers)


registry = SamplerRegistry()


@registry.register("normal")
def normal(*, mean: float = 0.0, std: float = 1.0) -> ScipyDistribution:
    """Normal distribution."""
    return ScipyDistribution(stats.norm(loc=mean, scale=std))


@registry.register("uniform")
def uniform(*, low: float = -1.0, high: float = 1.0) -> ScipyDistribution:
    """Uniform distribution on [low, high]."""
    return ScipyDistribution(stats.uniform(loc=low, scale=high - low))


@registry.register("truncated_normal")
def truncated_normal(
    *,
    mean: float = 0.0,
    std: float = 1.0,
    lower: float | None = None,
    upper: float | None = None,
) -> ScipyDistribution:
    """
    Truncated normal distribution.

    Args:
        mean: Mean of the underlying normal distribution.
        std: Standard deviation of the underlying normal distribution.
        lower: Lower bound (None = unbounded).
        upper: Upper bound (None = unbounded).
    """
    a_std = (lower - mean) / std if lower is not None else -np.inf
    b_std = (upper - mean) / std if upper is not None else np.inf
    return ScipyDistribution(
        stats.truncnorm(a_std, b_std, loc=mean, scale=std)
    )


def draw_sample(
    n: int,
    distribution_name: str = "normal",
    distribution_params: dict[str, float | None] | None = None,
    rng: Generator | None = None,
) -> NDArray[np.float64]:
    """
    Sample values from a registered distribution.

    Args:
        n: Number of values.
        distribution_name: Name of the distribution to sample from.
        distribution_params: Parameter values to pass to the distribution sampler.
        rng: Random number generator.

    Returns:
        Array of shape (n,) with sampled values.
    """
    if rng is None:
        rng = get_rng()

    if distribution_params is None:
        distribution_params = {}

    distribution = registry.get_sampler(distribution_name, distribution_params)

    return distribution.sample(n, rng)
