"""
prior.py
--------

Prior distributions over the aiming-error scale sigma.

Default:
- HalfCauchyPrior(scale=2.5): half-Cauchy with location 0, restricted to
  sigma > 0. Weakly informative on the radian scale.

Alternative:
- HalfNormalPrior(scale=1.0)

The physics does not pin down a unique prior, so AngleModel takes the prior
as a constructor argument instead of hard-coding one.

Connections
-----------
- AngleLogDensity adds log_density(sigma) to the binomial log-likelihood to
  form the log posterior.
- Both densities are normalised on (0, inf) and return -inf for sigma <= 0.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import jax.numpy as jnp


@dataclass(frozen=True)
class HalfCauchyPrior:
    """
    Half-Cauchy(0, scale) prior over sigma.

    Parameters
    ----------
    scale : float, default=2.5
        Cauchy scale parameter.
    """

    scale: float = 2.5

    def __post_init__(self):
        if self.scale <= 0:
            raise ValueError(f"scale must be positive, got {self.scale}")

    def log_density(self, sigma) -> jnp.ndarray:
        """
        log p(sigma) = log(2 / (pi * scale)) - log1p((sigma / scale)^2), sigma > 0.
        """
        sigma = jnp.asarray(sigma)
        logp = (
            math.log(2.0 / (math.pi * self.scale))
            - jnp.log1p((sigma / self.scale) ** 2)
        )
        return jnp.where(sigma > 0, logp, -jnp.inf)


@dataclass(frozen=True)
class HalfNormalPrior:
    """
    Half-Normal(0, scale) prior over sigma.

    Parameters
    ----------
    scale : float, default=1.0
        Standard deviation of the underlying normal.
    """

    scale: float = 1.0

    def __post_init__(self):
        if self.scale <= 0:
            raise ValueError(f"scale must be positive, got {self.scale}")

    def log_density(self, sigma) -> jnp.ndarray:
        sigma = jnp.asarray(sigma)
        logp = 0.5 * math.log(2.0 / math.pi) - math.log(self.scale) - 0.5 * (
            sigma / self.scale
        ) ** 2
        return jnp.where(sigma > 0, logp, -jnp.inf)

