"""
base.py
-------

Abstract base classes for inference engines.

All inference engines must implement a `fit(model, data)` method
that returns a posterior object.

- InferenceEngine : MAPOptimizer, LaplaceApproximation, samplers
- MCMCSampler     : shared configuration for the Markov chain samplers
  (NUTSSampler, LangevinSampler). Samplers only see the model's pure log
  density, so any sampler implementing `sample(log_density)` can be swapped in.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import jax.numpy as jnp
import jax.random as jr
import numpy as np

from golfputt.errors import DomainError


class InferenceEngine(ABC):
    """
    Abstract interface for inference engines.

    Methods
    -------
    fit(model, data) -> ParameterPosterior
        Fit model parameters to data and return a posterior object.
    """

    @abstractmethod
    def fit(self, model: Any, data: Any) -> Any:
        """
        Fit model parameters to data.

        Parameters
        ----------
        model : AngleModel
            Putting model to fit.
        data : PuttingData
            Observed putts.

        Returns
        -------
        ParameterPosterior
            Posterior object wrapping fitted params or draws and the model.
        """
        ...


class MCMCSampler(InferenceEngine):
    """
    Common configuration of the Markov chain samplers.

    Parameters
    ----------
    num_samples : int, default=1000
        Retained draws per chain.
    num_warmup : int | None, default=None
        Warm-up (adaptation) iterations per chain, excluded from the draws.
        Defaults to num_samples.
    num_chains : int, default=4
        Independent chains.
    init_sigma : float | sequence of float | None
        Starting value(s) of sigma, one shared value or one per chain.
        If None, each chain starts at log(sigma) ~ Uniform(-2, 2).
    seed : int, default=0
        PRNG seed for initialisation and transitions.
    """

    name = "mcmc"

    def __init__(
        self,
        num_samples: int = 1000,
        num_warmup: int | None = None,
        num_chains: int = 4,
        *,
        init_sigma=None,
        seed: int = 0,
    ):
        if int(num_samples) < 1:
            raise ValueError(f"num_samples must be >= 1, got {num_samples}")
        if int(num_chains) < 1:
            raise ValueError(f"num_chains must be >= 1, got {num_chains}")
        if num_warmup is not None and int(num_warmup) < 0:
            raise ValueError(f"num_warmup must be >= 0, got {num_warmup}")
        if init_sigma is not None:
            init = np.asarray(init_sigma, dtype=float).reshape(-1)
            if np.any(~(init > 0)):
                raise DomainError(f"init_sigma must be > 0, got {init_sigma}")
            if init.size not in (1, int(num_chains)):
                raise ValueError(
                    f"init_sigma must be a scalar or have one value per chain "
                    f"({num_chains}), got {init.size}"
                )
        self.num_samples = int(num_samples)
        self.num_warmup = self.num_samples if num_warmup is None else int(num_warmup)
        self.num_chains = int(num_chains)
        self.init_sigma = init_sigma
        self.seed = int(seed)

    def _initial_log_sigma(self, key) -> jnp.ndarray:
        """Starting log(sigma) per chain, shape (num_chains,)."""
        if self.init_sigma is not None:
            init = jnp.log(jnp.asarray(self.init_sigma, dtype=jnp.result_type(float)))
            return jnp.broadcast_to(init.reshape(-1), (self.num_chains,))
        return jr.uniform(key, (self.num_chains,), minval=-2.0, maxval=2.0)

    @abstractmethod
    def sample(self, log_density):
        """
        Draw from the posterior defined by ``log_density``.

        Parameters
        ----------
        log_density : AngleLogDensity
            Pure log density; only its ``unconstrained(log_sigma)`` form is used.

        Returns
        -------
        PosteriorDraws
        """
        ...

    def fit(self, model, data):
        """
        Sample the posterior of ``model`` given ``data``.

        Data and geometry are validated while binding the log density, before
        any chain runs.

        Returns
        -------
        MCMCPosterior
        """
        from golfputt.posterior.posterior import MCMCPosterior

        log_density = model.log_density(data)
        draws = self.sample(log_density)
        return MCMCPosterior(draws=draws, model=model)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(num_samples={self.num_samples}, "
            f"num_warmup={self.num_warmup}, num_chains={self.num_chains}, "
            f"seed={self.seed})"
        )
