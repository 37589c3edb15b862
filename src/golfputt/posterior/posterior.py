"""
posterior.py
------------

Concrete ParameterPosterior implementations.

This module provides:
- MAPPosterior: delta distribution at sigma_MAP (point estimate)
- LaplacePosterior: log-normal approximation, log(sigma) ~ N(mu, s^2)
- MCMCPosterior: retained draws from NUTSSampler / LangevinSampler
"""

from __future__ import annotations

import math

import jax.numpy as jnp
import jax.random as jr
import numpy as np

from golfputt.posterior.base_posterior import BasePosterior

from .diagnostics import DiagnosticReport, diagnose
from .draws import PosteriorDraws


class MAPPosterior(BasePosterior):
    """
    MAP (Maximum A Posteriori) posterior - delta distribution at sigma_MAP.

    Represents a point estimate with no uncertainty.

    Parameters
    ----------
    params : dict
        ``{"sigma": sigma_MAP}``
    model : AngleModel
        Model instance used for predictions
    info : dict, optional
        Optimizer information (final_loss, steps)
    """

    def __init__(self, params, model, info: dict | None = None):
        super().__init__(model)
        self._params = params
        self._info = dict(info or {})

    @property
    def params(self):
        """Return the MAP parameters."""
        return self._params

    def sample(self, n: int = 1, *, key=None):
        """
        Sample from delta distribution (returns repeated sigma_MAP).

        Notes
        -----
        Delta distribution has no randomness; ``key`` is ignored.
        """
        return {"sigma": jnp.full((n,), self._params["sigma"])}

    def log_prob(self, params: dict) -> jnp.ndarray:
        """
        0.0 if params match sigma_MAP, -inf otherwise.
        """
        match = jnp.allclose(params["sigma"], self._params["sigma"])
        return jnp.where(match, 0.0, -jnp.inf)

    def diagnostics(self) -> dict:
        """Optimizer information recorded by MAPOptimizer."""
        return dict(self._info)


class LaplacePosterior(BasePosterior):
    """
    Log-normal posterior approximation: log(sigma) ~ N(mean_log_sigma, std_log_sigma^2).

    Parameters
    ----------
    mean_log_sigma : float
        Mode of the log(sigma) posterior.
    std_log_sigma : float
        Standard deviation from the curvature at the mode.
    model : AngleModel
    info : dict, optional
    """

    def __init__(
        self,
        mean_log_sigma: float,
        std_log_sigma: float,
        model,
        info: dict | None = None,
    ):
        super().__init__(model)
        self.mean_log_sigma = float(mean_log_sigma)
        self.std_log_sigma = float(std_log_sigma)
        self._info = dict(info or {})

    @property
    def params(self):
        """exp(mode of log sigma), i.e. the median of the approximation."""
        return {"sigma": jnp.exp(jnp.asarray(self.mean_log_sigma))}

    def sample(self, n: int = 1, *, key=None):
        key = jr.PRNGKey(0) if key is None else key
        z = self.mean_log_sigma + self.std_log_sigma * jr.normal(key, (n,))
        return {"sigma": jnp.exp(z)}

    def log_prob(self, params: dict) -> jnp.ndarray:
        """Log-normal density of sigma."""
        sigma = jnp.asarray(params["sigma"])
        safe = jnp.where(sigma > 0, sigma, 1.0)
        z = (jnp.log(safe) - self.mean_log_sigma) / self.std_log_sigma
        logp = (
            -0.5 * z**2
            - jnp.log(safe)
            - math.log(self.std_log_sigma)
            - 0.5 * math.log(2.0 * math.pi)
        )
        return jnp.where(sigma > 0, logp, -jnp.inf)

    def diagnostics(self) -> dict:
        return {
            "mean_log_sigma": self.mean_log_sigma,
            "std_log_sigma": self.std_log_sigma,
            **self._info,
        }


class MCMCPosterior(BasePosterior):
    """
    Posterior represented by MCMC draws.

    Parameters
    ----------
    draws : PosteriorDraws
        Retained draws with sampler metadata.
    model : AngleModel

    Notes
    -----
    The draws are owned by the sampler output and never modified here.
    """

    def __init__(self, draws: PosteriorDraws, model):
        super().__init__(model)
        self._draws = draws

    @property
    def draws(self) -> PosteriorDraws:
        return self._draws

    @property
    def params(self):
        """Posterior mean of sigma."""
        return {"sigma": jnp.asarray(np.mean(self._draws.sigma))}

    def sample(self, n: int = 1, *, key=None):
        """
        Resample n stored draws (without replacement when n <= num_draws).
        """
        key = jr.PRNGKey(0) if key is None else key
        flat = jnp.asarray(self._draws.flat("sigma"))
        replace = n > flat.shape[0]
        idx = jr.choice(key, flat.shape[0], shape=(n,), replace=replace)
        return {"sigma": flat[idx]}

    def log_prob(self, params: dict) -> jnp.ndarray:
        raise NotImplementedError(
            "MCMC posteriors have no tractable density; use "
            "model.log_density(data) for the unnormalised posterior"
        )

    def diagnostics(self, **thresholds) -> DiagnosticReport:
        """
        Convergence report for the draws (see posterior.diagnostics.diagnose).

        Keyword arguments (min_ess_ratio, max_rhat, max_lag) are forwarded.
        """
        return diagnose(self._draws, **thresholds)

