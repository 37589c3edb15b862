"""
likelihood.py
-------------

Binomial likelihood and log posterior density for the angle model.

AngleLogDensity binds an AngleModel to a PuttingData set and exposes

    log_posterior_density(sigma) = log_prior(sigma)
        + sum_n log Binomial(successes_n | attempts_n, p(distance_n, sigma))

in three forms:

- __call__(sigma): pure and traceable; -inf outside sigma > 0. This is the
  callable handed to samplers.
- unconstrained(log_sigma): density of log_sigma (adds the log-Jacobian),
  for gradient-based engines working on the real line.
- log_posterior_density(sigma): checked; raises DomainError for sigma <= 0.

Capture angles and binomial coefficients are precomputed once per data set.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp
import numpy as np
from jax.scipy.special import gammaln, xlogy

from golfputt.data.dataset import PuttingData

from .angle_model import (
    _check_sigma,
    _failure_probability_from_angle,
    _success_probability_from_angle,
    sigma_degrees,
)


def log_binomial_coefficient(attempts, successes) -> jnp.ndarray:
    """log C(attempts, successes)."""
    n = jnp.asarray(attempts)
    k = jnp.asarray(successes)
    return gammaln(n + 1.0) - gammaln(k + 1.0) - gammaln(n - k + 1.0)


def log_binomial_pmf(successes, attempts, p, q=None, log_coef=None) -> jnp.ndarray:
    """
    log Binomial(successes | attempts, p).

    ``q`` may carry an accurately computed 1 - p; it defaults to 1 - p.
    ``log_coef`` may carry a precomputed log C(attempts, successes).
    Uses xlogy so that 0 * log(0) terms vanish at p in {0, 1}.
    """
    k = jnp.asarray(successes)
    n = jnp.asarray(attempts)
    q = 1.0 - p if q is None else q
    if log_coef is None:
        log_coef = log_binomial_coefficient(n, k)
    return log_coef + xlogy(k, p) + xlogy(n - k, q)


class AngleLogDensity:
    """
    Log posterior density of sigma for one data set.

    Parameters
    ----------
    model : AngleModel
        Supplies geometry and prior.
    data : PuttingData
        Observed putts.

    Raises
    ------
    TypeError
        If data is not a PuttingData.
    DomainError
        If any observed distance is below the capture threshold.
    """

    def __init__(self, model, data: PuttingData) -> None:
        if not isinstance(data, PuttingData):
            raise TypeError(f"data must be PuttingData, got {type(data)}")
        self.model = model
        self.data = data

        distance, attempts, successes = data.to_jax()
        # raises DomainError for distances inside the threshold
        self._angle = model.geometry.capture_angle(data.distance)
        self._attempts = attempts
        self._successes = successes
        self._log_coef = log_binomial_coefficient(attempts, successes)
        self._checked = jax.jit(self.__call__)

    def log_likelihood(self, sigma) -> jnp.ndarray:
        """
        Binomial log-likelihood; broadcasts over the shape of ``sigma``.
        """
        s = jnp.asarray(sigma)[..., None]
        p = _success_probability_from_angle(self._angle, s)
        q = _failure_probability_from_angle(self._angle, s)
        terms = log_binomial_pmf(
            self._successes, self._attempts, p, q, log_coef=self._log_coef
        )
        return jnp.sum(terms, axis=-1)

    def log_prior(self, sigma) -> jnp.ndarray:
        return self.model.prior.log_density(sigma)

    def __call__(self, sigma) -> jnp.ndarray:
        sigma = jnp.asarray(sigma)
        positive = sigma > 0
        # keep the likelihood branch finite so gradients stay nan-free
        safe = jnp.where(positive, sigma, 1.0)
        value = self.log_prior(safe) + self.log_likelihood(safe)
        return jnp.where(positive, value, -jnp.inf)

    def unconstrained(self, log_sigma) -> jnp.ndarray:
        """Log density of log_sigma: log p(exp(z) | data) + z."""
        return self(jnp.exp(log_sigma)) + log_sigma

    def log_posterior_density(self, sigma) -> jnp.ndarray:
        """
        Checked log posterior density.

        Raises
        ------
        DomainError
            If any sigma <= 0.
        """
        _check_sigma(sigma)
        return self._checked(jnp.asarray(sigma, dtype=jnp.result_type(float)))

    @staticmethod
    def sigma_degrees(sigma):
        return sigma_degrees(sigma)

    def __repr__(self) -> str:
        return f"AngleLogDensity(model={self.model!r}, data={self.data!r})"


def log_posterior_density(model, data: PuttingData, sigma) -> jnp.ndarray:
    """Functional form of AngleLogDensity(model, data).log_posterior_density."""
    return AngleLogDensity(model, data).log_posterior_density(np.asarray(sigma))
