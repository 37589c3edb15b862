"""
base_posterior.py
-----------------

Abstract base class for posterior representations in golfputt.

Defines the common interface for all posterior types:

- MAPPosterior      : point estimate only
- LaplacePosterior  : log-normal approximation around the mode
- MCMCPosterior     : posterior draws from NUTS/Langevin

Different inference methods yield very different posterior objects
(single point, Gaussian, draws). A common interface lets downstream code
(predictive curves, parameter summaries) treat them uniformly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

import jax.numpy as jnp

from golfputt.model.angle_model import sigma_degrees


class BasePosterior(ABC):
    """
    Abstract base class for posterior wrappers.

    Notes
    -----
    - Each concrete posterior (MAP, Laplace, MCMC) must inherit from this class.
    - All must provide params, model, sample, log_prob and diagnostics.
    """

    def __init__(self, model):
        self._model = model

    @property
    @abstractmethod
    def params(self) -> dict:
        """Representative point estimate ``{"sigma": ...}``."""
        ...

    @property
    def model(self):
        """Return the associated model."""
        return self._model

    @abstractmethod
    def sample(self, n: int = 1, *, key=None) -> dict:
        """
        Draw sigma from the posterior.

        Returns
        -------
        dict
            ``{"sigma": jnp.ndarray with shape (n,)}``
        """
        ...

    @abstractmethod
    def log_prob(self, params: dict) -> jnp.ndarray:
        ...

    @abstractmethod
    def diagnostics(self):
        ...

    # ------------------------------------------------------------------
    # DERIVED QUANTITIES
    # ------------------------------------------------------------------
    @property
    def sigma_degrees(self) -> jnp.ndarray:
        """Point estimate of sigma in degrees."""
        return sigma_degrees(self.params["sigma"])

    def predict_prob(self, distance) -> jnp.ndarray:
        """
        Success probability at ``distance`` under the point estimate.

        Delegates to AngleModel.success_probability(), which validates inputs.
        """
        return self.model.success_probability(distance, self.params["sigma"])
