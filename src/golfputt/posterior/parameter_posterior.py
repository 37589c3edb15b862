"""
parameter_posterior.py
---------------------

Protocol for posterior distributions over sigma.

This module defines the ParameterPosterior interface representing
p(sigma | data), used for research workflows: diagnostics, parameter
uncertainty, sampling.

Design
------
Different inference engines produce different posterior representations:
- MAP: delta distribution at sigma_MAP
- Laplace: log-normal approximation
- MCMC: collection of draws

All implement a common protocol for polymorphic use.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

import jax.numpy as jnp

if TYPE_CHECKING:
    import jax


@runtime_checkable
class ParameterPosterior(Protocol):
    """
    Protocol for posterior distributions over sigma.

    Returned by InferenceEngine.fit(model, data).
    """

    @property
    def params(self) -> dict:
        """
        Point estimate ``{"sigma": ...}``.

        Notes
        -----
        - MAP: sigma_MAP
        - Laplace: exp(mode of log sigma)
        - MCMC: posterior mean of the draws
        """
        ...

    @property
    def model(self):
        """Associated AngleModel."""
        ...

    def sample(self, n: int, *, key: jax.Array) -> dict:
        """
        Sample sigma from p(sigma | data).

        Returns
        -------
        dict
            ``{"sigma": jnp.ndarray with shape (n,)}``
        """
        ...

    def log_prob(self, params: dict) -> jnp.ndarray:
        """
        Evaluate log p(sigma | data) at given parameters.

        Raises
        ------
        NotImplementedError
            For MCMC posteriors (no tractable density)
        """
        ...

    def diagnostics(self) -> dict:
        """
        Return inference-specific diagnostic information.

        MAP:
            - final_loss: negative log posterior at MAP
        Laplace:
            - curvature, map_sigma
        MCMC:
            - DiagnosticReport (ESS, R-hat, autocorrelation, divergences)
        """
        ...

    def predict_prob(self, distance) -> jnp.ndarray:
        """
        Success probability at ``distance`` using the point estimate.

        For uncertainty quantification, use AnglePredictivePosterior instead.
        """
        ...
