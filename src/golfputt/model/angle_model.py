"""
angle_model.py
--------------

Angle-only putting model (Gelman & Nolan, 2002).

The golfer's aim angle error is Gaussian, N(0, sigma^2). A putt at distance x
drops when |error| < capture_angle(x), so

    p(success | x, sigma) = 2 * Phi(capture_angle(x) / sigma) - 1
                          = erf(capture_angle(x) / (sigma * sqrt(2)))

The erf form is used numerically; it is the same quantity without the
cancellation in ``2 * Phi - 1`` close to 1, and erfc gives log(1 - p) directly.

Observations are binomial counts:
    successes_n ~ Binomial(attempts_n, p(success | distance_n, sigma))

All numerics use JAX (jax.numpy as jnp) so the log density can be traced,
differentiated and jit-compiled by the inference engines.
"""

from __future__ import annotations

import math
from typing import Any

import jax.numpy as jnp
import numpy as np
from jax.scipy.special import erf, erfc

from golfputt.errors import DomainError

from .base import Model
from .geometry import PuttingGeometry
from .prior import HalfCauchyPrior

Params = dict[str, jnp.ndarray]

_SQRT2 = math.sqrt(2.0)
RAD_TO_DEG = 180.0 / math.pi


def sigma_degrees(sigma):
    """Convert sigma from radians to degrees (sigma * 180 / pi)."""
    return sigma * RAD_TO_DEG


def _check_sigma(sigma) -> None:
    s = np.asarray(sigma, dtype=float)
    if np.any(~(s > 0)):
        raise DomainError(f"sigma must be > 0, got {sigma}")


def _success_probability_from_angle(angle, sigma) -> jnp.ndarray:
    return erf(angle / (sigma * _SQRT2))


def _failure_probability_from_angle(angle, sigma) -> jnp.ndarray:
    return erfc(angle / (sigma * _SQRT2))


def success_probability(
    distance, sigma, geometry: PuttingGeometry | None = None
) -> jnp.ndarray:
    """
    Probability of holing a putt.

    Parameters
    ----------
    distance : float or array-like
        Distance(s) in inches.
    sigma : float or array-like
        Aim-angle standard deviation in radians; broadcast against distance.
    geometry : PuttingGeometry, optional
        Ball/hole sizes. Regulation sizes by default.

    Returns
    -------
    jnp.ndarray
        Probability in [0, 1].

    Raises
    ------
    DomainError
        If sigma <= 0 or a distance is below the geometric threshold.
    """
    geometry = geometry or PuttingGeometry()
    _check_sigma(sigma)
    angle = geometry.capture_angle(distance)
    return _success_probability_from_angle(angle, jnp.asarray(sigma))


class AngleModel(Model):
    """
    Angle-only putting success model.

    Parameters
    ----------
    geometry : PuttingGeometry, optional
        Ball and hole diameters (inches). Regulation sizes by default.
    prior : HalfCauchyPrior | HalfNormalPrior, optional
        Prior over sigma. Defaults to HalfCauchyPrior(scale=2.5).

    Notes
    -----
    Parameters are a PyTree ``{"sigma": jnp.ndarray}``. The unchecked methods
    (predict_prob and the callable returned by log_density) are traceable and
    are what the inference engines call; success_probability and
    capture_angle validate their inputs and raise DomainError.
    """

    def __init__(
        self,
        geometry: PuttingGeometry | None = None,
        prior: Any | None = None,
    ) -> None:
        super().__init__()
        self.geometry = geometry or PuttingGeometry()
        self.prior = prior or HalfCauchyPrior()

    def __repr__(self) -> str:
        return f"AngleModel(geometry={self.geometry!r}, prior={self.prior!r})"

    # ----------------------------------------------------------------------
    # CHECKED API
    # ----------------------------------------------------------------------
    def capture_angle(self, distance) -> jnp.ndarray:
        return self.geometry.capture_angle(distance)

    def success_probability(self, distance, sigma) -> jnp.ndarray:
        """Checked p(success | distance, sigma); see module docstring."""
        return success_probability(distance, sigma, self.geometry)

    # ----------------------------------------------------------------------
    # PREDICTION (traceable)
    # ----------------------------------------------------------------------
    def predict_prob(self, params: Params, distance) -> jnp.ndarray:
        """
        p(success) at ``distance`` for parameters ``params`` (no input checks).
        """
        angle = jnp.arcsin(self.geometry.threshold_distance / jnp.asarray(distance))
        return _success_probability_from_angle(angle, params["sigma"])

    def _forward(self, distances: jnp.ndarray, params: Params) -> jnp.ndarray:
        return self.predict_prob(params, distances)

    # ----------------------------------------------------------------------
    # LIKELIHOOD / POSTERIOR
    # ----------------------------------------------------------------------
    def log_density(self, data):
        """
        Bind data and return the pure log posterior density of sigma.

        Data is validated here, before any sampler sees it: distances below
        the capture threshold raise DomainError.
        """
        from .likelihood import AngleLogDensity  # local import to avoid cycles

        return AngleLogDensity(self, data)
