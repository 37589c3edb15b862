"""
golfputt.model
==============

Model-layer API: everything model-related in one place.

Includes
--------
- AngleModel (core model) and the Model base class
- Geometry (PuttingGeometry, capture_angle)
- Priors (HalfCauchyPrior, HalfNormalPrior)
- Likelihood (AngleLogDensity, log_binomial_pmf)

All functions/classes use JAX arrays (jax.numpy as jnp) for autodiff,
optimization with Optax and sampling with NumPyro.

Typical usage
-------------
    from golfputt.model import AngleModel, PuttingGeometry, HalfCauchyPrior
"""

from .angle_model import AngleModel, sigma_degrees, success_probability
from .base import Model
from .geometry import BALL_DIAMETER, HOLE_DIAMETER, PuttingGeometry, capture_angle
from .likelihood import AngleLogDensity, log_binomial_pmf, log_posterior_density
from .prior import HalfCauchyPrior, HalfNormalPrior

__all__ = [
    # Base
    "Model",
    # Models
    "AngleModel",
    "success_probability",
    "sigma_degrees",
    # Geometry
    "PuttingGeometry",
    "capture_angle",
    "BALL_DIAMETER",
    "HOLE_DIAMETER",
    # Likelihood
    "AngleLogDensity",
    "log_binomial_pmf",
    "log_posterior_density",
    # Priors
    "HalfCauchyPrior",
    "HalfNormalPrior",
]
