"""
geometry.py
-----------

Putting geometry: the capture half-angle.

A putt of length ``distance`` goes in when the aim-angle error is smaller than

    capture_angle = asin((hole_radius - ball_radius) / distance)

i.e. the ball centre must pass within ``hole_radius - ball_radius`` of the
hole centre. Distances shorter than that threshold make the arcsine argument
exceed 1 and are rejected with DomainError.

All lengths share one unit (inches throughout golfputt).
"""

from __future__ import annotations

from dataclasses import dataclass

import jax.numpy as jnp
import numpy as np

from golfputt.errors import DomainError

# Regulation sizes in inches
BALL_DIAMETER = 1.68
HOLE_DIAMETER = 4.25


def _capture_angle(distance, ball_radius, hole_radius) -> jnp.ndarray:
    """Unchecked, traceable form of capture_angle()."""
    return jnp.arcsin((hole_radius - ball_radius) / distance)


def capture_angle(distance, ball_radius: float, hole_radius: float) -> jnp.ndarray:
    """
    Maximum aim-angle deviation (radians) that still holes the putt.

    Parameters
    ----------
    distance : float or array-like
        Distance(s) from ball to hole.
    ball_radius, hole_radius : float
        Radii in the same unit as ``distance``.

    Returns
    -------
    jnp.ndarray
        Capture half-angle, same shape as ``distance``.

    Raises
    ------
    DomainError
        If ``ball_radius >= hole_radius`` or any ``distance`` is shorter than
        ``hole_radius - ball_radius``.
    """
    if not ball_radius < hole_radius:
        raise DomainError(
            f"ball_radius ({ball_radius}) must be smaller than "
            f"hole_radius ({hole_radius})"
        )
    threshold = hole_radius - ball_radius
    d = np.asarray(distance, dtype=float)
    if np.any(d < threshold):
        raise DomainError(
            f"distance must be >= hole_radius - ball_radius = {threshold:g}, "
            f"got min distance {float(d.min()):g}"
        )
    return _capture_angle(jnp.asarray(d), ball_radius, hole_radius)


@dataclass(frozen=True)
class PuttingGeometry:
    """
    Ball and hole sizes.

    Parameters
    ----------
    ball_diameter : float, default=1.68
        Ball diameter in inches.
    hole_diameter : float, default=4.25
        Hole diameter in inches.
    """

    ball_diameter: float = BALL_DIAMETER
    hole_diameter: float = HOLE_DIAMETER

    def __post_init__(self):
        if self.ball_diameter <= 0 or self.hole_diameter <= 0:
            raise DomainError("ball_diameter and hole_diameter must be positive")
        if not self.ball_diameter < self.hole_diameter:
            raise DomainError(
                f"ball_diameter ({self.ball_diameter}) must be smaller than "
                f"hole_diameter ({self.hole_diameter}); no putt could drop"
            )

    @property
    def ball_radius(self) -> float:
        return self.ball_diameter / 2.0

    @property
    def hole_radius(self) -> float:
        return self.hole_diameter / 2.0

    @property
    def threshold_distance(self) -> float:
        """Shortest distance for which the capture angle is defined."""
        return self.hole_radius - self.ball_radius

    def capture_angle(self, distance) -> jnp.ndarray:
        """Checked capture angle for this geometry (see module docstring)."""
        return capture_angle(distance, self.ball_radius, self.hole_radius)
