"""
test_geometry.py
----------------

Capture angle: asin((hole_radius - ball_radius) / distance).
"""

import math

import jax.numpy as jnp
import numpy as np
import pytest

from golfputt.errors import DomainError
from golfputt.model import BALL_DIAMETER, HOLE_DIAMETER, PuttingGeometry, capture_angle


class TestPuttingGeometry:
    """Radii, threshold and validation of PuttingGeometry."""

    def test_defaults_are_regulation_sizes(self):
        g = PuttingGeometry()
        assert g.ball_diameter == BALL_DIAMETER == 1.68
        assert g.hole_diameter == HOLE_DIAMETER == 4.25

    def test_radii_are_half_diameters(self, geometry):
        assert geometry.ball_radius == pytest.approx(0.84)
        assert geometry.hole_radius == pytest.approx(2.125)
        assert geometry.threshold_distance == pytest.approx(1.285)

    def test_ball_larger_than_hole_rejected(self):
        with pytest.raises(DomainError):
            PuttingGeometry(ball_diameter=5.0, hole_diameter=4.25)

    def test_non_positive_diameter_rejected(self):
        with pytest.raises(DomainError):
            PuttingGeometry(ball_diameter=0.0, hole_diameter=4.25)

    def test_frozen(self, geometry):
        with pytest.raises(AttributeError):
            geometry.ball_diameter = 2.0


class TestCaptureAngle:
    """Values, vectorisation and domain errors of capture_angle."""

    def test_known_value(self, geometry):
        expected = math.asin(1.285 / 120.0)
        assert float(geometry.capture_angle(120.0)) == pytest.approx(
            expected, rel=1e-6
        )

    def test_vectorised(self, geometry):
        d = jnp.array([24.0, 120.0, 240.0])
        angles = geometry.capture_angle(d)
        assert angles.shape == (3,)
        # farther putts leave less room for error
        assert np.all(np.diff(np.asarray(angles)) < 0)

    def test_at_threshold_is_right_angle(self, geometry):
        angle = geometry.capture_angle(geometry.threshold_distance)
        assert float(angle) == pytest.approx(math.pi / 2, rel=1e-5)

    def test_inside_threshold_raises(self, geometry):
        with pytest.raises(DomainError):
            geometry.capture_angle(1.0)

    def test_any_short_distance_in_array_raises(self, geometry):
        with pytest.raises(DomainError):
            geometry.capture_angle([24.0, 1.0, 120.0])

    def test_function_form_rejects_inverted_radii(self):
        with pytest.raises(DomainError):
            capture_angle(120.0, ball_radius=2.2, hole_radius=2.125)
