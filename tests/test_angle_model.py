"""
test_angle_model.py
-------------------

Success probability p = 2 * Phi(capture_angle / sigma) - 1.
"""

import math

import jax.numpy as jnp
import numpy as np
import pytest

from golfputt.errors import DomainError
from golfputt.model import AngleModel, Model, sigma_degrees, success_probability


def _reference_probability(distance, sigma, threshold=1.285):
    angle = math.asin(threshold / distance)
    phi = 0.5 * (1.0 + math.erf(angle / sigma / math.sqrt(2.0)))
    return 2.0 * phi - 1.0


class TestSuccessProbability:
    """Bounds, monotonicity and limits of success_probability."""

    def test_matches_normal_cdf_form(self, geometry):
        p = success_probability(120.0, 0.05, geometry)
        assert float(p) == pytest.approx(_reference_probability(120.0, 0.05), rel=1e-5)

    @pytest.mark.parametrize("sigma", [0.001, 0.01, 0.05, 0.5, 5.0])
    def test_bounded(self, geometry, sigma):
        d = jnp.linspace(1.3, 600.0, 50)
        p = np.asarray(success_probability(d, sigma, geometry))
        assert np.all(p >= 0.0)
        assert np.all(p <= 1.0)

    def test_decreasing_in_distance(self, geometry):
        d = jnp.arange(24.0, 241.0, 12.0)
        p = np.asarray(success_probability(d, 0.03, geometry))
        assert np.all(np.diff(p) < 0)

    def test_decreasing_in_sigma(self, geometry):
        sigma = jnp.array([0.01, 0.02, 0.05, 0.1, 0.5])
        p = np.asarray(success_probability(120.0, sigma, geometry))
        assert np.all(np.diff(p) < 0)

    def test_limit_small_sigma(self, geometry):
        p = success_probability(120.0, 1e-4, geometry)
        assert float(p) == pytest.approx(1.0, abs=1e-6)

    def test_limit_large_sigma(self, geometry):
        p = success_probability(120.0, 1e4, geometry)
        assert float(p) < 1e-5

    def test_broadcasting(self, geometry):
        d = jnp.array([24.0, 120.0, 240.0])
        sigma = jnp.array([[0.01], [0.03]])
        assert success_probability(d, sigma, geometry).shape == (2, 3)

    @pytest.mark.parametrize("sigma", [0.0, -0.1, float("nan")])
    def test_non_positive_sigma_raises(self, geometry, sigma):
        with pytest.raises(DomainError):
            success_probability(120.0, sigma, geometry)

    def test_short_distance_raises(self, geometry):
        with pytest.raises(DomainError):
            success_probability(1.0, 0.05, geometry)


class TestAngleModel:
    """Method forms on AngleModel."""

    def test_defaults(self):
        model = AngleModel()
        assert model.geometry.hole_diameter == 4.25
        assert model.prior.scale == 2.5

    def test_checked_method_matches_function(self, model, geometry):
        assert float(model.success_probability(120.0, 0.05)) == pytest.approx(
            float(success_probability(120.0, 0.05, geometry))
        )

    def test_predict_prob_is_unchecked_form(self, model):
        params = {"sigma": jnp.array(0.05)}
        assert float(model.predict_prob(params, 120.0)) == pytest.approx(
            float(model.success_probability(120.0, 0.05)), rel=1e-6
        )

    def test_predict_with_params(self, model):
        d = jnp.array([24.0, 120.0])
        out = model.predict_with_params(d, {"sigma": jnp.array(0.03)})
        assert out.shape == (2,)

    def test_model_needs_only_log_density_and_forward(self, model, berry_data):
        class Wrapped(Model):
            def log_density(self, data):
                return model.log_density(data)

            def _forward(self, distances, params):
                return model.predict_prob(params, distances)

        fitted = Wrapped().fit(
            berry_data, inference="map", inference_config={"steps": 50}
        )
        assert float(fitted.posterior(kind="parameter").params["sigma"]) > 0

    def test_posterior_before_fit_raises(self, model):
        with pytest.raises(RuntimeError):
            model.posterior(jnp.array([120.0]))


def test_sigma_degrees_exact():
    sigma = np.array([0.01, 0.0267, 0.5])
    assert np.array_equal(sigma_degrees(sigma), sigma * (180.0 / math.pi))
