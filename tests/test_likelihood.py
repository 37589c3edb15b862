"""
test_likelihood.py
------------------

Binomial likelihood and log posterior density of sigma.
"""

import math

import jax
import jax.numpy as jnp
import numpy as np
import pytest

from golfputt.data import PuttingData
from golfputt.errors import DomainError
from golfputt.model import (
    AngleLogDensity,
    AngleModel,
    HalfNormalPrior,
    log_binomial_pmf,
    log_posterior_density,
)


def _expected_log_posterior(sigma, distance=120.0, attempts=200, successes=100):
    """Direct evaluation with the standard library."""
    scale = 2.5
    log_prior = math.log(2.0 / (math.pi * scale)) - math.log1p((sigma / scale) ** 2)
    angle = math.asin((4.25 / 2 - 1.68 / 2) / distance)
    p = 2.0 * (0.5 * (1.0 + math.erf(angle / sigma / math.sqrt(2.0)))) - 1.0
    log_coef = (
        math.lgamma(attempts + 1)
        - math.lgamma(successes + 1)
        - math.lgamma(attempts - successes + 1)
    )
    log_lik = (
        log_coef
        + successes * math.log(p)
        + (attempts - successes) * math.log(1.0 - p)
    )
    return log_prior + log_lik


class TestLogBinomialPMF:
    """log Binomial(k | n, p)."""

    def test_matches_direct_formula(self):
        value = log_binomial_pmf(3, 10, 0.3)
        expected = math.log(math.comb(10, 3) * 0.3**3 * 0.7**7)
        assert float(value) == pytest.approx(expected, rel=1e-5)

    def test_edge_probabilities(self):
        assert float(log_binomial_pmf(0, 10, 0.0)) == pytest.approx(0.0, abs=1e-6)
        assert float(log_binomial_pmf(10, 10, 1.0)) == pytest.approx(0.0, abs=1e-6)

    def test_precomputed_coefficient(self):
        log_coef = math.log(math.comb(10, 3))
        with_coef = log_binomial_pmf(3, 10, 0.3, log_coef=log_coef)
        assert float(with_coef) == pytest.approx(float(log_binomial_pmf(3, 10, 0.3)))

    def test_log_likelihood_is_sum_of_pmf_terms(self, model, berry_data):
        distance, attempts, successes = berry_data.to_numpy()
        p = model.success_probability(distance, 0.027)
        expected = jnp.sum(log_binomial_pmf(successes, attempts, p))
        value = AngleLogDensity(model, berry_data).log_likelihood(0.027)
        assert float(value) == pytest.approx(float(expected), rel=1e-4)


class TestAngleLogDensity:
    """Pure, checked and unconstrained forms of the log posterior."""

    def test_single_observation_end_to_end(self, model, single_data):
        ld = AngleLogDensity(model, single_data)
        value = ld.log_posterior_density(0.05)
        assert float(value) == pytest.approx(_expected_log_posterior(0.05), rel=1e-4)

    def test_functional_form(self, model, single_data):
        value = log_posterior_density(model, single_data, 0.05)
        assert float(value) == pytest.approx(_expected_log_posterior(0.05), rel=1e-4)

    def test_model_log_density_binds_data(self, model, single_data):
        ld = model.log_density(single_data)
        assert isinstance(ld, AngleLogDensity)
        assert float(ld(0.05)) == pytest.approx(_expected_log_posterior(0.05), rel=1e-4)

    @pytest.mark.parametrize("sigma", [0.0, -0.05])
    def test_checked_form_rejects_non_positive_sigma(self, model, single_data, sigma):
        ld = model.log_density(single_data)
        with pytest.raises(DomainError):
            ld.log_posterior_density(sigma)

    @pytest.mark.parametrize("sigma", [0.0, -0.05])
    def test_pure_form_returns_minus_inf(self, model, single_data, sigma):
        ld = model.log_density(single_data)
        assert float(ld(sigma)) == -np.inf

    def test_unconstrained_adds_log_jacobian(self, model, berry_data):
        ld = model.log_density(berry_data)
        z = jnp.log(0.03)
        assert float(ld.unconstrained(z)) == pytest.approx(
            float(ld(jnp.exp(z)) + z), rel=1e-6
        )

    def test_gradient_finite_near_mode(self, model, berry_data):
        ld = model.log_density(berry_data)
        assert np.isfinite(float(jax.grad(ld)(0.0267)))
        assert np.isfinite(float(jax.grad(ld.unconstrained)(jnp.log(0.0267))))

    def test_pure_form_is_traceable(self, model, berry_data):
        ld = model.log_density(berry_data)
        jitted = jax.jit(ld)
        assert float(jitted(0.03)) == pytest.approx(float(ld(0.03)), rel=1e-6)

    def test_log_likelihood_broadcasts(self, model, berry_data):
        ld = model.log_density(berry_data)
        values = ld.log_likelihood(jnp.array([0.02, 0.0267, 0.04]))
        assert values.shape == (3,)
        # the middle value is closest to the posterior mode
        assert values[1] > values[0]
        assert values[1] > values[2]

    def test_non_putting_data_rejected(self, model):
        with pytest.raises(TypeError):
            AngleLogDensity(model, {"distance": [120.0]})

    def test_short_distance_rejected_at_binding(self, model):
        data = PuttingData(distance=[1.0, 120.0], attempts=[10, 10], successes=[9, 2])
        with pytest.raises(DomainError):
            model.log_density(data)

    def test_prior_is_configurable(self, single_data):
        default = AngleModel().log_density(single_data)
        alt_prior = HalfNormalPrior(scale=0.1)
        alt = AngleModel(prior=alt_prior).log_density(single_data)
        diff = float(alt(0.05)) - float(default(0.05))
        expected = float(alt_prior.log_density(0.05)) - float(
            AngleModel().prior.log_density(0.05)
        )
        assert diff == pytest.approx(expected, rel=1e-4, abs=1e-4)

    def test_sigma_degrees_transform(self):
        assert AngleLogDensity.sigma_degrees(math.pi) == pytest.approx(180.0)
