"""
test_diagnostics.py
-------------------

Convergence diagnostics over posterior draws.
"""

import warnings

import numpy as np
import pytest

from golfputt.errors import ConvergenceWarning
from golfputt.posterior import (
    DiagnosticReport,
    PosteriorDraws,
    autocorrelation,
    diagnose,
    divergence_summary,
    effective_sample_size,
    rhat,
)


def _draws(sigma, **overrides):
    sigma = np.asarray(sigma, dtype=float)
    fields = dict(
        sigma=sigma,
        log_density=np.zeros_like(sigma),
        diverging=np.zeros(sigma.shape, dtype=bool),
        tree_depth=np.ones(sigma.shape, dtype=int),
        num_warmup=100,
        max_tree_depth=10,
        sampler="synthetic",
    )
    fields.update(overrides)
    return PosteriorDraws(**fields)


class TestStandaloneEstimators:
    """ESS, R-hat and autocorrelation on synthetic chains."""

    def test_rhat_near_one_for_iid_chains(self):
        rng = np.random.default_rng(1)
        chains = rng.normal(size=(4, 1000))
        assert rhat(chains) == pytest.approx(1.0, abs=0.02)

    def test_rhat_large_for_separated_chains(self):
        rng = np.random.default_rng(2)
        chains = rng.normal(size=(4, 500)) + np.arange(4)[:, None] * 5.0
        assert rhat(chains) > 1.5

    def test_ess_close_to_draw_count_for_iid(self):
        rng = np.random.default_rng(3)
        chains = rng.normal(size=(4, 1000))
        assert effective_sample_size(chains) > 2000

    def test_ess_small_for_random_walk(self):
        rng = np.random.default_rng(4)
        chains = np.cumsum(rng.normal(size=(4, 1000)), axis=1)
        assert effective_sample_size(chains) < 200

    def test_short_chains_give_nan(self):
        assert np.isnan(rhat(np.ones((2, 3))))
        assert np.isnan(effective_sample_size(np.ones((2, 1))))

    def test_autocorrelation_shape_and_lag0(self):
        rng = np.random.default_rng(5)
        acf = autocorrelation(rng.normal(size=(3, 200)), max_lag=20)
        assert acf.shape == (3, 21)
        np.testing.assert_allclose(acf[:, 0], 1.0, rtol=1e-6)

    def test_autocorrelation_lag_clipped(self):
        acf = autocorrelation(np.arange(10.0), max_lag=50)
        assert acf.shape == (1, 10)


class TestDivergenceSummary:
    def test_locations(self):
        sigma = np.full((2, 10), 0.027)
        diverging = np.zeros((2, 10), dtype=bool)
        diverging[1, 5] = True
        tree_depth = np.ones((2, 10), dtype=int)
        tree_depth[0, 3] = 10
        draws = _draws(sigma, diverging=diverging, tree_depth=tree_depth)
        summary = divergence_summary(draws)
        assert summary["num_divergent"] == 1
        assert summary["divergent_iterations"] == [(1, 5)]
        assert summary["num_max_treedepth"] == 1
        assert summary["max_treedepth_iterations"] == [(0, 3)]
        assert summary["warmup_divergent"] is None

    def test_no_tree_cap(self):
        draws = _draws(np.full((1, 5), 0.03), tree_depth=np.full((1, 5), 99),
                       max_tree_depth=None)
        assert divergence_summary(draws)["num_max_treedepth"] == 0

    def test_warmup_divergences_counted(self):
        warm = np.zeros((1, 20), dtype=bool)
        warm[0, :3] = True
        draws = _draws(np.full((1, 5), 0.03), warmup_diverging=warm)
        assert divergence_summary(draws)["warmup_divergent"] == 3


class TestDiagnose:
    """Report contents and ConvergenceWarning emission."""

    def test_clean_report(self, good_draws):
        with warnings.catch_warnings():
            warnings.simplefilter("error", ConvergenceWarning)
            report = diagnose(good_draws, max_rhat=1.05)
        assert report.ok
        assert report.warnings == []
        assert report.num_chains == 4
        assert report.num_samples == 500
        assert report.num_warmup == 500
        assert report.num_divergent == 0
        assert set(report.ess) == {"sigma", "sigma_degrees"}
        assert report.summary["sigma"]["mean"] == pytest.approx(0.027, rel=0.01)
        assert report.summary["sigma_degrees"]["mean"] == pytest.approx(
            report.summary["sigma"]["mean"] * 180 / np.pi
        )

    def test_unmixed_chains_warn(self):
        rng = np.random.default_rng(6)
        sigma = 0.02 + 0.01 * np.arange(4)[:, None] + 1e-4 * rng.normal(size=(4, 200))
        with pytest.warns(ConvergenceWarning, match="R-hat"):
            report = diagnose(_draws(sigma))
        assert not report.ok
        assert any("R-hat" in w for w in report.warnings)

    def test_autocorrelated_chains_warn(self):
        rng = np.random.default_rng(7)
        walk = 0.027 + 1e-4 * np.cumsum(rng.normal(size=(4, 1000)), axis=1)
        with pytest.warns(ConvergenceWarning, match="effective sample size"):
            diagnose(_draws(walk), max_rhat=10.0)

    def test_divergences_warn(self, good_draws):
        diverging = np.zeros(good_draws.sigma.shape, dtype=bool)
        diverging[2, 17] = True
        draws = _draws(good_draws.sigma, diverging=diverging)
        with pytest.warns(ConvergenceWarning, match="divergent"):
            report = diagnose(draws, max_rhat=1.05)
        assert report.divergent_iterations == [(2, 17)]

    def test_max_treedepth_warn(self, good_draws):
        tree_depth = np.ones(good_draws.sigma.shape, dtype=int)
        tree_depth[0, :4] = 10
        draws = _draws(good_draws.sigma, tree_depth=tree_depth)
        with pytest.warns(ConvergenceWarning, match="max_tree_depth"):
            report = diagnose(draws, max_rhat=1.05)
        assert report.num_max_treedepth == 4

    def test_draws_not_modified(self, good_draws):
        before = good_draws.sigma.copy()
        diagnose(good_draws, max_rhat=1.05)
        np.testing.assert_array_equal(good_draws.sigma, before)

    def test_autocorrelation_reported(self, good_draws):
        report = diagnose(good_draws, max_rhat=1.05, max_lag=10)
        assert np.asarray(report.autocorrelation["sigma"]).shape == (4, 11)


class TestReportSerialisation:
    def test_json_round_trip(self, good_draws):
        diverging = np.zeros(good_draws.sigma.shape, dtype=bool)
        diverging[1, 2] = True
        draws = _draws(good_draws.sigma, diverging=diverging)
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", ConvergenceWarning)
            report = diagnose(draws, max_rhat=1.05)
        restored = DiagnosticReport.from_json(report.to_json())
        assert restored == report
        assert restored.divergent_iterations == [(1, 2)]
        assert restored.rhat["sigma"] == report.rhat["sigma"]

    def test_json_round_trip_with_undefined_diagnostics(self):
        sigma = np.random.default_rng(1).lognormal(np.log(0.027), 0.03, size=(4, 3))
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", ConvergenceWarning)
            report = diagnose(_draws(sigma))
        assert np.isnan(report.rhat["sigma"])
        restored = DiagnosticReport.from_json(report.to_json())
        assert np.isnan(restored.rhat["sigma"])
        assert restored == report

    def test_reports_with_different_values_differ(self, good_draws):
        report = diagnose(good_draws, max_rhat=1.05)
        changed = DiagnosticReport.from_dict({**report.to_dict(), "num_divergent": 7})
        assert changed != report

    def test_dict_round_trip(self, good_draws):
        report = diagnose(good_draws, max_rhat=1.05)
        assert DiagnosticReport.from_dict(report.to_dict()) == report


class TestPosteriorDraws:
    def test_sigma_degrees_exact(self, good_draws):
        np.testing.assert_array_equal(
            good_draws.sigma_degrees, good_draws.sigma * (180.0 / np.pi)
        )

    def test_immutable(self, good_draws):
        with pytest.raises(ValueError):
            good_draws.sigma[0, 0] = 1.0
        with pytest.raises(AttributeError):
            good_draws.num_warmup = 3

    def test_counts_and_records(self, good_draws):
        assert good_draws.num_chains == 4
        assert good_draws.num_samples == 500
        assert len(good_draws) == 2000
        assert good_draws.flat().shape == (2000,)
        first = next(good_draws.records())
        assert first == (0, 0, float(good_draws.sigma[0, 0]))

    def test_single_chain_promoted(self):
        draws = _draws(np.full(5, 0.03))
        assert draws.sigma.shape == (1, 5)

    def test_init_sigma_broadcast(self, good_draws):
        np.testing.assert_array_equal(good_draws.init_sigma, np.full(4, 0.03))
