"""
test_utils.py
-------------

RNG helpers and parameter summaries.
"""

import jax.numpy as jnp
import jax.random as jr
import numpy as np
import pytest

from golfputt.model import AngleModel
from golfputt.posterior import LaplacePosterior, MAPPosterior
from golfputt.utils import parameter_summary, print_parameter_summary, seed, split


class TestRNG:
    def test_seed_is_reproducible(self):
        a = jr.normal(seed(0))
        b = jr.normal(seed(0))
        assert float(a) == float(b)

    def test_split(self):
        keys = split(seed(0), 4)
        assert keys.shape[0] == 4
        draws = [float(jr.normal(k)) for k in keys]
        assert len(set(draws)) == 4

    def test_split_rejects_zero(self):
        with pytest.raises(ValueError):
            split(seed(0), 0)


class TestParameterSummary:
    def test_sigma_and_degrees(self):
        posterior = LaplacePosterior(
            mean_log_sigma=float(np.log(0.027)), std_log_sigma=0.02, model=AngleModel()
        )
        summary = parameter_summary(posterior, n_samples=2000, key=jr.PRNGKey(0))
        assert set(summary) == {"sigma", "sigma_degrees"}
        ratio = float(summary["sigma_degrees"]["mean"]) / float(
            summary["sigma"]["mean"]
        )
        assert ratio == pytest.approx(180.0 / np.pi, rel=1e-5)
        q = summary["sigma"]["quantiles"]
        assert float(q[0.025]) < float(q[0.5]) < float(q[0.975])

    def test_print(self, capsys):
        posterior = MAPPosterior(params={"sigma": jnp.array(0.027)}, model=AngleModel())
        print_parameter_summary(posterior, n_samples=10)
        out = capsys.readouterr().out
        assert "Parameter Summary (10 samples)" in out
        assert "sigma_degrees:" in out
