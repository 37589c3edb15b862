"""
Central pytest configuration for this project.

This file is automatically discovered by pytest and is intended for:

- **Fixtures**: reusable objects shared across multiple test files
  (geometry, models, the Berry data set, hand-built posterior draws).

Notes
-----
- Install the package in editable mode (`pip install -e .[test]`) so that
  imports are resolved consistently in local dev and CI environments.
- Keep this file focused on test setup. Do not add application logic here.
"""

import numpy as np
import pytest

from golfputt.data import PuttingData, load_berry_1996
from golfputt.model import AngleModel, PuttingGeometry
from golfputt.posterior import PosteriorDraws


@pytest.fixture
def geometry():
    """Regulation ball (1.68 in) and hole (4.25 in)."""
    return PuttingGeometry(ball_diameter=1.68, hole_diameter=4.25)


@pytest.fixture
def model(geometry):
    """AngleModel with the default half-Cauchy(2.5) prior."""
    return AngleModel(geometry=geometry)


@pytest.fixture
def berry_data():
    """Berry (1996) professional putting data, 19 bins from 24 to 240 inches."""
    return load_berry_1996()


@pytest.fixture
def single_data():
    """One bin: 100 of 200 putts holed from 120 inches."""
    return PuttingData(distance=[120.0], attempts=[200], successes=[100])


@pytest.fixture
def good_draws():
    """Four well-mixed chains of independent draws around sigma = 0.027."""
    rng = np.random.default_rng(0)
    sigma = rng.lognormal(mean=np.log(0.027), sigma=0.03, size=(4, 500))
    return PosteriorDraws(
        sigma=sigma,
        log_density=np.zeros_like(sigma),
        diverging=np.zeros(sigma.shape, dtype=bool),
        tree_depth=np.full(sigma.shape, 2),
        num_warmup=500,
        max_tree_depth=10,
        init_sigma=0.03,
        sampler="synthetic",
    )
