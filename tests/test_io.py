"""
test_io.py
----------

CSV loading/saving and posterior checkpoints.
"""

import jax.numpy as jnp
import numpy as np
import pytest

from golfputt.data import (
    PuttingData,
    load_posterior,
    load_putts_csv,
    save_posterior,
    save_putts_csv,
)
from golfputt.errors import DataError
from golfputt.model import AngleModel
from golfputt.posterior import LaplacePosterior


class TestCSV:
    def test_save_then_load(self, berry_data, tmp_path):
        path = tmp_path / "putts.csv"
        save_putts_csv(berry_data, path)
        loaded = load_putts_csv(path)
        np.testing.assert_array_equal(loaded.distance, berry_data.distance)
        np.testing.assert_array_equal(loaded.attempts, berry_data.attempts)
        np.testing.assert_array_equal(loaded.successes, berry_data.successes)

    def test_feet_and_column_aliases(self, tmp_path):
        path = tmp_path / "feet.csv"
        path.write_text("Distance,Tries,Successes\n2,1443,1346\n3,694,577\n")
        data = load_putts_csv(path, distance_unit="ft")
        np.testing.assert_allclose(data.distance, [24.0, 36.0])
        np.testing.assert_array_equal(data.attempts, [1443, 694])

    def test_missing_column(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text("distance,attempts\n24,10\n")
        with pytest.raises(DataError, match="successes"):
            load_putts_csv(path)

    def test_unparseable_value(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text("distance,attempts,successes\n24,ten,5\n")
        with pytest.raises(DataError):
            load_putts_csv(path)

    def test_invalid_record(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text("distance,attempts,successes\n24,10,11\n")
        with pytest.raises(DataError):
            load_putts_csv(path)

    def test_unknown_unit(self, tmp_path):
        with pytest.raises(ValueError):
            load_putts_csv(tmp_path / "x.csv", distance_unit="m")


def test_posterior_checkpoint(tmp_path):
    posterior = LaplacePosterior(
        mean_log_sigma=float(np.log(0.027)), std_log_sigma=0.02, model=AngleModel()
    )
    path = tmp_path / "posterior.pkl"
    save_posterior(posterior, path)
    loaded = load_posterior(path)
    assert isinstance(loaded, LaplacePosterior)
    assert loaded.mean_log_sigma == posterior.mean_log_sigma
    assert jnp.allclose(loaded.params["sigma"], posterior.params["sigma"])


def test_loaded_data_is_putting_data(berry_data, tmp_path):
    path = tmp_path / "putts.csv"
    save_putts_csv(berry_data, path)
    assert isinstance(load_putts_csv(path), PuttingData)
