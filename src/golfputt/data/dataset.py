"""
dataset.py
----------

Core data containers for golfputt.

defines:
- Observation: one distance bin (distance, attempts, successes)
- PuttingData: validated collection of observations

Notes
-----
- Data is stored in standard NumPy arrays.
- Convert to jax.numpy (jnp) arrays only when passing into AngleModel
  or inference engines (PuttingData.to_jax()).
- PuttingData is validated once, at construction, so invalid records never
  reach a sampler.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

import jax.numpy as jnp
import numpy as np

from golfputt.errors import DataError


@dataclass(frozen=True)
class Observation:
    """
    Aggregated putts at one distance.

    Attributes
    ----------
    distance : float
        Distance to the hole (inches).
    attempts : int
        Number of putts tried.
    successes : int
        Number of putts holed.
    """

    distance: float
    attempts: int
    successes: int


class PuttingData:
    """
    Validated collection of Observation records.

    Parameters
    ----------
    distance : array-like, shape (n,)
        Distances in inches, strictly positive.
    attempts : array-like, shape (n,)
        Positive integer attempt counts.
    successes : array-like, shape (n,)
        Integer success counts with 0 <= successes <= attempts.

    Raises
    ------
    DataError
        If any record violates the invariants above.
    """

    def __init__(self, distance, attempts, successes) -> None:
        distance = np.asarray(distance, dtype=float).reshape(-1)
        attempts_raw = np.asarray(attempts).reshape(-1)
        successes_raw = np.asarray(successes).reshape(-1)

        if not (len(distance) == len(attempts_raw) == len(successes_raw)):
            raise DataError(
                "distance, attempts and successes must have the same length, got "
                f"{len(distance)}, {len(attempts_raw)}, {len(successes_raw)}"
            )
        if len(distance) == 0:
            raise DataError("PuttingData needs at least one observation")

        for name, arr in (("attempts", attempts_raw), ("successes", successes_raw)):
            if not np.all(np.equal(np.mod(arr, 1), 0)):
                raise DataError(f"{name} must be integer counts")

        attempts = attempts_raw.astype(np.int64)
        successes = successes_raw.astype(np.int64)

        bad = np.flatnonzero(~np.isfinite(distance) | (distance <= 0))
        if bad.size:
            raise DataError(
                f"distance must be strictly positive, bad records at {bad.tolist()}"
            )
        bad = np.flatnonzero(attempts <= 0)
        if bad.size:
            raise DataError(
                f"attempts must be positive, bad records at {bad.tolist()}"
            )
        bad = np.flatnonzero((successes < 0) | (successes > attempts))
        if bad.size:
            raise DataError(
                "successes must satisfy 0 <= successes <= attempts, "
                f"bad records at {bad.tolist()}"
            )

        self._distance = distance
        self._attempts = attempts
        self._successes = successes
        for arr in (self._distance, self._attempts, self._successes):
            arr.setflags(write=False)

    @classmethod
    def from_records(cls, records: Iterable[Observation]) -> PuttingData:
        """
        Construct PuttingData from Observation records (or (d, n, y) tuples).
        """
        rows = [
            (r.distance, r.attempts, r.successes) if isinstance(r, Observation) else r
            for r in records
        ]
        if not rows:
            raise DataError("PuttingData needs at least one observation")
        d, n, y = zip(*rows)
        return cls(d, n, y)

    @property
    def distance(self) -> np.ndarray:
        return self._distance

    @property
    def attempts(self) -> np.ndarray:
        return self._attempts

    @property
    def successes(self) -> np.ndarray:
        return self._successes

    @property
    def records(self) -> list[Observation]:
        """Return the data as a list of Observation records."""
        return [
            Observation(float(d), int(n), int(y))
            for d, n, y in zip(self._distance, self._attempts, self._successes)
        ]

    def __len__(self) -> int:
        """Return number of distance bins."""
        return len(self._distance)

    def __repr__(self) -> str:
        return (
            f"PuttingData(n_bins={len(self)}, attempts={int(self._attempts.sum())}, "
            f"distance=[{self._distance.min():g}, {self._distance.max():g}])"
        )

    def to_numpy(self) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Return distance, attempts, successes as numpy arrays.
        """
        return self._distance.copy(), self._attempts.copy(), self._successes.copy()

    def to_jax(self) -> tuple[jnp.ndarray, jnp.ndarray, jnp.ndarray]:
        """
        Return distance, attempts, successes as jnp arrays (float dtype).
        """
        return (
            jnp.asarray(self._distance),
            jnp.asarray(self._attempts, dtype=jnp.result_type(float)),
            jnp.asarray(self._successes, dtype=jnp.result_type(float)),
        )

    def merge(self, other: PuttingData) -> PuttingData:
        """
        Return a new dataset with the bins of both datasets.
        """
        return PuttingData(
            np.concatenate([self._distance, other.distance]),
            np.concatenate([self._attempts, other.attempts]),
            np.concatenate([self._successes, other.successes]),
        )

    # ------------------------------------------------------------------
    # Plot preparation
    # ------------------------------------------------------------------
    def empirical_summary(self) -> dict[str, np.ndarray]:
        """
        Empirical success proportions with binomial standard errors.

        Returns
        -------
        dict
            - "distance": distances
            - "proportion": successes / attempts
            - "std_error": sqrt(p (1 - p) / attempts)
            - "lower", "upper": proportion -/+ one standard error, clipped to [0, 1]
        """
        p = self._successes / self._attempts
        se = np.sqrt(p * (1.0 - p) / self._attempts)
        return {
            "distance": self._distance.copy(),
            "proportion": p,
            "std_error": se,
            "lower": np.clip(p - se, 0.0, 1.0),
            "upper": np.clip(p + se, 0.0, 1.0),
        }

    def distance_grid(self, n: int = 200, *, start: float | None = None) -> np.ndarray:
        """
        Dense, evenly spaced distances spanning the observed range.

        Parameters
        ----------
        n : int, default=200
            Number of grid points.
        start : float, optional
            Lower end of the grid. Defaults to the smallest observed distance.
        """
        if n < 2:
            raise ValueError(f"n must be >= 2, got {n}")
        lo = float(self._distance.min()) if start is None else float(start)
        return np.linspace(lo, float(self._distance.max()), n)
