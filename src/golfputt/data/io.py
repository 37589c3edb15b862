"""
io.py
-----

I/O utilities for saving and loading golfputt data.

Supports:
- CSV for human-readable putting tables (distance, attempts, successes)
- Pickle (.pkl) for posterior checkpoints

Notes
-----
- CSV distances may be stored in feet; they are converted to inches on load.
- Column names are matched case-insensitively; "tries" is accepted as an
  alias for "attempts".
"""

from __future__ import annotations

import csv
import pickle
from pathlib import Path
from typing import Union

from golfputt.errors import DataError

from .datasets import INCHES_PER_FOOT
from .dataset import PuttingData

PathLike = Union[str, Path]

_UNIT_SCALE = {"in": 1.0, "ft": INCHES_PER_FOOT}
_ALIASES = {"tries": "attempts"}


def save_putts_csv(data: PuttingData, path: PathLike) -> None:
    """
    Save PuttingData to a CSV file (distances in inches).

    Parameters
    ----------
    data : PuttingData
    path : str or Path
    """
    distance, attempts, successes = data.to_numpy()
    with open(path, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["distance", "attempts", "successes"])
        for d, n, y in zip(distance, attempts, successes):
            writer.writerow([repr(float(d)), int(n), int(y)])


def load_putts_csv(path: PathLike, *, distance_unit: str = "in") -> PuttingData:
    """
    Load PuttingData from a CSV file.

    Parameters
    ----------
    path : str or Path
    distance_unit : {"in", "ft"}, default="in"
        Unit of the distance column in the file.

    Returns
    -------
    PuttingData

    Raises
    ------
    DataError
        If a required column is missing or a value cannot be parsed.
    """
    if distance_unit not in _UNIT_SCALE:
        raise ValueError(
            f"Unknown distance_unit: '{distance_unit}'. Use 'in' or 'ft'."
        )
    scale = _UNIT_SCALE[distance_unit]

    distance, attempts, successes = [], [], []
    with open(path, newline="") as f:
        reader = csv.DictReader(f)
        fields = {
            _ALIASES.get(name.strip().lower(), name.strip().lower()): name
            for name in (reader.fieldnames or [])
        }
        missing = {"distance", "attempts", "successes"} - fields.keys()
        if missing:
            raise DataError(f"CSV is missing column(s): {sorted(missing)}")
        for lineno, row in enumerate(reader, start=2):
            try:
                distance.append(float(row[fields["distance"]]) * scale)
                attempts.append(int(row[fields["attempts"]]))
                successes.append(int(row[fields["successes"]]))
            except (TypeError, ValueError) as exc:
                raise DataError(f"{path}:{lineno}: {exc}") from exc
    return PuttingData(distance, attempts, successes)


def save_posterior(posterior: object, path: PathLike) -> None:
    """
    Save a posterior object to disk using pickle.
    """
    with open(path, "wb") as f:
        pickle.dump(posterior, f)


def load_posterior(path: PathLike) -> object:
    """
    Load a posterior object from pickle.
    """
    with open(path, "rb") as f:
        return pickle.load(f)
