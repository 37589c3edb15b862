"""
datasets.py
-----------

Published putting datasets bundled with golfputt.

- load_berry_1996(): 19 distance bins from 2 ft to 20 ft (Berry, 1996),
  the data set used in Gelman & Nolan (2002) for the angle-only model.

Distances are returned in inches, matching the rest of the package.
"""

from __future__ import annotations

import numpy as np

from .dataset import PuttingData

INCHES_PER_FOOT = 12.0

# distance (ft), attempts, successes
_BERRY_1996 = (
    (2, 1443, 1346),
    (3, 694, 577),
    (4, 455, 337),
    (5, 353, 208),
    (6, 272, 149),
    (7, 256, 136),
    (8, 240, 111),
    (9, 217, 69),
    (10, 200, 67),
    (11, 237, 75),
    (12, 202, 52),
    (13, 192, 46),
    (14, 174, 54),
    (15, 167, 28),
    (16, 201, 27),
    (17, 195, 31),
    (18, 191, 33),
    (19, 147, 20),
    (20, 152, 24),
)


def load_berry_1996() -> PuttingData:
    """
    Berry (1996) professional putting data.

    Returns
    -------
    PuttingData
        19 bins at 24, 36, ..., 240 inches.
    """
    table = np.asarray(_BERRY_1996, dtype=float)
    return PuttingData(
        distance=table[:, 0] * INCHES_PER_FOOT,
        attempts=table[:, 1].astype(int),
        successes=table[:, 2].astype(int),
    )
