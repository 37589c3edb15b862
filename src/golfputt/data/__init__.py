"""
golfputt.data
=============

submodule for handling putting data.

Includes:
- dataset: Observation, PuttingData (validation, empirical summaries)
- datasets: bundled published data (Berry 1996)
- io: CSV load/save, posterior checkpoints
"""

from .dataset import Observation, PuttingData
from .datasets import load_berry_1996
from .io import load_posterior, load_putts_csv, save_posterior, save_putts_csv

__all__ = [
    "Observation",
    "PuttingData",
    "load_berry_1996",
    "load_putts_csv",
    "save_putts_csv",
    "load_posterior",
    "save_posterior",
]
