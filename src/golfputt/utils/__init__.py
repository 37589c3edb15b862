"""
utils
=====

Shared utility functions and helpers for golfputt.

This subpackage provides:
- diagnostics : parameter summaries of sigma (radians and degrees).
- rng : random number handling for reproducibility.
"""

from .diagnostics import parameter_summary, print_parameter_summary
from .rng import seed, split

__all__ = [
    # diagnostics
    "parameter_summary",
    "print_parameter_summary",
    # rng
    "seed",
    "split",
]
