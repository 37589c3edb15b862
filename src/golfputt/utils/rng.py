"""
rng.py
------

Random number utilities for golfputt.

Standardizes PRNG handling for the samplers: one integer seed per run is
turned into a JAX key, and every chain receives its own split of it, so
chains never share a random stream.

Examples
--------
>>> from golfputt.utils.rng import seed, split
>>> key = seed(0)
>>> key_init, key_run = split(key)
>>> chain_keys = split(key_run, 4)
"""

from __future__ import annotations

import jax
import jax.random as jr


def seed(seed_value: int) -> jax.Array:
    """
    Create a new PRNG key from an integer seed.

    Parameters
    ----------
    seed_value : int
        Seed for random number generation.

    Returns
    -------
    jax.Array
        New PRNG key.
    """
    return jr.PRNGKey(seed_value)


def split(key: jax.Array, num: int = 2):
    """
    Split a PRNG key into ``num`` independent keys (stacked along axis 0).
    """
    if num < 1:
        raise ValueError(f"num must be >= 1, got {num}")
    return jr.split(key, num=num)
