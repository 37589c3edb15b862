"""
draws.py
--------

Container for MCMC output.

PosteriorDraws holds the retained (post warm-up) draws of sigma for every
chain together with the per-draw sampler metadata that the convergence
diagnostics need:

- sigma        : (num_chains, num_samples) float
- log_density  : (num_chains, num_samples) unnormalised log posterior of sigma
- diverging    : (num_chains, num_samples) bool
- tree_depth   : (num_chains, num_samples) int (NUTS depth, or 1 for MALA)

plus run metadata (num_warmup, max_tree_depth, initial values, sampler name).

Draws are produced by a sampler and consumed read-only: arrays are stored as
non-writeable NumPy arrays.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

import numpy as np

from golfputt.model.angle_model import sigma_degrees


def _frozen(x, dtype=None) -> np.ndarray:
    arr = np.array(x, dtype=dtype, copy=True)
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True)
class PosteriorDraws:
    """
    Retained MCMC draws of sigma with sampler metadata.

    Attributes
    ----------
    sigma : np.ndarray, shape (num_chains, num_samples)
    log_density : np.ndarray, shape (num_chains, num_samples)
    diverging : np.ndarray of bool, shape (num_chains, num_samples)
    tree_depth : np.ndarray of int, shape (num_chains, num_samples)
    num_warmup : int
        Warm-up iterations run per chain (not included in the arrays).
    max_tree_depth : int | None
        Tree-depth cap of the sampler; None when the sampler has no trees.
    init_sigma : np.ndarray, shape (num_chains,)
        Starting value of each chain.
    sampler : str
        Name of the sampler that produced the draws.
    warmup_diverging : np.ndarray | None
        Divergence flags during warm-up, when the sampler kept them.
    """

    sigma: np.ndarray
    log_density: np.ndarray
    diverging: np.ndarray
    tree_depth: np.ndarray
    num_warmup: int = 0
    max_tree_depth: int | None = None
    init_sigma: np.ndarray | None = None
    sampler: str = "unknown"
    warmup_diverging: np.ndarray | None = field(default=None)

    def __post_init__(self):
        sigma = np.asarray(self.sigma, dtype=float)
        if sigma.ndim == 1:
            sigma = sigma[None, :]
        if sigma.ndim != 2:
            raise ValueError(
                f"sigma must have shape (num_chains, num_samples), got {sigma.shape}"
            )
        shape = sigma.shape
        object.__setattr__(self, "sigma", _frozen(sigma))
        for name, dtype in (
            ("log_density", float),
            ("diverging", bool),
            ("tree_depth", int),
        ):
            arr = np.asarray(getattr(self, name), dtype=dtype).reshape(shape)
            object.__setattr__(self, name, _frozen(arr))
        init = self.init_sigma
        if init is not None:
            init = np.broadcast_to(np.asarray(init, dtype=float), (shape[0],))
            object.__setattr__(self, "init_sigma", _frozen(init))
        if self.warmup_diverging is not None:
            warm = np.asarray(self.warmup_diverging, dtype=bool)
            if warm.ndim == 1:
                warm = warm[None, :]
            object.__setattr__(self, "warmup_diverging", _frozen(warm))
        object.__setattr__(self, "num_warmup", int(self.num_warmup))

    @property
    def num_chains(self) -> int:
        return self.sigma.shape[0]

    @property
    def num_samples(self) -> int:
        """Retained draws per chain."""
        return self.sigma.shape[1]

    @property
    def num_draws(self) -> int:
        """Total retained draws across chains."""
        return self.sigma.size

    @property
    def sigma_degrees(self) -> np.ndarray:
        """sigma converted to degrees, draw by draw."""
        return sigma_degrees(self.sigma)

    def flat(self, name: str = "sigma") -> np.ndarray:
        """Return a per-draw array flattened across chains (chain-major order)."""
        return np.asarray(getattr(self, name)).reshape(-1)

    def records(self) -> Iterator[tuple[int, int, float]]:
        """Yield (chain, iteration, sigma) in chain-major order."""
        for chain in range(self.num_chains):
            for iteration in range(self.num_samples):
                yield chain, iteration, float(self.sigma[chain, iteration])

    def grouped(self) -> dict[str, np.ndarray]:
        """Parameter arrays keyed by name, shape (num_chains, num_samples)."""
        return {"sigma": self.sigma, "sigma_degrees": self.sigma_degrees}

    def __len__(self) -> int:
        return self.num_draws
