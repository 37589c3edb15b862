"""
nuts.py
-------

No-U-Turn sampler (NUTS) via NumPyro.

The log density is handed to NumPyro as a `potential_fn` over the
unconstrained parameter ``log_sigma``, so no NumPyro model is built and the
sampler only depends on the pure callable exposed by AngleLogDensity.

Recorded per draw:
- potential energy -> log posterior density of sigma
- diverging flag
- number of leapfrog steps -> tree depth = ceil(log2(num_steps + 1))

Chains are independent; `chain_method` selects NumPyro's sequential,
vectorized or parallel (one device per chain) execution.
"""

from __future__ import annotations

import logging

import jax.numpy as jnp
import numpy as np
from numpyro.infer import MCMC, NUTS

from golfputt.posterior.draws import PosteriorDraws
from golfputt.utils import rng

from .base import MCMCSampler

logger = logging.getLogger(__name__)

_EXTRA_FIELDS = ("potential_energy", "diverging", "num_steps")


def tree_depth_from_steps(num_steps) -> np.ndarray:
    """Tree depth implied by a leapfrog step count (2**depth - 1 steps)."""
    steps = np.asarray(num_steps, dtype=float)
    return np.ceil(np.log2(steps + 1.0)).astype(int)


class NUTSSampler(MCMCSampler):
    """
    NUTS posterior sampler.

    Parameters
    ----------
    num_samples, num_warmup, num_chains, init_sigma, seed
        See MCMCSampler.
    target_accept_prob : float, default=0.8
        Target acceptance probability for step-size adaptation.
    max_tree_depth : int, default=10
        Maximum tree depth; iterations reaching it are reported by diagnostics.
    chain_method : {"sequential", "vectorized", "parallel"}, default="sequential"
        How NumPyro runs multiple chains.
    save_warmup : bool, default=False
        Also keep divergence flags from the warm-up phase.
    progress_bar : bool, default=False
        Show NumPyro's progress bar.

    Examples
    --------
    >>> sampler = NUTSSampler(num_chains=4, num_samples=300)
    >>> posterior = sampler.fit(AngleModel(), load_berry_1996())
    >>> posterior.diagnostics().rhat["sigma"]
    """

    name = "nuts"

    def __init__(
        self,
        num_samples: int = 1000,
        num_warmup: int | None = None,
        num_chains: int = 4,
        *,
        target_accept_prob: float = 0.8,
        max_tree_depth: int = 10,
        init_sigma=None,
        seed: int = 0,
        chain_method: str = "sequential",
        save_warmup: bool = False,
        progress_bar: bool = False,
    ):
        super().__init__(
            num_samples, num_warmup, num_chains, init_sigma=init_sigma, seed=seed
        )
        if not 0.0 < target_accept_prob < 1.0:
            raise ValueError(
                f"target_accept_prob must be in (0, 1), got {target_accept_prob}"
            )
        if int(max_tree_depth) < 1:
            raise ValueError(f"max_tree_depth must be >= 1, got {max_tree_depth}")
        if chain_method not in ("sequential", "vectorized", "parallel"):
            raise ValueError(
                f"Unknown chain_method: '{chain_method}'. "
                "Use 'sequential', 'vectorized' or 'parallel'."
            )
        self.target_accept_prob = float(target_accept_prob)
        self.max_tree_depth = int(max_tree_depth)
        self.chain_method = chain_method
        self.save_warmup = bool(save_warmup)
        self.progress_bar = bool(progress_bar)

    def sample(self, log_density) -> PosteriorDraws:
        """
        Run NUTS on ``log_density`` and return the retained draws.

        Parameters
        ----------
        log_density : AngleLogDensity

        Returns
        -------
        PosteriorDraws
        """

        def potential_fn(z):
            return -log_density.unconstrained(z["log_sigma"])

        kernel = NUTS(
            potential_fn=potential_fn,
            target_accept_prob=self.target_accept_prob,
            max_tree_depth=self.max_tree_depth,
        )
        mcmc = MCMC(
            kernel,
            num_warmup=self.num_warmup,
            num_samples=self.num_samples,
            num_chains=self.num_chains,
            chain_method=self.chain_method,
            progress_bar=self.progress_bar,
        )

        key_init, key_run = rng.split(rng.seed(self.seed))
        z0 = self._initial_log_sigma(key_init)
        init_params = {"log_sigma": z0 if self.num_chains > 1 else z0[0]}

        logger.info(
            "NUTS: %d chain(s) x (%d warm-up + %d draws), max_tree_depth=%d",
            self.num_chains,
            self.num_warmup,
            self.num_samples,
            self.max_tree_depth,
        )

        warmup_diverging = None
        if self.save_warmup and self.num_warmup > 0:
            mcmc.warmup(
                key_run,
                extra_fields=_EXTRA_FIELDS,
                collect_warmup=True,
                init_params=init_params,
            )
            warm = mcmc.get_extra_fields(group_by_chain=True)
            warmup_diverging = np.asarray(warm["diverging"])
            mcmc.run(mcmc.post_warmup_state.rng_key, extra_fields=_EXTRA_FIELDS)
        else:
            mcmc.run(key_run, extra_fields=_EXTRA_FIELDS, init_params=init_params)

        z = np.asarray(mcmc.get_samples(group_by_chain=True)["log_sigma"])
        extra = mcmc.get_extra_fields(group_by_chain=True)
        # potential = -(log p(sigma) + log_sigma)
        log_density_sigma = -np.asarray(extra["potential_energy"]) - z

        draws = PosteriorDraws(
            sigma=np.exp(z),
            log_density=log_density_sigma,
            diverging=np.asarray(extra["diverging"]),
            tree_depth=tree_depth_from_steps(extra["num_steps"]),
            num_warmup=self.num_warmup,
            max_tree_depth=self.max_tree_depth,
            init_sigma=np.exp(np.asarray(jnp.atleast_1d(z0))),
            sampler=self.name,
            warmup_diverging=warmup_diverging,
        )
        logger.info(
            "NUTS finished: mean sigma=%.5f, %d divergent transition(s)",
            float(np.mean(draws.sigma)),
            int(np.count_nonzero(draws.diverging)),
        )
        return draws
