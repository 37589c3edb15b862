"""
inference/langevin.py
---------------------

Metropolis-adjusted Langevin algorithm (MALA) for posterior inference.

Each iteration proposes

    z' = z + eps * grad log p(z) + sqrt(2 eps) * xi,   xi ~ N(0, 1)

on z = log(sigma) and accepts with the Metropolis-Hastings ratio, so the chain
targets the exact posterior (unlike the unadjusted Langevin algorithm).

- Step size eps is adapted during warm-up by a Robbins-Monro update towards
  `target_accept_prob` (0.574 is optimal for MALA) and frozen afterwards.
- A proposal whose log density is non-finite, or drops by more than
  DIVERGENCE_THRESHOLD, is flagged as divergent (and rejected).
- Every iteration takes one gradient step, reported as tree depth 1.

Chains run with jax.vmap; each chain owns its PRNG key and trajectory.
"""

from __future__ import annotations

import logging

import jax
import jax.numpy as jnp
import jax.random as jr
import numpy as np

from golfputt.posterior.draws import PosteriorDraws
from golfputt.utils import rng

from .base import MCMCSampler

logger = logging.getLogger(__name__)

# same energy-error cut-off NumPyro uses for NUTS divergences
DIVERGENCE_THRESHOLD = 1000.0


class LangevinSampler(MCMCSampler):
    """
    MALA sampler.

    Parameters
    ----------
    num_samples, num_warmup, num_chains, init_sigma, seed
        See MCMCSampler.
    step_size : float, default=0.1
        Initial step size on the log(sigma) scale.
    target_accept_prob : float, default=0.574
        Acceptance rate targeted during warm-up.
    """

    name = "langevin"

    def __init__(
        self,
        num_samples: int = 1000,
        num_warmup: int | None = None,
        num_chains: int = 4,
        *,
        step_size: float = 0.1,
        target_accept_prob: float = 0.574,
        init_sigma=None,
        seed: int = 0,
    ):
        super().__init__(
            num_samples, num_warmup, num_chains, init_sigma=init_sigma, seed=seed
        )
        if step_size <= 0:
            raise ValueError(f"step_size must be positive, got {step_size}")
        if not 0.0 < target_accept_prob < 1.0:
            raise ValueError(
                f"target_accept_prob must be in (0, 1), got {target_accept_prob}"
            )
        self.step_size = float(step_size)
        self.target_accept_prob = float(target_accept_prob)
        # Exposed after sample(): adapted step size per chain
        self.adapted_step_size: np.ndarray | None = None

    def _run_chain(self, log_density, key, z0):
        value_and_grad = jax.value_and_grad(log_density.unconstrained)
        num_warmup = self.num_warmup
        target = self.target_accept_prob

        def step(carry, inputs):
            z, lp, grad, log_eps = carry
            key, t = inputs
            eps = jnp.exp(log_eps)
            k_noise, k_accept = jr.split(key)

            z_new = z + eps * grad + jnp.sqrt(2.0 * eps) * jr.normal(k_noise)
            lp_new, grad_new = value_and_grad(z_new)

            forward = -((z_new - z - eps * grad) ** 2) / (4.0 * eps)
            backward = -((z - z_new - eps * grad_new) ** 2) / (4.0 * eps)
            log_ratio = lp_new - lp + backward - forward
            log_ratio = jnp.where(jnp.isfinite(log_ratio), log_ratio, -jnp.inf)
            accept_prob = jnp.minimum(1.0, jnp.exp(log_ratio))
            accept = jr.uniform(k_accept) < accept_prob
            diverging = ~jnp.isfinite(lp_new) | (lp - lp_new > DIVERGENCE_THRESHOLD)

            z = jnp.where(accept, z_new, z)
            lp = jnp.where(accept, lp_new, lp)
            grad = jnp.where(accept, grad_new, grad)
            log_eps = jnp.where(
                t < num_warmup,
                log_eps + (accept_prob - target) / jnp.sqrt(t + 1.0),
                log_eps,
            )
            return (z, lp, grad, log_eps), (z, lp, diverging)

        lp0, grad0 = value_and_grad(z0)
        n_total = num_warmup + self.num_samples
        keys = jr.split(key, n_total)
        ts = jnp.arange(n_total, dtype=z0.dtype)
        init = (z0, lp0, grad0, jnp.log(jnp.asarray(self.step_size, z0.dtype)))
        (_, _, _, log_eps), (zs, lps, divs) = jax.lax.scan(step, init, (keys, ts))
        return zs, lps, divs, jnp.exp(log_eps)

    def sample(self, log_density) -> PosteriorDraws:
        """
        Run MALA on ``log_density`` and return the retained draws.

        Parameters
        ----------
        log_density : AngleLogDensity

        Returns
        -------
        PosteriorDraws
        """
        key_init, key_run = rng.split(rng.seed(self.seed))
        z0 = self._initial_log_sigma(key_init)
        chain_keys = rng.split(key_run, self.num_chains)

        logger.info(
            "Langevin: %d chain(s) x (%d warm-up + %d draws)",
            self.num_chains,
            self.num_warmup,
            self.num_samples,
        )
        run = jax.jit(jax.vmap(lambda k, z: self._run_chain(log_density, k, z)))
        zs, lps, divs, eps = run(chain_keys, z0)

        zs = np.asarray(zs)
        lps = np.asarray(lps)
        divs = np.asarray(divs)
        self.adapted_step_size = np.asarray(eps)
        w = self.num_warmup
        logger.debug("Langevin adapted step sizes: %s", self.adapted_step_size)

        return PosteriorDraws(
            sigma=np.exp(zs[:, w:]),
            # unconstrained density includes the log-Jacobian z
            log_density=lps[:, w:] - zs[:, w:],
            diverging=divs[:, w:],
            tree_depth=np.ones_like(zs[:, w:], dtype=int),
            num_warmup=w,
            max_tree_depth=None,
            init_sigma=np.exp(np.asarray(z0)),
            sampler=self.name,
            warmup_diverging=divs[:, :w] if w > 0 else None,
        )
