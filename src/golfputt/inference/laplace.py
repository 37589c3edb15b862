"""
laplace.py
----------

Laplace approximation to the posterior.

Approximates the posterior of z = log(sigma) with a Gaussian:
    N(mean = mode of p(z | data), variance = -1 / (d^2/dz^2 log p(z | data)))

so sigma is log-normal. Provides posterior.sample() cheaply and is a quick
cross-check of the MCMC samplers.

The MAP fit (in sigma) is refined with Newton steps on the unconstrained
density, whose mode differs from the sigma-space mode by the log-Jacobian.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp

from golfputt.errors import DomainError
from golfputt.inference.base import InferenceEngine
from golfputt.inference.map_optimizer import MAPOptimizer
from golfputt.posterior.posterior import LaplacePosterior, MAPPosterior


class LaplaceApproximation(InferenceEngine):
    """
    Laplace approximation around the MAP estimate.

    Parameters
    ----------
    map_optimizer : MAPOptimizer, optional
        Engine used for the initial MAP fit.
    newton_steps : int, default=20
        Newton iterations on log(sigma) after the MAP fit.

    Methods
    -------
    fit(model, data) -> LaplacePosterior
    from_map(map_posterior, data) -> LaplacePosterior
        Construct a Gaussian approximation centered at the refined mode.
    """

    def __init__(
        self, map_optimizer: MAPOptimizer | None = None, newton_steps: int = 20
    ):
        self.map_optimizer = map_optimizer or MAPOptimizer()
        self.newton_steps = int(newton_steps)

    def fit(self, model, data) -> LaplacePosterior:
        return self.from_map(self.map_optimizer.fit(model, data), data)

    def from_map(self, map_posterior: MAPPosterior, data) -> LaplacePosterior:
        """
        Return posterior approximation from MAP.

        Parameters
        ----------
        map_posterior : MAPPosterior
            Posterior object from MAP optimization.
        data : PuttingData
            Data the MAP estimate was fitted to.

        Returns
        -------
        LaplacePosterior
        """
        model = map_posterior.model
        log_density = model.log_density(data)
        grad = jax.grad(log_density.unconstrained)
        hess = jax.grad(grad)

        @jax.jit
        def newton(z):
            h = hess(z)
            # fall back to a no-op where curvature is not negative
            return jnp.where(h < 0, z - grad(z) / h, z)

        z = jnp.log(jnp.asarray(map_posterior.params["sigma"]))
        for _ in range(self.newton_steps):
            z = newton(z)

        curvature = float(hess(z))
        if not curvature < 0:
            raise DomainError(
                "log posterior is not concave at the mode "
                f"(second derivative {curvature:g}); Laplace approximation undefined"
            )
        return LaplacePosterior(
            mean_log_sigma=float(z),
            std_log_sigma=float(1.0 / jnp.sqrt(-curvature)),
            model=model,
            info={
                "map_sigma": float(map_posterior.params["sigma"]),
                "curvature": curvature,
            },
        )
