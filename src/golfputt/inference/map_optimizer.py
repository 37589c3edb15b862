"""
map_optimizer.py
----------------

MAP (Maximum A Posteriori) optimizer using Optax.

- Gradient ascent on the log posterior of sigma, parameterised by
  log(sigma) so every iterate stays positive.
- Defaults to Adam with a cosine-decayed learning rate, but any Optax
  optimizer can be passed in.

Connections
-----------
- Uses AngleModel.log_density(data) as the objective.
- Returns a MAPPosterior wrapping the MAP estimate.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp
import optax

from golfputt.errors import DomainError
from golfputt.inference.base import InferenceEngine
from golfputt.posterior.posterior import MAPPosterior


class MAPOptimizer(InferenceEngine):
    """
    MAP (Maximum A Posteriori) optimizer.

    Parameters
    ----------
    steps : int, default=1000
        Number of optimization steps.
    learning_rate : float, default=0.05
        Peak learning rate of the default optimizer (on the log(sigma) scale).
    optimizer : optax.GradientTransformation, optional
        Optax optimizer to use. Default: Adam with cosine decay.

    Notes
    -----
    - Loss function = negative log posterior density of sigma.
    - The mode is that of p(sigma | data); no log-Jacobian is added.
    - Gradients computed with jax.grad.
    """

    def __init__(
        self,
        steps: int = 1000,
        learning_rate: float = 0.05,
        optimizer: optax.GradientTransformation | None = None,
        *,
        track_history: bool = False,
        log_every: int = 10,
    ):
        """Create a MAP optimizer.

        Parameters
        ----------
        steps : int
            Number of optimization steps.
        learning_rate : float, optional
            Learning rate for the default optimizer.
        optimizer : optax.GradientTransformation | None
            Optax optimizer to use.
        track_history : bool, optional
            When True, record loss history during fitting for plotting.
        log_every : int, optional
            Record every N steps (also records the last step).
        """
        if int(steps) < 1:
            raise ValueError(f"steps must be >= 1, got {steps}")
        self.steps = int(steps)
        self.optimizer = optimizer or optax.adam(
            optax.cosine_decay_schedule(learning_rate, decay_steps=self.steps)
        )
        self.track_history = track_history
        self.log_every = max(1, int(log_every))
        # Exposed after fit() when tracking is enabled
        self.loss_steps: list[int] = []
        self.loss_history: list[float] = []

    def fit(
        self,
        model,
        data,
        init_params: dict | None = None,
        seed: int | None = None,
    ) -> MAPPosterior:
        """
        Fit sigma by MAP optimization.

        Parameters
        ----------
        model : AngleModel
            Model instance.
        data : PuttingData
            Observed putts.
        init_params : dict | None, optional
            Initial ``{"sigma": ...}``. If provided, this takes precedence
            over the seed.
        seed : int | None, optional
            PRNG seed for the starting point log(sigma) ~ Uniform(-2, 2)
            when init_params is not provided. If None, defaults to 0.

        Returns
        -------
        MAPPosterior
            Posterior wrapper around MAP params and model.
        """
        log_density = model.log_density(data)

        def loss_fn(log_sigma):
            return -log_density(jnp.exp(log_sigma))

        # Initialize parameters
        if init_params is not None:
            sigma0 = float(init_params["sigma"])
            if not sigma0 > 0:
                raise DomainError(f"initial sigma must be > 0, got {sigma0}")
        else:
            rng_seed = 0 if seed is None else int(seed)
            # same self-initialisation as the samplers: log(sigma) ~ U(-2, 2)
            sigma0 = float(
                jnp.exp(
                    jax.random.uniform(
                        jax.random.PRNGKey(rng_seed), minval=-2.0, maxval=2.0
                    )
                )
            )
        log_sigma = jnp.log(jnp.asarray(sigma0, dtype=jnp.result_type(float)))
        opt_state = self.optimizer.init(log_sigma)

        @jax.jit
        def step(log_sigma, opt_state):
            loss, grads = jax.value_and_grad(loss_fn)(log_sigma)  # auto-diff
            updates, opt_state = self.optimizer.update(
                grads, opt_state, log_sigma
            )  # optimizer update
            log_sigma = optax.apply_updates(log_sigma, updates)  # apply updates
            return log_sigma, opt_state, loss

        # clear any previous history
        if self.track_history:
            self.loss_steps.clear()
            self.loss_history.clear()

        for i in range(self.steps):
            log_sigma, opt_state, loss = step(log_sigma, opt_state)
            if self.track_history and (
                (i % self.log_every == 0) or (i == self.steps - 1)
            ):
                self.loss_steps.append(i)
                self.loss_history.append(float(loss))

        final_loss = float(loss_fn(log_sigma))
        return MAPPosterior(
            params={"sigma": jnp.exp(log_sigma)},
            model=model,
            info={"final_loss": final_loss, "steps": self.steps},
        )

    # Optional helper
    def get_history(self) -> tuple[list[int], list[float]]:
        """Return (steps, losses) recorded during the last fit when tracking was enabled."""
        return self.loss_steps, self.loss_history
