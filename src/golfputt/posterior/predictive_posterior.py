"""
predictive_posterior.py
----------------------

Predictive posterior distributions p(success | distance, data).

This module defines posteriors over **success curves** (not parameters),
used to compare the fitted model against empirical proportions.

Design
------
AnglePredictivePosterior wraps a ParameterPosterior and turns every retained
draw of sigma into one success curve:
    curve_i(d) = p(success | d, sigma_i)   where sigma_i ~ p(sigma | data)

Curves are evaluated in batches and folded into running accumulators
(sum, sum of squares, fixed-bin histogram on [0, 1]), so the number of draws
is never limited by memory. The raw ensemble is kept only on request.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

import jax
import jax.numpy as jnp
import jax.random as jr
import numpy as np

if TYPE_CHECKING:
    from golfputt.posterior.parameter_posterior import ParameterPosterior


@runtime_checkable
class PredictivePosterior(Protocol):
    """
    Protocol for predictive distributions p(f(d*) | data) at test distances.

    Returned by Model.posterior(distances).
    """

    @property
    def mean(self) -> jnp.ndarray:
        """
        Posterior predictive mean E[p(success | d*) | data].

        Returns
        -------
        jnp.ndarray
            Shape (n_test,)
        """
        ...

    @property
    def variance(self) -> jnp.ndarray:
        """
        Pointwise variance of the success curves across draws, shape (n_test,).
        """
        ...

    def credible_band(self, prob: float = 0.9) -> tuple[jnp.ndarray, jnp.ndarray]:
        """
        Central pointwise credible band (lower, upper), each shape (n_test,).
        """
        ...

    def rsample(self, sample_shape: tuple = (), *, key: jax.Array) -> jnp.ndarray:
        """
        Sample success curves from p(f(d*) | data).

        Returns
        -------
        jnp.ndarray
            Shape (*sample_shape, n_test)
        """
        ...


class AnglePredictivePosterior:
    """
    Posterior predictive success curves for the angle model.

    Parameters
    ----------
    param_posterior : ParameterPosterior
        Posterior over sigma. MCMC posteriors contribute every retained draw;
        other posteriors are sampled ``n_samples`` times.
    distances : array-like, shape (n_test,)
        Distances (inches) at which curves are evaluated, e.g. the observed
        distances or ``data.distance_grid(200)``.
    n_samples : int, default=1000
        Number of sigma samples for posteriors without stored draws.
    batch_size : int, default=256
        Number of curves evaluated at once.
    keep_curves : bool, default=True
        Keep the full (num_draws, n_test) ensemble for overlay plots and exact
        quantiles. With False only the accumulators are held.
    n_bins : int, default=1000
        Histogram resolution on [0, 1] for streamed quantiles.
    key : jax.Array, optional
        PRNG key for sampling non-MCMC posteriors. Defaults to PRNGKey(0).

    Raises
    ------
    DomainError
        If any distance is below the capture threshold.
    ValueError
        If batch_size, n_samples or n_bins is not positive.

    Notes
    -----
    Uses lazy evaluation: curves are computed on first access.
    """

    def __init__(
        self,
        param_posterior: ParameterPosterior,
        distances,
        *,
        n_samples: int = 1000,
        batch_size: int = 256,
        keep_curves: bool = True,
        n_bins: int = 1000,
        key=None,
    ):
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")
        if n_samples < 1:
            raise ValueError(f"n_samples must be >= 1, got {n_samples}")
        if n_bins < 1:
            raise ValueError(f"n_bins must be >= 1, got {n_bins}")

        self.param_posterior = param_posterior
        self.distances = jnp.atleast_1d(jnp.asarray(distances, dtype=float))
        # raises DomainError for distances inside the hole
        param_posterior.model.capture_angle(self.distances)

        self.n_samples = int(n_samples)
        self.batch_size = int(batch_size)
        self.keep_curves = bool(keep_curves)
        self.n_bins = int(n_bins)
        self.key = jr.PRNGKey(0) if key is None else key

        # Lazy evaluation cache
        self._num_draws = 0
        self._sum = None
        self._sumsq = None
        self._hist = None
        self._curves = None
        self._computed = False

    # ------------------------------------------------------------------
    # STREAMING
    # ------------------------------------------------------------------
    def _sigma_draws(self) -> np.ndarray:
        draws = getattr(self.param_posterior, "draws", None)
        if draws is not None:
            return np.asarray(draws.flat("sigma"))
        samples = self.param_posterior.sample(self.n_samples, key=self.key)
        return np.asarray(samples["sigma"]).reshape(-1)

    def _curve_fn(self):
        model = self.param_posterior.model
        distances = self.distances

        @jax.jit
        def curves(sigma):
            return model.predict_prob({"sigma": sigma[:, None]}, distances)

        return curves

    def _ensure_computed(self):
        """Stream all draws through the accumulators (lazy)."""
        if self._computed:
            return

        sigma = self._sigma_draws()
        n_test = self.distances.shape[0]
        total = np.zeros(n_test)
        total_sq = np.zeros(n_test)
        hist = np.zeros((n_test, self.n_bins), dtype=np.int64)
        kept = []
        columns = np.arange(n_test)[None, :]
        curves = self._curve_fn()

        for start in range(0, sigma.shape[0], self.batch_size):
            batch = np.asarray(
                curves(jnp.asarray(sigma[start : start + self.batch_size])),
                dtype=np.float64,
            )
            total += batch.sum(axis=0)
            total_sq += np.square(batch).sum(axis=0)
            bins = np.clip((batch * self.n_bins).astype(np.int64), 0, self.n_bins - 1)
            np.add.at(hist, (np.broadcast_to(columns, bins.shape), bins), 1)
            if self.keep_curves:
                kept.append(batch)

        self._num_draws = int(sigma.shape[0])
        self._sum = total
        self._sumsq = total_sq
        self._hist = hist
        if self.keep_curves:
            self._curves = np.concatenate(kept, axis=0)
        self._computed = True

    # ------------------------------------------------------------------
    # SUMMARIES
    # ------------------------------------------------------------------
    @property
    def num_draws(self) -> int:
        """Number of curves folded into the summaries."""
        self._ensure_computed()
        return self._num_draws

    @property
    def mean(self) -> jnp.ndarray:
        """E[p(success | d*) | data], shape (n_test,)."""
        self._ensure_computed()
        return jnp.asarray(self._sum / self._num_draws)

    @property
    def variance(self) -> jnp.ndarray:
        """Var[p(success | d*) | data], shape (n_test,)."""
        self._ensure_computed()
        mean = self._sum / self._num_draws
        var = self._sumsq / self._num_draws - np.square(mean)
        return jnp.asarray(np.maximum(var, 0.0))

    @property
    def curves(self) -> jnp.ndarray:
        """
        Raw ensemble, shape (num_draws, n_test).

        Raises
        ------
        RuntimeError
            If the posterior was built with keep_curves=False.
        """
        if not self.keep_curves:
            raise RuntimeError(
                "curves were not kept; construct with keep_curves=True"
            )
        self._ensure_computed()
        return jnp.asarray(self._curves)

    def quantiles(self, q) -> jnp.ndarray:
        """
        Pointwise quantiles of the success curves.

        Parameters
        ----------
        q : float or array-like
            Probabilities in [0, 1].

        Returns
        -------
        jnp.ndarray
            Shape (n_test,) for scalar q, (len(q), n_test) otherwise.

        Notes
        -----
        Exact when curves are kept; otherwise interpolated inside histogram
        bins, accurate to 1 / n_bins.
        """
        q_arr = np.asarray(q, dtype=np.float64)
        if np.any((q_arr < 0) | (q_arr > 1)):
            raise ValueError(f"quantile probabilities must lie in [0, 1], got {q}")
        self._ensure_computed()

        if self.keep_curves:
            return jnp.asarray(np.quantile(self._curves, q_arr, axis=0))

        cdf = np.cumsum(self._hist, axis=1)
        targets = np.atleast_1d(q_arr)[:, None] * self._num_draws
        out = np.empty((targets.shape[0], cdf.shape[0]))
        width = 1.0 / self.n_bins
        for i, t in enumerate(targets[:, 0]):
            # first bin whose cumulative count reaches the target; q=0 is the
            # lower edge of the first non-empty bin
            reached = cdf >= t if t > 0 else cdf > 0
            idx = np.argmax(reached, axis=1)
            below = np.where(idx > 0, cdf[np.arange(cdf.shape[0]), idx - 1], 0)
            in_bin = self._hist[np.arange(cdf.shape[0]), idx]
            frac = np.where(in_bin > 0, (t - below) / np.maximum(in_bin, 1), 0.0)
            out[i] = (idx + np.clip(frac, 0.0, 1.0)) * width
        return jnp.asarray(out if q_arr.ndim else out[0])

    def credible_band(self, prob: float = 0.9) -> tuple[jnp.ndarray, jnp.ndarray]:
        """
        Central pointwise credible band.

        Parameters
        ----------
        prob : float, default=0.9
            Mass inside the band, in (0, 1).

        Returns
        -------
        (lower, upper) : tuple of jnp.ndarray, each shape (n_test,)
        """
        if not 0.0 < prob < 1.0:
            raise ValueError(f"prob must lie in (0, 1), got {prob}")
        tail = (1.0 - prob) / 2.0
        band = self.quantiles([tail, 1.0 - tail])
        return band[0], band[1]

    def rsample(self, sample_shape: tuple = (), *, key: jax.Array) -> jnp.ndarray:
        """
        Sample success curves from p(f(d*) | data).

        Parameters
        ----------
        sample_shape : tuple
            Batch shape
        key : jax.Array
            PRNG key

        Returns
        -------
        jnp.ndarray
            Shape (*sample_shape, n_test)
        """
        n = int(np.prod(sample_shape)) if sample_shape else 1
        sigma = self.param_posterior.sample(n, key=key)["sigma"]
        samples = self._curve_fn()(jnp.asarray(sigma).reshape(-1))
        if sample_shape:
            return samples.reshape(*sample_shape, -1)
        return samples[0]

    def to_dict(self, prob: float = 0.9) -> dict:
        """
        Plot-ready summary: distances, mean curve and credible band as lists.
        """
        lower, upper = self.credible_band(prob)
        return {
            "distance": np.asarray(self.distances).tolist(),
            "mean": np.asarray(self.mean).tolist(),
            "lower": np.asarray(lower).tolist(),
            "upper": np.asarray(upper).tolist(),
            "prob": float(prob),
            "num_draws": self.num_draws,
        }
