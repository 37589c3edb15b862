"""
diagnostics.py
--------------

Parameter summaries for fitted posteriors.

Works for any ParameterPosterior (MAP, Laplace, MCMC): sigma is sampled
through ``posterior.sample`` and summarized both in radians and in degrees.
Convergence checks for MCMC draws live in golfputt.posterior.diagnostics.

Examples
--------
>>> from golfputt.utils.diagnostics import parameter_summary
>>> summary = parameter_summary(param_post, n_samples=1000)
>>> print(
...     f"sigma: {summary['sigma_degrees']['mean']:.2f} "
...     f"± {summary['sigma_degrees']['std']:.2f} deg"
... )
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import jax.numpy as jnp
import jax.random as jr

from golfputt.model.angle_model import sigma_degrees

if TYPE_CHECKING:
    from golfputt.posterior import ParameterPosterior


def parameter_summary(
    param_posterior: ParameterPosterior,
    n_samples: int = 1000,
    *,
    key: Any | None = None,
    quantiles: tuple[float, ...] = (0.025, 0.25, 0.5, 0.75, 0.975),
) -> dict[str, dict[str, Any]]:
    """
    Compute summary statistics of sigma.

    Parameters
    ----------
    param_posterior : ParameterPosterior
        Parameter posterior to summarize
    n_samples : int, default=1000
        Number of Monte Carlo samples
    key : JAX PRNGKey, optional
        Random key for sampling. Defaults to PRNGKey(0).
    quantiles : tuple of floats, default=(0.025, 0.25, 0.5, 0.75, 0.975)
        Quantiles to compute

    Returns
    -------
    summary : dict[str, dict]
        Keys "sigma" and "sigma_degrees"; values are dicts with:
        - "mean": Mean of posterior samples
        - "std": Standard deviation
        - "quantiles": Dict mapping quantile to value
    """
    if key is None:
        key = jr.PRNGKey(0)

    sigma = jnp.asarray(param_posterior.sample(n_samples, key=key)["sigma"])
    samples = {"sigma": sigma, "sigma_degrees": sigma_degrees(sigma)}

    summary = {}
    for param_name, param_samples in samples.items():
        summary[param_name] = {
            "mean": jnp.mean(param_samples),
            "std": jnp.std(param_samples),
            "quantiles": {
                q: jnp.percentile(param_samples, 100 * q) for q in quantiles
            },
        }

    return summary


def print_parameter_summary(
    param_posterior: ParameterPosterior,
    n_samples: int = 1000,
    *,
    key: Any | None = None,
) -> None:
    """
    Print a human-readable parameter summary.

    Examples
    --------
    >>> print_parameter_summary(model.posterior(kind="parameter"))
    Parameter Summary (1000 samples):

    sigma:
      Mean: 0.027 ± 0.000
      95% CI: [0.026, 0.027]
    ...
    """
    summary = parameter_summary(param_posterior, n_samples, key=key)

    print(f"Parameter Summary ({n_samples} samples):\n")

    for param_name, stats in summary.items():
        print(f"{param_name}:")
        print(f"  Mean: {float(stats['mean']):.3f} ± {float(stats['std']):.3f}")
        q025 = float(stats["quantiles"][0.025])
        q975 = float(stats["quantiles"][0.975])
        print(f"  95% CI: [{q025:.3f}, {q975:.3f}]")
        print()
