"""
diagnostics.py
--------------

Convergence diagnostics for MCMC draws.

Provides:
- effective_sample_size : ESS pooled over chains
- rhat                  : split potential scale reduction (split-R-hat)
- autocorrelation       : per-chain autocorrelation up to a maximum lag
- divergence_summary    : count and (chain, iteration) location of divergent
                          transitions and of max-tree-depth hits
- diagnose              : all of the above as a DiagnosticReport

The estimators are NumPyro's (numpyro.diagnostics), which follow Stan's
definitions (Geyer initial monotone sequence for ESS, rank-free split-R-hat).

Threshold crossings are reported as ConvergenceWarning through
warnings.warn and recorded on the report. They never raise; the caller
decides whether to trust the draws. Nothing here modifies the draws.
"""

from __future__ import annotations

import json
import logging
import warnings
from dataclasses import asdict, dataclass, field
from typing import Any

import numpy as np
from numpyro.diagnostics import autocorrelation as _autocorrelation
from numpyro.diagnostics import effective_sample_size as _effective_sample_size
from numpyro.diagnostics import split_gelman_rubin

from golfputt.errors import ConvergenceWarning

from .draws import PosteriorDraws

logger = logging.getLogger(__name__)

DEFAULT_MIN_ESS_RATIO = 0.1
DEFAULT_MAX_RHAT = 1.01
DEFAULT_MAX_LAG = 50


def _as_chains(samples) -> np.ndarray:
    x = np.asarray(samples, dtype=float)
    if x.ndim == 1:
        x = x[None, :]
    if x.ndim != 2:
        raise ValueError(
            f"samples must have shape (num_chains, num_samples), got {x.shape}"
        )
    return x


def effective_sample_size(samples) -> float:
    """
    Estimate effective sample size (ESS): the number of independent draws a
    correlated MCMC sample is equivalent to.

    Parameters
    ----------
    samples : array-like
        Draws, shape (num_chains, num_samples) or (num_samples,) for one chain.

    Returns
    -------
    float
        ESS pooled over chains; nan with fewer than 2 draws per chain or for
        constant chains.
    """
    x = _as_chains(samples)
    if x.shape[1] < 2:
        return float("nan")
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(_effective_sample_size(x))


def rhat(chains) -> float:
    """
    Compute the split-R-hat convergence diagnostic.

    Each chain is split in half and the Gelman-Rubin statistic is computed over
    the 2 * num_chains half-chains, so a single chain is also checked for
    within-chain drift.

    Parameters
    ----------
    chains : array-like
        Draws, shape (num_chains, num_samples).

    Returns
    -------
    float
        R-hat; values near 1 indicate convergence. nan with fewer than 4 draws
        per chain.

    References:
    ----------
        [1] https://bookdown.org/rdpeng/advstatcomp/monitoring-convergence.html
        [2] Vehtari et al. (2021), Rank-normalization, folding, and localization.
    """
    x = _as_chains(chains)
    if x.shape[1] < 4:
        return float("nan")
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(split_gelman_rubin(x))


def autocorrelation(samples, max_lag: int = DEFAULT_MAX_LAG) -> np.ndarray:
    """
    Sample autocorrelation of each chain.

    Parameters
    ----------
    samples : array-like, shape (num_chains, num_samples)
    max_lag : int
        Largest lag returned (clipped to num_samples - 1).

    Returns
    -------
    np.ndarray, shape (num_chains, min(max_lag, num_samples - 1) + 1)
        Lag-0 entry is 1 for non-constant chains.
    """
    x = _as_chains(samples)
    n_lags = min(int(max_lag), x.shape[1] - 1) + 1
    with np.errstate(divide="ignore", invalid="ignore"):
        acf = np.asarray(_autocorrelation(x, axis=-1))
    return acf[:, :n_lags]


def divergence_summary(draws: PosteriorDraws) -> dict[str, Any]:
    """
    Locate divergent transitions and max-tree-depth hits.

    Returns
    -------
    dict
        - "num_divergent": int
        - "divergent_iterations": list of (chain, iteration)
        - "num_max_treedepth": int
        - "max_treedepth_iterations": list of (chain, iteration)
        - "warmup_divergent": int | None
    """
    divergent = [(int(c), int(i)) for c, i in zip(*np.nonzero(draws.diverging))]
    if draws.max_tree_depth is None:
        saturated = []
    else:
        hits = draws.tree_depth >= draws.max_tree_depth
        saturated = [(int(c), int(i)) for c, i in zip(*np.nonzero(hits))]
    warmup = (
        None
        if draws.warmup_diverging is None
        else int(np.count_nonzero(draws.warmup_diverging))
    )
    return {
        "num_divergent": len(divergent),
        "divergent_iterations": divergent,
        "num_max_treedepth": len(saturated),
        "max_treedepth_iterations": saturated,
        "warmup_divergent": warmup,
    }


def _same(a, b) -> bool:
    """Structural equality where NaN matches NaN."""
    if isinstance(a, dict) and isinstance(b, dict):
        return a.keys() == b.keys() and all(_same(a[k], b[k]) for k in a)
    if isinstance(a, (list, tuple)) and isinstance(b, (list, tuple)):
        return len(a) == len(b) and all(_same(x, y) for x, y in zip(a, b))
    if isinstance(a, float) and isinstance(b, float):
        return a == b or (np.isnan(a) and np.isnan(b))
    return a == b


@dataclass
class DiagnosticReport:
    """
    Convergence report for one set of posterior draws.

    Per-parameter entries (ess, ess_ratio, rhat, autocorrelation, summary) are
    keyed by parameter name ("sigma", "sigma_degrees"). Undefined diagnostics
    (chains too short or constant) are NaN; report equality treats NaN as
    equal to NaN so a JSON round-trip compares equal.
    """

    num_chains: int
    num_samples: int
    num_warmup: int
    sampler: str
    ess: dict[str, float]
    ess_ratio: dict[str, float]
    rhat: dict[str, float]
    autocorrelation: dict[str, list[list[float]]]
    summary: dict[str, dict[str, float]]
    num_divergent: int
    divergent_iterations: list[tuple[int, int]]
    num_max_treedepth: int
    max_treedepth_iterations: list[tuple[int, int]]
    warmup_divergent: int | None = None
    thresholds: dict[str, float] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True when no convergence check failed."""
        return not self.warnings

    def __eq__(self, other) -> bool:
        if not isinstance(other, DiagnosticReport):
            return NotImplemented
        return _same(self.to_dict(), other.to_dict())

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> DiagnosticReport:
        payload = dict(payload)
        for key in ("divergent_iterations", "max_treedepth_iterations"):
            payload[key] = [tuple(loc) for loc in payload.get(key, [])]
        return cls(**payload)

    def to_json(self, **kwargs) -> str:
        return json.dumps(self.to_dict(), **kwargs)

    @classmethod
    def from_json(cls, text: str) -> DiagnosticReport:
        return cls.from_dict(json.loads(text))


def _summarize(x: np.ndarray) -> dict[str, float]:
    flat = x.reshape(-1)
    q05, q50, q95 = np.quantile(flat, [0.05, 0.5, 0.95])
    return {
        "mean": float(np.mean(flat)),
        "sd": float(np.std(flat, ddof=1)) if flat.size > 1 else float("nan"),
        "q05": float(q05),
        "median": float(q50),
        "q95": float(q95),
    }


def diagnose(
    draws: PosteriorDraws,
    *,
    min_ess_ratio: float = DEFAULT_MIN_ESS_RATIO,
    max_rhat: float = DEFAULT_MAX_RHAT,
    max_lag: int = DEFAULT_MAX_LAG,
) -> DiagnosticReport:
    """
    Run every convergence check over the across-chain draw collection.

    Parameters
    ----------
    draws : PosteriorDraws
    min_ess_ratio : float, default=0.1
        ESS / total draws below this flags inadequate mixing.
    max_rhat : float, default=1.01
        R-hat above this flags non-convergence.
    max_lag : int, default=50
        Largest autocorrelation lag reported.

    Returns
    -------
    DiagnosticReport
        Warnings are emitted as ConvergenceWarning and listed in
        ``report.warnings``.
    """
    flagged: list[str] = []

    def flag(message: str) -> None:
        flagged.append(message)
        warnings.warn(message, ConvergenceWarning, stacklevel=3)

    ess, ess_ratio, rhats, acfs, summary = {}, {}, {}, {}, {}
    for name, values in draws.grouped().items():
        ess[name] = effective_sample_size(values)
        ess_ratio[name] = ess[name] / values.size
        rhats[name] = rhat(values)
        acfs[name] = autocorrelation(values, max_lag=max_lag).tolist()
        summary[name] = _summarize(values)

    # sigma_degrees is a linear transform of sigma; check the parameter once
    name = "sigma"
    if not np.isfinite(rhats[name]):
        flag(f"R-hat for {name} is undefined ({draws.num_samples} draws per chain)")
    elif rhats[name] > max_rhat:
        flag(f"R-hat for {name} is {rhats[name]:.4f} > {max_rhat}; chains have not mixed")
    if not np.isfinite(ess_ratio[name]):
        flag(f"effective sample size for {name} is undefined")
    elif ess_ratio[name] < min_ess_ratio:
        flag(
            f"effective sample size ratio for {name} is {ess_ratio[name]:.3f} "
            f"< {min_ess_ratio}; draws are strongly autocorrelated"
        )

    div = divergence_summary(draws)
    if div["num_divergent"]:
        flag(
            f"{div['num_divergent']} divergent transition(s) after warm-up; "
            "posterior draws may be biased"
        )
    if div["num_max_treedepth"]:
        flag(
            f"{div['num_max_treedepth']} iteration(s) hit max_tree_depth="
            f"{draws.max_tree_depth}; sampler efficiency is limited"
        )

    report = DiagnosticReport(
        num_chains=draws.num_chains,
        num_samples=draws.num_samples,
        num_warmup=draws.num_warmup,
        sampler=draws.sampler,
        ess=ess,
        ess_ratio=ess_ratio,
        rhat=rhats,
        autocorrelation=acfs,
        summary=summary,
        thresholds={
            "min_ess_ratio": float(min_ess_ratio),
            "max_rhat": float(max_rhat),
        },
        warnings=flagged,
        **div,
    )
    logger.debug(
        "diagnostics: rhat=%.4f ess=%.1f divergent=%d ok=%s",
        rhats["sigma"],
        ess["sigma"],
        div["num_divergent"],
        report.ok,
    )
    return report
