"""
posterior
=========

Posterior representations and diagnostics.

This subpackage provides:
- ParameterPosterior: protocol for posteriors over sigma, p(sigma | data)
- MAPPosterior: delta distribution at sigma_MAP (point estimate)
- LaplacePosterior: log-normal approximation around the mode
- MCMCPosterior: retained sampler draws (PosteriorDraws)
- diagnostics: ESS, R-hat, autocorrelation, divergences, DiagnosticReport

Two-tier design
---------------
- ParameterPosterior: represents p(sigma | data) for research/diagnostics
- PredictivePosterior: represents p(success | distance, data) for comparing
  fitted curves against empirical proportions
"""

from .base_posterior import BasePosterior
from .diagnostics import (
    DiagnosticReport,
    autocorrelation,
    diagnose,
    divergence_summary,
    effective_sample_size,
    rhat,
)
from .draws import PosteriorDraws
from .parameter_posterior import ParameterPosterior
from .posterior import LaplacePosterior, MAPPosterior, MCMCPosterior
from .predictive_posterior import AnglePredictivePosterior, PredictivePosterior

__all__ = [
    # Core protocols
    "ParameterPosterior",
    "PredictivePosterior",
    "BasePosterior",
    # Parameter posterior implementations
    "MAPPosterior",
    "LaplacePosterior",
    "MCMCPosterior",
    "PosteriorDraws",
    # Predictive posterior implementations
    "AnglePredictivePosterior",
    # Diagnostics
    "DiagnosticReport",
    "diagnose",
    "effective_sample_size",
    "rhat",
    "autocorrelation",
    "divergence_summary",
]
