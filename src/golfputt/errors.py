"""
errors.py
---------

Exception and warning types raised by golfputt.

- DomainError : geometrically or physically impossible inputs
  (distance shorter than the capture threshold, inverted radii, sigma <= 0).
- DataError : observations that violate the data model
  (successes > attempts, non-positive distance or attempts).
- ConvergenceWarning : emitted by posterior diagnostics. Never raised as an
  error; draws are still returned and the caller decides whether to trust them.

Both error types subclass ValueError so existing ``except ValueError``
handlers keep working.
"""

from __future__ import annotations


class GolfPuttError(Exception):
    """Base class for golfputt errors."""


class DomainError(GolfPuttError, ValueError):
    """Input lies outside the domain of the geometric/probability model."""


class DataError(GolfPuttError, ValueError):
    """Observation record violates the data model."""


class ConvergenceWarning(UserWarning):
    """MCMC draws failed a convergence check (R-hat, ESS ratio, divergences)."""
