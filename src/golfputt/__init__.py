"""
golfputt
========

Bayesian estimation of a golfer's angular aiming error from putting data.

A putt is holed when the launch angle is small enough for the ball to drop
into the hole. With ball radius r, hole radius R and distance d, that is the
case when ``|angle| < asin((R - r) / d)``. Assuming aim angles are
Gaussian with standard deviation sigma (radians), the success probability is

    p(success | d, sigma) = 2 * Phi(asin((R - r) / d) / sigma) - 1

Binned putting data (attempts and successes per distance) gives a binomial
likelihood; with a half-Cauchy prior on sigma the posterior is sampled,
diagnosed, and propagated into predictive success curves.

----------------------------------------------------------------------
Workflow
----------------------------------------------------------------------

Core design
-----------
1. PuttingGeometry (model/geometry.py):
   - Ball and hole sizes (regulation 1.68 in / 4.25 in by default).
   - Capture angle asin((R - r) / d); DomainError inside the hole.

2. AngleModel (model/angle_model.py):
   - Success probability from the capture angle and sigma.
   - Owns geometry and prior; binds data into a pure log density.

3. Prior (model/prior.py):
   - HalfCauchyPrior(scale=2.5) by default, HalfNormalPrior as alternative.

4. AngleLogDensity (model/likelihood.py):
   - log prior + binomial log likelihood, a pure function of sigma.
   - Consumed by every inference engine.

5. Inference (inference/):
   - NUTSSampler (NumPyro), LangevinSampler (MALA), MAPOptimizer (Optax),
     LaplaceApproximation.

6. Posterior (posterior/):
   - PosteriorDraws + diagnose() for ESS, R-hat, autocorrelation,
     divergences.
   - AnglePredictivePosterior: mean curve and credible bands.

Unified import style
--------------------
Top-level:
  from golfputt import AngleModel, PuttingData, NUTSSampler, load_berry_1996

Subpackages:
  from golfputt.model import AngleModel, PuttingGeometry, HalfCauchyPrior
  from golfputt.inference import NUTSSampler, LangevinSampler, MAPOptimizer
  from golfputt.posterior import diagnose, AnglePredictivePosterior
  from golfputt.data import PuttingData, load_putts_csv, load_berry_1996

Data flow
---------
    data = load_berry_1996()
    model = AngleModel()
    model.fit(data, inference="nuts", inference_config={"num_samples": 1000})
    report = model.posterior(kind="parameter").diagnostics()
    pred = model.posterior(data.distance_grid(200))
    lower, upper = pred.credible_band(0.9)

----------------------------------------------------------------------
"""

# Re-export subpackages for unified import style (e.g., golfputt.model, golfputt.inference)
from . import data as data
from . import inference as inference
from . import model as model
from . import posterior as posterior
from . import utils as utils

# Data
from .data import PuttingData, load_berry_1996, load_putts_csv
from .errors import ConvergenceWarning, DataError, DomainError, GolfPuttError

# Inference
from .inference import (
    LangevinSampler,
    LaplaceApproximation,
    MAPOptimizer,
    NUTSSampler,
)

# Model
from .model import (
    AngleModel,
    HalfCauchyPrior,
    HalfNormalPrior,
    PuttingGeometry,
    sigma_degrees,
    success_probability,
)

# Posterior
from .posterior import (
    AnglePredictivePosterior,
    DiagnosticReport,
    MCMCPosterior,
    PosteriorDraws,
    diagnose,
)

__version__ = "0.1.0"

__all__ = [
    # Core model
    "AngleModel",
    "PuttingGeometry",
    "HalfCauchyPrior",
    "HalfNormalPrior",
    "success_probability",
    "sigma_degrees",
    # Inference
    "NUTSSampler",
    "LangevinSampler",
    "MAPOptimizer",
    "LaplaceApproximation",
    # Posterior
    "PosteriorDraws",
    "MCMCPosterior",
    "DiagnosticReport",
    "diagnose",
    "AnglePredictivePosterior",
    # Data handling
    "PuttingData",
    "load_berry_1996",
    "load_putts_csv",
    # Errors
    "GolfPuttError",
    "DomainError",
    "DataError",
    "ConvergenceWarning",
    # Subpackages
    "model",
    "inference",
    "posterior",
    "utils",
    "data",
]
