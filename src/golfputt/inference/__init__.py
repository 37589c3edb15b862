"""
inference
=========

Inference engines for the angle model.

This subpackage provides different strategies for fitting sigma to data and
returning posterior objects. Every engine consumes the model's pure log
density only, so engines are interchangeable.

Implementations
---------------
- MAPOptimizer : maximum a posteriori fit with Optax optimizers.
- LaplaceApproximation : Gaussian approximation in log(sigma) around the mode.
- NUTSSampler : No-U-Turn sampler (NumPyro) with divergence/tree-depth output.
- LangevinSampler : Metropolis-adjusted Langevin (MALA) chains in JAX.
"""

from .base import InferenceEngine, MCMCSampler
from .langevin import LangevinSampler
from .laplace import LaplaceApproximation
from .map_optimizer import MAPOptimizer
from .nuts import NUTSSampler

# Registry for string-based inference selection
INFERENCE_ENGINES = {
    "map": MAPOptimizer,
    "laplace": LaplaceApproximation,
    "nuts": NUTSSampler,
    "langevin": LangevinSampler,
}

__all__ = [
    "InferenceEngine",
    "MCMCSampler",
    "MAPOptimizer",
    "LaplaceApproximation",
    "NUTSSampler",
    "LangevinSampler",
    "INFERENCE_ENGINES",
]
