"""
base.py
-------

Base class for putting models with a BoTorch-style API.

Provides:
- Model.fit(data) --> fit model to data with a pluggable inference engine
- Model.posterior(distances) --> predictive posterior over success curves
- Model.posterior(kind="parameter") --> posterior over sigma

Design
------
This façade delegates inference to specialized engines (MAP, Laplace, NUTS,
Langevin) while keeping a small, composable API for users. Engines only see
the model's pure log-density, so any engine honouring
InferenceEngine.fit(model, data) can be swapped in.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

import jax.numpy as jnp

if TYPE_CHECKING:
    from golfputt.data import PuttingData
    from golfputt.inference.base import InferenceEngine
    from golfputt.posterior import ParameterPosterior, PredictivePosterior


class Model(ABC):
    """
    Abstract base class for putting models.

    Provides API that mimics BoTorch style:
    - fit(data) --> run inference
    - posterior(distances) --> get predictions

    Subclasses must implement:
    - log_density(data) --> pure log posterior density of the free parameter
    - _forward(distances, params) --> predictions at fixed parameters

    Attributes
    ----------
    _posterior : ParameterPosterior | None
        Cached parameter posterior from last fit
    _inference_engine : InferenceEngine | None
        Engine used for the last fit
    _data : PuttingData | None
        Data used for the last fit
    """

    def __init__(self) -> None:
        self._posterior: ParameterPosterior | None = None
        self._inference_engine: InferenceEngine | None = None
        self._data: PuttingData | None = None

    # ------------------------------------------------------------------
    # Abstract methods (must be implemented by subclasses)
    # ------------------------------------------------------------------

    @abstractmethod
    def log_density(self, data: PuttingData):
        """Return the log posterior density of the free parameter given data."""
        ...

    @abstractmethod
    def _forward(self, distances: jnp.ndarray, params: dict) -> jnp.ndarray:
        ...

    # ------------------------------------------------------------------
    # BoTorch-style API: fit, posterior
    # ------------------------------------------------------------------

    def fit(
        self,
        data: PuttingData,
        *,
        inference: InferenceEngine | str = "nuts",
        inference_config: dict | None = None,
    ) -> Model:
        """
        Fit model to data.

        Parameters
        ----------
        data : PuttingData
            Observed putts.
        inference : InferenceEngine | str, default="nuts"
            Inference engine or string key ("map", "laplace", "nuts", "langevin")
        inference_config : dict | None
            Hyperparameters for string-based inference.
            Examples: {"num_chains": 4, "num_samples": 300} for NUTS

        Returns
        -------
        Model
            Self for method chaining

        Examples
        --------
        >>> # Simple: use defaults
        >>> model.fit(data)

        >>> # Explicit sampler
        >>> from golfputt.inference import NUTSSampler
        >>> model.fit(data, inference=NUTSSampler(num_chains=4, num_samples=500))

        >>> # String + config (for experiment tracking)
        >>> model.fit(data, inference="map", inference_config={"steps": 300})
        """
        from golfputt.data import PuttingData
        from golfputt.inference import INFERENCE_ENGINES, InferenceEngine

        if not isinstance(data, PuttingData):
            raise TypeError(f"data must be PuttingData, got {type(data)}")

        # Resolve inference engine
        is_string_inference = isinstance(inference, str)

        if is_string_inference:
            config = inference_config or {}
            inference_key: str = inference  # type: ignore[assignment]
            if inference_key not in INFERENCE_ENGINES:
                available = ", ".join(INFERENCE_ENGINES.keys())
                raise ValueError(
                    f"Unknown inference: '{inference}'. Available: {available}"
                )
            inference_engine: InferenceEngine = INFERENCE_ENGINES[inference_key](
                **config
            )
        elif isinstance(inference, InferenceEngine):
            inference_engine = inference
        else:
            raise TypeError(
                f"inference must be InferenceEngine or str, got {type(inference)}"
            )

        if inference_config is not None and not is_string_inference:
            raise ValueError(
                "Cannot pass inference_config with InferenceEngine instance"
            )

        self._posterior = inference_engine.fit(self, data)
        self._inference_engine = inference_engine
        self._data = data
        return self

    def posterior(
        self,
        distances: jnp.ndarray | None = None,
        *,
        kind: str = "predictive",
        **predictive_kwargs,
    ) -> PredictivePosterior | ParameterPosterior:
        """
        Return posterior distribution.

        Parameters
        ----------
        distances : array-like | None
            Distances at which to evaluate success curves. Required for
            predictive posteriors.
        kind : {"predictive", "parameter"}
            Type of posterior to return:
            - "predictive": PredictivePosterior over p(success | distance)
            - "parameter": ParameterPosterior over sigma
        **predictive_kwargs
            Forwarded to AnglePredictivePosterior (batch_size, keep_curves, ...).

        Returns
        -------
        PredictivePosterior | ParameterPosterior

        Raises
        ------
        RuntimeError
            If model has not been fit yet

        Examples
        --------
        >>> grid = data.distance_grid(200)
        >>> pred_post = model.posterior(grid)
        >>> lower, upper = pred_post.credible_band(0.9)

        >>> param_post = model.posterior(kind="parameter")
        >>> param_post.diagnostics()
        """
        if self._posterior is None:
            raise RuntimeError("Must call fit() before posterior()")

        if kind == "parameter":
            return self._posterior
        elif kind == "predictive":
            if distances is None:
                raise ValueError("distances are required for predictive posteriors")
            from golfputt.posterior import AnglePredictivePosterior

            return AnglePredictivePosterior(
                self._posterior, distances, **predictive_kwargs
            )
        else:
            raise ValueError(
                f"Unknown kind: '{kind}'. Use 'predictive' or 'parameter'."
            )

    def predict_with_params(self, distances, params: dict) -> jnp.ndarray:
        """
        Evaluate the model at fixed parameters (no marginalization).

        Parameters
        ----------
        distances : array-like, shape (n,)
        params : dict
            e.g. {"sigma": jnp.ndarray}

        Returns
        -------
        jnp.ndarray, shape (n,)
        """
        return self._forward(jnp.asarray(distances), params)
