"""Classifier and training backend protocols."""

from concurrent.futures import Future
from pathlib import Path
from typing import Dict, Protocol, runtime_checkable

import numpy as np

from txncategorizer.core.models import TrainingExample


@runtime_checkable
class ClassifierModel(Protocol):
    """A trained model able to score a feature vector."""

    def predict_scores(self, vector: np.ndarray) -> Dict[str, float]:
        """Return a score per known label."""


@runtime_checkable
class TrainingBackend(Protocol):
    """Asynchronous single-example training."""

    def submit(self, base_model_path: Path, example: TrainingExample) -> "Future[ClassifierModel]":
        """Train the model stored at ``base_model_path`` on one example.

        The returned future resolves, on a backend worker thread, to a new
        model. The stored base model is never modified.
        """

    def shutdown(self, wait: bool = True) -> None:
        """Release worker threads."""


__all__ = ["ClassifierModel", "TrainingBackend"]
