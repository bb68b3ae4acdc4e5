"""
Updatable k-Nearest-Neighbours Classifier

Reference implementation of the classifier capabilities: a KNN model that
keeps its training examples and can be extended one example at a time.
Each update produces a new classifier instance; the base instance is left
untouched so the live model can keep serving predictions while training runs.

Scores come from scikit-learn's ``KNeighborsClassifier`` with distance
weighting, so a description identical to a training example scores 1.0 for
that example's label.
"""

from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np
from sklearn.neighbors import KNeighborsClassifier

from txncategorizer.core.constants import DEFAULT_N_NEIGHBORS, FEATURE_DIMENSION
from txncategorizer.core.model_store import ModelStore
from txncategorizer.core.models import TrainingExample
from txncategorizer.exceptions import InsufficientDataError, PredictionError, TrainingError
from txncategorizer.logging_config import get_logger
from txncategorizer.ml.vectorizer import Vectorizer

logger = get_logger(__name__)


class UpdatableKNNClassifier:
    """KNN classifier over stored (vector, label) examples."""

    def __init__(
        self,
        n_neighbors: int = DEFAULT_N_NEIGHBORS,
        dimension: int = FEATURE_DIMENSION,
        vectors: Optional[np.ndarray] = None,
        labels: Optional[List[str]] = None,
        version: int = 0,
        trained_at: Optional[str] = None,
    ):
        self.n_neighbors = n_neighbors
        self.dimension = dimension
        if vectors is None:
            vectors = np.empty((0, dimension), dtype=np.float32)
        self.vectors = np.asarray(vectors, dtype=np.float32).reshape(-1, dimension)
        self.labels: List[str] = list(labels or [])
        if len(self.labels) != self.vectors.shape[0]:
            raise TrainingError(
                f"Got {self.vectors.shape[0]} vectors but {len(self.labels)} labels"
            )
        self.version = version
        self.trained_at = trained_at or datetime.now().isoformat()
        self._knn: Optional[KNeighborsClassifier] = None
        self._fit()

    @property
    def n_examples(self) -> int:
        return len(self.labels)

    @property
    def classes(self) -> List[str]:
        return sorted(set(self.labels))

    def with_example(self, vector: np.ndarray, label: str) -> "UpdatableKNNClassifier":
        """Return a new classifier that also knows ``(vector, label)``.

        Stored examples with exactly the same vector are dropped first, so
        relabelling a description replaces its old label instead of leaving
        two labels tied at distance zero.

        Raises:
            TrainingError: If the vector has the wrong length.
        """
        vector = np.asarray(vector, dtype=np.float32)
        if vector.shape != (self.dimension,):
            raise TrainingError(
                f"Expected a vector of length {self.dimension}, got shape {vector.shape}"
            )

        keep = ~np.all(self.vectors == vector, axis=1)
        replaced = int(np.count_nonzero(~keep))
        if replaced:
            logger.debug("Replacing %d example(s) with the same vector", replaced)

        return UpdatableKNNClassifier(
            n_neighbors=self.n_neighbors,
            dimension=self.dimension,
            vectors=np.vstack([self.vectors[keep], vector]),
            labels=[existing for existing, kept in zip(self.labels, keep) if kept] + [label],
            version=self.version + 1,
        )

    def predict_scores(self, vector: np.ndarray) -> Dict[str, float]:
        """Score every known label for ``vector``.

        Returns:
            Mapping of label to probability; empty if the model has no examples.

        Raises:
            PredictionError: If the vector has the wrong length.
        """
        if self._knn is None:
            return {}
        vector = np.asarray(vector, dtype=np.float32)
        if vector.shape != (self.dimension,):
            raise PredictionError(
                f"Expected a vector of length {self.dimension}, got shape {vector.shape}"
            )
        probabilities = self._knn.predict_proba(vector.reshape(1, -1))[0]
        return {
            str(label): float(p)
            for label, p in zip(self._knn.classes_, probabilities)
        }

    def metadata(self) -> Dict:
        """Summary used by model-info endpoints."""
        return {
            "version": self.version,
            "trained_at": self.trained_at,
            "n_examples": self.n_examples,
            "n_neighbors": self.n_neighbors,
            "labels": self.classes,
        }

    def _fit(self) -> None:
        if not self.labels:
            self._knn = None
            return
        self._knn = KNeighborsClassifier(
            n_neighbors=min(self.n_neighbors, self.n_examples),
            weights="distance",
        )
        self._knn.fit(self.vectors, self.labels)

    # The fitted estimator is rebuilt on load rather than stored
    def __getstate__(self):
        state = self.__dict__.copy()
        state["_knn"] = None
        return state

    def __setstate__(self, state):
        self.__dict__.update(state)
        self._fit()

    def __repr__(self) -> str:
        return (
            f"UpdatableKNNClassifier(version={self.version}, "
            f"n_examples={self.n_examples}, labels={len(self.classes)})"
        )


class KNNTrainingBackend:
    """Runs single-example KNN updates on a background thread pool."""

    def __init__(self, store: ModelStore, max_workers: int = 1):
        self.store = store
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="knn_trainer")

    def train(self, base_model_path: Path, example: TrainingExample) -> UpdatableKNNClassifier:
        """Load the model at ``base_model_path`` and extend it with ``example``.

        Raises:
            TrainingError: If the base model cannot be loaded or updated.
        """
        base = self.store.load(base_model_path)
        if base is None:
            raise TrainingError(f"No loadable base model at {base_model_path}")
        if not isinstance(base, UpdatableKNNClassifier):
            raise TrainingError(
                f"Base model at {base_model_path} is not updatable ({type(base).__name__})"
            )

        model = base.with_example(example.vector, example.label)
        logger.info(
            "Trained version %d on label %r (%d examples)",
            model.version,
            example.label,
            model.n_examples,
        )
        return model

    def submit(self, base_model_path: Path, example: TrainingExample) -> "Future[UpdatableKNNClassifier]":
        return self._executor.submit(self.train, base_model_path, example)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)


def build_default_model(
    examples: Iterable[Tuple[str, str]],
    vectorizer: Vectorizer,
    n_neighbors: int = DEFAULT_N_NEIGHBORS,
    min_samples: int = 1,
) -> UpdatableKNNClassifier:
    """Build the bundled default model from (description, category) pairs.

    Descriptions without any embeddable word are skipped.

    Args:
        examples: Labelled descriptions.
        vectorizer: Vectorizer used for every description.
        n_neighbors: Neighbours consulted per prediction.
        min_samples: Minimum number of usable examples.

    Returns:
        Version-0 classifier.

    Raises:
        InsufficientDataError: If fewer than ``min_samples`` examples are usable.
    """
    vectors = []
    labels = []
    skipped = 0
    for description, category in examples:
        vector = vectorizer.vectorize(str(description))
        if vector is None:
            skipped += 1
            continue
        vectors.append(vector)
        labels.append(str(category))

    if skipped:
        logger.warning("Skipped %d descriptions with no known words", skipped)

    if len(labels) < min_samples:
        raise InsufficientDataError(
            f"Insufficient training data: {len(labels)} usable samples (minimum: {min_samples})",
            required=min_samples,
            available=len(labels),
        )

    model = UpdatableKNNClassifier(
        n_neighbors=n_neighbors,
        dimension=vectorizer.dimension,
        vectors=np.vstack(vectors) if vectors else None,
        labels=labels,
    )
    logger.info("Built default model with %d examples across %d labels", model.n_examples, len(model.classes))
    return model
