"""
Prediction Service

Facade used by the application: answers predictions with the live model and
hands updates to the UpdateOrchestrator.

The live model is the personalized model when one exists, otherwise the
bundled default model. The personalized model is loaded from disk lazily,
exactly once, on the first predict or update call. After that it only
changes when an update completes (swap) or on reset.

Usage:
    from txncategorizer.ml import build_service

    service = build_service()
    service.predict("coffee shop")            # -> "Dining" or None
    future = service.update("coffee shop", "Dining")
    future.result().succeeded                 # -> True
    service.reset()
"""

import threading
from pathlib import Path
from typing import Any, Dict, Optional, Union

from txncategorizer.config import Config, get_config
from txncategorizer.core.constants import CONFIDENCE_THRESHOLD
from txncategorizer.core.model_store import ModelStore
from txncategorizer.core.models import ExportResult, ModelArtifactLocation
from txncategorizer.exceptions import (
    ConfigurationError,
    ExportError,
    PredictionError,
    ValidationError,
)
from txncategorizer.logging_config import get_logger
from txncategorizer.ml.base import TrainingBackend
from txncategorizer.ml.classifier import KNNTrainingBackend
from txncategorizer.ml.embeddings import WordEmbedding
from txncategorizer.ml.updater import CompletionCallback, Dispatch, UpdateOrchestrator
from txncategorizer.ml.vectorizer import Vectorizer

logger = get_logger(__name__)


def select_label(scores: Dict[str, float], threshold: float = CONFIDENCE_THRESHOLD) -> Optional[str]:
    """Pick the best label whose score is strictly above ``threshold``.

    Ties on score go to the lexicographically smallest label.
    """
    candidates = [(label, score) for label, score in scores.items() if score > threshold]
    if not candidates:
        return None
    return min(candidates, key=lambda item: (-item[1], item[0]))[0]


class PredictionService:
    """Holds the live model and exposes predict / update / reset / export."""

    def __init__(
        self,
        store: ModelStore,
        vectorizer: Vectorizer,
        backend: TrainingBackend,
        locations: ModelArtifactLocation,
        confidence_threshold: float = CONFIDENCE_THRESHOLD,
    ):
        """Initialize the service and load the bundled default model.

        Raises:
            ConfigurationError: If the default model is missing or unreadable.
        """
        self.store = store
        self.vectorizer = vectorizer
        self.locations = locations
        self.confidence_threshold = confidence_threshold

        default_model = store.load(locations.default_path)
        if default_model is None:
            raise ConfigurationError(
                f"Default model missing or unreadable at {locations.default_path}. "
                "Run 'python -m txncategorizer.cli.train_model' first."
            )
        self.default_model = default_model

        self._personalized_model: Optional[Any] = None
        self._state_lock = threading.Lock()
        self._load_lock = threading.Lock()
        self._has_attempted_lazy_load = False

        store.discard_staging(locations.personalized_path)

        self.orchestrator = UpdateOrchestrator(
            store=store,
            vectorizer=vectorizer,
            backend=backend,
            personalized_path=locations.personalized_path,
        )

    @property
    def live_model(self) -> Any:
        with self._state_lock:
            if self._personalized_model is not None:
                return self._personalized_model
            return self.default_model

    @property
    def is_personalized(self) -> bool:
        with self._state_lock:
            return self._personalized_model is not None

    def predict(self, text: str) -> Optional[str]:
        """Predict the category for ``text``.

        Returns:
            The label, or None if the text has no known words or no label
            scores above the confidence threshold.
        """
        return select_label(self.predict_scores(text), self.confidence_threshold)

    def predict_scores(self, text: str) -> Dict[str, float]:
        """Score every label of the live model for ``text``.

        Returns:
            Label -> score mapping, empty if the text has no known words.

        Raises:
            PredictionError: If the model fails to score the text.
        """
        self._ensure_loaded()

        vector = self.vectorizer.vectorize(text)
        if vector is None:
            return {}

        model = self.live_model
        try:
            scores = model.predict_scores(vector)
        except PredictionError:
            raise
        except Exception as e:
            logger.error("Prediction failed for %r: %s", text, e, exc_info=True)
            raise PredictionError(f"Prediction failed: {e}", text=text) from e

        logger.debug("Scores for %r: %s", text, scores)
        return scores

    def update(
        self,
        text: str,
        label: str,
        on_complete: Optional[CompletionCallback] = None,
        dispatch: Optional[Dispatch] = None,
    ):
        """Teach the model that ``text`` belongs to ``label``.

        Returns immediately. The live model changes only once the returned
        future resolves (and before ``on_complete`` runs).

        Args:
            text: Transaction description.
            label: Category name.
            on_complete: Called with the UpdateResult.
            dispatch: Delivers ``on_complete`` to the caller's context.

        Returns:
            Future resolving to an UpdateResult.

        Raises:
            ValidationError: If the label is empty.
        """
        if not label or not label.strip():
            raise ValidationError("Label must not be empty", field="label", value=label)

        self._ensure_loaded()
        return self.orchestrator.update(
            self._current_model_path,
            text,
            label.strip(),
            on_swap=self._swap,
            on_complete=on_complete,
            dispatch=dispatch,
        )

    def reset(self) -> None:
        """Forget all personalization and go back to the default model."""
        with self._state_lock:
            self._personalized_model = None
        if self.store.delete(self.locations.personalized_path):
            logger.info("Personalized model removed, default model is live")
        else:
            logger.debug("No personalized model to reset")

    def export(self, destination: Union[str, Path]) -> ExportResult:
        """Copy the active persisted model to ``destination``.

        Returns:
            ExportResult; failures are reported, not raised.
        """
        personalized = self.locations.personalized_path
        source = personalized if self.store.exists(personalized) else self.locations.default_path
        try:
            written = self.store.export(source, destination)
        except ExportError as e:
            logger.error("Export failed: %s", e)
            return ExportResult(success=False, reason=e.message)
        return ExportResult(success=True, path=str(written))

    def model_info(self) -> Dict[str, Any]:
        """Describe the live model."""
        self._ensure_loaded()
        model = self.live_model
        metadata = model.metadata() if hasattr(model, "metadata") else {}
        return {
            "live": "personalized" if self.is_personalized else "default",
            "default_path": str(self.locations.default_path),
            "personalized_path": str(self.locations.personalized_path),
            "has_personalized_artifact": self.store.exists(self.locations.personalized_path),
            "confidence_threshold": self.confidence_threshold,
            "model": metadata,
        }

    def shutdown(self, wait: bool = True) -> None:
        self.orchestrator.shutdown(wait=wait)

    def __enter__(self) -> "PredictionService":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()

    def _ensure_loaded(self) -> None:
        if self._has_attempted_lazy_load:
            return
        with self._load_lock:
            if self._has_attempted_lazy_load:
                return
            model = self.store.load(self.locations.personalized_path)
            if model is not None:
                with self._state_lock:
                    self._personalized_model = model
                logger.info("Using personalized model from %s", self.locations.personalized_path)
            else:
                logger.info("No personalized model, using default model")
            self._has_attempted_lazy_load = True

    def _current_model_path(self) -> Path:
        with self._state_lock:
            if self._personalized_model is not None:
                return self.locations.personalized_path
            return self.locations.default_path

    def _swap(self, model: Any) -> None:
        with self._state_lock:
            self._personalized_model = model


def build_service(config: Optional[Config] = None, embedding: Optional[WordEmbedding] = None) -> PredictionService:
    """Wire a PredictionService from configuration.

    Args:
        config: Configuration; uses the global config if not provided.
        embedding: Word embedding; loaded from ``config.embedding.path`` if not provided.

    Raises:
        ConfigurationError: If no embedding is configured or the default
            model is missing.
    """
    config = config or get_config()

    if embedding is None:
        if not config.embedding.path:
            raise ConfigurationError(
                "No word embedding configured. Set TXNCATEGORIZER_EMBEDDING_PATH."
            )
        embedding = WordEmbedding.from_text_file(config.embedding.path)

    store = ModelStore(export_filename=config.model.export_filename)
    locations = ModelArtifactLocation(
        default_path=config.model.default_model_path,
        personalized_path=config.model.personalized_model_path,
    )
    return PredictionService(
        store=store,
        vectorizer=Vectorizer(embedding.embed, dimension=config.embedding.dimension),
        backend=KNNTrainingBackend(store),
        locations=locations,
        confidence_threshold=config.classifier.confidence_threshold,
    )
