"""
Machine learning modules for transaction categorization.

Provides embedding-based text vectorization, an updatable KNN classifier and
the services that keep a personalized model trained, persisted and live.
"""

from txncategorizer.ml.classifier import (
    KNNTrainingBackend,
    UpdatableKNNClassifier,
    build_default_model,
)
from txncategorizer.ml.embeddings import WordEmbedding
from txncategorizer.ml.prediction_service import PredictionService, build_service, select_label
from txncategorizer.ml.updater import UpdateOrchestrator
from txncategorizer.ml.vectorizer import Vectorizer

__all__ = [
    "KNNTrainingBackend",
    "PredictionService",
    "UpdatableKNNClassifier",
    "UpdateOrchestrator",
    "Vectorizer",
    "WordEmbedding",
    "build_default_model",
    "build_service",
    "select_label",
]
