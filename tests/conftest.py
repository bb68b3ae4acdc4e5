"""
Pytest Configuration and Fixtures

Provides shared fixtures for all tests.
"""

from pathlib import Path
from typing import Generator

import numpy as np
import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from txncategorizer.core.model_store import ModelStore
from txncategorizer.core.models import ModelArtifactLocation
from txncategorizer.ml.classifier import KNNTrainingBackend, build_default_model
from txncategorizer.ml.embeddings import WordEmbedding
from txncategorizer.ml.prediction_service import PredictionService
from txncategorizer.ml.vectorizer import Vectorizer

EMBEDDING_WORDS = [
    "coffee", "shop", "grocery", "store", "supermarket", "gas", "station",
    "train", "ticket", "electricity", "bill", "movie", "tickets", "pharmacy",
    "prescription", "rent", "payment",
]

DEFAULT_EXAMPLES = [
    ("grocery store", "Groceries"),
    ("supermarket", "Groceries"),
    ("gas station", "Transport"),
    ("train ticket", "Transport"),
    ("electricity bill", "Utilities"),
    ("movie tickets", "Entertainment"),
    ("pharmacy prescription", "Health"),
    ("rent payment", "Housing"),
]


def make_embedding(dimension: int, words=EMBEDDING_WORDS, seed: int = 7) -> WordEmbedding:
    """Deterministic random embedding for the given words."""
    rng = np.random.default_rng(seed)
    return WordEmbedding({word: rng.normal(size=dimension) for word in words})


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Get the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture(scope="function")
def test_config(tmp_path: Path, monkeypatch):
    """Create test configuration pointing at temporary directories.

    Yields:
        Config object configured for testing.
    """
    monkeypatch.setenv("TXNCATEGORIZER_MODEL_DIR", str(tmp_path / "models"))
    monkeypatch.setenv("TXNCATEGORIZER_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("TXNCATEGORIZER_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("TXNCATEGORIZER_CORS_ORIGINS", "http://localhost:5000")
    monkeypatch.delenv("TXNCATEGORIZER_EXPORT_DIR", raising=False)
    monkeypatch.delenv("TXNCATEGORIZER_EMBEDDING_PATH", raising=False)

    from txncategorizer.config import reset_config, get_config
    reset_config()

    config = get_config()
    yield config

    reset_config()


@pytest.fixture(scope="function")
def embedding_factory():
    """Build deterministic embeddings of any dimension."""
    return make_embedding


@pytest.fixture(scope="function")
def embedding() -> WordEmbedding:
    """Small 50-dimensional embedding."""
    return make_embedding(50)


@pytest.fixture(scope="function")
def vectorizer(embedding: WordEmbedding) -> Vectorizer:
    return Vectorizer(embedding.embed)


@pytest.fixture(scope="function")
def store() -> ModelStore:
    return ModelStore()


@pytest.fixture(scope="function")
def default_model(vectorizer: Vectorizer):
    """Version-0 model built from DEFAULT_EXAMPLES."""
    return build_default_model(DEFAULT_EXAMPLES, vectorizer)


@pytest.fixture(scope="function")
def locations(tmp_path: Path, store: ModelStore, default_model) -> ModelArtifactLocation:
    """Artifact locations with the default model already bundled."""
    locations = ModelArtifactLocation(
        default_path=tmp_path / "models" / "default_classifier.joblib",
        personalized_path=tmp_path / "data" / "personalized.joblib",
    )
    store.save(default_model, locations.default_path)
    return locations


@pytest.fixture(scope="function")
def service(
    store: ModelStore,
    vectorizer: Vectorizer,
    locations: ModelArtifactLocation,
) -> Generator[PredictionService, None, None]:
    """Prediction service over a fresh store (no personalized model)."""
    svc = PredictionService(
        store=store,
        vectorizer=vectorizer,
        backend=KNNTrainingBackend(store),
        locations=locations,
    )
    yield svc
    svc.shutdown()
