"""
Transaction Categorizer

On-device, incrementally trainable categorization of short transaction
descriptions (e.g. "coffee shop" -> "Dining").

Main components:
- core: model artifact storage and shared data models
- ml: vectorizer, embeddings, updatable classifier, update orchestration
  and the prediction service facade
- api: Flask REST API server
- cli: Command-line interfaces

Usage:
    from txncategorizer import config
    from txncategorizer.ml import build_service

    service = build_service()
    service.predict("coffee shop")
"""

__version__ = "1.0.0"

from txncategorizer.config import get_config
from txncategorizer.logging_config import setup_logging

__all__ = [
    "__version__",
    "get_config",
    "setup_logging",
]
