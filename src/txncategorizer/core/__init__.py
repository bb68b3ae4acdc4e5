"""
Core modules for the Transaction Categorizer.

Contains shared constants and data models. The model artifact store lives in
``txncategorizer.core.model_store``.
"""

from txncategorizer.core.constants import (
    CONFIDENCE_THRESHOLD,
    FEATURE_DIMENSION,
)
from txncategorizer.core.models import (
    ExportResult,
    ModelArtifactLocation,
    TrainingExample,
    UpdateResult,
    UpdateStatus,
)

__all__ = [
    "CONFIDENCE_THRESHOLD",
    "FEATURE_DIMENSION",
    "ExportResult",
    "ModelArtifactLocation",
    "TrainingExample",
    "UpdateResult",
    "UpdateStatus",
]
