"""
Data Models for the Transaction Categorizer

Dataclass definitions for training examples, artifact locations and
operation results.
"""

from dataclasses import dataclass, asdict
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

import numpy as np

from txncategorizer.core.constants import STAGING_SUFFIX


@dataclass(frozen=True)
class TrainingExample:
    """One labelled feature vector handed to the training backend."""

    vector: np.ndarray
    label: str


def staging_path_for(path: Path) -> Path:
    """Sibling scratch path used while ``path`` is being written.

    ``personalized.joblib`` -> ``personalized_tmp.joblib``
    """
    path = Path(path)
    return path.with_name(f"{path.stem}{STAGING_SUFFIX}{path.suffix}")


@dataclass(frozen=True)
class ModelArtifactLocation:
    """The three file-system paths involved in the model lifecycle."""

    default_path: Path
    personalized_path: Path

    @property
    def staging_path(self) -> Path:
        """Scratch location, only meaningful during a save."""
        return staging_path_for(self.personalized_path)


class UpdateStatus(str, Enum):
    """Outcome of a single incremental update.

    ``TRAINING_FAILED`` covers every failure before a new model exists:
    the embedding provider raising while the text is vectorized, the
    backend failing, or an unexpected error in the update job itself.
    ``PERSISTENCE_FAILED`` means a model was trained but could not be
    saved or reloaded, so it was discarded.
    """

    COMPLETED = "completed"
    SKIPPED = "skipped"
    TRAINING_FAILED = "training_failed"
    PERSISTENCE_FAILED = "persistence_failed"


@dataclass
class UpdateResult:
    """Result delivered when an update finishes (successfully or not)."""

    status: UpdateStatus
    label: str
    model_version: Optional[int] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status == UpdateStatus.COMPLETED

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data = asdict(self)
        data["status"] = self.status.value
        data["succeeded"] = self.succeeded
        return data


@dataclass
class ExportResult:
    """Result of copying the active model artifact somewhere user-visible."""

    success: bool
    path: Optional[str] = None
    reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)
