"""
Model Artifact Store

Owns the on-disk representation of classifier models. Every artifact is a
joblib file holding a small envelope::

    {"format_version": 1, "saved_at": "<iso timestamp>", "model": <classifier>}

Saves are atomic: the artifact is fully written and fsynced to a staging
sibling (``personalized_tmp.joblib``) and then moved over the target with a
single ``os.replace``. A reader of the target path sees either the previous
artifact or the new one, never a partial file.

Usage:
    from txncategorizer.core.model_store import ModelStore

    store = ModelStore()
    store.save(model, path)
    model = store.load(path)  # None if missing or unreadable
"""

import os
import shutil
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, Union

import joblib

from txncategorizer.core.constants import ARTIFACT_FORMAT_VERSION, EXPORT_FILENAME
from txncategorizer.core.models import staging_path_for
from txncategorizer.exceptions import ExportError, PersistenceError
from txncategorizer.logging_config import get_logger

logger = get_logger(__name__)

PathLike = Union[str, Path]


class ModelStore:
    """Atomic save, tolerant load, delete and export of model artifacts."""

    def __init__(self, export_filename: str = EXPORT_FILENAME):
        self.export_filename = export_filename

    def exists(self, path: PathLike) -> bool:
        return Path(path).is_file()

    def load(self, path: PathLike) -> Optional[Any]:
        """Load the model stored at ``path``.

        Args:
            path: Artifact path.

        Returns:
            The model, or None if nothing is stored there or the artifact
            cannot be read. A corrupt artifact is never fatal to the caller.
        """
        path = Path(path)
        if not path.is_file():
            logger.debug("No model artifact at %s", path)
            return None

        try:
            envelope = joblib.load(path)
        except Exception as e:
            logger.warning("Could not read model artifact %s: %s", path, e)
            return None

        if not isinstance(envelope, dict) or "model" not in envelope:
            logger.warning("Model artifact %s has no envelope, ignoring it", path)
            return None

        version = envelope.get("format_version")
        if version != ARTIFACT_FORMAT_VERSION:
            logger.warning(
                "Model artifact %s has format version %s (expected %s), ignoring it",
                path,
                version,
                ARTIFACT_FORMAT_VERSION,
            )
            return None

        logger.info("Model loaded from %s (saved %s)", path, envelope.get("saved_at", "unknown"))
        return envelope["model"]

    def save(self, model: Any, path: PathLike) -> None:
        """Atomically write ``model`` to ``path``.

        Args:
            model: Model to persist.
            path: Destination artifact path.

        Raises:
            PersistenceError: If the staging write or the replace fails. The
                artifact previously at ``path`` (or its absence) is unchanged.
        """
        path = Path(path)
        staging = staging_path_for(path)
        envelope = {
            "format_version": ARTIFACT_FORMAT_VERSION,
            "saved_at": datetime.now().isoformat(),
            "model": model,
        }

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(staging, "wb") as f:
                joblib.dump(envelope, f)
                f.flush()
                os.fsync(f.fileno())
            os.replace(staging, path)
        except Exception as e:
            self._remove_quietly(staging)
            logger.error("Could not save model to %s: %s", path, e)
            raise PersistenceError(f"Failed to save model to {path}: {e}", path=str(path)) from e

        self._fsync_directory(path.parent)
        logger.info("Model saved to: %s", path)

    def delete(self, path: PathLike) -> bool:
        """Remove the artifact at ``path``.

        Returns:
            True if a file was removed, False if there was nothing to remove.
        """
        path = Path(path)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        logger.info("Deleted model artifact %s", path)
        return True

    def discard_staging(self, path: PathLike) -> bool:
        """Remove a staging file left behind by an interrupted save of ``path``."""
        staging = staging_path_for(Path(path))
        if not staging.exists():
            return False
        logger.warning("Discarding leftover staging artifact %s", staging)
        self._remove_quietly(staging)
        return True

    def export(self, source: PathLike, destination: PathLike) -> Path:
        """Copy the artifact at ``source`` to ``destination``.

        Args:
            source: Artifact to copy.
            destination: Target file, or an existing directory in which case
                the configured export file name is used.

        Returns:
            Path of the written copy.

        Raises:
            ExportError: If the source is missing or the copy fails.
        """
        source = Path(source)
        destination = Path(destination)
        if destination.is_dir():
            destination = destination / self.export_filename

        if not source.is_file():
            raise ExportError(f"No model artifact to export at {source}", destination=str(destination))

        try:
            shutil.copyfile(source, destination)
        except OSError as e:
            raise ExportError(f"Failed to export model to {destination}: {e}", destination=str(destination)) from e

        logger.info("Model exported to %s", destination)
        return destination

    @staticmethod
    def _remove_quietly(path: Path) -> None:
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Could not remove %s: %s", path, e)

    @staticmethod
    def _fsync_directory(directory: Path) -> None:
        # Makes the rename itself durable; not supported on every platform
        if not hasattr(os, "O_DIRECTORY"):
            return
        try:
            fd = os.open(directory, os.O_RDONLY | os.O_DIRECTORY)
        except OSError as e:
            logger.debug("Could not open %s for fsync: %s", directory, e)
            return
        try:
            os.fsync(fd)
        except OSError as e:
            logger.debug("Directory fsync failed for %s: %s", directory, e)
        finally:
            os.close(fd)
