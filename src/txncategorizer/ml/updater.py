"""
Update Orchestrator

Drives one incremental training update at a time:

    vectorize -> train (backend) -> save -> reload -> swap -> notify

Updates are queued on a single worker thread, so overlapping calls run one
after another and each trains on top of the model produced by the previous
one. ``update()`` returns a Future immediately; it resolves to an
``UpdateResult`` only after the new model is durably saved, reloaded and
swapped in.

Failures never propagate to the caller as exceptions. They are logged and
reported through the result's status, and the previously live model stays
in use.
"""

import functools
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Any, Callable, Optional

from txncategorizer.core.model_store import ModelStore
from txncategorizer.core.models import TrainingExample, UpdateResult, UpdateStatus
from txncategorizer.exceptions import EmbeddingError, PersistenceError
from txncategorizer.logging_config import get_logger
from txncategorizer.ml.base import TrainingBackend
from txncategorizer.ml.vectorizer import Vectorizer

logger = get_logger(__name__)

# Runs a zero-argument callable on the caller's execution context,
# e.g. loop.call_soon_threadsafe or queue.Queue.put
Dispatch = Callable[[Callable[[], None]], Any]
CompletionCallback = Callable[[UpdateResult], None]


class UpdateOrchestrator:
    """Serializes incremental updates and persists their results."""

    def __init__(
        self,
        store: ModelStore,
        vectorizer: Vectorizer,
        backend: TrainingBackend,
        personalized_path: Path,
    ):
        self.store = store
        self.vectorizer = vectorizer
        self.backend = backend
        self.personalized_path = Path(personalized_path)
        self._queue = ThreadPoolExecutor(max_workers=1, thread_name_prefix="model_update")

    def update(
        self,
        base_model_path: Callable[[], Path],
        text: str,
        label: str,
        on_swap: Optional[Callable[[Any], None]] = None,
        on_complete: Optional[CompletionCallback] = None,
        dispatch: Optional[Dispatch] = None,
    ) -> "Future[UpdateResult]":
        """Queue an update and return immediately.

        Args:
            base_model_path: Returns the path of the currently live model.
                Called when the queued update starts running.
            text: Transaction description to learn from.
            label: Category for ``text``.
            on_swap: Receives the reloaded model; must make it live.
            on_complete: Receives the UpdateResult once the update is over.
            dispatch: Delivers ``on_complete`` to the caller's context.
                Without it the callback runs on the update worker thread.

        Returns:
            Future resolving to an UpdateResult.
        """
        future: "Future[UpdateResult]" = Future()

        def job() -> None:
            if not future.set_running_or_notify_cancel():
                logger.info("Update for label %r was cancelled before it started", label)
                return
            try:
                result = self._run(base_model_path, text, label, on_swap)
            except Exception as e:
                logger.error("Update for label %r crashed: %s", label, e, exc_info=True)
                result = UpdateResult(UpdateStatus.TRAINING_FAILED, label, error=str(e))
            future.set_result(result)
            if on_complete is not None:
                self._notify(on_complete, result, dispatch)

        self._queue.submit(job)
        logger.debug("Queued update for label %r", label)
        return future

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting updates and release worker threads."""
        self._queue.shutdown(wait=wait)
        self.backend.shutdown(wait=wait)

    def _run(
        self,
        base_model_path: Callable[[], Path],
        text: str,
        label: str,
        on_swap: Optional[Callable[[Any], None]],
    ) -> UpdateResult:
        base_path = base_model_path()

        try:
            vector = self.vectorizer.vectorize(text)
        except EmbeddingError as e:
            logger.error("Could not vectorize %r: %s", text, e)
            return UpdateResult(UpdateStatus.TRAINING_FAILED, label, error=str(e))

        if vector is None:
            logger.info("No known words in %r, skipping update", text)
            return UpdateResult(UpdateStatus.SKIPPED, label)

        example = TrainingExample(vector=vector, label=label)

        try:
            new_model = self.backend.submit(base_path, example).result()
        except Exception as e:
            logger.error("Training on %s failed: %s", base_path, e, exc_info=True)
            return UpdateResult(UpdateStatus.TRAINING_FAILED, label, error=str(e))

        try:
            self.store.save(new_model, self.personalized_path)
        except PersistenceError as e:
            logger.error("Discarding trained model, previous model stays live: %s", e)
            return UpdateResult(UpdateStatus.PERSISTENCE_FAILED, label, error=str(e))

        reloaded = self.store.load(self.personalized_path)
        if reloaded is None:
            logger.error("Saved model at %s could not be reloaded", self.personalized_path)
            return UpdateResult(
                UpdateStatus.PERSISTENCE_FAILED,
                label,
                error=f"Saved model at {self.personalized_path} could not be reloaded",
            )

        if on_swap is not None:
            on_swap(reloaded)

        version = getattr(reloaded, "version", None)
        logger.info("Update complete: label %r, model version %s", label, version)
        return UpdateResult(UpdateStatus.COMPLETED, label, model_version=version)

    @staticmethod
    def _notify(on_complete: CompletionCallback, result: UpdateResult, dispatch: Optional[Dispatch]) -> None:
        callback = functools.partial(_safe_call, on_complete, result)
        if dispatch is None:
            callback()
            return
        try:
            dispatch(callback)
        except Exception as e:
            logger.error("Could not dispatch update completion: %s", e, exc_info=True)


def _safe_call(on_complete: CompletionCallback, result: UpdateResult) -> None:
    try:
        on_complete(result)
    except Exception as e:
        logger.error("Update completion callback raised: %s", e, exc_info=True)
