"""
Custom Exceptions for the Transaction Categorizer

Provides a hierarchy of exceptions for standardized error handling across all modules.

Exception Hierarchy:
    TxnCategorizerError (base)
    ├── ConfigurationError
    ├── EmbeddingError
    ├── ModelError
    │   ├── ModelNotFoundError
    │   ├── PersistenceError
    │   ├── TrainingError
    │   ├── InsufficientDataError
    │   └── PredictionError
    ├── ExportError
    └── ValidationError

A text with no embeddable words is not an error: it is reported as ``None``
by the vectorizer and as a ``skipped`` update.
"""


class TxnCategorizerError(Exception):
    """Base exception for all Transaction Categorizer errors."""

    def __init__(self, message: str, *args, **kwargs):
        self.message = message
        super().__init__(message, *args, **kwargs)


class ConfigurationError(TxnCategorizerError):
    """Raised when there's a configuration problem.

    A missing or unreadable bundled default model is reported with this
    error, since prediction has no fallback below the default model.
    """

    pass


class EmbeddingError(TxnCategorizerError):
    """Raised when the word embedding cannot be loaded or is inconsistent."""

    def __init__(self, message: str, source: str = None):
        self.source = source
        super().__init__(message)


# ML Model Errors
class ModelError(TxnCategorizerError):
    """Base exception for ML model-related errors."""

    pass


class ModelNotFoundError(ModelError):
    """Raised when a model artifact is not found."""

    def __init__(self, model_path: str = None):
        self.model_path = model_path
        message = f"Model not found at: {model_path}" if model_path else "Model not found"
        super().__init__(message)


class PersistenceError(ModelError):
    """Raised when writing or replacing a model artifact fails."""

    def __init__(self, message: str, path: str = None):
        self.path = path
        super().__init__(message)


class TrainingError(ModelError):
    """Raised when an incremental training update fails."""

    pass


class InsufficientDataError(ModelError):
    """Raised when there is not enough usable data to build a model."""

    def __init__(self, message: str, required: int = None, available: int = None):
        self.required = required
        self.available = available
        super().__init__(message)


class PredictionError(ModelError):
    """Raised when a prediction fails."""

    def __init__(self, message: str, text: str = None):
        self.text = text
        super().__init__(message)


class ExportError(TxnCategorizerError):
    """Raised when exporting a model artifact fails."""

    def __init__(self, message: str, destination: str = None):
        self.destination = destination
        super().__init__(message)


# Validation Errors
class ValidationError(TxnCategorizerError):
    """Raised when input validation fails."""

    def __init__(self, message: str, field: str = None, value=None):
        self.field = field
        self.value = value
        super().__init__(message)
