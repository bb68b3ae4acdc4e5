"""
Centralized Configuration Module

Provides configuration classes and environment variable loading for all components.

Usage:
    from txncategorizer.config import get_config

    config = get_config()
    default_model = config.model.default_model_path
    threshold = config.classifier.confidence_threshold
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from txncategorizer.core.constants import (
    CONFIDENCE_THRESHOLD,
    DEFAULT_MODEL_FILENAME,
    DEFAULT_N_NEIGHBORS,
    EXPORT_FILENAME,
    FEATURE_DIMENSION,
    PERSONALIZED_MODEL_FILENAME,
)

# Load .env file if present
load_dotenv()


def _get_project_root() -> Path:
    """Get the project root directory."""
    # Go up: config.py -> txncategorizer -> src -> project_root
    return Path(__file__).resolve().parent.parent.parent


def _resolve(path: str) -> str:
    if not os.path.isabs(path):
        return str(_get_project_root() / path)
    return path


@dataclass
class ModelConfig:
    """Model artifact locations."""

    # Bundled, read-only default model
    model_dir: str = field(default_factory=lambda: os.getenv(
        "TXNCATEGORIZER_MODEL_DIR",
        str(_get_project_root() / "models")
    ))
    default_model_filename: str = field(default_factory=lambda: os.getenv(
        "TXNCATEGORIZER_DEFAULT_MODEL", DEFAULT_MODEL_FILENAME
    ))
    # User-writable application data (personalized model lives here)
    data_dir: str = field(default_factory=lambda: os.getenv(
        "TXNCATEGORIZER_DATA_DIR",
        str(Path.home() / ".txncategorizer")
    ))
    personalized_model_filename: str = PERSONALIZED_MODEL_FILENAME
    export_filename: str = EXPORT_FILENAME
    # API exports are confined to this directory (default: <data_dir>/exports)
    export_dir: Optional[str] = field(default_factory=lambda: os.getenv(
        "TXNCATEGORIZER_EXPORT_DIR"
    ))

    def __post_init__(self):
        self.model_dir = _resolve(self.model_dir)
        self.data_dir = os.path.expanduser(self.data_dir)
        if self.export_dir:
            self.export_dir = os.path.expanduser(self.export_dir)
        else:
            self.export_dir = os.path.join(self.data_dir, "exports")

    @property
    def default_model_path(self) -> Path:
        """Path to the bundled default model."""
        return Path(self.model_dir) / self.default_model_filename

    @property
    def personalized_model_path(self) -> Path:
        """Path to the user's personalized model."""
        return Path(self.data_dir) / self.personalized_model_filename


@dataclass
class EmbeddingConfig:
    """Word embedding configuration."""

    path: Optional[str] = field(default_factory=lambda: os.getenv(
        "TXNCATEGORIZER_EMBEDDING_PATH"
    ))
    dimension: int = FEATURE_DIMENSION

    def __post_init__(self):
        if self.path:
            self.path = _resolve(self.path)


@dataclass
class ClassifierConfig:
    """Prediction and update behaviour."""

    confidence_threshold: float = field(default_factory=lambda: float(os.getenv(
        "TXNCATEGORIZER_CONFIDENCE_THRESHOLD", str(CONFIDENCE_THRESHOLD)
    )))
    n_neighbors: int = field(default_factory=lambda: int(os.getenv(
        "TXNCATEGORIZER_N_NEIGHBORS", str(DEFAULT_N_NEIGHBORS)
    )))
    # Seconds the API/CLI wait for an update to finish
    update_timeout: float = field(default_factory=lambda: float(os.getenv(
        "TXNCATEGORIZER_UPDATE_TIMEOUT", "30"
    )))


@dataclass
class APIConfig:
    """API server configuration."""

    host: str = field(default_factory=lambda: os.getenv(
        "TXNCATEGORIZER_API_HOST", "127.0.0.1"
    ))
    port: int = field(default_factory=lambda: int(os.getenv(
        "TXNCATEGORIZER_API_PORT", "5000"
    )))
    debug: bool = field(default_factory=lambda: os.getenv(
        "TXNCATEGORIZER_DEBUG", "false"
    ).lower() in ("true", "1", "yes"))
    # Comma-separated origins allowed to call the API from a browser
    cors_origins: List[str] = field(default_factory=lambda: [
        origin.strip()
        for origin in os.getenv(
            "TXNCATEGORIZER_CORS_ORIGINS",
            "http://localhost:5000,http://127.0.0.1:5000",
        ).split(",")
        if origin.strip()
    ])


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = field(default_factory=lambda: os.getenv(
        "TXNCATEGORIZER_LOG_LEVEL", "INFO"
    ).upper())
    log_file: Optional[str] = field(default_factory=lambda: os.getenv(
        "TXNCATEGORIZER_LOG_FILE"
    ))

    def __post_init__(self):
        # Validate log level
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if self.level not in valid_levels:
            self.level = "INFO"


@dataclass
class Config:
    """Main configuration container."""

    model: ModelConfig = field(default_factory=ModelConfig)
    embedding: EmbeddingConfig = field(default_factory=EmbeddingConfig)
    classifier: ClassifierConfig = field(default_factory=ClassifierConfig)
    api: APIConfig = field(default_factory=APIConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


# Singleton instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance.

    Returns:
        Config: The application configuration.
    """
    global _config
    if _config is None:
        _config = Config()
    return _config


def reset_config() -> None:
    """Reset the configuration (useful for testing)."""
    global _config
    _config = None
