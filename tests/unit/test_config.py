"""
Unit tests for config module.
"""

from pathlib import Path

from txncategorizer.config import Config, get_config, reset_config
from txncategorizer.core.constants import (
    CONFIDENCE_THRESHOLD,
    DEFAULT_MODEL_FILENAME,
    FEATURE_DIMENSION,
    PERSONALIZED_MODEL_FILENAME,
)


class TestConfig:
    """Tests for environment-driven configuration."""

    def test_paths_follow_environment(self, test_config, tmp_path):
        assert test_config.model.default_model_path == tmp_path / "models" / DEFAULT_MODEL_FILENAME
        assert test_config.model.personalized_model_path == tmp_path / "data" / PERSONALIZED_MODEL_FILENAME

    def test_defaults(self, test_config):
        assert test_config.classifier.confidence_threshold == CONFIDENCE_THRESHOLD
        assert test_config.embedding.dimension == FEATURE_DIMENSION
        assert test_config.logging.level == "DEBUG"

    def test_numeric_overrides(self, monkeypatch):
        monkeypatch.setenv("TXNCATEGORIZER_CONFIDENCE_THRESHOLD", "0.7")
        monkeypatch.setenv("TXNCATEGORIZER_N_NEIGHBORS", "5")
        config = Config()
        assert config.classifier.confidence_threshold == 0.7
        assert config.classifier.n_neighbors == 5

    def test_export_dir_defaults_under_data_dir(self, test_config, tmp_path):
        assert Path(test_config.model.export_dir) == tmp_path / "data" / "exports"

    def test_export_dir_override(self, monkeypatch, tmp_path):
        monkeypatch.setenv("TXNCATEGORIZER_EXPORT_DIR", str(tmp_path / "out"))
        assert Config().model.export_dir == str(tmp_path / "out")

    def test_cors_origins_parsed(self, monkeypatch):
        monkeypatch.setenv("TXNCATEGORIZER_CORS_ORIGINS", " http://a.test , ,http://b.test")
        assert Config().api.cors_origins == ["http://a.test", "http://b.test"]

    def test_invalid_log_level_falls_back_to_info(self, monkeypatch):
        monkeypatch.setenv("TXNCATEGORIZER_LOG_LEVEL", "chatty")
        assert Config().logging.level == "INFO"

    def test_relative_embedding_path_resolved(self, monkeypatch):
        monkeypatch.setenv("TXNCATEGORIZER_EMBEDDING_PATH", "data/vectors.txt")
        path = Path(Config().embedding.path)
        assert path.is_absolute()
        assert path.parts[-2:] == ("data", "vectors.txt")

    def test_singleton(self, monkeypatch):
        reset_config()
        try:
            assert get_config() is get_config()
        finally:
            reset_config()
