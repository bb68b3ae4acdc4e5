"""
Unit tests for model_store module.
"""

import joblib
import pytest

from txncategorizer.core.constants import ARTIFACT_FORMAT_VERSION
from txncategorizer.core.model_store import ModelStore
from txncategorizer.core.models import ModelArtifactLocation, staging_path_for
from txncategorizer.exceptions import ExportError, PersistenceError
from txncategorizer.ml.classifier import UpdatableKNNClassifier

TEST_TEXTS = ["grocery store", "gas station", "coffee shop", "movie tickets", "rent"]


class TestStagingPath:
    """Tests for staging_path_for and ModelArtifactLocation."""

    def test_sibling_with_tmp_suffix(self, tmp_path):
        path = tmp_path / "personalized.joblib"
        assert staging_path_for(path) == tmp_path / "personalized_tmp.joblib"

    def test_location_staging_path(self, tmp_path):
        locations = ModelArtifactLocation(
            default_path=tmp_path / "default.joblib",
            personalized_path=tmp_path / "data" / "personalized.joblib",
        )
        assert locations.staging_path == tmp_path / "data" / "personalized_tmp.joblib"


class TestLoad:
    """Tests for ModelStore.load."""

    def test_missing_returns_none(self, store, tmp_path):
        assert store.load(tmp_path / "missing.joblib") is None

    def test_corrupt_returns_none(self, store, tmp_path):
        path = tmp_path / "model.joblib"
        path.write_bytes(b"definitely not a joblib file")
        assert store.load(path) is None

    def test_truncated_returns_none(self, store, default_model, tmp_path):
        path = tmp_path / "model.joblib"
        store.save(default_model, path)
        data = path.read_bytes()
        path.write_bytes(data[: len(data) // 2])
        assert store.load(path) is None

    def test_raw_object_without_envelope_returns_none(self, store, default_model, tmp_path):
        path = tmp_path / "model.joblib"
        joblib.dump(default_model, path)
        assert store.load(path) is None

    def test_unknown_format_version_returns_none(self, store, default_model, tmp_path):
        path = tmp_path / "model.joblib"
        joblib.dump({"format_version": ARTIFACT_FORMAT_VERSION + 1, "model": default_model}, path)
        assert store.load(path) is None


class TestSave:
    """Tests for ModelStore.save."""

    def test_round_trip_predicts_the_same(self, store, default_model, vectorizer, tmp_path):
        path = tmp_path / "model.joblib"
        store.save(default_model, path)
        loaded = store.load(path)

        assert isinstance(loaded, UpdatableKNNClassifier)
        assert loaded.version == default_model.version
        for text in TEST_TEXTS:
            vector = vectorizer.vectorize(text)
            if vector is None:
                continue
            assert loaded.predict_scores(vector) == pytest.approx(default_model.predict_scores(vector))

    def test_creates_parent_directory(self, store, default_model, tmp_path):
        path = tmp_path / "nested" / "dir" / "model.joblib"
        store.save(default_model, path)
        assert store.exists(path)

    def test_leaves_no_staging_file(self, store, default_model, tmp_path):
        path = tmp_path / "model.joblib"
        store.save(default_model, path)
        assert not staging_path_for(path).exists()

    def test_overwrites_existing(self, store, default_model, vectorizer, tmp_path):
        path = tmp_path / "model.joblib"
        store.save(default_model, path)
        updated = default_model.with_example(vectorizer.vectorize("coffee shop"), "Dining")
        store.save(updated, path)
        assert store.load(path).version == updated.version

    def test_crash_before_replace_keeps_previous_artifact(self, store, default_model, vectorizer, tmp_path, monkeypatch):
        path = tmp_path / "model.joblib"
        store.save(default_model, path)
        before = path.read_bytes()

        def crash(src, dst):
            raise OSError("simulated crash between staging write and rename")

        monkeypatch.setattr("txncategorizer.core.model_store.os.replace", crash)
        updated = default_model.with_example(vectorizer.vectorize("coffee shop"), "Dining")

        with pytest.raises(PersistenceError):
            store.save(updated, path)

        assert path.read_bytes() == before
        assert store.load(path).version == default_model.version
        assert not staging_path_for(path).exists()

    def test_crash_before_replace_keeps_absence(self, store, default_model, tmp_path, monkeypatch):
        path = tmp_path / "model.joblib"

        def crash(src, dst):
            raise OSError("simulated crash")

        monkeypatch.setattr("txncategorizer.core.model_store.os.replace", crash)

        with pytest.raises(PersistenceError):
            store.save(default_model, path)

        assert not path.exists()

    def test_failed_staging_write_leaves_target_untouched(self, store, default_model, tmp_path, monkeypatch):
        path = tmp_path / "model.joblib"
        store.save(default_model, path)
        before = path.read_bytes()

        def broken_dump(obj, f):
            f.write(b"partial")
            raise IOError("disk full")

        monkeypatch.setattr("txncategorizer.core.model_store.joblib.dump", broken_dump)

        with pytest.raises(PersistenceError) as exc_info:
            store.save(default_model, path)

        assert exc_info.value.path == str(path)
        assert path.read_bytes() == before
        assert not staging_path_for(path).exists()


class TestDelete:
    """Tests for ModelStore.delete and discard_staging."""

    def test_delete_existing(self, store, default_model, tmp_path):
        path = tmp_path / "model.joblib"
        store.save(default_model, path)
        assert store.delete(path) is True
        assert not store.exists(path)

    def test_delete_missing_is_noop(self, store, tmp_path):
        assert store.delete(tmp_path / "missing.joblib") is False

    def test_discard_staging(self, store, tmp_path):
        path = tmp_path / "model.joblib"
        staging = staging_path_for(path)
        staging.write_bytes(b"half written")
        assert store.discard_staging(path) is True
        assert not staging.exists()
        assert store.discard_staging(path) is False


class TestExport:
    """Tests for ModelStore.export."""

    def test_export_to_file(self, store, default_model, tmp_path):
        source = tmp_path / "model.joblib"
        store.save(default_model, source)
        written = store.export(source, tmp_path / "copy.joblib")
        assert written == tmp_path / "copy.joblib"
        assert written.read_bytes() == source.read_bytes()

    def test_export_to_directory_uses_export_filename(self, default_model, tmp_path):
        store = ModelStore(export_filename="exported.joblib")
        source = tmp_path / "model.joblib"
        store.save(default_model, source)
        out_dir = tmp_path / "exports"
        out_dir.mkdir()
        written = store.export(source, out_dir)
        assert written == out_dir / "exported.joblib"
        assert store.load(written) is not None

    def test_missing_source_raises(self, store, tmp_path):
        with pytest.raises(ExportError):
            store.export(tmp_path / "missing.joblib", tmp_path / "copy.joblib")

    def test_unwritable_destination_raises(self, store, default_model, tmp_path):
        source = tmp_path / "model.joblib"
        store.save(default_model, source)
        with pytest.raises(ExportError):
            store.export(source, tmp_path / "no" / "such" / "dir" / "copy.joblib")
