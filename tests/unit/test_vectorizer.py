"""
Unit tests for vectorizer module.
"""

import numpy as np
import pytest

from txncategorizer.core.constants import FEATURE_DIMENSION
from txncategorizer.exceptions import EmbeddingError
from txncategorizer.ml.vectorizer import Vectorizer, resize_vector, tokenize


class TestTokenize:
    """Tests for tokenize function."""

    def test_lowercases_and_splits(self):
        assert tokenize("Coffee SHOP") == ["coffee", "shop"]

    def test_any_whitespace(self):
        assert tokenize("  coffee\tshop\nnow ") == ["coffee", "shop", "now"]

    def test_empty(self):
        assert tokenize("") == []


class TestResizeVector:
    """Tests for resize_vector function."""

    def test_pads_with_zeros(self):
        result = resize_vector(np.ones(3, dtype=np.float32), 5)
        np.testing.assert_array_equal(result, [1, 1, 1, 0, 0])

    def test_truncates(self):
        result = resize_vector(np.arange(10, dtype=np.float32), 4)
        np.testing.assert_array_equal(result, [0, 1, 2, 3])

    def test_exact_length_unchanged(self):
        vector = np.arange(4, dtype=np.float32)
        np.testing.assert_array_equal(resize_vector(vector, 4), vector)


class TestVectorize:
    """Tests for Vectorizer.vectorize."""

    @pytest.mark.parametrize("dimension", [8, 50, 128, 300])
    def test_always_feature_dimension(self, dimension, embedding_factory):
        vectorizer = Vectorizer(embedding_factory(dimension).embed)
        result = vectorizer.vectorize("coffee shop")
        assert result.shape == (FEATURE_DIMENSION,)
        assert result.dtype == np.float32

    def test_long_text_still_feature_dimension(self, vectorizer):
        text = " ".join(["coffee", "shop", "grocery", "store"] * 50)
        assert vectorizer.vectorize(text).shape == (FEATURE_DIMENSION,)

    def test_no_known_words_returns_none(self, vectorizer):
        assert vectorizer.vectorize("zzz qqq") is None

    def test_empty_text_returns_none(self, vectorizer):
        assert vectorizer.vectorize("") is None
        assert vectorizer.vectorize("   ") is None

    def test_two_token_average(self, embedding, vectorizer):
        v1 = embedding.embed("coffee")
        v2 = embedding.embed("shop")
        result = vectorizer.vectorize("coffee shop")
        np.testing.assert_allclose(result[:embedding.dimension], (v1 + v2) / 2, rtol=1e-6, atol=1e-7)

    def test_unknown_tokens_are_dropped(self, embedding, vectorizer):
        result = vectorizer.vectorize("coffee xyzzy")
        np.testing.assert_allclose(result[:embedding.dimension], embedding.embed("coffee"), rtol=1e-6, atol=1e-7)

    def test_case_insensitive(self, vectorizer):
        np.testing.assert_array_equal(
            vectorizer.vectorize("Coffee Shop"),
            vectorizer.vectorize("coffee shop"),
        )

    def test_small_native_dimension_zero_tail(self, embedding, vectorizer):
        result = vectorizer.vectorize("coffee")
        assert np.all(result[embedding.dimension:] == 0)

    def test_large_native_dimension_truncated(self, embedding_factory):
        embedding = embedding_factory(300)
        vectorizer = Vectorizer(embedding.embed)
        result = vectorizer.vectorize("coffee")
        np.testing.assert_allclose(result, embedding.embed("coffee")[:FEATURE_DIMENSION], rtol=1e-6, atol=1e-7)

    def test_custom_dimension(self, embedding):
        vectorizer = Vectorizer(embedding.embed, dimension=16)
        assert vectorizer.vectorize("coffee").shape == (16,)

    def test_mixed_dimensions_raise(self):
        lookup = {"coffee": np.ones(4), "shop": np.ones(6)}
        vectorizer = Vectorizer(lookup.get)
        with pytest.raises(EmbeddingError):
            vectorizer.vectorize("coffee shop")

    def test_callable(self, vectorizer):
        np.testing.assert_array_equal(vectorizer("coffee"), vectorizer.vectorize("coffee"))
