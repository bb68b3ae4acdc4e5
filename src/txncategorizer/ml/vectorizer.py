"""
Text Vectorizer

Turns a transaction description into a fixed-length feature vector:
lowercase, split on whitespace, look up each word's embedding, average the
vectors that were found and resize the mean to ``FEATURE_DIMENSION``
(truncating or right-padding with zeros).
"""

from typing import Callable, List, Optional

import numpy as np

from txncategorizer.core.constants import FEATURE_DIMENSION
from txncategorizer.exceptions import EmbeddingError
from txncategorizer.logging_config import get_logger

logger = get_logger(__name__)

# embed(word) -> vector or None
EmbedFunction = Callable[[str], Optional[np.ndarray]]


def tokenize(text: str) -> List[str]:
    """Lowercase and split on whitespace."""
    return text.lower().split()


def resize_vector(vector: np.ndarray, dimension: int = FEATURE_DIMENSION) -> np.ndarray:
    """Truncate or zero-pad ``vector`` to exactly ``dimension`` components."""
    if vector.shape[0] >= dimension:
        return vector[:dimension].copy()
    return np.pad(vector, (0, dimension - vector.shape[0]), mode="constant")


class Vectorizer:
    """Averages word embeddings into fixed-size feature vectors."""

    def __init__(self, embed: EmbedFunction, dimension: int = FEATURE_DIMENSION):
        """Initialize the vectorizer.

        Args:
            embed: Word lookup returning a vector, or None for unknown words.
            dimension: Length of every produced feature vector.
        """
        self.embed = embed
        self.dimension = dimension

    def vectorize(self, text: str) -> Optional[np.ndarray]:
        """Convert ``text`` to a feature vector.

        Args:
            text: Free-text transaction description.

        Returns:
            float32 array of length ``dimension``, or None when no word of
            the text has an embedding.

        Raises:
            EmbeddingError: If the lookup returns vectors of different lengths.
        """
        vectors = []
        for token in tokenize(text):
            vector = self.embed(token)
            if vector is not None:
                vectors.append(np.asarray(vector, dtype=np.float32))

        if not vectors:
            logger.debug("No embeddings found for %r", text)
            return None

        lengths = {v.shape[0] for v in vectors}
        if len(lengths) > 1:
            raise EmbeddingError(f"Word vectors have mixed dimensions: {sorted(lengths)}")

        mean = np.mean(np.vstack(vectors), axis=0).astype(np.float32)
        return resize_vector(mean, self.dimension)

    __call__ = vectorize
