"""
Word Embeddings

Provides the ``embed(word) -> vector | None`` lookup used by the vectorizer.
Vectors are read from a plain-text file in the GloVe / word2vec text format::

    coffee 0.12 -0.48 0.91 ...
    shop -0.33 0.05 0.27 ...

A word2vec-style header line ("<vocab_size> <dimension>") is skipped.
"""

from pathlib import Path
from typing import Dict, Iterable, Optional, Tuple, Union

import numpy as np

from txncategorizer.exceptions import EmbeddingError
from txncategorizer.logging_config import get_logger

logger = get_logger(__name__)


class WordEmbedding:
    """In-memory word -> vector lookup."""

    def __init__(self, vectors: Dict[str, Iterable[float]]):
        self._vectors: Dict[str, np.ndarray] = {
            word.lower(): np.asarray(vector, dtype=np.float32)
            for word, vector in vectors.items()
        }
        dims = {v.shape[0] for v in self._vectors.values()}
        if len(dims) > 1:
            raise EmbeddingError(f"Embedding vectors have mixed dimensions: {sorted(dims)}")
        self.dimension: int = dims.pop() if dims else 0

    def embed(self, word: str) -> Optional[np.ndarray]:
        """Return the vector for ``word``, or None if it is unknown."""
        return self._vectors.get(word.lower())

    def __contains__(self, word: str) -> bool:
        return word.lower() in self._vectors

    def __len__(self) -> int:
        return len(self._vectors)

    @classmethod
    def from_text_file(cls, path: Union[str, Path]) -> "WordEmbedding":
        """Load vectors from a GloVe / word2vec text file.

        Args:
            path: Path to the embedding file.

        Returns:
            WordEmbedding with every parsable line.

        Raises:
            EmbeddingError: If the file does not exist or holds no vectors.
        """
        path = Path(path)
        if not path.is_file():
            raise EmbeddingError(f"Embedding file not found: {path}", source=str(path))

        logger.info("Loading word embedding from %s", path)

        vectors: Dict[str, np.ndarray] = {}
        skipped = 0
        with open(path, "r", encoding="utf-8") as f:
            for line_no, line in enumerate(f):
                parsed = _parse_line(line)
                if parsed is None:
                    if line_no > 0 and line.strip():
                        skipped += 1
                    continue
                word, vector = parsed
                vectors[word] = vector

        if not vectors:
            raise EmbeddingError(f"No word vectors found in {path}", source=str(path))

        if skipped:
            logger.warning("Skipped %d malformed lines in %s", skipped, path)

        embedding = cls(vectors)
        logger.info("Loaded %d word vectors (dimension %d)", len(embedding), embedding.dimension)
        return embedding


def _parse_line(line: str) -> Optional[Tuple[str, np.ndarray]]:
    parts = line.rstrip().split(" ")
    # word + at least two components; also rejects the word2vec header
    if len(parts) < 3:
        return None
    try:
        vector = np.asarray([float(x) for x in parts[1:]], dtype=np.float32)
    except ValueError:
        return None
    return parts[0], vector
