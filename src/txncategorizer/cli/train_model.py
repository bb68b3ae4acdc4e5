#!/usr/bin/env python
"""
CLI for building the bundled default model.

Usage:
    python -m txncategorizer.cli.train_model --embedding-path glove.txt
    python -m txncategorizer.cli.train_model --data labelled.csv --n-neighbors 5
"""

import argparse
import sys

from txncategorizer.config import get_config
from txncategorizer.logging_config import setup_logging, get_logger


def main():
    """Main entry point for model training CLI."""
    parser = argparse.ArgumentParser(
        description="Build the default transaction categorization model",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python -m txncategorizer.cli.train_model
    python -m txncategorizer.cli.train_model --data labelled.csv
    python -m txncategorizer.cli.train_model --output models/custom.joblib
        """,
    )
    parser.add_argument(
        "--data",
        type=str,
        default=None,
        help="CSV with Description and Category columns (default: built-in samples)",
    )
    parser.add_argument(
        "--embedding-path",
        type=str,
        default=None,
        help="Word embedding text file (default: from config)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Where to write the model (default: from config)",
    )
    parser.add_argument(
        "--n-neighbors",
        type=int,
        default=None,
        help="Neighbours consulted per prediction (default: from config)",
    )
    parser.add_argument(
        "--min-samples",
        type=int,
        default=1,
        help="Minimum usable examples required (default: 1)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Set log level (default: INFO)",
    )

    args = parser.parse_args()

    setup_logging(level=args.log_level)
    logger = get_logger(__name__)

    config = get_config()
    embedding_path = args.embedding_path or config.embedding.path
    output = args.output or str(config.model.default_model_path)
    n_neighbors = args.n_neighbors or config.classifier.n_neighbors

    if not embedding_path:
        logger.error("No word embedding configured. Pass --embedding-path or set TXNCATEGORIZER_EMBEDDING_PATH.")
        sys.exit(1)

    logger.info("Building default model")
    logger.info("Embedding: %s", embedding_path)
    logger.info("Output: %s", output)

    try:
        from txncategorizer.core.model_store import ModelStore
        from txncategorizer.ml.classifier import build_default_model
        from txncategorizer.ml.embeddings import WordEmbedding
        from txncategorizer.ml.training_data import load_training_examples
        from txncategorizer.ml.vectorizer import Vectorizer

        embedding = WordEmbedding.from_text_file(embedding_path)
        vectorizer = Vectorizer(embedding.embed, dimension=config.embedding.dimension)
        examples = load_training_examples(args.data)

        model = build_default_model(
            examples,
            vectorizer,
            n_neighbors=n_neighbors,
            min_samples=args.min_samples,
        )
        ModelStore().save(model, output)

        print("\nDefault Model:")
        print(f"  Examples: {model.n_examples}")
        print(f"  Labels: {', '.join(model.classes)}")
        print(f"  Saved to: {output}")

    except Exception as e:
        logger.error("Training error: %s", e, exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
