"""
Training Data for the Default Model

Sample labelled transaction descriptions used to build the bundled default
model, plus a loader for user-supplied CSV files with ``Description`` and
``Category`` columns.
"""

from pathlib import Path
from typing import List, Optional, Tuple, Union

import pandas as pd

from txncategorizer.core.constants import CATEGORY_COLUMN, DESCRIPTION_COLUMN
from txncategorizer.exceptions import ValidationError
from txncategorizer.logging_config import get_logger

logger = get_logger(__name__)

SAMPLE_TRAINING_DATA: List[Tuple[str, str]] = [
    # Groceries
    ("grocery store", "Groceries"),
    ("supermarket weekly shop", "Groceries"),
    ("farmers market produce", "Groceries"),
    ("organic food market", "Groceries"),
    # Transport
    ("gas station fuel", "Transport"),
    ("train ticket", "Transport"),
    ("taxi ride home", "Transport"),
    ("monthly bus pass", "Transport"),
    ("airport parking", "Transport"),
    # Utilities
    ("electricity bill", "Utilities"),
    ("water bill payment", "Utilities"),
    ("internet service provider", "Utilities"),
    ("mobile phone plan", "Utilities"),
    # Entertainment
    ("movie theater tickets", "Entertainment"),
    ("music streaming subscription", "Entertainment"),
    ("concert tickets", "Entertainment"),
    # Health
    ("pharmacy prescription", "Health"),
    ("dentist appointment", "Health"),
    ("gym membership", "Health"),
    # Shopping
    ("clothing store", "Shopping"),
    ("online electronics order", "Shopping"),
    ("bookstore purchase", "Shopping"),
    # Housing
    ("monthly rent payment", "Housing"),
    ("home insurance premium", "Housing"),
]


def load_training_examples(path: Optional[Union[str, Path]] = None) -> List[Tuple[str, str]]:
    """Load (description, category) pairs from a CSV or the built-in samples.

    Args:
        path: Optional CSV file with ``Description`` and ``Category`` columns.

    Returns:
        List of (description, category) tuples.

    Raises:
        ValidationError: If the CSV lacks the required columns.
    """
    if not path:
        logger.info("Using %d built-in training examples", len(SAMPLE_TRAINING_DATA))
        return list(SAMPLE_TRAINING_DATA)

    logger.info("Loading training data from %s", path)
    df = pd.read_csv(path)

    required = {DESCRIPTION_COLUMN, CATEGORY_COLUMN}
    if not required.issubset(df.columns):
        raise ValidationError(
            f"Training CSV must contain {DESCRIPTION_COLUMN} and {CATEGORY_COLUMN} columns",
            field="columns",
            value=list(df.columns),
        )

    initial_count = len(df)
    df = df[[DESCRIPTION_COLUMN, CATEGORY_COLUMN]].dropna()
    df[DESCRIPTION_COLUMN] = df[DESCRIPTION_COLUMN].astype(str).str.strip()
    df[CATEGORY_COLUMN] = df[CATEGORY_COLUMN].astype(str).str.strip()
    df = df[(df[DESCRIPTION_COLUMN] != "") & (df[CATEGORY_COLUMN] != "")]
    logger.info("Removed %d incomplete rows", initial_count - len(df))

    return list(df.itertuples(index=False, name=None))
