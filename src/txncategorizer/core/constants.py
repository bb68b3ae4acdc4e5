"""
Shared Constants for the Transaction Categorizer

Contains all constant values used across the application.
"""

# Length of every feature vector fed to the classifier
FEATURE_DIMENSION: int = 128

# A label is only predicted when its score is strictly above this value
CONFIDENCE_THRESHOLD: float = 0.5

DEFAULT_N_NEIGHBORS: int = 3

# Model artifact file names
DEFAULT_MODEL_FILENAME: str = "default_classifier.joblib"
PERSONALIZED_MODEL_FILENAME: str = "personalized.joblib"
EXPORT_FILENAME: str = "UpdatedModel.joblib"

# Suffix appended to an artifact's stem to build its staging sibling
STAGING_SUFFIX: str = "_tmp"

# Bump when the on-disk artifact envelope changes shape
ARTIFACT_FORMAT_VERSION: int = 1

# Training CSV columns
DESCRIPTION_COLUMN: str = "Description"
CATEGORY_COLUMN: str = "Category"
