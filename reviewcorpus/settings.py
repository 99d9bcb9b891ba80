"""
Configuration settings for the review corpus toolkit.

Centralized defaults for parsing, splitting and logging. Command-line flags
in prepare_helpfulness_data.py override these values.
"""

# Output directory, resolved against the working directory at run time
DATA_DIRNAME = "data"

# Corpus layout
BLOCK_SIZE = 8  # Field lines per review once blank separators are dropped
DEFAULT_ENCODING = "utf-8"
FALLBACK_ENCODING = "latin-1"  # Single-byte, so every line is convertible

# Label derivation
DEFAULT_MIN_VOTES = 10
ZERO_VOTE_RATIO = 0.0  # Sentinel ratio when zero-vote reviews are kept

# Splitting
DEFAULT_VALIDATION_SIZE = 0.2
RANDOM_SEED = 42

# Published counts for the Amazon Fine Food Reviews corpus (finefoods.txt)
FINEFOODS_REFERENCE = {
    "num_reviews": 568454,
    "num_products": 74258,
    "num_users": 256059,
}

# Logging
LOG_LEVEL = "INFO"  # DEBUG, INFO, WARNING, ERROR
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
