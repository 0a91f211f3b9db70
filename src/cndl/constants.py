"""Constants used throughout cndl."""

# Directory names
REPO_DIR = ".cndl"
OBJECTS_DIR = "objects"
REFS_DIR = "refs"

# Ref namespaces
HEADS_NAMESPACE = "heads"
STAGING_NAMESPACE = "fetch"
DEFAULT_BRANCH = "main"

# Prefix for in-flight files; never a valid shard entry or ref name
TMP_PREFIX = ".tmp_"

# Hash algorithm
HASH_ALGORITHM = "sha256"
HASH_LENGTH = 64  # SHA-256 produces 64 hex characters
SHARD_LENGTH = 2
MIN_PREFIX_LENGTH = SHARD_LENGTH + 1

# Chunk envelope: [tag:1][payload:N][crc32c:4]
ENVELOPE_TAG_SIZE = 1
ENVELOPE_CHECKSUM_SIZE = 4
ENVELOPE_MIN_SIZE = ENVELOPE_TAG_SIZE + ENVELOPE_CHECKSUM_SIZE

# Encoding tags
ENCODING_XOR = 1
SUPPORTED_ENCODINGS = frozenset({ENCODING_XOR})

# Synthetic series defaults (geometric Brownian motion)
GBM_S0 = 100.0
GBM_STEPS = 7200
GBM_MU = 0.0
GBM_SIGMA = 0.001
GBM_SEED = 42

# Exit codes
EXIT_USER_ERROR = 1
EXIT_SYSTEM_ERROR = 2
EXIT_DATA_ERROR = 3
