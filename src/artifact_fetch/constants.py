"""Constants for artifact-fetch."""

# Digest bit lengths
FILE_HASH_BITS = 256  # SHA2-256 content digest
TREE_HASH_BITS = 160  # SHA1 git tree digest

# Streaming
CHUNK_SIZE = 1024 * 1024
HASH_CHUNK_SIZE = 8192

# Version
VERSION = "0.1.0"

# Network defaults
DEFAULT_TIMEOUT = 60.0
DEFAULT_USER_AGENT = f"artifact-fetch/{VERSION}"

# Configuration
APP_NAME = "artifact-fetch"
CONFIG_FILE = "config.yaml"
CONFIG_ENV = "ARTIFACT_FETCH_CONFIG"
TIMEOUT_ENV = "ARTIFACT_FETCH_TIMEOUT"
INSECURE_ENV = "ARTIFACT_FETCH_INSECURE"
TEMP_DIR_ENV = "ARTIFACT_FETCH_TEMP_DIR"

# Prefix of internally allocated temporary paths
TEMP_PREFIX = "artifact-fetch-"
