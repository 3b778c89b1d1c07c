"""Constants for artifact-layout."""

# Storage provider implementation tags
FILE_SYSTEM_IMPLEMENTATION = "file-system"

# Service folder markers (internal bookkeeping, never artifacts)
TRASH_DIR = ".trash"
TEMP_DIR = ".temp"
INDEX_DIR = ".index"
SERVICE_MARKERS = (TRASH_DIR, TEMP_DIR, INDEX_DIR)

# Lock file guarding trash relocation (inside the repository directory)
TRASH_LOCK_FILE = ".trash.lock"
TRASH_LOCK_TIMEOUT = 60

# Digest algorithm names
MD5 = "MD5"
SHA_1 = "SHA-1"
SHA_512 = "SHA-512"
DEFAULT_DIGEST_ALGORITHMS = (MD5, SHA_1)

# Suffixes recognised as checksum companion files, shared by every format
CHECKSUM_EXTENSIONS = (".md5", ".sha1", ".sha256", ".sha512")

# Configuration
CONFIG_ENV_VAR = "ARTIFACT_LAYOUT_CONFIG"
CONFIG_FILE = "storages.yaml"
APP_NAME = "artifact-layout"

# Version
LAYOUT_VERSION = "0.1.0"
