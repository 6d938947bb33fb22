# filosign_core/constants.py

# Key discovery
DISCOVERY_MESSAGE_TAG = "FiloSign Public Key Discovery"
PUBLIC_KEY_STORAGE_KEY = "filosign_public_keys"
CACHE_TTL_MS = 30 * 24 * 60 * 60 * 1000  # 30 days

# Dual-access encryption
ENCRYPTION_METHOD = "privacy-preserving-dual-access"
CONTENT_KEY_SIZE = 32  # AES-256
NONCE_SIZE = 12  # AES-GCM standard nonce
WRAP_INFO = b"filosign-dual-access-v1"

# Defaults for the local store
DEFAULT_STORAGE_PROVIDER = "sqlite"
DEFAULT_DB_PATH = "db/filosign_state.db"
