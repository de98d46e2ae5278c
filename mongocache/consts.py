# Cache defaults
DEFAULT_TTL = 10  # seconds an entry lives after its last write
DEFAULT_CHECK_PERIOD = 5  # seconds between background expiry sweeps
DEFAULT_COLLECTION_NAME = "cache"

# MongoDB connection defaults
DEFAULT_MONGO_URI = "mongodb://localhost:27017"
DEFAULT_DATABASE_NAME = "mongocache"
DEFAULT_SERVER_SELECTION_TIMEOUT_MS = 5000

# Environment variables read by the CLI (explicit option > env var > default)
ENV_MONGO_URI = "MONGOCACHE_URI"
ENV_DATABASE_NAME = "MONGOCACHE_DATABASE"
ENV_COLLECTION_NAME = "MONGOCACHE_COLLECTION"

# Largest |ttl| accepted; keeps now + ttl inside the datetime and BSON date range
MAX_TTL = 100 * 365 * 24 * 3600  # ~100 years
