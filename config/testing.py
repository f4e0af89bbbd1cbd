SECRET_KEY = "test-secret"

DB_CONFIG = None

DEBUG = False
TESTING = True

SESSION_STORAGE_BACKEND = "memory"

INACTIVITY_THRESHOLD_MS = 60 * 60 * 1000
EXPIRY_CHECK_INTERVAL_SECONDS = 60

AUTO_INIT_DB = False

SESSION_ENCRYPTION_KEY = None

MEMORY_MAX_TABS = 100
