import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "medhir_portal"),
}

DEBUG = False

SESSION_STORAGE_BACKEND = os.getenv("SESSION_STORAGE_BACKEND", "mysql")

INACTIVITY_THRESHOLD_MS = int(os.getenv("INACTIVITY_THRESHOLD_MS", str(60 * 60 * 1000)))
EXPIRY_CHECK_INTERVAL_SECONDS = int(os.getenv("EXPIRY_CHECK_INTERVAL_SECONDS", "60"))

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

# Fernet key (Fernet.generate_key()); when set, session values are stored encrypted.
SESSION_ENCRYPTION_KEY = os.getenv("SESSION_ENCRYPTION_KEY") or None

MEMORY_MAX_TABS = int(os.getenv("MEMORY_MAX_TABS", "10000"))
