import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# json | mysql | memory
STATE_BACKEND = os.getenv("STATE_BACKEND", "json")
STATE_FILE = os.getenv("STATE_FILE", "./.data/bot-data.json")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "wakeup_streak"),
}

# Daily aggregation time (local)
SWEEP_HOUR = int(os.getenv("SWEEP_HOUR", "12"))
SWEEP_MINUTE = int(os.getenv("SWEEP_MINUTE", "0"))
ENABLE_SCHEDULER = bool(int(os.getenv("ENABLE_SCHEDULER", "1")))

# "@Bot test-sweep" / "@Bot test-time HH:MM" and POST /admin/sweep
ENABLE_TEST_COMMANDS = bool(int(os.getenv("ENABLE_TEST_COMMANDS", "1")))

# Outbound push; notifications are only logged when unset
PUSH_ENDPOINT = os.getenv("PUSH_ENDPOINT")
PUSH_TOKEN = os.getenv("PUSH_TOKEN")

# Member display names; stored names are kept when unset
PROFILE_ENDPOINT = os.getenv("PROFILE_ENDPOINT")

# HMAC-SHA256 of the raw webhook body, base64, in the X-Signature header
WEBHOOK_SECRET = os.getenv("WEBHOOK_SECRET")
ALLOW_UNSIGNED_WEBHOOKS = bool(int(os.getenv("ALLOW_UNSIGNED_WEBHOOKS", "1")))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled with STATE_BACKEND=mysql, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
