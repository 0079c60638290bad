import os

SECRET_KEY = "test-secret"

STATE_BACKEND = "memory"
STATE_FILE = os.getenv("STATE_FILE", "./.data/test-bot-data.json")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "wakeup_streak_test"),
}

SWEEP_HOUR = 12
SWEEP_MINUTE = 0
ENABLE_SCHEDULER = False
ENABLE_TEST_COMMANDS = True

PUSH_ENDPOINT = None
PUSH_TOKEN = None
PROFILE_ENDPOINT = None

WEBHOOK_SECRET = None
ALLOW_UNSIGNED_WEBHOOKS = True

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False
