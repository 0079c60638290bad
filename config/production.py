import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

STATE_BACKEND = os.getenv("STATE_BACKEND", "mysql")
STATE_FILE = os.getenv("STATE_FILE", "./.data/bot-data.json")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "wakeup_streak"),
}

SWEEP_HOUR = int(os.getenv("SWEEP_HOUR", "12"))
SWEEP_MINUTE = int(os.getenv("SWEEP_MINUTE", "0"))
ENABLE_SCHEDULER = bool(int(os.getenv("ENABLE_SCHEDULER", "1")))

ENABLE_TEST_COMMANDS = bool(int(os.getenv("ENABLE_TEST_COMMANDS", "0")))

PUSH_ENDPOINT = os.getenv("PUSH_ENDPOINT")
PUSH_TOKEN = os.getenv("PUSH_TOKEN")
PROFILE_ENDPOINT = os.getenv("PROFILE_ENDPOINT")

# Unsigned webhooks are refused unless explicitly allowed
WEBHOOK_SECRET = os.getenv("WEBHOOK_SECRET")
ALLOW_UNSIGNED_WEBHOOKS = bool(int(os.getenv("ALLOW_UNSIGNED_WEBHOOKS", "0")))

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
