"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EXEMPTION_CUTOFF_HOUR = 22
WEEKLY_EXEMPTION_QUOTA = 1
WEEK_LENGTH_DAYS = 7

DEFAULT_SWEEP_HOUR = 12
DEFAULT_SWEEP_MINUTE = 0

DEFAULT_DISPLAY_NAME = "User"
DEFAULT_STATE_FILE = "./.data/bot-data.json"
