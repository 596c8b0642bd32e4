"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_TOKEN_DAYS = 7
DEFAULT_LESSON_DURATION = 90
RECENT_LESSONS_PER_GROUP = 5
QR_CODE_BYTES = 16
