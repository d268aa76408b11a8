"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DATE_FORMAT = "%Y-%m-%d"

UNRATED = 0
MIN_RATING = 1
MAX_RATING = 10
DEFAULT_CLOSURE_RATING = 10

PHONE_PATTERN = r"^(010|011|012|015)\d{8}$"

UNKNOWN_STUDENT_NAME = "Unknown Student"
