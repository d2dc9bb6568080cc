"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# date.weekday(): Monday=0 ... Sunday=6
DEFAULT_REST_WEEKDAY = 6
DEFAULT_SESSION_DAYS = 7
SCHOOL_DAYS_PER_WEEK = 6
