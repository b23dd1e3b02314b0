"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

MINUTES_PER_DAY = 24 * 60
ALLOWED_BUCKET_WIDTHS = (15, 30, 45, 60)
DEFAULT_BUCKET_WIDTH = 60

NOT_AVAILABLE = "N/A"
