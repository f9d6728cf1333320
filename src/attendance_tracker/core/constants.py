"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# Airtable accepts at most 10 records per create/update call.
BATCH_SIZE = 10

DEFAULT_SESSION_HOURS = 24
DEFAULT_SESSION_KEY = "buildathon_session"
DEFAULT_MAX_WRITE_WORKERS = 4

ISO_DATE_FORMAT = "%Y-%m-%d"
UNKNOWN_NAME = "Unknown"
