"""Settings shared by every environment.

Values come from the process environment (a ``.env`` file is loaded by the
app factory before the settings module is imported).
"""

import os

AIRTABLE_API_KEY = os.getenv("AIRTABLE_API_KEY", "YOUR_AIRTABLE_API_KEY")
AIRTABLE_BASE_ID = os.getenv("AIRTABLE_BASE_ID", "YOUR_BASE_ID")
AIRTABLE_API_URL = os.getenv("AIRTABLE_API_URL", "https://api.airtable.com/v0")

PARTICIPANTS_TABLE = os.getenv("PARTICIPANTS_TABLE", "Participants")
ATTENDANCE_TABLE = os.getenv("ATTENDANCE_TABLE", "Attendance")

PROGRAM_NAME = os.getenv("PROGRAM_NAME", "Buildathon 2025")
PROGRAM_START_DATE = os.getenv("PROGRAM_START_DATE", "2025-12-26")

# Static staff accounts, "username:password" pairs separated by commas.
# WARNING: demonstration-grade authentication only.
AUTH_CREDENTIALS = os.getenv("AUTH_CREDENTIALS", "admin:buildathon2025,coordinator:coordinator123")
SESSION_KEY = os.getenv("SESSION_KEY", "buildathon_session")
SESSION_HOURS = int(os.getenv("SESSION_HOURS", "24"))

# Seconds; empty means no client-side timeout.
_timeout = os.getenv("REQUEST_TIMEOUT", "")
REQUEST_TIMEOUT = float(_timeout) if _timeout else None

MAX_WRITE_WORKERS = int(os.getenv("MAX_WRITE_WORKERS", "4"))
