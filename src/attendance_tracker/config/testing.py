from .base import *  # noqa: F401,F403

SECRET_KEY = "test-secret"

AIRTABLE_API_KEY = "test-key"
AIRTABLE_BASE_ID = "appTEST"

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"
