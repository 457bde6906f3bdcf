"""Application-wide constants.

This module defines constants used throughout the application
to avoid magic numbers and ensure consistency.
"""

# Cache
CACHE_BACKEND_FILE = "file"
CACHE_BACKEND_REDIS = "redis"
DEFAULT_CACHE_BACKEND = CACHE_BACKEND_FILE
DEFAULT_CACHE_FILE = ".cache/sitekit.json"
CACHE_FILE_INDENT = 2
CACHE_READINESS_PROBE_KEY = "health:probe"

# Sessions
SESSION_KEY_PREFIX = "session:"
SESSION_ID_BYTES = 8
SESSION_COOKIE_NAME = "__session"
SESSION_COOKIE_MAX_AGE_SECONDS = 28800  # 8 hours

# Logging
REDACTED_PLACEHOLDER = "[Redacted]"
DEFAULT_REDACT_PATHS = ["headers.Authorization"]

# API client
DEFAULT_API_ERROR_MESSAGE = "API request error encountered"
