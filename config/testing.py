SECRET_KEY = "test-secret"

SUPABASE_CONFIG = {
    "url": "http://localhost:54321",
    "key": "test-key",
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AVATAR_BUCKET = "coaches"
AVATAR_MAX_EDGE = 512

PAYROLL_EXCLUDED_ROLES = "admin"
CURRENCY_CODE = "EGP"

PAYROLL_CACHE_SECONDS = 0
DASHBOARD_CACHE_SECONDS = 0

REALTIME_ENABLED = False
