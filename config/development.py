import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

SUPABASE_CONFIG = {
    "url": os.getenv("SUPABASE_URL", "http://localhost:54321"),
    "key": os.getenv("SUPABASE_KEY", ""),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Avatars are stored in this public bucket, downscaled to AVATAR_MAX_EDGE pixels
AVATAR_BUCKET = os.getenv("AVATAR_BUCKET", "coaches")
AVATAR_MAX_EDGE = int(os.getenv("AVATAR_MAX_EDGE", "512"))

# Comma separated staff roles left out of payroll
PAYROLL_EXCLUDED_ROLES = os.getenv("PAYROLL_EXCLUDED_ROLES", "admin")
CURRENCY_CODE = os.getenv("CURRENCY_CODE", "EGP")

# Stale time of cached reads, in seconds (0 disables caching)
PAYROLL_CACHE_SECONDS = int(os.getenv("PAYROLL_CACHE_SECONDS", "0"))
DASHBOARD_CACHE_SECONDS = int(os.getenv("DASHBOARD_CACHE_SECONDS", "0"))

# Subscribe to the backend change feed to drop stale cached reads
REALTIME_ENABLED = bool(int(os.getenv("REALTIME_ENABLED", "0")))
