import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

SUPABASE_CONFIG = {
    "url": os.getenv("SUPABASE_URL", ""),
    "key": os.getenv("SUPABASE_KEY", ""),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AVATAR_BUCKET = os.getenv("AVATAR_BUCKET", "coaches")
AVATAR_MAX_EDGE = int(os.getenv("AVATAR_MAX_EDGE", "512"))

PAYROLL_EXCLUDED_ROLES = os.getenv("PAYROLL_EXCLUDED_ROLES", "admin")
CURRENCY_CODE = os.getenv("CURRENCY_CODE", "EGP")

PAYROLL_CACHE_SECONDS = int(os.getenv("PAYROLL_CACHE_SECONDS", "300"))
DASHBOARD_CACHE_SECONDS = int(os.getenv("DASHBOARD_CACHE_SECONDS", "60"))

REALTIME_ENABLED = bool(int(os.getenv("REALTIME_ENABLED", "1")))
