"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# Supabase table names
T_COACHES = "coaches"
T_PROFILES = "profiles"
T_COACH_ATTENDANCE = "coach_attendance"
T_PT_SESSIONS = "pt_sessions"
T_PT_SUBSCRIPTIONS = "pt_subscriptions"
T_STUDENTS = "students"
T_STUDENT_ATTENDANCE = "student_attendance"
T_STUDENT_TRAINING_SCHEDULE = "student_training_schedule"
T_PAYMENTS = "payments"
T_EXPENSES = "expenses"
T_REFUNDS = "refunds"
T_SUBSCRIPTION_PLANS = "subscription_plans"
T_TRAINING_GROUPS = "training_groups"
T_NOTIFICATIONS = "notifications"
T_SKILL_ASSESSMENTS = "skill_assessments"

RPC_CREATE_NEW_USER = "create_new_user"

DEFAULT_AVATAR_BUCKET = "coaches"
DEFAULT_AVATAR_MAX_EDGE = 512
DEFAULT_IMAGE_POS = 50

DEFAULT_PAYROLL_CACHE_SECONDS = 300
DEFAULT_DASHBOARD_CACHE_SECONDS = 60
DEFAULT_NOTIFICATION_LIMIT = 50
DEFAULT_RECENT_STUDENTS = 5

MIN_PASSWORD_LENGTH = 6

# Recipients of staff check-in/out notices
STAFF_DESK_TARGET = "admin_head_reception"
