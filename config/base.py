"""Settings shared by every environment, read from the process environment.

Environment modules import * from here and override what differs.
"""

import os

from timesheet_tracker.core.constants import (
    DEFAULT_ADMIN_NOTIFICATION_EMAIL,
    DEFAULT_NOTIFICATION_SENDER,
    DEFAULT_SESSION_DAYS,
)


def env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "timesheet_db"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
SESSION_DAYS = int(os.getenv("SESSION_DAYS", str(DEFAULT_SESSION_DAYS)))

AUTO_INIT_DB = env_flag("AUTO_INIT_DB")
AUTO_SEED_DB = env_flag("AUTO_SEED_DB")

# Notification e-mail. Without SMTP_HOST notifications are logged and dropped.
SMTP_HOST = os.getenv("SMTP_HOST", "")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SMTP_USER = os.getenv("SMTP_USER", "")
SMTP_PASSWORD = os.getenv("SMTP_PASSWORD", "")
SMTP_USE_TLS = env_flag("SMTP_USE_TLS", "1")
NOTIFICATION_SENDER = os.getenv("NOTIFICATION_SENDER", DEFAULT_NOTIFICATION_SENDER)
ADMIN_NOTIFICATION_EMAIL = os.getenv("ADMIN_NOTIFICATION_EMAIL", DEFAULT_ADMIN_NOTIFICATION_EMAIL)

# Deliver notifications on the background scheduler (False: inline)
NOTIFICATIONS_IN_BACKGROUND = True
