from config.base import *  # noqa: F401,F403

SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
AUTO_SEED_DB = False

SMTP_HOST = ""
NOTIFICATIONS_IN_BACKGROUND = False
