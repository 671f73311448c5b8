"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

DEFAULT_SESSION_DAYS = 7
DEFAULT_HOURLY_RATE = Decimal("20")
MIN_PASSWORD_LENGTH = 6
MAX_HOURS_PER_DAY = Decimal("24")

OWN_TIMESHEETS_LIMIT = 50
ADMIN_TIMESHEETS_LIMIT = 500

DEFAULT_ADMIN_NOTIFICATION_EMAIL = "admin@cwi-facades.co.uk"
DEFAULT_NOTIFICATION_SENDER = "CWI Facades Timesheets <timesheets@cwi-facades.co.uk>"
