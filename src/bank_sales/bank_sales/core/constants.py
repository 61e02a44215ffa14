"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

DEFAULT_TOKEN_HOURS = 24
DEFAULT_PAGE = 1
DEFAULT_PAGE_LIMIT = 10
MAX_PAGE_LIMIT = 100
DEFAULT_RECENT_LIMIT = 5
DEFAULT_TOP_LIMIT = 5
DEFAULT_TREND_DAYS = 30
MAX_TREND_DAYS = 365

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 255
NAME_MIN_LENGTH = 3
NAME_MAX_LENGTH = 50
EMAIL_MAX_LENGTH = 50

RATE_MIN = Decimal("0")
RATE_MAX = Decimal("100")
MONEY_QUANT = Decimal("0.01")
AMOUNT_MAX = Decimal("9999999999999.99")
