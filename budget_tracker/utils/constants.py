APP_NAME = "Budget Tracker"
APP_WIDTH = 1100
APP_HEIGHT = 720
DB_FILE = "budget_tracker.db"
LOG_FILE = "budget_tracker.log"

DATE_FORMAT = "%Y-%m-%d"
MONTH_FORMAT = "%Y-%m"

SAVINGS_CATEGORY = "Savings"
UNCATEGORIZED_CATEGORY = "Uncategorized"

DEFAULT_CATEGORIES = [
    {"name": "Salary",         "color_hex": "#4CAF50", "is_system": 0},
    {"name": "Food",           "color_hex": "#FF9800", "is_system": 0},
    {"name": "Rent/Mortgage",  "color_hex": "#F44336", "is_system": 0},
    {"name": "Utilities",      "color_hex": "#9C27B0", "is_system": 0},
    {"name": "Transport",      "color_hex": "#2196F3", "is_system": 0},
    {"name": "Entertainment",  "color_hex": "#FF5722", "is_system": 0},
    {"name": SAVINGS_CATEGORY,       "color_hex": "#009688", "is_system": 1},
    {"name": UNCATEGORIZED_CATEGORY, "color_hex": "#888888", "is_system": 1},
]

DIRECTIONS = ("income", "expense")

FREQUENCIES = ["weekly", "biweekly", "monthly"]
FREQUENCY_LABELS = {
    "weekly": "Weekly",
    "biweekly": "Every 2 weeks",
    "monthly": "Monthly",
}
# Accepted spellings from forms and callers, normalized to FREQUENCIES.
FREQUENCY_ALIASES = {
    "bi-weekly": "biweekly",
    "every 2 weeks": "biweekly",
    "fortnightly": "biweekly",
}
WEEK_INTERVALS = {
    "weekly": 7,
    "biweekly": 14,
}
MIN_DAY_OF_MONTH = 1
MAX_DAY_OF_MONTH = 28

# December of this year still has a next month for carry-over.
MAX_YEAR = 9998

BUDGET_HISTORY_ROWS = 50
UPCOMING_DAYS = 30
BANNER_TIMEOUT_MS = 6000
