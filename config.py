"""
Defaults and constants for the Equity-Cash Swap calculator.

All monetary values in plain currency units (dollars in the UI).
Percentages are stored as entered, e.g. 50 means 50%.
"""

import os

# ── Projection ───────────────────────────────────────────────────────
PROJECTION_YEARS = 20            # years 0..20 inclusive → 21 periods

# ── Dividend modes ───────────────────────────────────────────────────
DIVIDEND_FLAT = "flat"           # flat currency amount per share per year
DIVIDEND_RATE = "rate"           # percent of current share value per year
DIVIDEND_MODES = (DIVIDEND_FLAT, DIVIDEND_RATE)
DEFAULT_DIVIDEND_MODE = DIVIDEND_RATE

# ── Input defaults (used when no stored value is available) ──────────
DEFAULT_EQUITY_SWAP = 0
DEFAULT_HOURS_PER_WEEK = 20
DEFAULT_WEEKS_PER_YEAR = 30
DEFAULT_HOURLY_RATE = 100
DEFAULT_SHARE_VALUE = 10
DEFAULT_OPTION_STRIKE_PRICE = 4
DEFAULT_DIVIDEND_PER_SHARE = 1
DEFAULT_DIVIDEND_RATE = 5
DEFAULT_GROWTH_RATE = 20

# ── Slider ranges: (min, max). Presentation only, never enforced
#    by the engine; direct numeric entry may go outside them. ─────────
EQUITY_SWAP_RANGE = (0, 80)
HOURS_PER_WEEK_RANGE = (10, 35)
WEEKS_PER_YEAR_RANGE = (20, 44)

# ── Persisted settings: store key → (input field, default) ──────────
COMMON_SETTINGS = [
    ("equitySwap", "equity_swap_percent", DEFAULT_EQUITY_SWAP),
    ("hoursPerWeek", "hours_per_week", DEFAULT_HOURS_PER_WEEK),
    ("weeksPerYear", "weeks_per_year", DEFAULT_WEEKS_PER_YEAR),
    ("hourlyRate", "hourly_rate", DEFAULT_HOURLY_RATE),
    ("shareValue", "share_value", DEFAULT_SHARE_VALUE),
    ("optionStrikePrice", "option_strike_price", DEFAULT_OPTION_STRIKE_PRICE),
]
MODE_SETTINGS = {
    DIVIDEND_FLAT: [
        ("dividendPerShare", "dividend_per_share", DEFAULT_DIVIDEND_PER_SHARE),
    ],
    DIVIDEND_RATE: [
        ("dividendRate", "dividend_rate", DEFAULT_DIVIDEND_RATE),
        ("growthRate", "growth_rate", DEFAULT_GROWTH_RATE),
    ],
}

# ── Labels used in user-facing messages ─────────────────────────────
FIELD_LABELS = {
    "equity_swap_percent": "Equity swap",
    "hours_per_week": "Hours per week",
    "weeks_per_year": "Weeks per year",
    "hourly_rate": "Hourly rate",
    "share_value": "Share value",
    "option_strike_price": "Option strike price",
    "dividend_per_share": "Dividend per share",
    "dividend_rate": "Dividend rate",
    "growth_rate": "Growth rate",
}

SETTINGS_PATH = os.environ.get("EQUITY_SWAP_SETTINGS", "equity_swap_settings.json")

# ── Web server ───────────────────────────────────────────────────────
HOST = "127.0.0.1"
PORT = 5000
