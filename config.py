"""
config.py
---------
Central configuration module. Loads all environment variables
from the .env file and exposes them as typed constants.
"""

import os
from dotenv import load_dotenv

load_dotenv()


# ── Telegram ──────────────────────────────────────────────
TELEGRAM_BOT_TOKEN: str = os.getenv("TELEGRAM_BOT_TOKEN", "")

# ── Security ──────────────────────────────────────────────
_raw_ids = os.getenv("ALLOWED_USER_IDS", "")
ALLOWED_USER_IDS: list[int] = (
    [int(uid.strip()) for uid in _raw_ids.split(",") if uid.strip()]
    if _raw_ids
    else []
)

# ── Rate Limiting ─────────────────────────────────────────
RATE_LIMIT_MESSAGES: int = int(os.getenv("RATE_LIMIT_MESSAGES", "30"))
RATE_LIMIT_WINDOW_SECONDS: int = int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "60"))

# ── Logging ───────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# ── Fixed weekly costs (VND) ──────────────────────────────
GAS_COST: int = int(os.getenv("GAS_COST", "70000"))
WIFI_COST: int = int(os.getenv("WIFI_COST", "30000"))
FIXED_EXPENSES: int = GAS_COST + WIFI_COST

# ── Default weekly budgets (VND) ──────────────────────────
DEFAULT_FOOD_BUDGET: int = int(os.getenv("DEFAULT_FOOD_BUDGET", "315000"))
DEFAULT_MISC_BUDGET: int = int(os.getenv("DEFAULT_MISC_BUDGET", "100000"))

# ── Advice thresholds ─────────────────────────────────────
SHIFT_VALUE: int = int(os.getenv("SHIFT_VALUE", "100000"))  # one 5h shift
URGENT_DAYS: int = int(os.getenv("URGENT_DAYS", "3"))
GAS_SHORT_INTERVAL_DAYS: int = int(os.getenv("GAS_SHORT_INTERVAL_DAYS", "5"))
WIFI_CYCLE_DAYS: int = int(os.getenv("WIFI_CYCLE_DAYS", "7"))

# ── Wallet sync (simulated) ───────────────────────────────
WALLET_SYNC_DELAY_SECONDS: float = float(os.getenv("WALLET_SYNC_DELAY_SECONDS", "1.5"))

# ── Scheduler ─────────────────────────────────────────────
REMINDER_HOUR: int = int(os.getenv("REMINDER_HOUR", "9"))

# ── Currency ──────────────────────────────────────────────
CURRENCY_SYMBOL: str = "đ"
AMOUNT_INPUT_MULTIPLIER: int = 1000  # "315" typed by the user means 315.000đ
