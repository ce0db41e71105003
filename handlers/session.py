"""
handlers/session.py
--------------------
Per-chat BudgetSession storage and shared argument parsing helpers.
"""

from datetime import MAXYEAR, MINYEAR, datetime
from typing import Optional

from telegram.ext import ContextTypes

from config import DEFAULT_FOOD_BUDGET, DEFAULT_MISC_BUDGET
from models.debt import BudgetBucket
from models.session import BudgetSession

SESSION_KEY = "budget_session"


def now() -> datetime:
    """The only place the bot reads the wall clock."""
    return datetime.now()


def get_session(context: ContextTypes.DEFAULT_TYPE) -> BudgetSession:
    """The chat's session, created with default budgets on first use."""
    session = context.user_data.get(SESSION_KEY)
    if session is None:
        session = BudgetSession.start(now(), DEFAULT_FOOD_BUDGET, DEFAULT_MISC_BUDGET)
        context.user_data[SESSION_KEY] = session
    return session


def split_fields(text: str) -> list[str]:
    """Split 'a | b | c' into stripped parts."""
    return [part.strip() for part in text.split("|")]


def parse_date(text: str) -> Optional[datetime]:
    """Accept 2026-03-15 or 15/03/2026; returns midnight of that day."""
    text = text.strip()
    for fmt in ("%Y-%m-%d", "%d/%m/%Y"):
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def parse_bucket(text: str, current_year: int) -> Optional[BudgetBucket]:
    """Parse 'MM/YYYY' (or just 'MM' for `current_year`) into a budget bucket."""
    parts = text.strip().split("/")
    try:
        month = int(parts[0])
        year = int(parts[1]) if len(parts) > 1 else current_year
    except (ValueError, IndexError):
        return None
    if not 1 <= month <= 12 or not MINYEAR <= year <= MAXYEAR:
        return None
    return BudgetBucket(month, year)
