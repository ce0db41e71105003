"""
handlers/budget_handler.py
---------------------------
Handles weekly income, budget and overview commands.
"""

from telegram import Update
from telegram.ext import ContextTypes

from handlers.session import get_session, now
from security.auth import authorized_only
from security.rate_limiter import rate_limited
from services.budget_service import FOOD, MISC, BudgetService
from utils.logger import get_logger
from utils.money import parse_amount

logger = get_logger(__name__)

_CATEGORY_MAP = {
    "an": FOOD, "ăn": FOOD, "anuong": FOOD, "food": FOOD,
    "khac": MISC, "khác": MISC, "misc": MISC,
}


def _parse_category_amount(args: list[str]) -> tuple:
    """['an', '315'] -> ('food', 315000); (None, None) when malformed."""
    if len(args) < 2:
        return None, None
    return _CATEGORY_MAP.get(args[0].lower()), parse_amount(args[1])


@authorized_only
@rate_limited
async def summary_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /summary - weekly planned vs. actual overview."""
    service = BudgetService(get_session(context))
    await update.message.reply_text(service.get_summary(now()), parse_mode="Markdown")


@authorized_only
@rate_limited
async def income_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /income <số tiền> - set this week's income.
    Usage: /income 1500
    """
    amount = parse_amount(context.args[0]) if context.args else None
    if amount is None:
        await update.message.reply_text("⚠️ Dùng: /income <số tiền>\nVí dụ: /income 1500")
        return
    msg = BudgetService(get_session(context)).set_income(amount)
    await update.message.reply_text(msg)


@authorized_only
@rate_limited
async def budget_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /budget <an|khac> <số tiền> - set the planned weekly amount.

    Examples:
        /budget an 315
        /budget khac 100
    """
    category, amount = _parse_category_amount(context.args or [])
    if category is None or amount is None:
        await update.message.reply_text(
            "⚠️ Dùng: /budget <an|khac> <số tiền>\nVí dụ: /budget an 315"
        )
        return
    msg = BudgetService(get_session(context)).set_budget(category, amount)
    await update.message.reply_text(msg)


@authorized_only
@rate_limited
async def actual_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /actual <an|khac> <số tiền> - set what was actually spent.
    Usage: /actual an 280
    """
    category, amount = _parse_category_amount(context.args or [])
    if category is None or amount is None:
        await update.message.reply_text(
            "⚠️ Dùng: /actual <an|khac> <số tiền>\nVí dụ: /actual an 280"
        )
        return
    msg = BudgetService(get_session(context)).set_actual(category, amount)
    await update.message.reply_text(msg)
