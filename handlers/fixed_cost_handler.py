"""
handlers/fixed_cost_handler.py
-------------------------------
Fuel and internet tick commands.
"""

from telegram import Update
from telegram.ext import ContextTypes

from handlers.session import get_session, now
from security.auth import authorized_only
from security.rate_limiter import rate_limited
from services.fixed_cost_service import FixedCostService


@authorized_only
@rate_limited
async def gas_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /gas - tick (or untick) today's fuel refill."""
    msg = FixedCostService(get_session(context)).toggle_gas(now())
    await update.message.reply_text(msg)


@authorized_only
@rate_limited
async def wifi_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /wifi - tick (or untick) this week's internet payment."""
    msg = FixedCostService(get_session(context)).toggle_wifi(now())
    await update.message.reply_text(msg)


@authorized_only
@rate_limited
async def fixed_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /fixed - fuel history for the active filter and internet state."""
    msg = FixedCostService(get_session(context)).get_status(now())
    await update.message.reply_text(msg, parse_mode="Markdown")
