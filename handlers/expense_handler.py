"""
handlers/expense_handler.py
----------------------------
Handles the miscellaneous spending log.
Delegates all logic to ExpenseService.
"""

from telegram import Update
from telegram.ext import ContextTypes

from handlers.session import get_session, now, parse_date, split_fields
from security.auth import authorized_only
from security.rate_limiter import rate_limited
from services.expense_service import ExpenseService
from utils.logger import get_logger
from utils.money import parse_amount

logger = get_logger(__name__)


@authorized_only
@rate_limited
async def misc_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /misc [all] - list misc expenses inside the active filter,
    or every one of them with 'all'.
    """
    use_filter = not (context.args and context.args[0].lower() in ("all", "tatca"))
    service = ExpenseService(get_session(context))
    await update.message.reply_text(service.get_logs_summary(use_filter), parse_mode="Markdown")


@authorized_only
@rate_limited
async def misc_add_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /misc_add tên | số tiền [| ngày].

    Examples:
        /misc_add Cắt tóc | 50
        /misc_add Quà sinh nhật | 200 | 2026-10-12
    """
    parts = split_fields(" ".join(context.args or []))
    if len(parts) < 2:
        await update.message.reply_text(
            "⚠️ Dùng: /misc_add <tên> | <số tiền> [| ngày]\nVí dụ: /misc_add Cắt tóc | 50"
        )
        return

    when = now()
    if len(parts) > 2 and parts[2]:
        when = parse_date(parts[2])
        if when is None:
            await update.message.reply_text("⚠️ Ngày không hợp lệ. Ví dụ: 2026-10-12")
            return

    msg = ExpenseService(get_session(context)).add_from_input(parts[0], parse_amount(parts[1]), when)
    await update.message.reply_text(msg)


@authorized_only
@rate_limited
async def misc_delete_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /misc_delete <mã> - remove a misc expense."""
    if not context.args:
        await update.message.reply_text("⚠️ Dùng: /misc_delete <mã>")
        return
    msg = ExpenseService(get_session(context)).delete_log(context.args[0].lstrip("#"))
    await update.message.reply_text(msg)
