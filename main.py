"""
main.py
-------
Entry point for the budget-dash Telegram bot.

Responsibilities:
    - Configure and start the Telegram bot with all handlers.
    - Schedule the daily due-debt reminder and the weekly summary.
"""

from datetime import time as dt_time

from telegram import BotCommand
from telegram.ext import Application, CommandHandler, ContextTypes
from telegram.helpers import escape_markdown

from config import REMINDER_HOUR, TELEGRAM_BOT_TOKEN
from handlers.budget_handler import actual_command, budget_command, income_command, summary_command
from handlers.debt_handler import (
    add_debt_command,
    add_recurring_command,
    completed_command,
    debts_command,
    delete_debt_command,
    edit_debt_command,
    history_command,
    pay_command,
    spaylater_command,
    withdraw_command,
)
from handlers.expense_handler import misc_add_command, misc_command, misc_delete_command
from handlers.filter_handler import filter_command, weeks_command
from handlers.fixed_cost_handler import fixed_command, gas_command, wifi_command
from handlers.session import SESSION_KEY, now
from handlers.start_handler import help_command, myid_command, start_command
from handlers.wallet_handler import (
    WALLET_SOURCE_KEY,
    momo_command,
    momo_import_command,
    momo_pick_command,
    momo_sync_command,
)
from services.budget_service import BudgetService
from services.debt_service import DebtService, status_text
from services.wallet_service import DemoWalletSource
from utils.dates import format_date
from utils.logger import get_logger
from utils.money import format_vnd

logger = get_logger(__name__)

COMMANDS = [
    ("start", start_command, "🚀 Bắt đầu"),
    ("help", help_command, "📖 Trợ giúp"),
    ("myid", myid_command, "🆔 Telegram ID"),
    ("summary", summary_command, "📊 Tổng quan tuần"),
    ("income", income_command, "💰 Thu nhập tuần"),
    ("budget", budget_command, "🎯 Ngân sách"),
    ("actual", actual_command, "💸 Chi thực tế"),
    ("debts", debts_command, "💳 Nợ trong tháng"),
    ("add_debt", add_debt_command, "➕ Thêm nợ"),
    ("add_recurring", add_recurring_command, "🔁 Nợ định kỳ"),
    ("spaylater", spaylater_command, "🛍️ Shopee SPayLater"),
    ("pay", pay_command, "✅ Góp tiền"),
    ("withdraw", withdraw_command, "↩️ Rút bớt"),
    ("edit_debt", edit_debt_command, "✏️ Sửa nợ"),
    ("delete_debt", delete_debt_command, "🗑️ Xóa nợ"),
    ("history", history_command, "🕘 Lịch sử nợ"),
    ("completed", completed_command, "🏁 Nợ đã trả xong"),
    ("gas", gas_command, "⛽ Đổ xăng"),
    ("wifi", wifi_command, "📶 Đóng wifi"),
    ("fixed", fixed_command, "🧾 Chi phí cố định"),
    ("misc", misc_command, "🧾 Chi khác"),
    ("misc_add", misc_add_command, "➕ Thêm chi khác"),
    ("misc_delete", misc_delete_command, "🗑️ Xóa chi khác"),
    ("filter", filter_command, "🔎 Bộ lọc"),
    ("weeks", weeks_command, "📆 Các tuần"),
    ("momo", momo_command, "💜 Liên kết MoMo"),
    ("momo_sync", momo_sync_command, "🔄 Đồng bộ MoMo"),
    ("momo_pick", momo_pick_command, "☑️ Chọn giao dịch"),
    ("momo_import", momo_import_command, "📥 Nhập giao dịch"),
]


def _sessions(context: ContextTypes.DEFAULT_TYPE):
    """(user_id, session) for every chat that has opened a session."""
    for user_id, data in context.application.user_data.items():
        session = data.get(SESSION_KEY)
        if session is not None:
            yield user_id, session


async def send_reminders(context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Scheduled job: remind each user of urgent and overdue debts.
    Runs daily at REMINDER_HOUR.
    """
    moment = now()
    for user_id, session in _sessions(context):
        due = DebtService(session).get_due_reminders(moment)
        if not due:
            continue
        lines = ["⏰ *Nhắc nợ sắp đến hạn!*\n"]
        for debt, status in due:
            lines.append(
                f"📌 {escape_markdown(debt.name)}: {format_vnd(status.remaining)} - "
                f"hạn {format_date(debt.due_date)} ({status_text(status)})"
            )
        try:
            await context.bot.send_message(chat_id=user_id, text="\n".join(lines), parse_mode="Markdown")
            logger.info(f"Sent {len(due)} debt reminder(s) to user {user_id}")
        except Exception as e:
            logger.error(f"Failed to send reminders to {user_id}: {e}")


async def send_weekly_report(context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Scheduled job: send the weekly overview to every user.
    Runs every Sunday at 20:00.
    """
    moment = now()
    for user_id, session in _sessions(context):
        try:
            summary = BudgetService(session).get_summary(moment)
            await context.bot.send_message(
                chat_id=user_id,
                text=f"📬 *Báo cáo tuần*\n\n{summary}",
                parse_mode="Markdown",
            )
            logger.info(f"Sent weekly report to user {user_id}")
        except Exception as e:
            logger.error(f"Failed to send weekly report to {user_id}: {e}")


async def set_bot_commands(application: Application) -> None:
    """Register bot commands menu in Telegram on startup."""
    await application.bot.set_my_commands([BotCommand(name, desc) for name, _, desc in COMMANDS])
    logger.info("Bot commands menu registered successfully.")


def main() -> None:
    """Initialize and run the bot."""

    # ── 1. Build the Telegram application ─────────────────
    logger.info("Starting Telegram bot...")
    app = Application.builder().token(TELEGRAM_BOT_TOKEN).post_init(set_bot_commands).build()
    app.bot_data[WALLET_SOURCE_KEY] = DemoWalletSource()

    # ── 2. Register command handlers ──────────────────────
    for name, callback, _ in COMMANDS:
        app.add_handler(CommandHandler(name, callback))

    # ── 3. Schedule jobs ──────────────────────────────────
    job_queue = app.job_queue
    if job_queue:
        job_queue.run_daily(
            send_reminders,
            time=dt_time(hour=REMINDER_HOUR, minute=0),
            name="debt_reminders",
        )
        job_queue.run_daily(
            send_weekly_report,
            time=dt_time(hour=20, minute=0),
            days=(0,),  # Sunday
            name="weekly_report",
        )
        logger.info(f"Scheduled debt reminders ({REMINDER_HOUR:02d}:00) + weekly report (Sunday 20:00)")

    # ── 4. Start polling ──────────────────────────────────
    logger.info("budget-dash is running! Press Ctrl+C to stop.")
    app.run_polling(drop_pending_updates=True, allowed_updates=["message"])
    logger.info("budget-dash stopped.")


if __name__ == "__main__":
    main()
