"""
handlers/debt_handler.py
-------------------------
Handles debt commands: listing, creation (single, recurring, SPayLater),
payments, withdrawals, edits and deletion.
Delegates all logic to DebtService.
"""

import re

from telegram import Update
from telegram.ext import ContextTypes

from handlers.session import get_session, now, parse_bucket, parse_date, split_fields
from security.auth import authorized_only
from security.rate_limiter import rate_limited
from services.debt_service import DebtService
from services.recurring_service import MONTHLY, WEEKLY
from utils.logger import get_logger
from utils.money import parse_amount

logger = get_logger(__name__)

# Cadence words accepted in /add_recurring
_FREQ_MAP = {
    "tuần": WEEKLY, "tuan": WEEKLY, "hàng tuần": WEEKLY, "weekly": WEEKLY,
    "tháng": MONTHLY, "thang": MONTHLY, "hàng tháng": MONTHLY, "monthly": MONTHLY,
}

_EDIT_KEYS = "ten|nguon|tien|han|thang"
_EDIT_FIELD = re.compile(rf"({_EDIT_KEYS}):\s*(.+?)(?=\s+(?:{_EDIT_KEYS}):|$)")


def _service(context: ContextTypes.DEFAULT_TYPE) -> DebtService:
    return DebtService(get_session(context))


@authorized_only
@rate_limited
async def debts_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /debts [MM/YYYY] - show the active debts of a budget month.
    Without an argument the last selected month is shown.
    """
    service = _service(context)
    if context.args:
        bucket = parse_bucket(context.args[0], now().year)
        if not bucket:
            await update.message.reply_text("⚠️ Tháng không hợp lệ. Ví dụ: /debts 3/2026")
            return
        service.set_bucket(bucket.month, bucket.year)
    await update.message.reply_text(service.list_for_bucket(now()), parse_mode="Markdown")


@authorized_only
@rate_limited
async def add_debt_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /add_debt - add a single debt.

    Format:
        /add_debt tên | nguồn | số tiền | hạn
        /add_debt tên | nguồn | số tiền | hạn | tháng ngân sách

    Examples:
        /add_debt Vay bạn | Lan | 500 | 2026-11-30
        /add_debt Học phí | Trường | 2000 | 2026-12-05 | 11/2026
    """
    parts = split_fields(" ".join(context.args or []))
    if len(parts) < 4:
        await update.message.reply_text(
            "📝 *Thêm khoản nợ*\n\n"
            "`/add_debt tên | nguồn | số tiền | hạn [| tháng ngân sách]`\n\n"
            "• `/add_debt Vay bạn | Lan | 500 | 2026-11-30`\n"
            "• `/add_debt Học phí | Trường | 2000 | 2026-12-05 | 11/2026`\n\n"
            "💡 Số tiền tính theo nghìn đồng (500 = 500.000đ).",
            parse_mode="Markdown",
        )
        return

    name, source = parts[0], parts[1]
    amount = parse_amount(parts[2])
    due_date = parse_date(parts[3])
    bucket = parse_bucket(parts[4], now().year) if len(parts) > 4 and parts[4] else None

    if not name or amount is None or due_date is None:
        await update.message.reply_text("⚠️ Thiếu tên, số tiền hoặc ngày hạn không hợp lệ.")
        return
    if len(parts) > 4 and parts[4] and bucket is None:
        await update.message.reply_text("⚠️ Tháng ngân sách phải có dạng MM/YYYY.")
        return

    msg = _service(context).add_single(name, source, amount, due_date, now(), bucket)
    await update.message.reply_text(msg)


@authorized_only
@rate_limited
async def add_recurring_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /add_recurring - create one debt per installment.

    Format:
        /add_recurring tên | nguồn | tiền mỗi kỳ | ngày bắt đầu | ngày kết thúc | tuần/tháng

    Example:
        /add_recurring Trả góp điện thoại | FE Credit | 850 | 2026-01-15 | 2026-06-15 | tháng
    """
    parts = split_fields(" ".join(context.args or []))
    if len(parts) < 6:
        await update.message.reply_text(
            "🔁 *Nợ định kỳ*\n\n"
            "`/add_recurring tên | nguồn | tiền mỗi kỳ | bắt đầu | kết thúc | tuần/tháng`\n\n"
            "• `/add_recurring Trả góp | FE Credit | 850 | 2026-01-15 | 2026-06-15 | tháng`",
            parse_mode="Markdown",
        )
        return

    name, source = parts[0], parts[1]
    amount = parse_amount(parts[2])
    start = parse_date(parts[3])
    end = parse_date(parts[4])
    cadence = _FREQ_MAP.get(parts[5].lower())

    if not start or not end:
        await update.message.reply_text("⚠️ Vui lòng chọn ngày bắt đầu và ngày kết thúc!")
        return
    if not name or amount is None or cadence is None:
        await update.message.reply_text("⚠️ Thiếu tên, số tiền hoặc chu kỳ (tuần/tháng) không hợp lệ.")
        return

    msg = _service(context).add_recurring(name, source, amount, start, end, cadence, now())
    await update.message.reply_text(msg)


@authorized_only
@rate_limited
async def spaylater_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /spaylater <số tiền> <tháng hóa đơn MM/YYYY>.
    The bill is due on the 10th of the next month.
    """
    args = context.args or []
    if len(args) < 2:
        await update.message.reply_text(
            "🛍️ Dùng: /spaylater <số tiền> <tháng hóa đơn>\nVí dụ: /spaylater 1200 12/2026"
        )
        return

    amount = parse_amount(args[0])
    bucket = parse_bucket(args[1], now().year)
    if amount is None or bucket is None:
        await update.message.reply_text("⚠️ Số tiền hoặc tháng hóa đơn không hợp lệ.")
        return

    msg = _service(context).add_spaylater(amount, bucket.month, bucket.year, now())
    await update.message.reply_text(msg)


@authorized_only
@rate_limited
async def pay_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /pay <mã> <số tiền> - add a payment towards a debt."""
    args = context.args or []
    amount = parse_amount(args[1]) if len(args) >= 2 else None
    if amount is None:
        await update.message.reply_text("⚠️ Dùng: /pay <mã nợ> <số tiền>\nVí dụ: /pay a1b2c3d4 200")
        return

    msg = _service(context).pay(args[0].lstrip("#"), amount, now())
    await update.message.reply_text(msg)


@authorized_only
@rate_limited
async def withdraw_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /withdraw <mã> <số tiền> <lý do> - take money back out of a debt.
    The reason is mandatory.
    """
    args = context.args or []
    amount = parse_amount(args[1]) if len(args) >= 2 else None
    if amount is None:
        await update.message.reply_text(
            "⚠️ Dùng: /withdraw <mã nợ> <số tiền> <lý do>\n"
            "Ví dụ: /withdraw a1b2c3d4 100 Cần tiền mua thuốc"
        )
        return

    reason = " ".join(args[2:])
    msg = _service(context).withdraw(args[0].lstrip("#"), amount, reason, now())
    await update.message.reply_text(msg)


@authorized_only
@rate_limited
async def edit_debt_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /edit_debt <mã> [ten:..] [nguon:..] [tien:..] [han:..] [thang:..].
    With only the id, shows the current values.
    """
    args = context.args or []
    if not args:
        await update.message.reply_text(
            "✏️ Dùng: /edit_debt <mã nợ> ten:<tên> nguon:<nguồn> tien:<số tiền> han:<ngày> thang:<MM/YYYY>"
        )
        return

    service = _service(context)
    debt_id = args[0].lstrip("#")
    text = " ".join(args[1:])
    if not text:
        await update.message.reply_text(service.describe_for_edit(debt_id), parse_mode="Markdown")
        return

    fields = {key: value.strip() for key, value in _EDIT_FIELD.findall(text)}
    amount = parse_amount(fields["tien"]) if "tien" in fields else None
    due_date = parse_date(fields["han"]) if "han" in fields else None
    bucket = parse_bucket(fields["thang"], now().year) if "thang" in fields else None

    if ("tien" in fields and amount is None) or ("han" in fields and due_date is None) \
            or ("thang" in fields and bucket is None):
        await update.message.reply_text("⚠️ Giá trị không hợp lệ (tien, han hoặc thang).")
        return

    msg = service.edit(
        debt_id,
        name=fields.get("ten"),
        source=fields.get("nguon"),
        total_amount=amount,
        due_date=due_date,
        bucket=bucket,
    )
    await update.message.reply_text(msg)


@authorized_only
@rate_limited
async def delete_debt_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /delete_debt <mã> - remove a debt."""
    if not context.args:
        await update.message.reply_text("⚠️ Dùng: /delete_debt <mã nợ>")
        return
    msg = _service(context).delete(context.args[0].lstrip("#"))
    await update.message.reply_text(msg)


@authorized_only
@rate_limited
async def history_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /history <mã> - show a debt's payments and withdrawals."""
    if not context.args:
        await update.message.reply_text("⚠️ Dùng: /history <mã nợ>")
        return
    msg = _service(context).history(context.args[0].lstrip("#"))
    await update.message.reply_text(msg, parse_mode="Markdown")


@authorized_only
@rate_limited
async def completed_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /completed - list debts already paid off."""
    await update.message.reply_text(_service(context).list_completed(), parse_mode="Markdown")
