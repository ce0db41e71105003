"""
handlers/filter_handler.py
---------------------------
Chooses the date filter applied to fuel and misc logs.
"""

from datetime import MAXYEAR, MINYEAR
from typing import Optional

from telegram import Update
from telegram.ext import ContextTypes

from handlers.session import get_session, now
from models.filter import FILTER_ALL, FILTER_MONTH, FILTER_WEEK, FILTER_YEAR, FilterState
from security.auth import authorized_only
from security.rate_limiter import rate_limited
from utils.dates import describe_filter, format_date, weeks_in_year
from utils.logger import get_logger

logger = get_logger(__name__)

_MAX_WEEK = 53

_TYPE_MAP = {
    "all": FILTER_ALL, "tatca": FILTER_ALL,
    "year": FILTER_YEAR, "nam": FILTER_YEAR,
    "month": FILTER_MONTH, "thang": FILTER_MONTH,
    "week": FILTER_WEEK, "tuan": FILTER_WEEK,
}

_USAGE = (
    "🔎 *Bộ lọc dữ liệu*\n\n"
    "• `/filter week <số tuần> [năm]`\n"
    "• `/filter month <tháng> [năm]`\n"
    "• `/filter year <năm>`\n"
    "• `/filter all`"
)


def parse_filter(args: list[str], current_year: int) -> Optional[FilterState]:
    """Build a FilterState from command arguments; None when malformed."""
    if not args:
        return None
    kind = _TYPE_MAP.get(args[0].lower())
    try:
        numbers = [int(a) for a in args[1:]]
    except ValueError:
        return None

    try:
        if kind == FILTER_ALL:
            return FilterState(type=FILTER_ALL, year=current_year)
        if kind == FILTER_YEAR:
            return FilterState(type=FILTER_YEAR, year=numbers[0] if numbers else current_year)
        if kind in (FILTER_MONTH, FILTER_WEEK) and numbers:
            year = numbers[1] if len(numbers) > 1 else current_year
            if kind == FILTER_MONTH:
                return FilterState(type=FILTER_MONTH, year=year, month=numbers[0])
            if not 1 <= numbers[0] <= _MAX_WEEK:
                return None
            return FilterState(type=FILTER_WEEK, year=year, week=numbers[0])
    except ValueError:
        return None
    return None


@authorized_only
@rate_limited
async def filter_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /filter - show or change the active log filter."""
    session = get_session(context)
    if not context.args:
        await update.message.reply_text(
            f"🔎 Đang lọc: {describe_filter(session.filter)}\n\n{_USAGE}", parse_mode="Markdown"
        )
        return

    flt = parse_filter(context.args, now().year)
    if flt is None:
        await update.message.reply_text(_USAGE, parse_mode="Markdown")
        return

    label = describe_filter(flt)
    session.filter = flt
    logger.info(f"Filter set to {flt}")
    await update.message.reply_text(f"✅ Đang lọc: {label}")


@authorized_only
@rate_limited
async def weeks_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /weeks [năm] - list the weeks of a year with their dates."""
    try:
        year = int(context.args[0]) if context.args else now().year
    except ValueError:
        year = None
    if year is None or not MINYEAR <= year <= MAXYEAR:
        await update.message.reply_text("⚠️ Năm không hợp lệ. Ví dụ: /weeks 2026")
        return

    lines = [f"📆 Các tuần năm {year}:\n"]
    for span in weeks_in_year(year):
        lines.append(f"Tuần {span.week}: {format_date(span.start)} - {format_date(span.end)}")
    await update.message.reply_text("\n".join(lines))
