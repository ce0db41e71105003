"""
handlers/start_handler.py
--------------------------
Handles /start, /help and /myid.
Opens the chat's budget session and shows available commands.
"""

from telegram import Update
from telegram.ext import ContextTypes

from handlers.session import get_session
from security.auth import authorized_only
from security.rate_limiter import rate_limited
from utils.logger import get_logger

logger = get_logger(__name__)

HELP_TEXT = """
🐂 *Sổ tay tài chính tuần*

💡 Số tiền nhập theo *nghìn đồng*: 315 = 315.000đ

*📊 Tổng quan:*
/summary - Thu nhập, chi tiêu, dư/thiếu
/income - Đặt thu nhập tuần
/budget - Ngân sách ăn uống / chi khác
/actual - Chi thực tế ăn uống / chi khác

*💳 Nợ:*
/debts - Nợ cần trả trong tháng
/add\\_debt - Thêm khoản nợ
/add\\_recurring - Thêm nợ định kỳ (tuần/tháng)
/spaylater - Thêm hóa đơn Shopee SPayLater
/pay - Góp tiền trả nợ
/withdraw - Rút bớt tiền đã góp
/edit\\_debt - Sửa khoản nợ
/delete\\_debt - Xóa khoản nợ
/history - Lịch sử giao dịch của khoản nợ
/completed - Các khoản đã trả xong

*⛽ Cố định:*
/gas - Đánh dấu đổ xăng hôm nay
/wifi - Đánh dấu đóng tiền wifi
/fixed - Lịch sử đổ xăng và wifi

*🧾 Chi khác:*
/misc - Danh sách chi khác
/misc\\_add - Thêm khoản chi
/misc\\_delete - Xóa khoản chi

*🔎 Bộ lọc:*
/filter - Lọc theo tuần / tháng / năm
/weeks - Danh sách các tuần trong năm

*💜 MoMo:*
/momo - Liên kết ví
/momo\\_sync - Đồng bộ giao dịch
/momo\\_pick - Chọn/bỏ chọn giao dịch
/momo\\_import - Nhập giao dịch đã chọn

/myid - Xem Telegram ID của bạn
"""


@authorized_only
@rate_limited
async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /start command - open the session and greet the user."""
    user = update.effective_user
    get_session(context)
    logger.info(f"User {user.id} ({user.first_name}) opened a budget session.")

    await update.message.reply_text(
        f"Chào mừng trở lại, {user.first_name}! 👋\n"
        f"Mình giúp bạn theo dõi thu nhập, chi tiêu và các khoản nợ mỗi tuần.\n\n"
        f"Gõ /help để xem tất cả lệnh."
    )


@authorized_only
@rate_limited
async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /help command - show all available commands."""
    await update.message.reply_text(HELP_TEXT, parse_mode="Markdown")


@authorized_only
async def myid_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /myid command - show user's Telegram ID for whitelisting."""
    user = update.effective_user
    await update.message.reply_text(
        f"🆔 Telegram ID của bạn: `{user.id}`\n"
        f"Thêm ID này vào `ALLOWED_USER_IDS` trong file `.env` để khóa bot.",
        parse_mode="Markdown",
    )
