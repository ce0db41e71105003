"""
handlers/wallet_handler.py
---------------------------
MoMo wallet link, sync and import commands.
"""

from telegram import Update
from telegram.ext import ContextTypes

from handlers.session import get_session, now
from security.auth import authorized_only
from security.rate_limiter import rate_limited
from services.errors import WalletNotConnectedError
from services.wallet_service import DemoWalletSource, WalletService, WalletSource
from utils.logger import get_logger
from utils.money import format_vnd

logger = get_logger(__name__)

WALLET_SOURCE_KEY = "wallet_source"


def _service(context: ContextTypes.DEFAULT_TYPE) -> WalletService:
    """The wallet provider comes from bot_data so it can be swapped at startup."""
    source: WalletSource = context.bot_data.get(WALLET_SOURCE_KEY) or DemoWalletSource()
    return WalletService(get_session(context), source)


@authorized_only
@rate_limited
async def momo_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /momo - link or unlink the wallet."""
    await update.message.reply_text(_service(context).toggle_connection())


@authorized_only
@rate_limited
async def momo_sync_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /momo_sync - fetch recent wallet transactions for review."""
    service = _service(context)
    await update.message.reply_text("🔄 Đang đồng bộ...")
    try:
        await service.sync(now())
    except WalletNotConnectedError:
        await update.message.reply_text("⚠️ Vui lòng liên kết ví MoMo trước! (/momo)")
        return
    await update.message.reply_text(service.format_pending(), parse_mode="Markdown")


@authorized_only
@rate_limited
async def momo_pick_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /momo_pick <số> - select or deselect a fetched transaction."""
    service = _service(context)
    try:
        index = int(context.args[0]) if context.args else 0
    except ValueError:
        index = 0
    if not service.toggle_selection(index):
        await update.message.reply_text("⚠️ Không có giao dịch số này. Dùng /momo_sync trước.")
        return
    await update.message.reply_text(service.format_pending(), parse_mode="Markdown")


@authorized_only
@rate_limited
async def momo_import_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /momo_import - add the selected transactions to actual spending."""
    service = _service(context)
    if not get_session(context).pending_wallet:
        await update.message.reply_text("📭 Không có giao dịch nào chờ nhập.")
        return
    totals = service.import_selected()
    await update.message.reply_text(
        f"📥 Đã nhập giao dịch MoMo:\n"
        f"  🍜 Ăn uống: +{format_vnd(totals['food'])}\n"
        f"  🧾 Chi khác: +{format_vnd(totals['misc'])}"
    )
