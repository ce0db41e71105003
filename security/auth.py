"""
security/auth.py
-----------------
Access control for the bot. The dashboard is personal: only the
whitelisted owner(s) may read or change the budget.
"""

from functools import wraps
from typing import Callable

from telegram import Update
from telegram.ext import ContextTypes

from config import ALLOWED_USER_IDS
from utils.logger import get_logger

logger = get_logger(__name__)


def is_allowed(user_id: int, allowed: list[int]) -> bool:
    """An empty whitelist means dev mode: everyone is allowed."""
    return not allowed or user_id in allowed


def authorized_only(func: Callable):
    """
    Decorator that restricts a handler to whitelisted users only.

    Usage:
        @authorized_only
        async def my_handler(update, context):
            ...

    Behavior:
        - If ALLOWED_USER_IDS is empty, ALL users are allowed (dev mode).
        - Otherwise other users get a refusal and the attempt is logged.
    """
    @wraps(func)
    async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE, *args, **kwargs):
        user = update.effective_user
        if not user:
            return

        if not is_allowed(user.id, ALLOWED_USER_IDS):
            logger.warning(
                f"Unauthorized access attempt: user_id={user.id}, username={user.username}"
            )
            await update.message.reply_text(
                "⛔ Xin lỗi, đây là bot quản lý tài chính cá nhân, không dành cho người khác."
            )
            return

        return await func(update, context, *args, **kwargs)

    return wrapper
