"""
security/rate_limiter.py
-------------------------
Per-user sliding-window rate limiting for bot commands.
"""

import time
from collections import defaultdict
from functools import wraps
from typing import Callable

from telegram import Update
from telegram.ext import ContextTypes

from config import RATE_LIMIT_MESSAGES, RATE_LIMIT_WINDOW_SECONDS
from utils.logger import get_logger

logger = get_logger(__name__)


class SlidingWindowLimiter:
    """
    Allows at most `limit` hits per user within the last `window` seconds.

    Args:
        limit: Max hits per window.
        window: Window length in seconds.
        clock: Returns the current time in seconds (injectable for tests).
    """

    def __init__(self, limit: int, window: float, clock: Callable[[], float] = time.monotonic):
        self.limit = limit
        self.window = window
        self.clock = clock
        self._hits: dict[int, list[float]] = defaultdict(list)

    def allow(self, user_id: int) -> bool:
        """Record a hit and report whether it is within the limit."""
        now = self.clock()
        cutoff = now - self.window
        hits = [t for t in self._hits[user_id] if t > cutoff]
        if len(hits) >= self.limit:
            self._hits[user_id] = hits
            return False
        hits.append(now)
        self._hits[user_id] = hits
        return True

    def reset(self) -> None:
        self._hits.clear()


limiter = SlidingWindowLimiter(RATE_LIMIT_MESSAGES, RATE_LIMIT_WINDOW_SECONDS)


def rate_limited(func: Callable):
    """
    Decorator that enforces the module-level limiter per user.

    Configuration (via .env):
        RATE_LIMIT_MESSAGES: Max messages per window (default: 30).
        RATE_LIMIT_WINDOW_SECONDS: Window duration in seconds (default: 60).
    """
    @wraps(func)
    async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE, *args, **kwargs):
        user = update.effective_user
        if not user:
            return

        if not limiter.allow(user.id):
            logger.warning(f"Rate limit hit for user {user.id}")
            await update.message.reply_text(
                "⚠️ Bạn gửi quá nhiều tin nhắn. Vui lòng chờ một chút rồi thử lại."
            )
            return

        return await func(update, context, *args, **kwargs)

    return wrapper
