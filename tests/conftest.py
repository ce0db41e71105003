"""Shared fixtures: a fixed clock, a fresh session and Telegram mocks."""

from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from telegram import Message, Update
from telegram import User as TgUser
from telegram.ext import ContextTypes

from models.debt import Debt
from models.session import BudgetSession
from security.rate_limiter import limiter


@pytest.fixture
def now():
    """Wednesday 2024-03-13 10:00, ISO week 11."""
    return datetime(2024, 3, 13, 10, 0)


@pytest.fixture
def session(now):
    return BudgetSession.start(now, food_budget=315000, misc_budget=100000)


@pytest.fixture
def make_debt(now):
    """Factory for debts with sensible defaults."""
    counter = iter(range(1, 10_000))

    def _make(**overrides):
        fields = dict(
            id=f"d{next(counter)}",
            name="Vay bạn",
            source="Lan",
            total_amount=700_000,
            due_date=datetime(2024, 4, 30),
            created_at=now,
        )
        fields.update(overrides)
        return Debt(**fields)

    return _make


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    limiter.reset()
    yield
    limiter.reset()


@pytest.fixture
def mock_update():
    """Create mock Update with message and user."""
    update = AsyncMock(spec=Update)
    update.effective_user = MagicMock(spec=TgUser)
    update.effective_user.id = 123456789
    update.effective_user.first_name = "Anh"
    update.effective_user.username = "anh"
    update.message = AsyncMock(spec=Message)
    update.message.reply_text = AsyncMock()
    return update


@pytest.fixture
def mock_context(session):
    """Create mock context carrying the test session."""
    context = AsyncMock(spec=ContextTypes.DEFAULT_TYPE)
    context.user_data = {"budget_session": session}
    context.bot_data = {}
    context.args = []
    return context
