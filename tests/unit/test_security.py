"""Tests for the auth and rate limiting decorators."""

from unittest.mock import AsyncMock

import pytest

import security.auth as auth
from security.auth import authorized_only, is_allowed
from security.rate_limiter import SlidingWindowLimiter, rate_limited


class FakeClock:
    def __init__(self):
        self.t = 1000.0

    def __call__(self):
        return self.t


class TestSlidingWindowLimiter:
    def test_blocks_after_limit(self):
        limiter = SlidingWindowLimiter(limit=2, window=60, clock=FakeClock())
        assert limiter.allow(1)
        assert limiter.allow(1)
        assert not limiter.allow(1)

    def test_users_are_independent(self):
        limiter = SlidingWindowLimiter(limit=1, window=60, clock=FakeClock())
        assert limiter.allow(1)
        assert limiter.allow(2)

    def test_window_slides(self):
        clock = FakeClock()
        limiter = SlidingWindowLimiter(limit=1, window=60, clock=clock)
        assert limiter.allow(1)
        clock.t += 30
        assert not limiter.allow(1)
        clock.t += 31
        assert limiter.allow(1)

    def test_reset(self):
        limiter = SlidingWindowLimiter(limit=1, window=60, clock=FakeClock())
        limiter.allow(1)
        limiter.reset()
        assert limiter.allow(1)


def test_is_allowed():
    assert is_allowed(5, [])
    assert is_allowed(5, [5, 6])
    assert not is_allowed(7, [5, 6])


@pytest.mark.asyncio
async def test_authorized_only_refuses_strangers(mock_update, mock_context, monkeypatch):
    monkeypatch.setattr(auth, "ALLOWED_USER_IDS", [42])
    inner = AsyncMock()

    await authorized_only(inner)(mock_update, mock_context)

    inner.assert_not_called()
    assert "⛔" in mock_update.message.reply_text.call_args[0][0]


@pytest.mark.asyncio
async def test_authorized_only_lets_owner_through(mock_update, mock_context, monkeypatch):
    monkeypatch.setattr(auth, "ALLOWED_USER_IDS", [mock_update.effective_user.id])
    inner = AsyncMock()

    await authorized_only(inner)(mock_update, mock_context)

    inner.assert_awaited_once_with(mock_update, mock_context)


@pytest.mark.asyncio
async def test_rate_limited_replies_when_exceeded(mock_update, mock_context, monkeypatch):
    import security.rate_limiter as rl

    monkeypatch.setattr(rl, "limiter", SlidingWindowLimiter(limit=1, window=60, clock=FakeClock()))
    inner = AsyncMock()
    handler = rate_limited(inner)

    await handler(mock_update, mock_context)
    await handler(mock_update, mock_context)

    assert inner.await_count == 1
    assert "quá nhiều" in mock_update.message.reply_text.call_args[0][0]
