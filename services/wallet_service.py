"""
services/wallet_service.py
---------------------------
E-wallet (MoMo) sync: fetch recent transactions, let the user pick which
to keep, then fold them into the week's actual food/misc spending.

The provider is an injected `WalletSource`; this module never talks to a
network itself.
"""

import asyncio
from datetime import datetime
from typing import Protocol

from telegram.helpers import escape_markdown

from config import WALLET_SYNC_DELAY_SECONDS
from models.logs import ExpenseLog
from models.session import BudgetSession
from models.wallet import CATEGORY_FOOD, CATEGORY_MISC, WalletTransaction
from repositories.expense_repo import ExpenseRepository
from services.errors import WalletNotConnectedError
from utils.logger import get_logger
from utils.money import format_vnd

logger = get_logger(__name__)


class WalletSource(Protocol):
    """Anything that can list recent wallet transactions."""

    async def fetch_transactions(self, now: datetime) -> list[WalletTransaction]:
        ...


class DemoWalletSource:
    """
    Stand-in provider: after a short delay it returns a fixed set of
    transactions dated `now`.
    """

    def __init__(self, delay: float = WALLET_SYNC_DELAY_SECONDS):
        self.delay = delay

    async def fetch_transactions(self, now: datetime) -> list[WalletTransaction]:
        await asyncio.sleep(self.delay)
        stamp = int(now.timestamp() * 1000)
        return [
            WalletTransaction(f"m1-{stamp}", "Highlands Coffee", 59000, now, CATEGORY_FOOD),
            WalletTransaction(f"m2-{stamp}", "Circle K", 23000, now, CATEGORY_FOOD),
            WalletTransaction(f"m3-{stamp}", "GrabBike", 35000, now, CATEGORY_MISC),
            WalletTransaction(f"m4-{stamp}", "Thanh toán Shopee", 150000, now, CATEGORY_MISC, is_selected=False),
        ]


def selected_totals(candidates: list[WalletTransaction]) -> dict[str, int]:
    """Sum of the selected candidates per category."""
    totals = {CATEGORY_FOOD: 0, CATEGORY_MISC: 0}
    for t in candidates:
        if t.is_selected and t.category in totals:
            totals[t.category] += t.amount
    return totals


class WalletService:
    """Wallet link state and the import flow of one session."""

    def __init__(self, session: BudgetSession, source: WalletSource):
        self.session = session
        self.source = source
        self.expense_repo = ExpenseRepository(session)

    def toggle_connection(self) -> str:
        self.session.wallet_connected = not self.session.wallet_connected
        if self.session.wallet_connected:
            logger.info("Wallet linked")
            return "✅ Đã liên kết thành công với ví MoMo!"
        self.session.pending_wallet = []
        logger.info("Wallet unlinked")
        return "🔌 Đã hủy liên kết ví MoMo."

    async def sync(self, now: datetime) -> list[WalletTransaction]:
        """
        Fetch candidates and keep them pending until imported.

        Raises:
            WalletNotConnectedError: If the wallet is not linked.
        """
        if not self.session.wallet_connected:
            raise WalletNotConnectedError("Wallet is not linked")
        candidates = await self.source.fetch_transactions(now)
        self.session.pending_wallet = candidates
        logger.info(f"Fetched {len(candidates)} wallet transaction(s)")
        return candidates

    def toggle_selection(self, index: int) -> bool:
        """
        Flip the selection of the pending candidate at a 1-based position.

        Returns:
            False if there is no such candidate.
        """
        pending = self.session.pending_wallet
        if not 1 <= index <= len(pending):
            return False
        pending[index - 1].is_selected = not pending[index - 1].is_selected
        return True

    def import_selected(self) -> dict[str, int]:
        """
        Add the selected candidates to the actual totals. Misc candidates
        also become misc log lines. Pending candidates are cleared.

        Returns:
            The imported total per category.
        """
        candidates = self.session.pending_wallet
        totals = selected_totals(candidates)
        budget = self.session.budget
        budget.actual_food += totals[CATEGORY_FOOD]
        budget.actual_misc += totals[CATEGORY_MISC]

        self.expense_repo.add_many([
            ExpenseLog(id=t.id, name=t.description, amount=t.amount, date=t.date)
            for t in candidates
            if t.is_selected and t.category == CATEGORY_MISC
        ])
        self.session.pending_wallet = []
        logger.info(f"Imported wallet totals: {totals}")
        return totals

    def format_pending(self) -> str:
        pending = self.session.pending_wallet
        if not pending:
            return "📭 Không có giao dịch nào chờ nhập."
        labels = {CATEGORY_FOOD: "Ăn uống", CATEGORY_MISC: "Khác"}
        lines = ["💳 *Giao dịch MoMo tìm thấy:*\n"]
        for i, t in enumerate(pending, start=1):
            mark = "☑️" if t.is_selected else "⬜"
            lines.append(
                f"  {i}. {mark} {escape_markdown(t.description)} - {format_vnd(t.amount)} "
                f"({labels.get(t.category, t.category)})"
            )
        selected = sum(1 for t in pending if t.is_selected)
        lines.append(f"\n/momo\\_pick <số> để chọn/bỏ chọn, /momo\\_import để nhập {selected} mục.")
        return "\n".join(lines)
