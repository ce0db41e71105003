"""
repositories/debt_repo.py
--------------------------
Data access layer for debts.
Debts live in the session's list, in creation order.
"""

from models.debt import Debt
from models.session import BudgetSession
from services.errors import DebtNotFoundError
from utils.logger import get_logger

logger = get_logger(__name__)


class DebtRepository:
    """Repository for CRUD operations on the session's debts."""

    def __init__(self, session: BudgetSession):
        self.session = session

    # ── CREATE ────────────────────────────────────────────

    def add_many(self, debts: list[Debt]) -> list[Debt]:
        """
        Append new debts.

        Args:
            debts: Debts with fresh ids.

        Returns:
            The same debts, for chaining.
        """
        self.session.debts = [*self.session.debts, *debts]
        logger.info(f"Added {len(debts)} debt(s); session now holds {len(self.session.debts)}")
        return debts

    # ── READ ──────────────────────────────────────────────

    def list_all(self) -> list[Debt]:
        """All debts, active and completed, in creation order."""
        return list(self.session.debts)

    def get_by_id(self, debt_id: str) -> Debt:
        """
        Fetch a single debt.

        Raises:
            DebtNotFoundError: If no debt has this id.
        """
        for debt in self.session.debts:
            if debt.id == debt_id:
                return debt
        raise DebtNotFoundError(debt_id)

    # ── UPDATE ────────────────────────────────────────────

    def replace(self, debt: Debt) -> Debt:
        """
        Swap in a new version of an existing debt (same id, same position).

        Raises:
            DebtNotFoundError: If no debt has this id.
        """
        self.get_by_id(debt.id)
        self.session.debts = [debt if d.id == debt.id else d for d in self.session.debts]
        return debt

    # ── DELETE ────────────────────────────────────────────

    def delete(self, debt_id: str) -> Debt:
        """
        Remove a debt and return it.

        Raises:
            DebtNotFoundError: If no debt has this id.
        """
        debt = self.get_by_id(debt_id)
        self.session.debts = [d for d in self.session.debts if d.id != debt_id]
        logger.info(f"Deleted debt '{debt.name}' #{debt_id}")
        return debt
