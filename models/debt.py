"""
models/debt.py
--------------
Domain model for debts and their payment ledger.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import NamedTuple, Optional

PAYMENT = "payment"
WITHDRAWAL = "withdrawal"


@dataclass(frozen=True)
class DebtTransaction:
    """
    One ledger entry. Entries are never edited once appended.

    Attributes:
        id: Opaque identifier.
        date: When the entry was applied.
        amount: Always positive; `type` carries the sign.
        type: Either 'payment' or 'withdrawal'.
        reason: Why money was taken back (withdrawals only).
    """
    id: str
    date: datetime
    amount: int
    type: str  # 'payment' | 'withdrawal'
    reason: Optional[str] = None

    @property
    def signed_amount(self) -> int:
        return self.amount if self.type == PAYMENT else -self.amount


@dataclass
class Debt:
    """
    A debt being paid off in installments.

    Attributes:
        id: Opaque identifier, fixed at creation.
        name: Label shown to the user.
        source: Who is owed (bank, app, person).
        total_amount: Amount owed.
        due_date: When the debt must be fully paid.
        created_at: Creation timestamp.
        amount_paid: Running net total of the ledger. May exceed
            `total_amount` (overpayment or a later edit).
        target_month: Optional budget month (1-12) overriding the due date's.
        target_year: Optional budget year, paired with `target_month`.
        transactions: Ledger entries in the order they were applied.
    """
    id: str
    name: str
    source: str
    total_amount: int
    due_date: datetime
    created_at: datetime
    amount_paid: int = 0
    target_month: Optional[int] = None
    target_year: Optional[int] = None
    transactions: list[DebtTransaction] = field(default_factory=list)

    @property
    def remaining(self) -> int:
        return self.total_amount - self.amount_paid

    @property
    def is_completed(self) -> bool:
        return self.amount_paid >= self.total_amount

    def __str__(self) -> str:
        return f"{self.name} ({self.source}): {self.amount_paid}/{self.total_amount} - due {self.due_date:%Y-%m-%d}"


class BudgetBucket(NamedTuple):
    """The (month, year) a debt's balance is budgeted in."""
    month: int
    year: int


def resolve_bucket(debt: Debt) -> BudgetBucket:
    """The target bucket when one is set, else the due date's month."""
    if debt.target_month is not None and debt.target_year is not None:
        return BudgetBucket(debt.target_month, debt.target_year)
    return BudgetBucket(debt.due_date.month, debt.due_date.year)
