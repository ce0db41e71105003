"""
services/ledger_service.py
--------------------------
The debt ledger: payments, withdrawals and derived status.

Every function is pure: it returns a new Debt (or new lists) and never
mutates its input. The current time is always passed in as `now`.
"""

import math
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Iterable, Optional

from models.debt import (
    PAYMENT,
    WITHDRAWAL,
    BudgetBucket,
    Debt,
    DebtTransaction,
    resolve_bucket,
)
from services.errors import InsufficientPaidBalanceError, InvalidAmountError
from utils.ids import new_id

BAND_OVERDUE = "overdue"
BAND_URGENT = "urgent"
BAND_NORMAL = "normal"

_SECONDS_PER_DAY = 86_400


@dataclass(frozen=True)
class DebtStatus:
    """Derived view of a debt at a given moment."""
    remaining: int
    is_overdue: bool
    days_left: int  # negative: overdue by that many days
    band: str


@dataclass(frozen=True)
class DebtPartition:
    active: list[Debt]
    completed: list[Debt]


def apply_payment(debt: Debt, amount: int, now: datetime) -> Debt:
    """
    Record a payment towards a debt.

    Overpayment is allowed and simply leaves the debt completed.

    Raises:
        InvalidAmountError: If amount is not positive.
    """
    if amount <= 0:
        raise InvalidAmountError(amount)
    entry = DebtTransaction(id=new_id(), date=now, amount=amount, type=PAYMENT)
    return replace(
        debt,
        amount_paid=debt.amount_paid + amount,
        transactions=[*debt.transactions, entry],
    )


def apply_withdrawal(debt: Debt, amount: int, reason: Optional[str], now: datetime) -> Debt:
    """
    Take money back out of what was paid into a debt.

    The reason is required by policy but validated by the caller.

    Raises:
        InvalidAmountError: If amount is not positive.
        InsufficientPaidBalanceError: If amount exceeds `amount_paid`.
    """
    if amount <= 0:
        raise InvalidAmountError(amount)
    if amount > debt.amount_paid:
        raise InsufficientPaidBalanceError(amount, debt.amount_paid)
    entry = DebtTransaction(
        id=new_id(), date=now, amount=amount, type=WITHDRAWAL, reason=reason
    )
    return replace(
        debt,
        amount_paid=max(0, debt.amount_paid - amount),
        transactions=[*debt.transactions, entry],
    )


def debt_status(debt: Debt, now: datetime, urgent_days: int = 3) -> DebtStatus:
    """Remaining balance, overdue flag, signed days left and display band."""
    remaining = debt.remaining
    seconds_left = (debt.due_date - now).total_seconds()
    days_left = math.ceil(seconds_left / _SECONDS_PER_DAY)

    if days_left < 0:
        band = BAND_OVERDUE
    elif days_left <= urgent_days:
        band = BAND_URGENT
    else:
        band = BAND_NORMAL

    return DebtStatus(
        remaining=remaining,
        is_overdue=now > debt.due_date and remaining > 0,
        days_left=days_left,
        band=band,
    )


def partition(debts: Iterable[Debt]) -> DebtPartition:
    """Split debts into active and completed, keeping their order."""
    active, completed = [], []
    for debt in debts:
        (completed if debt.is_completed else active).append(debt)
    return DebtPartition(active=active, completed=completed)


def edit_debt(
    debt: Debt,
    name: Optional[str] = None,
    source: Optional[str] = None,
    total_amount: Optional[int] = None,
    due_date: Optional[datetime] = None,
    bucket: Optional[BudgetBucket] = None,
) -> Debt:
    """Edit a debt's descriptive fields. The id and ledger are left alone."""
    changes = {}
    if name is not None:
        changes["name"] = name
    if source is not None:
        changes["source"] = source
    if total_amount is not None:
        if total_amount < 0:
            raise InvalidAmountError(total_amount)
        changes["total_amount"] = total_amount
    if due_date is not None:
        changes["due_date"] = due_date
    if bucket is not None:
        changes["target_month"] = bucket.month
        changes["target_year"] = bucket.year
    return replace(debt, **changes)


def debts_in_bucket(debts: Iterable[Debt], bucket: BudgetBucket) -> list[Debt]:
    """Active debts budgeted in `bucket`, earliest due first."""
    matching = [d for d in partition(debts).active if resolve_bucket(d) == bucket]
    return sorted(matching, key=lambda d: d.due_date)


def progress_percent(debt: Debt) -> float:
    """Share of the debt paid, capped at 100. A debt with nothing owed counts as fully paid."""
    if debt.total_amount <= 0:
        return 100.0
    return min(debt.amount_paid / debt.total_amount * 100, 100.0)
