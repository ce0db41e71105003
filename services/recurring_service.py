"""
services/recurring_service.py
------------------------------
Debt creation: single debts, recurring installment series and
Shopee SPayLater bills.

Series are expanded up front into independent debts. No instance keeps a
reference to its siblings, so paying or editing one never touches another.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from models.debt import BudgetBucket, Debt
from utils.dates import WEEKDAY_NAMES, DateLike, as_datetime, next_month
from utils.ids import new_id
from utils.logger import get_logger

logger = get_logger(__name__)

WEEKLY = "weekly"
MONTHLY = "monthly"
CADENCES = (WEEKLY, MONTHLY)

SPAYLATER_SOURCE = "Shopee SPayLater"
SPAYLATER_DUE_DAY = 10

_INSTALLMENT_SUFFIX = re.compile(r"\(Tháng \d+/\d+\)|\(Kỳ \d+\)")


@dataclass(frozen=True)
class DebtTemplate:
    """What every installment of a series shares."""
    name: str
    source: str
    amount: int  # per installment


def single_debt(
    name: str,
    source: str,
    amount: int,
    due_date: DateLike,
    now: datetime,
    bucket: Optional[BudgetBucket] = None,
) -> Debt:
    """A one-off debt, optionally budgeted in a month other than its due month."""
    return Debt(
        id=new_id(),
        name=name,
        source=source,
        total_amount=amount,
        due_date=as_datetime(due_date),
        created_at=now,
        target_month=bucket.month if bucket else None,
        target_year=bucket.year if bucket else None,
    )


def expand_recurring(
    template: DebtTemplate,
    start: DateLike,
    end: DateLike,
    cadence: str,
    now: datetime,
) -> list[Debt]:
    """
    Expand a recurring debt into one debt per installment.

    Installments fall on `start`, then every 7 days (weekly) or on the same
    day of each following month (monthly), up to and including `end`. A
    monthly step from a day the next month lacks rolls over, and the series
    continues from the rolled date (Jan 31, Mar 2, Apr 2, ...). A start after
    the end yields no debts.

    Args:
        template: Name, source and per-installment amount.
        start: Due date of the first installment.
        end: Last allowed due date (inclusive).
        cadence: 'weekly' or 'monthly'.
        now: Creation timestamp for every instance.

    Returns:
        The installments in due-date order.
    """
    if cadence not in CADENCES:
        raise ValueError(f"Unknown cadence: {cadence!r}")

    first = as_datetime(start)
    last = as_datetime(end)
    debts: list[Debt] = []
    current = first
    count = 0

    while current <= last:
        count += 1
        if cadence == MONTHLY:
            suffix = f"(Tháng {current.month}/{current.year})"
        else:
            suffix = f"(Kỳ {count})"

        debts.append(Debt(
            id=new_id(),
            name=f"{template.name} {suffix}",
            source=template.source,
            total_amount=template.amount,
            due_date=current,
            created_at=now,
            target_month=current.month,
            target_year=current.year,
        ))

        if cadence == WEEKLY:
            current = first + timedelta(weeks=count)
        else:
            current = next_month(current)

    logger.info(f"Expanded '{template.name}' into {len(debts)} {cadence} installments")
    return debts


def spaylater_due_date(bill_month: int, bill_year: int) -> datetime:
    """The 10th of the month after the bill month (December rolls into January)."""
    if bill_month == 12:
        return datetime(bill_year + 1, 1, SPAYLATER_DUE_DAY)
    return datetime(bill_year, bill_month + 1, SPAYLATER_DUE_DAY)


def spaylater_debt(amount: int, bill_month: int, bill_year: int, now: datetime) -> Debt:
    """
    A Shopee SPayLater bill. It is due, and budgeted, in the month after
    the bill month.
    """
    if not 1 <= bill_month <= 12:
        raise ValueError(f"Bill month must be 1-12, got {bill_month}")
    due = spaylater_due_date(bill_month, bill_year)
    return Debt(
        id=new_id(),
        name=f"SPayLater - Hóa đơn T{bill_month}",
        source=SPAYLATER_SOURCE,
        total_amount=amount,
        due_date=due,
        created_at=now,
        target_month=due.month,
        target_year=due.year,
    )


def strip_installment_suffix(name: str) -> str:
    """Drop the automatic '(Tháng m/y)' or '(Kỳ n)' part of a generated name."""
    return _INSTALLMENT_SUFFIX.sub("", name, count=1).strip()


def recurring_day_description(start: DateLike, cadence: str) -> str:
    """When a series repeats, e.g. 'ngày 15 hàng tháng' or 'Thứ 2 hàng tuần'."""
    if cadence == MONTHLY:
        return f"ngày {start.day} hàng tháng"
    return f"{WEEKDAY_NAMES[start.weekday()]} hàng tuần"
