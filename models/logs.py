"""
models/logs.py
--------------
Timestamped log entries: fuel refills and miscellaneous spending.
"""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class GasLog:
    """A fuel refill. Only the moment matters; the cost is fixed weekly."""
    id: str
    date: datetime


@dataclass(frozen=True)
class ExpenseLog:
    """
    A miscellaneous spending line item.

    Attributes:
        id: Opaque identifier.
        name: What the money went on.
        amount: Amount spent in dong.
        date: When it was spent.
    """
    id: str
    name: str
    amount: int
    date: datetime

    def __str__(self) -> str:
        return f"{self.name}: {self.amount} ({self.date:%Y-%m-%d})"
