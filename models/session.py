"""
models/session.py
-----------------
The in-memory state of one budgeting session.

Everything the dashboard shows is recomputed from this snapshot; nothing
derived (debt status, totals) is stored here.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from models.debt import BudgetBucket, Debt
from models.filter import FilterState
from models.logs import ExpenseLog, GasLog
from models.wallet import WalletTransaction


@dataclass
class WeeklyBudget:
    """
    Planned vs. actual weekly figures, all in dong.

    Attributes:
        weekly_income: Income expected this week.
        food_budget: Planned food spending.
        actual_food: Food actually spent.
        misc_budget: Planned miscellaneous spending.
        actual_misc: Miscellaneous actually spent (fed by the misc log).
    """
    weekly_income: int = 0
    food_budget: int = 0
    actual_food: int = 0
    misc_budget: int = 0
    actual_misc: int = 0


@dataclass
class BudgetSession:
    """State owned by a single chat for the lifetime of the bot process."""
    budget: WeeklyBudget
    filter: FilterState
    debt_bucket: BudgetBucket
    debts: list[Debt] = field(default_factory=list)
    gas_history: list[GasLog] = field(default_factory=list)
    last_wifi_payment: Optional[datetime] = None
    misc_logs: list[ExpenseLog] = field(default_factory=list)
    wallet_connected: bool = False
    pending_wallet: list[WalletTransaction] = field(default_factory=list)

    @classmethod
    def start(cls, now: datetime, food_budget: int = 0, misc_budget: int = 0) -> "BudgetSession":
        """A fresh session: current week filter, current month debt bucket."""
        return cls(
            budget=WeeklyBudget(food_budget=food_budget, misc_budget=misc_budget),
            filter=FilterState.current_week(now),
            debt_bucket=BudgetBucket(now.month, now.year),
        )
