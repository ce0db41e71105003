"""
services/budget_service.py
---------------------------
Weekly aggregates: amortized debt contribution, planned vs. actual
spending, surplus/deficit and how many days off the surplus buys.
"""

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Union

from config import FIXED_EXPENSES, SHIFT_VALUE
from models.debt import Debt
from models.session import BudgetSession
from services.errors import InvalidAmountError
from services.ledger_service import partition
from utils.dates import days_until
from utils.logger import get_logger
from utils.money import format_vnd

logger = get_logger(__name__)

FOOD = "food"
MISC = "misc"
CATEGORY_LABELS = {FOOD: "Ăn uống", MISC: "Chi tiêu khác"}

Number = Union[int, float]


@dataclass(frozen=True)
class BudgetUsage:
    label: str
    budget: int
    actual: int
    percentage: float
    is_over_budget: bool


@dataclass(frozen=True)
class DashboardSummary:
    """Everything the weekly overview shows, derived from one snapshot."""
    weekly_income: int
    fixed_expenses: int
    debt_contribution: float
    total_planned: float
    total_actual: float
    financial_status: float
    total_debt_remaining: int
    days_off: Number  # math.inf when unbounded
    shifts_needed: int
    food: BudgetUsage
    misc: BudgetUsage


def weekly_debt_contribution(active_debts: Iterable[Debt], now: datetime) -> float:
    """
    What must be set aside this week so every debt is paid by its due date.

    Each remaining balance is spread evenly over the weeks left; a debt due
    this week or already overdue contributes its whole remaining balance.
    """
    total = 0.0
    for debt in active_debts:
        remaining = debt.remaining
        if remaining <= 0:
            continue
        weeks_left = math.ceil(days_until(now, debt.due_date) / 7)
        if weeks_left <= 0:
            total += remaining
        else:
            total += remaining / weeks_left
    return total


def total_planned(fixed: Number, food_budget: Number, misc_budget: Number, contribution: Number) -> float:
    return fixed + food_budget + misc_budget + contribution


def total_actual(fixed: Number, actual_food: Number, actual_misc: Number, contribution: Number) -> float:
    # The debt contribution counts as spent even before it is paid.
    return fixed + actual_food + actual_misc + contribution


def financial_status(weekly_income: Number, actual: Number) -> float:
    """Surplus (>= 0) or deficit (< 0) of the week."""
    return weekly_income - actual


def days_off_affordable(active_debts: Iterable[Debt], weekly_income: Number, actual: Number) -> Number:
    """
    Whole days the surplus covers at the current daily spend.

    Unbounded (math.inf) when no debt is left or nothing is spent.
    """
    remaining_debt = sum(d.remaining for d in active_debts)
    if remaining_debt <= 0:
        return math.inf
    daily_spend = actual / 7
    if daily_spend <= 0:
        return math.inf
    surplus = financial_status(weekly_income, actual)
    if surplus <= 0:
        return 0
    return math.floor(surplus / daily_spend)


def shifts_needed(status: Number, shift_value: int = SHIFT_VALUE) -> int:
    """Extra shifts needed to close a deficit; 0 when there is none."""
    if status >= 0:
        return 0
    return math.ceil(abs(status) / shift_value)


def budget_usage(label: str, budget: int, actual: int) -> BudgetUsage:
    """Share of a budget used, capped at 100%."""
    percentage = min(actual / budget * 100, 100.0) if budget > 0 else 0.0
    return BudgetUsage(
        label=label,
        budget=budget,
        actual=actual,
        percentage=percentage,
        is_over_budget=budget > 0 and actual > budget,
    )


def summarize(session: BudgetSession, now: datetime, fixed_expenses: int = FIXED_EXPENSES) -> DashboardSummary:
    """Recompute the whole weekly overview from the session snapshot."""
    budget = session.budget
    active = partition(session.debts).active
    contribution = weekly_debt_contribution(active, now)
    planned = total_planned(fixed_expenses, budget.food_budget, budget.misc_budget, contribution)
    actual = total_actual(fixed_expenses, budget.actual_food, budget.actual_misc, contribution)
    status = financial_status(budget.weekly_income, actual)

    return DashboardSummary(
        weekly_income=budget.weekly_income,
        fixed_expenses=fixed_expenses,
        debt_contribution=contribution,
        total_planned=planned,
        total_actual=actual,
        financial_status=status,
        total_debt_remaining=sum(d.remaining for d in active),
        days_off=days_off_affordable(active, budget.weekly_income, actual),
        shifts_needed=shifts_needed(status),
        food=budget_usage(CATEGORY_LABELS[FOOD], budget.food_budget, budget.actual_food),
        misc=budget_usage(CATEGORY_LABELS[MISC], budget.misc_budget, budget.actual_misc),
    )


class BudgetService:
    """Weekly income and budget figures of one session, and the overview text."""

    def __init__(self, session: BudgetSession):
        self.session = session

    def set_income(self, amount: int) -> str:
        """Set this week's income."""
        if amount < 0:
            raise InvalidAmountError(amount)
        self.session.budget.weekly_income = amount
        logger.info(f"Weekly income set to {amount}")
        return f"✅ Thu nhập tuần này: {format_vnd(amount)}"

    def set_budget(self, category: str, amount: int) -> str:
        """Set the planned amount of 'food' or 'misc'."""
        if amount < 0:
            raise InvalidAmountError(amount)
        setattr(self.session.budget, f"{category}_budget", amount)
        return f"✅ Ngân sách {CATEGORY_LABELS[category]}: {format_vnd(amount)}"

    def set_actual(self, category: str, amount: int) -> str:
        """Overwrite the actual amount spent on 'food' or 'misc'."""
        if amount < 0:
            raise InvalidAmountError(amount)
        setattr(self.session.budget, f"actual_{category}", amount)
        usage = self._usage(category)
        msg = f"✅ Chi thực tế {usage.label}: {format_vnd(amount)}"
        if usage.is_over_budget:
            msg += "\n🔴 Vượt ngân sách!"
        return msg

    def get_summary(self, now: datetime) -> str:
        """The weekly overview as a chat message."""
        s = summarize(self.session, now)

        lines = ["📊 *Tổng quan tuần*\n"]
        lines.append(f"💰 Thu nhập: {format_vnd(s.weekly_income)}")
        lines.append(f"🎯 Thu nhập cần đạt: {format_vnd(s.total_planned)}")
        lines.append(f"💸 Chi thực tế: {format_vnd(s.total_actual)}")
        lines.append(f"  • Cố định (xăng + wifi): {format_vnd(s.fixed_expenses)}")
        lines.append(f"  • Góp nợ tuần này: {format_vnd(s.debt_contribution)}")

        for usage in (s.food, s.misc):
            warn = " 🔴 Vượt ngân sách!" if usage.is_over_budget else ""
            lines.append(
                f"\n🍜 *{usage.label}*: {format_vnd(usage.actual)} / {format_vnd(usage.budget)}{warn}\n"
                f"  {self._progress_bar(usage.percentage, usage.is_over_budget)}"
            )

        status_label = "Dư giả" if s.financial_status >= 0 else "Thiếu hụt"
        icon = "📈" if s.financial_status >= 0 else "📉"
        lines.append(f"\n{icon} Tình trạng tài chính: {format_vnd(s.financial_status)} ({status_label})")

        if s.financial_status < 0:
            lines.append(
                f"⚠️ Bạn đang thiếu hụt {format_vnd(abs(s.financial_status))}. "
                f"Cần làm thêm khoảng {s.shifts_needed} ca (5h/ca)."
            )
        elif s.weekly_income > 0:
            days = "vô hạn" if s.days_off == math.inf else str(s.days_off)
            lines.append(f"🌴 Bạn có thể nghỉ tối đa {days} ngày mà vẫn đảm bảo tài chính.")

        return "\n".join(lines)

    def _usage(self, category: str) -> BudgetUsage:
        budget = self.session.budget
        return budget_usage(
            CATEGORY_LABELS[category],
            getattr(budget, f"{category}_budget"),
            getattr(budget, f"actual_{category}"),
        )

    @staticmethod
    def _progress_bar(pct: float, over: bool, length: int = 15) -> str:
        """Generate a text progress bar."""
        filled = int(min(pct, 100) / 100 * length)
        empty = length - filled
        if over:
            return "█" * length + " ⚠️"
        return "█" * filled + "░" * empty + f" {pct:.0f}%"
