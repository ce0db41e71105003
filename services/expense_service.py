"""
services/expense_service.py
----------------------------
Business logic for the miscellaneous spending log.
Every log line feeds the week's actual misc spending.
"""

from datetime import datetime
from typing import Optional

from telegram.helpers import escape_markdown

from models.logs import ExpenseLog
from models.session import BudgetSession
from repositories.expense_repo import ExpenseRepository
from services.errors import InvalidAmountError
from utils.dates import describe_filter, format_date
from utils.ids import new_id
from utils.logger import get_logger
from utils.money import format_vnd

logger = get_logger(__name__)


class ExpenseService:
    """
    Handles the misc spending log of one session.

    Adding a line raises `actual_misc` by its amount; deleting one lowers it
    again, never below zero.
    """

    def __init__(self, session: BudgetSession):
        self.session = session
        self.repo = ExpenseRepository(session)

    def add_log(self, name: str, amount: int, date: datetime) -> ExpenseLog:
        """
        Record a misc expense.

        Raises:
            InvalidAmountError: If amount is not positive.
        """
        if amount <= 0:
            raise InvalidAmountError(amount)
        log = self.repo.add(ExpenseLog(id=new_id(), name=name, amount=amount, date=date))
        self.session.budget.actual_misc += amount
        return log

    def add_from_input(self, name: str, amount: Optional[int], date: datetime) -> str:
        """Chat entry point for `add_log`; returns the reply text."""
        if not name:
            return "⚠️ Vui lòng nhập tên khoản chi."
        try:
            log = self.add_log(name, amount or 0, date)
        except InvalidAmountError:
            return "⚠️ Số tiền phải lớn hơn 0."
        return (
            f"🧾 Đã ghi: {log.name} - {format_vnd(log.amount)} ({format_date(log.date)})\n"
            f"  🔖 Mã: #{log.id}\n"
            f"  💸 Tổng chi khác: {format_vnd(self.session.budget.actual_misc)}"
        )

    def delete_log(self, log_id: str) -> str:
        """Delete a log and take its amount back off the actual misc total."""
        log = self.repo.delete(log_id)
        if log is None:
            return f"⚠️ Khoản chi #{log_id} không tồn tại."
        budget = self.session.budget
        budget.actual_misc = max(0, budget.actual_misc - log.amount)
        return f"🗑️ Đã xóa khoản chi #{log_id} ({format_vnd(log.amount)})."

    def get_logs_summary(self, use_filter: bool = True) -> str:
        """List misc logs, by default only those inside the active filter."""
        flt = self.session.filter if use_filter else None
        logs = self.repo.get_filtered(flt)
        label = describe_filter(flt) if flt else "Tất cả"

        if not logs:
            return f"📭 Chưa có khoản chi khác nào ({label})."

        lines = [f"🧾 *Chi tiêu khác* - {label}\n"]
        for log in reversed(logs):
            lines.append(f"  • #{log.id} | {format_date(log.date)} | {escape_markdown(log.name)}: {format_vnd(log.amount)}")
        total = sum(log.amount for log in logs)
        lines.append(f"\n💶 Tổng: {format_vnd(total)} ({len(logs)} khoản)")
        return "\n".join(lines)
