"""
repositories/expense_repo.py
-----------------------------
Data access layer for miscellaneous spending logs.
"""

from typing import Optional

from models.filter import FilterState
from models.logs import ExpenseLog
from models.session import BudgetSession
from utils.dates import is_in_filter_range
from utils.logger import get_logger

logger = get_logger(__name__)


class ExpenseRepository:
    """Repository for the session's misc spending logs."""

    def __init__(self, session: BudgetSession):
        self.session = session

    # ── CREATE ────────────────────────────────────────────

    def add(self, log: ExpenseLog) -> ExpenseLog:
        self.session.misc_logs = [*self.session.misc_logs, log]
        logger.info(f"Added misc log '{log.name}' #{log.id}")
        return log

    def add_many(self, logs: list[ExpenseLog]) -> list[ExpenseLog]:
        self.session.misc_logs = [*self.session.misc_logs, *logs]
        return logs

    # ── READ ──────────────────────────────────────────────

    def get_by_id(self, log_id: str) -> Optional[ExpenseLog]:
        return next((log for log in self.session.misc_logs if log.id == log_id), None)

    def get_filtered(self, flt: Optional[FilterState] = None) -> list[ExpenseLog]:
        """
        Logs in insertion order, optionally restricted to a date filter.
        """
        if flt is None:
            return list(self.session.misc_logs)
        return [log for log in self.session.misc_logs if is_in_filter_range(log.date, flt)]

    # ── DELETE ────────────────────────────────────────────

    def delete(self, log_id: str) -> Optional[ExpenseLog]:
        """Remove a log; returns it, or None if it did not exist."""
        log = self.get_by_id(log_id)
        if log is None:
            return None
        self.session.misc_logs = [entry for entry in self.session.misc_logs if entry.id != log_id]
        logger.info(f"Deleted misc log #{log_id}")
        return log
