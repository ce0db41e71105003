"""
services/debt_service.py
-------------------------
Business logic for debts: creation, edits, payments and withdrawals,
plus the monthly debt card and reminders.
Orchestrates the pure ledger/recurring functions and the DebtRepository.
"""

from datetime import datetime
from typing import Optional

from telegram.helpers import escape_markdown

from config import AMOUNT_INPUT_MULTIPLIER, URGENT_DAYS
from models.debt import PAYMENT, BudgetBucket, Debt, resolve_bucket
from models.session import BudgetSession
from repositories.debt_repo import DebtRepository
from services import ledger_service, recurring_service
from services.errors import (
    DebtNotFoundError,
    InsufficientPaidBalanceError,
    InvalidAmountError,
)
from services.ledger_service import BAND_NORMAL, BAND_OVERDUE, BAND_URGENT, DebtStatus
from utils.dates import MONTH_NAMES, DateLike, format_date, format_datetime
from utils.logger import get_logger
from utils.money import format_vnd

logger = get_logger(__name__)

_BAND_ICONS = {BAND_OVERDUE: "🔴", BAND_URGENT: "🟠", BAND_NORMAL: "🟢"}


def status_text(status: DebtStatus) -> str:
    """'Còn 5 ngày', 'Gấp! Còn 2 ngày' or 'Quá hạn 3 ngày'."""
    if status.band == BAND_OVERDUE:
        return f"Quá hạn {abs(status.days_left)} ngày"
    if status.band == BAND_URGENT:
        return f"Gấp! Còn {status.days_left} ngày"
    return f"Còn {status.days_left} ngày"


class DebtService:
    """
    Handles all business logic related to debts of one session.

    Every method that changes a debt goes through the pure ledger functions
    and stores the returned copy via the repository.
    """

    def __init__(self, session: BudgetSession, urgent_days: int = URGENT_DAYS):
        self.session = session
        self.repo = DebtRepository(session)
        self.urgent_days = urgent_days

    # ── CREATE ────────────────────────────────────────────

    def add_single(
        self,
        name: str,
        source: str,
        amount: int,
        due_date: DateLike,
        now: datetime,
        bucket: Optional[BudgetBucket] = None,
    ) -> str:
        """Add one debt; the budget bucket defaults to the due month."""
        if amount <= 0:
            return "⚠️ Tổng số tiền phải lớn hơn 0."
        debt = recurring_service.single_debt(name, source, amount, due_date, now, bucket)
        self.repo.add_many([debt])
        return (
            f"📝 Đã thêm khoản nợ:\n"
            f"  📌 {debt.name} ({debt.source})\n"
            f"  💶 {format_vnd(debt.total_amount)}\n"
            f"  📅 Hạn: {format_date(debt.due_date)}\n"
            f"  🔖 Mã: #{debt.id}"
        )

    def add_recurring(
        self,
        name: str,
        source: str,
        amount: int,
        start: DateLike,
        end: DateLike,
        cadence: str,
        now: datetime,
    ) -> str:
        """Expand a recurring debt into its installments and add them all."""
        if amount <= 0:
            return "⚠️ Số tiền mỗi kỳ phải lớn hơn 0."
        template = recurring_service.DebtTemplate(name=name, source=source, amount=amount)
        debts = recurring_service.expand_recurring(template, start, end, cadence, now)
        if not debts:
            return "⚠️ Ngày bắt đầu sau ngày kết thúc, không có kỳ nào được tạo."

        self.repo.add_many(debts)
        when = recurring_service.recurring_day_description(start, cadence)
        return (
            f"🔁 Đã tạo {len(debts)} kỳ cho \"{name}\":\n"
            f"  💶 {format_vnd(amount)} mỗi kỳ, vào {when}\n"
            f"  📅 {format_date(debts[0].due_date)} → {format_date(debts[-1].due_date)}\n"
            f"  💰 Tổng: {format_vnd(amount * len(debts))}"
        )

    def add_spaylater(self, amount: int, bill_month: int, bill_year: int, now: datetime) -> str:
        """Add a Shopee SPayLater bill, due the 10th of the following month."""
        if amount <= 0:
            return "⚠️ Tổng số tiền phải lớn hơn 0."
        try:
            debt = recurring_service.spaylater_debt(amount, bill_month, bill_year, now)
        except ValueError:
            return "⚠️ Tháng hóa đơn không hợp lệ."
        self.repo.add_many([debt])
        return (
            f"🛍️ Đã thêm {debt.name}:\n"
            f"  💶 {format_vnd(debt.total_amount)}\n"
            f"  📅 Hạn thanh toán: {format_date(debt.due_date)}\n"
            f"  📊 Tính vào ngân sách tháng {debt.target_month}/{debt.target_year}\n"
            f"  🔖 Mã: #{debt.id}"
        )

    # ── UPDATE ────────────────────────────────────────────

    def edit(
        self,
        debt_id: str,
        name: Optional[str] = None,
        source: Optional[str] = None,
        total_amount: Optional[int] = None,
        due_date: Optional[datetime] = None,
        bucket: Optional[BudgetBucket] = None,
    ) -> str:
        """Edit one debt's fields. Siblings of a recurring series are untouched."""
        if all(v is None for v in (name, source, total_amount, due_date, bucket)):
            return "⚠️ Không có gì để sửa. Chọn ít nhất một trường."
        try:
            debt = self.repo.get_by_id(debt_id)
            updated = ledger_service.edit_debt(debt, name, source, total_amount, due_date, bucket)
        except DebtNotFoundError:
            return f"⚠️ Khoản nợ #{debt_id} không tồn tại."
        except InvalidAmountError:
            return "⚠️ Tổng số tiền không được âm."

        self.repo.replace(updated)
        logger.info(f"Edited debt #{debt_id}")
        return f"✏️ Đã cập nhật khoản nợ #{debt_id}: {updated.name}"

    def pay(self, debt_id: str, amount: int, now: datetime) -> str:
        """Add a payment towards a debt."""
        try:
            debt = self.repo.get_by_id(debt_id)
            updated = ledger_service.apply_payment(debt, amount, now)
        except DebtNotFoundError:
            return f"⚠️ Khoản nợ #{debt_id} không tồn tại."
        except InvalidAmountError:
            return "⚠️ Số tiền phải lớn hơn 0."

        self.repo.replace(updated)
        logger.info(f"Payment of {amount} on debt #{debt_id}")
        if updated.is_completed:
            return f"🎉 Đã trả xong \"{updated.name}\"!"
        return (
            f"✅ Đã góp {format_vnd(amount)} vào \"{updated.name}\".\n"
            f"  Còn lại: {format_vnd(updated.remaining)}"
        )

    def withdraw(self, debt_id: str, amount: int, reason: str, now: datetime) -> str:
        """Take money back out of a debt; a reason is mandatory."""
        if not reason or not reason.strip():
            return "⚠️ Vui lòng nhập lý do rút tiền!"
        try:
            debt = self.repo.get_by_id(debt_id)
            updated = ledger_service.apply_withdrawal(debt, amount, reason.strip(), now)
        except DebtNotFoundError:
            return f"⚠️ Khoản nợ #{debt_id} không tồn tại."
        except InvalidAmountError:
            return "⚠️ Số tiền phải lớn hơn 0."
        except InsufficientPaidBalanceError as e:
            logger.warning(f"Rejected withdrawal on #{debt_id}: {e}")
            return f"⚠️ Không thể rút quá số tiền đã đóng ({format_vnd(e.available)})!"

        self.repo.replace(updated)
        logger.info(f"Withdrawal of {amount} on debt #{debt_id}")
        return (
            f"↩️ Đã rút {format_vnd(amount)} từ \"{updated.name}\" ({reason.strip()}).\n"
            f"  Đã trả: {format_vnd(updated.amount_paid)} / {format_vnd(updated.total_amount)}"
        )

    def set_bucket(self, month: int, year: int) -> str:
        """Choose which budget month the debt card shows."""
        if not 1 <= month <= 12:
            return "⚠️ Tháng phải từ 1 đến 12."
        self.session.debt_bucket = BudgetBucket(month, year)
        return f"📅 Đang xem nợ của {MONTH_NAMES[month - 1]}/{year}."

    # ── DELETE ────────────────────────────────────────────

    def delete(self, debt_id: str) -> str:
        try:
            debt = self.repo.delete(debt_id)
        except DebtNotFoundError:
            return f"⚠️ Khoản nợ #{debt_id} không tồn tại."
        return f"🗑️ Đã xóa khoản nợ \"{debt.name}\"."

    # ── READ ──────────────────────────────────────────────

    def list_for_bucket(self, now: datetime) -> str:
        """Active debts of the selected budget month, earliest due first."""
        bucket = self.session.debt_bucket
        debts = ledger_service.debts_in_bucket(self.repo.list_all(), bucket)
        header = f"💳 *Nợ cần trả - {MONTH_NAMES[bucket.month - 1]}/{bucket.year}*\n"
        if not debts:
            return header + "\n📭 Không có khoản nợ nào trong tháng này."

        lines = [header]
        for debt in debts:
            status = ledger_service.debt_status(debt, now, self.urgent_days)
            lines.append(
                f"{_BAND_ICONS[status.band]} #{debt.id} "
                f"{escape_markdown(debt.name)} ({escape_markdown(debt.source)})\n"
                f"  Còn nợ: {format_vnd(status.remaining)} | Hạn: {format_date(debt.due_date)} | {status_text(status)}\n"
                f"  Đã trả: {format_vnd(debt.amount_paid)} / {format_vnd(debt.total_amount)} "
                f"({ledger_service.progress_percent(debt):.0f}%)"
            )
        total = sum(d.remaining for d in debts)
        lines.append(f"\n💶 Tổng còn nợ tháng này: {format_vnd(total)}")
        return "\n".join(lines)

    def list_completed(self) -> str:
        """Debts already paid off."""
        completed = ledger_service.partition(self.repo.list_all()).completed
        if not completed:
            return "📭 Chưa có khoản nợ nào được trả xong."
        lines = ["✅ *Các khoản nợ đã trả xong:*\n"]
        for debt in completed:
            lines.append(
                f"  • {escape_markdown(debt.name)} ({escape_markdown(debt.source)}) - "
                f"{format_vnd(debt.total_amount)}"
            )
        return "\n".join(lines)

    def history(self, debt_id: str) -> str:
        """A debt's ledger, newest entry first."""
        try:
            debt = self.repo.get_by_id(debt_id)
        except DebtNotFoundError:
            return f"⚠️ Khoản nợ #{escape_markdown(debt_id)} không tồn tại."
        name = escape_markdown(debt.name)
        if not debt.transactions:
            return f"📭 \"{name}\" chưa có giao dịch nào."

        lines = [f"🕘 *Lịch sử giao dịch:* {name}\n"]
        for entry in reversed(debt.transactions):
            sign = "+" if entry.type == PAYMENT else "-"
            reason = f" ({escape_markdown(entry.reason)})" if entry.reason else ""
            lines.append(f"  {format_datetime(entry.date)}  {sign}{format_vnd(entry.amount)}{reason}")
        return "\n".join(lines)

    def describe_for_edit(self, debt_id: str) -> str:
        """Current values of a debt, as a starting point for /edit_debt."""
        try:
            debt = self.repo.get_by_id(debt_id)
        except DebtNotFoundError:
            return f"⚠️ Khoản nợ #{escape_markdown(debt_id)} không tồn tại."
        bucket = resolve_bucket(debt)
        return (
            f"✏️ *Sửa khoản nợ #{debt.id}*\n\n"
            f"  ten: {escape_markdown(recurring_service.strip_installment_suffix(debt.name))}\n"
            f"  nguon: {escape_markdown(debt.source)}\n"
            f"  tien: {debt.total_amount / AMOUNT_INPUT_MULTIPLIER:g}\n"
            f"  han: {debt.due_date:%Y-%m-%d}\n"
            f"  thang: {bucket.month}/{bucket.year}\n\n"
            f"Ví dụ: `/edit_debt {debt.id} tien:500 han:2026-12-10`"
        )

    def get_due_reminders(self, now: datetime) -> list[tuple[Debt, DebtStatus]]:
        """Active debts that are urgent or overdue, earliest due first."""
        active = ledger_service.partition(self.repo.list_all()).active
        due = []
        for debt in sorted(active, key=lambda d: d.due_date):
            status = ledger_service.debt_status(debt, now, self.urgent_days)
            if status.band != BAND_NORMAL:
                due.append((debt, status))
        return due
