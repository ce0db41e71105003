"""Tests for services/debt_service.py."""

from datetime import date, datetime, timedelta

import pytest

from models.debt import BudgetBucket
from services.debt_service import DebtService, status_text
from services.ledger_service import BAND_OVERDUE, BAND_URGENT, DebtStatus
from services.recurring_service import MONTHLY


@pytest.fixture
def service(session):
    return DebtService(session, urgent_days=3)


class TestCreate:
    def test_add_single(self, service, session, now):
        msg = service.add_single("Vay bạn", "Lan", 500_000, datetime(2024, 3, 30), now)
        assert len(session.debts) == 1
        assert f"#{session.debts[0].id}" in msg
        assert "500.000đ" in msg

    def test_add_single_rejects_zero(self, service, session, now):
        assert "lớn hơn 0" in service.add_single("x", "y", 0, datetime(2024, 3, 30), now)
        assert session.debts == []

    def test_add_recurring(self, service, session, now):
        msg = service.add_recurring(
            "Trả góp", "FE Credit", 850_000, date(2024, 1, 15), date(2024, 6, 15), MONTHLY, now
        )
        assert len(session.debts) == 6
        assert "6 kỳ" in msg
        assert "ngày 15 hàng tháng" in msg
        assert "5.100.000đ" in msg

    def test_add_recurring_with_empty_range(self, service, session, now):
        msg = service.add_recurring(
            "Trả góp", "FE Credit", 850_000, date(2024, 6, 15), date(2024, 1, 15), MONTHLY, now
        )
        assert "không có kỳ nào" in msg
        assert session.debts == []

    def test_add_spaylater(self, service, session, now):
        msg = service.add_spaylater(1_200_000, 12, 2024, now)
        assert "10/01/2025" in msg
        assert session.debts[0].target_month == 1


class TestLedgerFlow:
    def test_pay_and_complete(self, service, session, make_debt, now):
        session.debts = [make_debt(id="abc", total_amount=300_000)]
        assert "Còn lại: 100.000đ" in service.pay("abc", 200_000, now)
        assert "Đã trả xong" in service.pay("abc", 100_000, now)
        assert session.debts[0].is_completed

    def test_pay_unknown_debt(self, service, now):
        assert "không tồn tại" in service.pay("missing", 100_000, now)

    def test_withdraw_requires_reason(self, service, session, make_debt, now):
        session.debts = [make_debt(id="abc", amount_paid=100_000)]
        assert "lý do" in service.withdraw("abc", 50_000, "  ", now)
        assert session.debts[0].amount_paid == 100_000

    def test_withdraw_more_than_paid(self, service, session, make_debt, now):
        session.debts = [make_debt(id="abc", amount_paid=100_000)]
        msg = service.withdraw("abc", 150_000, "Mua thuốc", now)
        assert "Không thể rút" in msg
        assert session.debts[0].amount_paid == 100_000
        assert session.debts[0].transactions == []

    def test_withdraw(self, service, session, make_debt, now):
        session.debts = [make_debt(id="abc", amount_paid=100_000)]
        msg = service.withdraw("abc", 40_000, "Mua thuốc", now)
        assert "Mua thuốc" in msg
        assert session.debts[0].amount_paid == 60_000

    def test_history_newest_first(self, service, session, make_debt, now):
        session.debts = [make_debt(id="abc")]
        service.pay("abc", 100_000, now)
        service.withdraw("abc", 30_000, "Đi chợ", now + timedelta(hours=1))
        text = service.history("abc")
        assert text.index("-30.000đ") < text.index("+100.000đ")
        assert "(Đi chợ)" in text

    def test_history_empty(self, service, session, make_debt):
        session.debts = [make_debt(id="abc")]
        assert "chưa có giao dịch" in service.history("abc")


class TestEditAndDelete:
    def test_edit_fields(self, service, session, make_debt):
        session.debts = [make_debt(id="abc"), make_debt(id="def")]
        msg = service.edit("abc", name="Vay mẹ", bucket=BudgetBucket(5, 2024))
        assert "Vay mẹ" in msg
        assert session.debts[0].name == "Vay mẹ"
        assert session.debts[0].target_month == 5
        assert session.debts[1].name == "Vay bạn"

    def test_edit_nothing(self, service):
        assert "Không có gì để sửa" in service.edit("abc")

    def test_edit_negative_total(self, service, session, make_debt):
        session.debts = [make_debt(id="abc")]
        assert "không được âm" in service.edit("abc", total_amount=-1)

    def test_delete(self, service, session, make_debt):
        session.debts = [make_debt(id="abc")]
        assert "Đã xóa" in service.delete("abc")
        assert session.debts == []
        assert "không tồn tại" in service.delete("abc")

    def test_describe_for_edit_strips_suffix(self, service, session, make_debt):
        session.debts = [make_debt(id="abc", name="Trả góp (Tháng 4/2024)")]
        text = service.describe_for_edit("abc")
        assert "ten: Trả góp\n" in text
        assert "tien: 700\n" in text
        assert "han: 2024-04-30" in text
        assert "thang: 4/2024" in text


class TestReads:
    def test_list_for_bucket(self, service, session, make_debt, now):
        session.debts = [
            make_debt(id="mar", name="Tháng ba", due_date=datetime(2024, 3, 20)),
            make_debt(id="apr", name="Tháng tư", due_date=datetime(2024, 4, 20)),
        ]
        text = service.list_for_bucket(now)
        assert "Tháng ba" in text
        assert "Tháng tư" not in text

        service.set_bucket(4, 2024)
        assert "Tháng tư" in service.list_for_bucket(now)

    def test_list_for_empty_bucket(self, service, now):
        assert "Không có khoản nợ" in service.list_for_bucket(now)

    def test_set_bucket_rejects_bad_month(self, service, session):
        assert "1 đến 12" in service.set_bucket(13, 2024)
        assert session.debt_bucket == BudgetBucket(3, 2024)

    def test_list_completed(self, service, session, make_debt):
        assert "Chưa có" in service.list_completed()
        session.debts = [make_debt(name="Xong rồi", amount_paid=700_000), make_debt(name="Chưa xong")]
        text = service.list_completed()
        assert "Xong rồi" in text
        assert "Chưa xong" not in text

    def test_due_reminders(self, service, session, make_debt, now):
        session.debts = [
            make_debt(id="late", due_date=now - timedelta(days=2)),
            make_debt(id="soon", due_date=now + timedelta(days=1)),
            make_debt(id="far", due_date=now + timedelta(days=30)),
            make_debt(id="done", due_date=now - timedelta(days=2), amount_paid=700_000),
        ]
        due = service.get_due_reminders(now)
        assert [(d.id, s.band) for d, s in due] == [("late", BAND_OVERDUE), ("soon", BAND_URGENT)]


@pytest.mark.parametrize("status, expected", [
    (DebtStatus(1, True, -3, BAND_OVERDUE), "Quá hạn 3 ngày"),
    (DebtStatus(1, False, 2, BAND_URGENT), "Gấp! Còn 2 ngày"),
    (DebtStatus(1, False, 9, "normal"), "Còn 9 ngày"),
])
def test_status_text(status, expected):
    assert status_text(status) == expected


class TestMarkdownEscaping:
    def test_list_for_bucket_escapes_names(self, service, session, make_debt, now):
        session.debts = [make_debt(name="tra_gop *shopee*", source="[FE]", due_date=datetime(2024, 3, 20))]
        text = service.list_for_bucket(now)
        assert r"tra\_gop \*shopee\*" in text
        assert r"(\[FE])" in text

    def test_history_escapes_name_and_reason(self, service, session, make_debt, now):
        session.debts = [make_debt(id="abc", name="vay_me", amount_paid=100_000)]
        service.withdraw("abc", 10_000, "mua_thuoc", now)
        text = service.history("abc")
        assert r"vay\_me" in text
        assert r"(mua\_thuoc)" in text

    def test_completed_and_edit_prefill_escape_names(self, service, session, make_debt):
        session.debts = [make_debt(id="abc", name="hoc_phi", amount_paid=700_000)]
        assert r"hoc\_phi" in service.list_completed()
        assert r"ten: hoc\_phi" in service.describe_for_edit("abc")

    def test_unknown_id_is_escaped(self, service):
        assert r"#no\_such" in service.history("no_such")
