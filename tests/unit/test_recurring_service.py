"""Tests for debt creation in services/recurring_service.py."""

from datetime import date, datetime

import pytest

from models.debt import BudgetBucket, resolve_bucket
from services.recurring_service import (
    MONTHLY,
    SPAYLATER_SOURCE,
    WEEKLY,
    DebtTemplate,
    expand_recurring,
    recurring_day_description,
    single_debt,
    spaylater_debt,
    spaylater_due_date,
    strip_installment_suffix,
)

TEMPLATE = DebtTemplate(name="Trả góp điện thoại", source="FE Credit", amount=850_000)


class TestExpandRecurring:
    def test_monthly_series(self, now):
        debts = expand_recurring(TEMPLATE, date(2024, 1, 15), date(2024, 4, 15), MONTHLY, now)

        assert len(debts) == 4
        assert [d.due_date for d in debts] == [
            datetime(2024, 1, 15), datetime(2024, 2, 15),
            datetime(2024, 3, 15), datetime(2024, 4, 15),
        ]
        assert debts[0].name == "Trả góp điện thoại (Tháng 1/2024)"
        assert debts[3].name == "Trả góp điện thoại (Tháng 4/2024)"
        assert [resolve_bucket(d) for d in debts] == [
            BudgetBucket(m, 2024) for m in (1, 2, 3, 4)
        ]

    def test_weekly_series(self, now):
        debts = expand_recurring(TEMPLATE, date(2024, 1, 1), date(2024, 1, 22), WEEKLY, now)

        assert [d.name for d in debts] == [f"Trả góp điện thoại (Kỳ {n})" for n in range(1, 5)]
        gaps = [(b.due_date - a.due_date).days for a, b in zip(debts, debts[1:])]
        assert gaps == [7, 7, 7]

    def test_instances_are_independent(self, now):
        debts = expand_recurring(TEMPLATE, date(2024, 1, 15), date(2024, 3, 15), MONTHLY, now)

        assert len({d.id for d in debts}) == 3
        for debt in debts:
            assert debt.source == "FE Credit"
            assert debt.total_amount == 850_000
            assert debt.amount_paid == 0
            assert debt.transactions == []
            assert debt.created_at == now
        assert debts[0].transactions is not debts[1].transactions

    def test_end_is_inclusive(self, now):
        debts = expand_recurring(TEMPLATE, date(2024, 1, 1), date(2024, 1, 1), WEEKLY, now)
        assert len(debts) == 1

    def test_start_after_end_yields_nothing(self, now):
        assert expand_recurring(TEMPLATE, date(2024, 5, 1), date(2024, 4, 1), MONTHLY, now) == []

    def test_month_end_rolls_over_into_next_month(self, now):
        debts = expand_recurring(TEMPLATE, date(2024, 1, 31), date(2024, 4, 30), MONTHLY, now)
        assert [d.due_date.date() for d in debts] == [
            date(2024, 1, 31), date(2024, 3, 2), date(2024, 4, 2),
        ]
        assert [d.name for d in debts] == [
            "Trả góp điện thoại (Tháng 1/2024)",
            "Trả góp điện thoại (Tháng 3/2024)",
            "Trả góp điện thoại (Tháng 4/2024)",
        ]

    def test_rolled_over_date_counts_against_the_end(self, now):
        debts = expand_recurring(TEMPLATE, date(2024, 1, 31), date(2024, 3, 2), MONTHLY, now)
        assert [d.due_date.date() for d in debts] == [date(2024, 1, 31), date(2024, 3, 2)]

    def test_unknown_cadence(self, now):
        with pytest.raises(ValueError):
            expand_recurring(TEMPLATE, date(2024, 1, 1), date(2024, 2, 1), "daily", now)


class TestSpaylater:
    def test_due_on_tenth_of_next_month(self):
        assert spaylater_due_date(3, 2024) == datetime(2024, 4, 10)

    def test_december_bill_rolls_into_january(self, now):
        debt = spaylater_debt(1_200_000, 12, 2024, now)
        assert debt.due_date == datetime(2025, 1, 10)
        assert resolve_bucket(debt) == BudgetBucket(1, 2025)
        assert debt.name == "SPayLater - Hóa đơn T12"
        assert debt.source == SPAYLATER_SOURCE

    def test_rejects_bad_month(self, now):
        with pytest.raises(ValueError):
            spaylater_debt(100_000, 13, 2024, now)


def test_single_debt_with_and_without_bucket(now):
    plain = single_debt("Vay bạn", "Lan", 500_000, date(2024, 4, 30), now)
    assert plain.due_date == datetime(2024, 4, 30)
    assert resolve_bucket(plain) == BudgetBucket(4, 2024)

    moved = single_debt("Học phí", "Trường", 2_000_000, date(2024, 5, 5), now, BudgetBucket(4, 2024))
    assert resolve_bucket(moved) == BudgetBucket(4, 2024)


@pytest.mark.parametrize("name, expected", [
    ("Trả góp (Tháng 3/2024)", "Trả góp"),
    ("Học thêm (Kỳ 12)", "Học thêm"),
    ("Vay bạn", "Vay bạn"),
])
def test_strip_installment_suffix(name, expected):
    assert strip_installment_suffix(name) == expected


def test_recurring_day_description():
    assert recurring_day_description(date(2024, 1, 15), MONTHLY) == "ngày 15 hàng tháng"
    assert recurring_day_description(date(2024, 1, 1), WEEKLY) == "Thứ 2 hàng tuần"
