"""Tests for repositories/debt_repo.py."""

import pytest

from repositories.debt_repo import DebtRepository
from services.errors import DebtNotFoundError


def test_add_and_list_keep_creation_order(session, make_debt):
    repo = DebtRepository(session)
    repo.add_many([make_debt(id="a"), make_debt(id="b")])
    repo.add_many([make_debt(id="c")])
    assert [d.id for d in repo.list_all()] == ["a", "b", "c"]


def test_list_all_is_a_copy(session, make_debt):
    repo = DebtRepository(session)
    repo.add_many([make_debt(id="a")])
    repo.list_all().clear()
    assert len(session.debts) == 1


def test_get_by_id(session, make_debt):
    repo = DebtRepository(session)
    repo.add_many([make_debt(id="a")])
    assert repo.get_by_id("a").id == "a"
    with pytest.raises(DebtNotFoundError) as exc:
        repo.get_by_id("zzz")
    assert exc.value.debt_id == "zzz"


def test_replace_keeps_position(session, make_debt):
    repo = DebtRepository(session)
    repo.add_many([make_debt(id="a"), make_debt(id="b"), make_debt(id="c")])
    repo.replace(make_debt(id="b", name="Mới"))
    assert [d.name for d in session.debts] == ["Vay bạn", "Mới", "Vay bạn"]


def test_replace_unknown(session, make_debt):
    with pytest.raises(DebtNotFoundError):
        DebtRepository(session).replace(make_debt(id="ghost"))


def test_delete(session, make_debt):
    repo = DebtRepository(session)
    repo.add_many([make_debt(id="a"), make_debt(id="b")])
    removed = repo.delete("a")
    assert removed.id == "a"
    assert [d.id for d in session.debts] == ["b"]
    with pytest.raises(DebtNotFoundError):
        repo.delete("a")
