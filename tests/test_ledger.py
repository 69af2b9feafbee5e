from decimal import Decimal

import pytest

from tricount.balances import compute_balances
from tricount.errors import InvalidExpenseError, UnknownParticipantError
from tricount.ledger import GroupLedger
from tricount.models import Expense, Payment


@pytest.fixture
def ledger(trio, trio_expenses):
    ledger = GroupLedger(trio)
    for expense in trio_expenses:
        ledger.add_expense(expense)
    return ledger


def test_cached_summary_matches_recomputation(ledger, trio, trio_expenses):
    assert ledger.total == Decimal("45")
    assert ledger.balances() == compute_balances(trio, trio_expenses)
    assert [(s.from_id, s.amount) for s in ledger.settlements()] == [
        ("carol", Decimal("17.50")),
        ("bob", Decimal("2.50")),
    ]


def test_mutations_invalidate_cache(ledger):
    ledger.balances()
    ledger.remove_expense("e2")

    amounts = {b.participant_id: b.amount for b in ledger.balances()}
    assert amounts == {"alice": Decimal("20"), "bob": Decimal("-10"), "carol": Decimal("-10")}
    assert ledger.total == Decimal("30")


def test_update_expense_changes_total(ledger):
    assert ledger.total == Decimal("45")

    ledger.update_expense(Expense(payer_id="bob", amount=25, involved_ids=["bob", "carol"], group_id="g1", id="e2"))

    assert ledger.total == Decimal("55")


def test_update_unknown_expense(ledger):
    with pytest.raises(KeyError):
        ledger.update_expense(Expense(payer_id="bob", amount=1, involved_ids=["bob"], id="missing"))


def test_invalid_expense_is_not_stored(ledger):
    with pytest.raises(UnknownParticipantError):
        ledger.add_expense(Expense(payer_id="zed", amount=5, involved_ids=["alice"], id="e3"))
    with pytest.raises(InvalidExpenseError):
        ledger.add_expense(Expense(payer_id="alice", amount=5, involved_ids=[], id="e4"))

    assert [e.id for e in ledger.expenses] == ["e1", "e2"]


def test_duplicate_expense_id_rejected(ledger):
    with pytest.raises(ValueError):
        ledger.add_expense(Expense(payer_id="alice", amount=5, involved_ids=["alice"], id="e1"))


def test_completing_payment_settles_debt(ledger):
    ledger.record_payment(Payment(from_id="carol", to_id="alice", amount="17.50", group_id="g1", id="p1"))
    assert len(ledger.settlements()) == 2

    payment = ledger.complete_payment("p1")

    assert payment.completed
    assert [(s.from_id, s.to_id, s.amount) for s in ledger.settlements()] == [("bob", "alice", Decimal("2.50"))]


def test_reconcile_detects_drift(ledger):
    assert ledger.reconcile(Decimal("45.00"))
    assert not ledger.reconcile(Decimal("60"))


def test_reconcile_rejects_non_numbers(ledger):
    with pytest.raises(ValueError):
        ledger.reconcile("lots")
