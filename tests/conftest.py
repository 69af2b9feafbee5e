import pytest

from tricount.models import Expense, Group, Participant


@pytest.fixture
def trio():
    return Group(
        id="g1",
        name="Trip",
        participants=[
            Participant("alice", "Alice"),
            Participant("bob", "Bob"),
            Participant("carol", "Carol"),
        ],
    )


@pytest.fixture
def trio_expenses():
    return [
        Expense(payer_id="alice", amount=30, involved_ids=["alice", "bob", "carol"], group_id="g1", id="e1"),
        Expense(payer_id="bob", amount=15, involved_ids=["bob", "carol"], group_id="g1", id="e2"),
    ]
