from decimal import Decimal

import pytest

from tricount.models import Balance, PaymentSuggestion
from tricount.serializers import (
    balance_from_payload,
    balance_to_dict,
    expense_from_payload,
    group_from_payload,
    payment_from_payload,
    suggestion_to_dict,
)


def test_ids_are_normalized_to_strings():
    group = group_from_payload({"id": 7, "name": "Flat", "participants": [{"id": 1, "name": "Ann"}, {"id": 2}]})
    expense = expense_from_payload({"payer_id": 1, "amount": "9.99", "involved_ids": [1, 2], "group_id": 7})

    assert group.id == "7"
    assert [(p.id, p.name) for p in group.participants] == [("1", "Ann"), ("2", "2")]
    assert expense.payer_id == "1"
    assert expense.involved_ids == ("1", "2")
    assert expense.group_id == "7"


@pytest.mark.parametrize(
    "payload",
    [
        {"amount": 5, "involved_ids": ["a"]},
        {"payer_id": "a", "involved_ids": ["a"]},
        {"payer_id": "a", "amount": 5, "involved_ids": "a"},
    ],
)
def test_incomplete_expense_payload(payload):
    with pytest.raises(ValueError, match="invalid_expense_payload"):
        expense_from_payload(payload)


def test_payment_status_is_validated():
    with pytest.raises(ValueError, match="invalid_payment_payload"):
        payment_from_payload({"from_id": "a", "to_id": "b", "amount": 1, "status": "lost"})


def test_balance_payload_requires_finite_amount():
    with pytest.raises(ValueError, match="invalid_balance_payload"):
        balance_from_payload({"participant_id": "a", "amount": "Infinity"})


def test_amounts_serialized_as_rounded_floats():
    balance = Balance("a", "Ann", Decimal("6.666666666666666666666666667"), "g", "G")
    suggestion = PaymentSuggestion("b", "Bob", "a", "Ann", Decimal("3.33"), "g", "G")

    assert balance_to_dict(balance)["amount"] == 6.67
    assert suggestion_to_dict(suggestion) == {
        "from_id": "b",
        "from_name": "Bob",
        "to_id": "a",
        "to_name": "Ann",
        "amount": 3.33,
        "group_id": "g",
        "group_name": "G",
    }
