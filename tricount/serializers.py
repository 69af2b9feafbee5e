from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from .money import round_currency, to_decimal
from .models import PAYMENT_COMPLETED, Balance, Expense, ExpenseDebt, Group, Participant, Payment, PaymentSuggestion


def group_from_payload(payload: Mapping[str, Any]) -> Group:
    try:
        participants = [
            Participant(id=str(item["id"]), name=str(item.get("name") or item["id"]))
            for item in payload.get("participants") or []
        ]
        return Group(id=str(payload["id"]), name=str(payload.get("name") or ""), participants=participants)
    except (KeyError, TypeError, AttributeError):
        raise ValueError("invalid_group_payload") from None


def expense_from_payload(payload: Mapping[str, Any]) -> Expense:
    payer_id = payload.get("payer_id", payload.get("payer"))
    involved = payload.get("involved_ids", payload.get("involved"))
    amount = payload.get("amount")

    if payer_id is None or amount is None or involved is None:
        raise ValueError("invalid_expense_payload")
    if not isinstance(involved, list):
        raise ValueError("invalid_expense_payload")

    return Expense(
        payer_id=str(payer_id),
        amount=amount,
        involved_ids=tuple(str(participant_id) for participant_id in involved),
        group_id=_optional_id(payload.get("group_id")),
        id=_optional_id(payload.get("id")),
        title=str(payload.get("title") or ""),
    )


def payment_from_payload(payload: Mapping[str, Any]) -> Payment:
    try:
        return Payment(
            from_id=str(payload["from_id"]),
            to_id=str(payload["to_id"]),
            amount=payload["amount"],
            group_id=_optional_id(payload.get("group_id")),
            id=_optional_id(payload.get("id")),
            status=payload.get("status", PAYMENT_COMPLETED),
        )
    except (KeyError, TypeError, ValueError):
        raise ValueError("invalid_payment_payload") from None


def balance_from_payload(payload: Mapping[str, Any]) -> Balance:
    try:
        amount = to_decimal(payload["amount"])
        participant_id = str(payload["participant_id"])
    except (KeyError, TypeError, ValueError):
        raise ValueError("invalid_balance_payload") from None
    if not amount.is_finite():
        raise ValueError("invalid_balance_payload")

    return Balance(
        participant_id=participant_id,
        participant_name=str(payload.get("participant_name") or participant_id),
        amount=amount,
        group_id=_optional_id(payload.get("group_id")),
        group_name=str(payload.get("group_name") or ""),
    )


def balance_to_dict(balance: Balance) -> Dict[str, Any]:
    return {
        "participant_id": balance.participant_id,
        "participant_name": balance.participant_name,
        "amount": float(balance.rounded),
        "group_id": balance.group_id,
        "group_name": balance.group_name,
    }


def suggestion_to_dict(suggestion: PaymentSuggestion) -> Dict[str, Any]:
    return {
        "from_id": suggestion.from_id,
        "from_name": suggestion.from_name,
        "to_id": suggestion.to_id,
        "to_name": suggestion.to_name,
        "amount": float(suggestion.amount),
        "group_id": suggestion.group_id,
        "group_name": suggestion.group_name,
    }


def debt_to_dict(debt: ExpenseDebt) -> Dict[str, Any]:
    return {
        "expense_id": debt.expense_id,
        "group_id": debt.group_id,
        "payer_id": debt.payer_id,
        "amount": float(round_currency(debt.amount)),
        "debtors": [
            {"participant_id": participant_id, "amount": float(round_currency(share))}
            for participant_id, share in debt.debtors
        ],
    }


def list_payload(payload: Mapping[str, Any], key: str) -> List[Mapping[str, Any]]:
    items = payload.get(key) or []
    if not isinstance(items, list) or not all(isinstance(item, Mapping) for item in items):
        raise ValueError(f"invalid_{key}_payload")
    return items


def _optional_id(value: Any) -> Optional[str]:
    return None if value is None else str(value)
