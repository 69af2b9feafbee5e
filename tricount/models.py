from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Iterable, Optional, Tuple

from .money import round_currency

PAYMENT_PENDING = "pending"
PAYMENT_COMPLETED = "completed"
PAYMENT_STATUSES = (PAYMENT_PENDING, PAYMENT_COMPLETED)


@dataclass(frozen=True)
class Participant:
    id: str
    name: str


@dataclass(frozen=True)
class Group:
    id: str
    name: str
    participants: Tuple[Participant, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "participants", tuple(self.participants))
        seen = set()
        for participant in self.participants:
            if participant.id in seen:
                raise ValueError(f"duplicate participant id {participant.id!r} in group {self.id!r}")
            seen.add(participant.id)

    def participant_map(self) -> Dict[str, Participant]:
        return {participant.id: participant for participant in self.participants}


@dataclass(frozen=True)
class Expense:
    """An amount paid by one participant on behalf of ``involved_ids``.

    ``amount`` is kept as supplied; the balance calculator validates it.
    A ``group_id`` of None leaves the group scoping to the caller.
    """

    payer_id: str
    amount: Any
    involved_ids: Tuple[str, ...]
    group_id: Optional[str] = None
    id: Optional[str] = None
    title: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "involved_ids", tuple(self.involved_ids))


@dataclass(frozen=True)
class Payment:
    """A transfer between two participants, as recorded by the application."""

    from_id: str
    to_id: str
    amount: Any
    group_id: Optional[str] = None
    id: Optional[str] = None
    status: str = PAYMENT_PENDING

    def __post_init__(self) -> None:
        if self.status not in PAYMENT_STATUSES:
            raise ValueError(f"invalid payment status {self.status!r}")

    @property
    def completed(self) -> bool:
        return self.status == PAYMENT_COMPLETED


@dataclass(frozen=True)
class Balance:
    participant_id: str
    participant_name: str
    amount: Decimal
    group_id: Optional[str] = None
    group_name: str = ""

    @property
    def rounded(self) -> Decimal:
        return round_currency(self.amount)


@dataclass(frozen=True)
class PaymentSuggestion:
    from_id: str
    from_name: str
    to_id: str
    to_name: str
    amount: Decimal
    group_id: Optional[str] = None
    group_name: str = ""


@dataclass(frozen=True)
class ExpenseDebt:
    expense_id: Optional[str]
    group_id: Optional[str]
    payer_id: str
    amount: Decimal
    debtors: Tuple[Tuple[str, Decimal], ...] = field(default_factory=tuple)

    @classmethod
    def from_shares(
        cls,
        expense: Expense,
        amount: Decimal,
        shares: Iterable[Tuple[str, Decimal]],
    ) -> "ExpenseDebt":
        return cls(
            expense_id=expense.id,
            group_id=expense.group_id,
            payer_id=expense.payer_id,
            amount=amount,
            debtors=tuple((user_id, share) for user_id, share in shares if user_id != expense.payer_id),
        )
