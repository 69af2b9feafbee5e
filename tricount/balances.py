"""Net balance per participant, recomputed from a group's expenses.

Balances are never stored: every call rebuilds them from the supplied
expenses (and completed payments), so any cached figure elsewhere must
agree with what :func:`compute_balances` returns.
"""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from .errors import InvalidExpenseError, UnknownParticipantError
from .money import MAX_AMOUNT, ZERO, round_currency, to_decimal
from .models import Balance, Expense, ExpenseDebt, Group, Payment

logger = logging.getLogger(__name__)


def compute_balances(
    group: Group,
    expenses: Iterable[Expense],
    payments: Iterable[Payment] = (),
) -> List[Balance]:
    """Return one :class:`Balance` per participant of ``group``, in group order.

    Each expense credits its payer with the full amount and debits every
    involved participant with an equal share. Completed payments are applied
    as offsetting entries; pending ones are ignored.

    Raises :class:`InvalidExpenseError` or :class:`UnknownParticipantError`
    on malformed input, in which case nothing is returned.
    """
    members = group.participant_map()
    totals: Dict[str, Decimal] = {participant_id: ZERO for participant_id in members}

    expense_count = 0
    for expense in expenses:
        amount = _checked_amount(expense.amount, expense.id)
        _check_group_scope(expense.group_id, group, expense.id)
        involved = expense.involved_ids

        if not involved:
            raise InvalidExpenseError("expense has no involved participants", expense.id)
        if len(set(involved)) != len(involved):
            raise InvalidExpenseError("expense lists a participant more than once", expense.id)

        _require_member(members, expense.payer_id, group)
        for participant_id in involved:
            _require_member(members, participant_id, group)

        totals[expense.payer_id] += amount
        share = amount / len(involved)
        for participant_id in involved:
            totals[participant_id] -= share
        expense_count += 1

    for payment in payments:
        if not payment.completed:
            continue
        amount = _checked_amount(payment.amount, payment.id)
        _check_group_scope(payment.group_id, group, payment.id)
        _require_member(members, payment.from_id, group)
        _require_member(members, payment.to_id, group)
        if payment.from_id == payment.to_id:
            raise InvalidExpenseError("payment sender and recipient are the same participant", payment.id)

        totals[payment.from_id] += amount
        totals[payment.to_id] -= amount

    logger.debug("Computed %d balances for group %s from %d expenses", len(totals), group.id, expense_count)

    return [
        Balance(
            participant_id=participant.id,
            participant_name=participant.name,
            amount=totals[participant.id],
            group_id=group.id,
            group_name=group.name,
        )
        for participant in group.participants
    ]


def compute_all_balances(
    groups: Sequence[Group],
    expenses: Iterable[Expense],
    payments: Iterable[Payment] = (),
) -> List[Balance]:
    """Compute balances for several groups at once, concatenated in group order.

    Expenses and payments are routed by ``group_id``. A record without a
    group is only accepted when exactly one group is given.
    """
    by_id: Dict[str, Group] = {}
    for group in groups:
        if group.id in by_id:
            raise ValueError(f"duplicate group id {group.id!r}")
        by_id[group.id] = group

    expenses_by_group: Dict[str, List[Expense]] = {group_id: [] for group_id in by_id}
    payments_by_group: Dict[str, List[Payment]] = {group_id: [] for group_id in by_id}

    for expense in expenses:
        group_id = _route(expense.group_id, by_id, expense.id)
        expenses_by_group[group_id].append(expense)
    for payment in payments:
        group_id = _route(payment.group_id, by_id, payment.id)
        payments_by_group[group_id].append(payment)

    balances: List[Balance] = []
    for group in groups:
        balances.extend(compute_balances(group, expenses_by_group[group.id], payments_by_group[group.id]))
    return balances


def split_expense(expense: Expense) -> ExpenseDebt:
    """Break an expense down into what each involved participant owes the payer.

    Shares are rounded to cents and the last involved participant absorbs
    the rounding remainder, so the shares always add up to the amount. The
    payer's own share is not listed as a debt.
    """
    amount = _checked_amount(expense.amount, expense.id)
    involved = expense.involved_ids
    if not involved:
        raise InvalidExpenseError("expense has no involved participants", expense.id)
    if len(set(involved)) != len(involved):
        raise InvalidExpenseError("expense lists a participant more than once", expense.id)

    return ExpenseDebt.from_shares(expense, amount, _equal_shares(amount, involved))


def group_total(expenses: Iterable[Expense]) -> Decimal:
    total = ZERO
    for expense in expenses:
        total += _checked_amount(expense.amount, expense.id)
    return total


def _equal_shares(amount: Decimal, participant_ids: Sequence[str]) -> List[Tuple[str, Decimal]]:
    count = len(participant_ids)
    per_person = round_currency(amount / count)
    shares: List[Tuple[str, Decimal]] = []
    total_assigned = ZERO

    for participant_id in participant_ids[:-1]:
        shares.append((participant_id, per_person))
        total_assigned += per_person

    shares.append((participant_ids[-1], amount - total_assigned))
    return shares


def _checked_amount(value: Any, record_id: Optional[str]) -> Decimal:
    try:
        amount = to_decimal(value)
    except ValueError:
        raise InvalidExpenseError(f"amount {value!r} is not a number", record_id) from None

    if not amount.is_finite():
        raise InvalidExpenseError(f"amount {value!r} is not finite", record_id)
    if amount < 0:
        raise InvalidExpenseError(f"amount {value!r} is negative", record_id)
    if amount > MAX_AMOUNT:
        raise InvalidExpenseError(f"amount {value!r} exceeds {MAX_AMOUNT}", record_id)
    return amount


def _check_group_scope(group_id: Optional[str], group: Group, record_id: Optional[str]) -> None:
    if group_id is not None and group_id != group.id:
        raise InvalidExpenseError(f"record belongs to group {group_id!r}, not {group.id!r}", record_id)


def _require_member(members: Dict[str, Any], participant_id: str, group: Group) -> None:
    if participant_id not in members:
        raise UnknownParticipantError(participant_id, group.id)


def _route(group_id: Optional[str], by_id: Dict[str, Group], record_id: Optional[str]) -> str:
    if group_id is None:
        if len(by_id) == 1:
            return next(iter(by_id))
        raise InvalidExpenseError("record has no group and several groups were given", record_id)
    if group_id not in by_id:
        raise InvalidExpenseError(f"record belongs to unknown group {group_id!r}", record_id)
    return group_id
