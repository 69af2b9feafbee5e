from __future__ import annotations

import logging
import warnings
from dataclasses import replace
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Optional, Sequence

from .balances import compute_all_balances
from .errors import InconsistentBalanceWarning
from .money import NEGLIGIBLE_CENTS, ZERO, from_cents, is_negligible, round_currency, split_cents, to_decimal
from .models import Balance, Expense, Group, Payment, PaymentSuggestion

logger = logging.getLogger(__name__)


def suggest_settlements(balances: Iterable[Balance]) -> List[PaymentSuggestion]:
    """Greedy largest-debtor to largest-creditor matching, one group at a time.

    Debts are never netted across groups. Each group's balances are first
    moved to whole cents, handing out the leftover cents by largest
    remainder so a group that nets to zero still nets to exactly zero.
    A group whose balances do not add up to zero still gets best-effort
    suggestions; whatever cannot be matched is dropped after an
    :class:`InconsistentBalanceWarning`. Entries without a finite amount
    are skipped.
    """
    groups: Dict[Optional[str], List[Balance]] = {}
    for balance in balances:
        try:
            amount = to_decimal(balance.amount)
        except ValueError:
            amount = None
        if amount is None or not amount.is_finite():
            logger.warning("Skipping balance of %s with amount %r", balance.participant_id, balance.amount)
            continue
        if amount is not balance.amount:
            balance = replace(balance, amount=amount)
        groups.setdefault(balance.group_id, []).append(balance)

    suggestions: List[PaymentSuggestion] = []
    for group_id, group_balances in groups.items():
        _check_zero_sum(group_id, group_balances)
        suggestions.extend(_settle_group(group_balances))
    return suggestions


def settle_groups(
    groups: Sequence[Group],
    expenses: Iterable[Expense],
    payments: Iterable[Payment] = (),
) -> List[PaymentSuggestion]:
    return suggest_settlements(compute_all_balances(groups, expenses, payments))


def _to_group_cents(balances: List[Balance]) -> List[int]:
    parts = [split_cents(b.amount) for b in balances]
    cents = [whole for whole, _ in parts]
    leftover = int(sum((fraction for _, fraction in parts), ZERO).quantize(Decimal(1), rounding=ROUND_HALF_UP))

    by_remainder = sorted(range(len(parts)), key=lambda i: parts[i][1], reverse=True)
    for i in by_remainder[:leftover]:
        cents[i] += 1
    return cents


def _settle_group(balances: List[Balance]) -> List[PaymentSuggestion]:
    # Remaining amounts live in local lists; the Balance records stay untouched.
    cents = _to_group_cents(balances)
    debtors = sorted((i for i, c in enumerate(cents) if c < 0), key=lambda i: cents[i])
    creditors = sorted((i for i, c in enumerate(cents) if c > 0), key=lambda i: cents[i], reverse=True)
    debtor_left = [-cents[i] for i in debtors]
    creditor_left = [cents[i] for i in creditors]

    settlements: List[PaymentSuggestion] = []
    debtor_idx = 0
    creditor_idx = 0

    while debtor_idx < len(debtors) and creditor_idx < len(creditors):
        debtor = balances[debtors[debtor_idx]]
        creditor = balances[creditors[creditor_idx]]

        settled_cents = min(debtor_left[debtor_idx], creditor_left[creditor_idx])
        if settled_cents > NEGLIGIBLE_CENTS:
            settlements.append(
                PaymentSuggestion(
                    from_id=debtor.participant_id,
                    from_name=debtor.participant_name,
                    to_id=creditor.participant_id,
                    to_name=creditor.participant_name,
                    amount=from_cents(settled_cents),
                    group_id=debtor.group_id,
                    group_name=debtor.group_name,
                )
            )

        debtor_left[debtor_idx] -= settled_cents
        creditor_left[creditor_idx] -= settled_cents

        if debtor_left[debtor_idx] < NEGLIGIBLE_CENTS:
            debtor_idx += 1
        if creditor_left[creditor_idx] < NEGLIGIBLE_CENTS:
            creditor_idx += 1

    return settlements


def _check_zero_sum(group_id: Optional[str], balances: List[Balance]) -> None:
    residual = sum((b.amount for b in balances), ZERO)
    if is_negligible(residual):
        return

    message = f"balances of group {group_id!r} do not sum to zero (residual {round_currency(residual)})"
    logger.warning(message)
    warnings.warn(message, InconsistentBalanceWarning, stacklevel=3)
