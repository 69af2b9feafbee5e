from __future__ import annotations

import logging
from dataclasses import replace
from decimal import Decimal
from typing import Dict, List, Optional

from .balances import compute_balances, group_total
from .money import amounts_close, to_decimal
from .models import PAYMENT_COMPLETED, Balance, Expense, Group, Payment, PaymentSuggestion
from .settlements import suggest_settlements

logger = logging.getLogger(__name__)


class GroupLedger:
    """Expenses and payments of one group with a cached summary.

    The cached total, balances and settlements are a view over the stored
    records: any mutation drops them and the next read recomputes them
    from scratch.
    """

    def __init__(self, group: Group) -> None:
        self.group = group
        self._expenses: Dict[str, Expense] = {}
        self._payments: Dict[str, Payment] = {}
        self._total: Optional[Decimal] = None
        self._balances: Optional[List[Balance]] = None
        self._settlements: Optional[List[PaymentSuggestion]] = None

    @property
    def expenses(self) -> List[Expense]:
        return list(self._expenses.values())

    @property
    def payments(self) -> List[Payment]:
        return list(self._payments.values())

    def add_expense(self, expense: Expense) -> None:
        if expense.id is None:
            raise ValueError("expense must have an id to be stored")
        if expense.id in self._expenses:
            raise ValueError(f"expense {expense.id!r} already exists")
        self._store_expense(expense)

    def update_expense(self, expense: Expense) -> None:
        if expense.id not in self._expenses:
            raise KeyError(expense.id)
        self._store_expense(expense)

    def remove_expense(self, expense_id: str) -> Expense:
        expense = self._expenses.pop(expense_id)
        self._invalidate()
        return expense

    def record_payment(self, payment: Payment) -> None:
        if payment.id is None:
            raise ValueError("payment must have an id to be stored")
        if payment.id in self._payments:
            raise ValueError(f"payment {payment.id!r} already exists")
        # Validate against the group before storing anything.
        compute_balances(self.group, (), [_as_completed(payment)])
        self._payments[payment.id] = payment
        self._invalidate()

    def complete_payment(self, payment_id: str) -> Payment:
        payment = self._payments[payment_id]
        if not payment.completed:
            payment = _as_completed(payment)
            self._payments[payment_id] = payment
            self._invalidate()
        return payment

    @property
    def total(self) -> Decimal:
        if self._total is None:
            self._total = group_total(self._expenses.values())
        return self._total

    def balances(self) -> List[Balance]:
        if self._balances is None:
            self._balances = compute_balances(self.group, self._expenses.values(), self._payments.values())
        return list(self._balances)

    def settlements(self) -> List[PaymentSuggestion]:
        if self._settlements is None:
            self._settlements = suggest_settlements(self.balances())
        return list(self._settlements)

    def reconcile(self, cached_total: Decimal) -> bool:
        """Check an externally cached group total against the stored expenses."""
        in_sync = amounts_close(to_decimal(cached_total), self.total)
        if not in_sync:
            logger.info("Cached total %s of group %s drifted from %s", cached_total, self.group.id, self.total)
        return in_sync

    def _store_expense(self, expense: Expense) -> None:
        # Raises before anything is stored if the expense is invalid for this group.
        compute_balances(self.group, [expense])
        self._expenses[expense.id] = expense
        self._invalidate()

    def _invalidate(self) -> None:
        self._total = None
        self._balances = None
        self._settlements = None


def _as_completed(payment: Payment) -> Payment:
    return replace(payment, status=PAYMENT_COMPLETED)
