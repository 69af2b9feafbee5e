from .balances import compute_all_balances, compute_balances, group_total, split_expense
from .errors import (
    InconsistentBalanceWarning,
    InvalidExpenseError,
    TricountError,
    UnknownParticipantError,
)
from .ledger import GroupLedger
from .models import Balance, Expense, ExpenseDebt, Group, Participant, Payment, PaymentSuggestion
from .settlements import settle_groups, suggest_settlements

__all__ = [
    "Balance",
    "Expense",
    "ExpenseDebt",
    "Group",
    "GroupLedger",
    "InconsistentBalanceWarning",
    "InvalidExpenseError",
    "Participant",
    "Payment",
    "PaymentSuggestion",
    "TricountError",
    "UnknownParticipantError",
    "compute_all_balances",
    "compute_balances",
    "group_total",
    "settle_groups",
    "split_expense",
    "suggest_settlements",
]
