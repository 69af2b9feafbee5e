from typing import Optional


class TricountError(Exception):
    """Base class for errors raised while computing balances."""

    code = "tricount_error"


class InvalidExpenseError(TricountError, ValueError):
    code = "invalid_expense"

    def __init__(self, message: str, expense_id: Optional[str] = None) -> None:
        super().__init__(message)
        self.expense_id = expense_id


class UnknownParticipantError(TricountError, KeyError):
    code = "unknown_participant"

    def __init__(self, participant_id: str, group_id: Optional[str] = None) -> None:
        super().__init__(participant_id)
        self.participant_id = participant_id
        self.group_id = group_id

    def __str__(self) -> str:
        if self.group_id is None:
            return f"unknown participant {self.participant_id!r}"
        return f"unknown participant {self.participant_id!r} in group {self.group_id!r}"


class InconsistentBalanceWarning(RuntimeWarning):
    """Issued when a group's balances handed to the planner do not net to zero."""
