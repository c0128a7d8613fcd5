"""Transaction-related types.

A statement executor holds at most one open transaction at a time. Model.save()
is the only caller that opens one, and it always ends it with commit() or
rollback().

    IDLE ──begin()──> ACTIVE ──commit()───> COMMITTED
                         │
                         └────rollback()──> ROLLED_BACK

COMMITTED and ROLLED_BACK behave like IDLE: a new transaction may begin.
"""

from __future__ import annotations

from enum import Enum, auto


class TransactionState(Enum):
    """Transaction lifecycle states of a statement executor."""

    IDLE = auto()
    """No transaction has been started on this connection yet."""

    ACTIVE = auto()
    """A transaction is open; writes are not yet durable."""

    COMMITTED = auto()
    """The last transaction committed."""

    ROLLED_BACK = auto()
    """The last transaction was rolled back."""

    def is_active(self) -> bool:
        """Check if a transaction is currently open."""
        return self == TransactionState.ACTIVE

    def is_terminal(self) -> bool:
        """Check if the last transaction has ended."""
        return self in (TransactionState.COMMITTED, TransactionState.ROLLED_BACK)

    def can_begin(self) -> bool:
        """Check if a new transaction may be started."""
        return not self.is_active()

    def can_commit(self) -> bool:
        """Check if commit() is legal in this state."""
        return self.is_active()

    def can_rollback(self) -> bool:
        """Check if rollback() is legal in this state."""
        return self.is_active()
