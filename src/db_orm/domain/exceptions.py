"""Exceptions raised by the ORM.

Callers only ever need to catch OrmError: every validation failure and every
lower-level storage failure surfaces as one, carrying a human-readable
message. InvariantViolation is deliberately NOT an OrmError - it signals a
broken primary-key or driver contract, or a logical column kind nobody wired
up, and should never be handled as bad input.
"""

from __future__ import annotations


class OrmError(Exception):
    """Raised when the ORM rejects a value or an operation fails."""


class InvariantViolation(RuntimeError):
    """Raised when an internal invariant of the ORM no longer holds."""


class UnhandledTypeError(InvariantViolation):
    """Raised when a column's logical data type has no coercion rule."""

    def __init__(self, data_type: str) -> None:
        super().__init__(f"unhandled column type {data_type}")
        self.data_type = data_type
