from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from calltape.records import InvocationRecord


def format_records(records: Sequence[InvocationRecord]) -> str:
    if not records:
        return "  (none)"
    return "\n".join(f"  #{r.sequence} {r.describe()}" for r in records)


class VerificationFailure(AssertionError):
    """A count or interaction condition was not met.

    Attributes:
        operation: What was being verified (e.g. ``mailer.send('a')``).
        expected:  The condition, e.g. ``exactly 1 time``.
        actual:    What was observed, usually a call count.
        records:   Records worth showing: near misses or unexpected calls.
    """

    def __init__(
        self,
        message: str,
        *,
        operation: str = "",
        expected: Any = None,
        actual: Any = None,
        records: tuple[InvocationRecord, ...] = (),
    ) -> None:
        self.operation = operation
        self.expected = expected
        self.actual = actual
        self.records = tuple(records)
        super().__init__(message)

    @classmethod
    def count_mismatch(
        cls,
        operation: str,
        expected: str,
        actual: int,
        near_misses: tuple[InvocationRecord, ...],
    ) -> VerificationFailure:
        message = (
            f"Expected {operation} to be called {expected}, "
            f"but it was called {actual} time(s)."
        )
        if near_misses:
            message += (
                f"\nOther calls to the same operation:\n{format_records(near_misses)}"
            )
        return cls(
            message,
            operation=operation,
            expected=expected,
            actual=actual,
            records=near_misses,
        )


class OrderViolation(VerificationFailure):
    """No strictly increasing placement of the in-order results exists."""


class EmptyOrderQuery(VerificationFailure):
    """An in-order input matched no records, so there is nothing to order."""


class UnknownMockError(KeyError):
    def __init__(self, mock_id: str) -> None:
        self.mock_id = mock_id
        super().__init__(f"No mock registered under id {mock_id!r} in this session.")

    def __str__(self) -> str:
        return str(self.args[0])
