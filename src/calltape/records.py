from __future__ import annotations

import copy
import logging
import threading
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

logger = logging.getLogger(__name__)


def format_call(name: str, arguments: Sequence[Any], keywords: Mapping[str, Any]) -> str:
    parts = [repr(a) for a in arguments]
    parts.extend(f"{k}={v!r}" for k, v in keywords.items())
    return f"{name}({', '.join(parts)})"


def snapshot_value(value: Any) -> Any:
    """Deep copy of *value* so later mutation can't rewrite history.

    Kept by reference instead when a copy would not compare equal to the
    original: identity-compared objects, containers holding them, and objects
    that refuse to be copied (locks, sockets, generators).
    """
    if type(value).__eq__ is object.__eq__:
        return value
    try:
        copied = copy.deepcopy(value)
    except (TypeError, copy.Error, RecursionError) as exc:
        logger.debug("Keeping %s by reference: %s", type(value).__name__, exc)
        return value
    try:
        same = bool(copied == value)
    except Exception as exc:
        logger.debug("Keeping %s by reference: %s", type(value).__name__, exc)
        return value
    if not same:
        logger.debug("Keeping %s by reference: copy is not equal", type(value).__name__)
        return value
    return copied


@dataclass(frozen=True)
class OperationId:
    """Identity of a called operation: the owning mock plus the name."""

    mock_name: str
    name: str

    def __str__(self) -> str:
        return f"{self.mock_name}.{self.name}"


@dataclass(frozen=True)
class InvocationRecord:
    """One captured call."""

    operation: OperationId
    arguments: tuple[Any, ...]
    keywords: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    sequence: int = 0

    @property
    def name(self) -> str:
        return self.operation.name

    def describe(self) -> str:
        return format_call(str(self.operation), self.arguments, self.keywords)


class SequenceCounter:
    """Strictly increasing sequence numbers shared by every ledger of a session.

    ``lock`` also guards the ledgers' record lists, so issuing a number and
    appending the record happen as one step.
    """

    def __init__(self, start: int = 0) -> None:
        self._next = start
        self.lock = threading.Lock()

    def issue(self) -> int:
        """Return the next number. Caller must hold ``lock``."""
        value = self._next
        self._next += 1
        return value

    @property
    def issued(self) -> int:
        return self._next


class Ledger:
    """Append-only history of the calls made on one mock."""

    def __init__(self, mock_name: str, counter: SequenceCounter) -> None:
        self.mock_name = mock_name
        self.counter = counter
        self._records: list[InvocationRecord] = []

    def append(
        self,
        operation: str,
        arguments: Sequence[Any] = (),
        keywords: Mapping[str, Any] | None = None,
    ) -> int:
        args = tuple(snapshot_value(a) for a in arguments)
        kwargs = MappingProxyType(
            {k: snapshot_value(v) for k, v in (keywords or {}).items()}
        )
        op = OperationId(self.mock_name, operation)
        with self.counter.lock:
            sequence = self.counter.issue()
            self._records.append(
                InvocationRecord(op, args, kwargs, sequence=sequence)
            )
        return sequence

    def snapshot(self) -> tuple[InvocationRecord, ...]:
        with self.counter.lock:
            return tuple(self._records)

    def __len__(self) -> int:
        with self.counter.lock:
            return len(self._records)

    def __iter__(self) -> Iterator[InvocationRecord]:
        return iter(self.snapshot())

    def summary(self) -> str:
        records = self.snapshot()
        if not records:
            return f"{self.mock_name}: no calls"
        lines = [f"{self.mock_name}: {len(records)} call(s)"]
        lines.extend(f"  #{r.sequence} {r.describe()}" for r in records)
        return "\n".join(lines)
