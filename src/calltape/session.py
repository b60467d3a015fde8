from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from calltape.counts import CountMatcher
from calltape.errors import UnknownMockError
from calltape.guard import InteractionGuard
from calltape.ordering import in_order as _in_order
from calltape.records import InvocationRecord, Ledger, SequenceCounter, format_call
from calltape.verification import VerificationResult, Verifier

if TYPE_CHECKING:
    from calltape.mocks import Mock

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MockHandle:
    """What the core knows about a mock: its id, display name, ledger and session."""

    mock_id: str
    name: str
    ledger: Ledger
    session: Session


def handle_of(target: Any) -> MockHandle:
    handle = getattr(target, "_calltape_handle", None)
    if not isinstance(handle, MockHandle):
        raise TypeError(f"{target!r} is not a calltape mock.")
    return handle


class Session:
    """Scope of one test: owns the sequence counter and every mock's ledger.

    All mocks created by a session share one counter, so calls can be ordered
    across mocks. A fresh session starts numbering at 0 again, which keeps
    one test's history out of the next.

    Args:
        name:  Shown in logs and summaries.
        debug: Log every intercepted call. Also on when CALLTAPE_DEBUG=1.
    """

    def __init__(self, name: str = "calltape", debug: bool = False) -> None:
        self.name = name
        self.debug = debug or os.environ.get("CALLTAPE_DEBUG", "").strip() == "1"
        self.counter = SequenceCounter()
        self.guard = InteractionGuard()
        self._handles: dict[str, MockHandle] = {}

    def __enter__(self) -> Session:
        logger.info("Session %s opened", self.name)
        return self

    def __exit__(
        self, exc_type: type | None, exc: BaseException | None, tb: object
    ) -> None:
        logger.info(
            "Session %s closed (%d mock(s), %d call(s))",
            self.name,
            len(self._handles),
            self.counter.issued,
        )
        if exc_type is None:
            self.check_checkpoints()

    # ------------------------------------------------------------------ #
    # Mock registry — the proxy boundary                                  #
    # ------------------------------------------------------------------ #

    def register(self, name: str) -> MockHandle:
        """Give a new mock its ledger. Adapters call this once per double."""
        mock_id = f"{name}#{len(self._handles)}"
        handle = MockHandle(mock_id, name, Ledger(name, self.counter), self)
        self._handles[mock_id] = handle
        return handle

    def mock(self, name: str = "mock", spec: type | None = None) -> Mock:
        from calltape.mocks import Mock

        return Mock(name, spec=spec, session=self)

    def on_intercept(
        self,
        mock_id: str,
        operation: str,
        arguments: Sequence[Any] = (),
        keywords: Mapping[str, Any] | None = None,
    ) -> int:
        """Record one intercepted call and return its sequence number."""
        try:
            handle = self._handles[mock_id]
        except KeyError:
            raise UnknownMockError(mock_id) from None
        sequence = handle.ledger.append(operation, arguments, keywords)
        if self.debug:
            logger.debug(
                "INTERCEPT #%d %s",
                sequence,
                format_call(f"{handle.name}.{operation}", arguments, keywords or {}),
            )
        return sequence

    @property
    def handles(self) -> list[MockHandle]:
        return list(self._handles.values())

    def _own(self, target: Any) -> MockHandle:
        handle = handle_of(target)
        if handle.session is not self:
            raise ValueError(f"{handle.name} belongs to session {handle.session.name!r}.")
        return handle

    # ------------------------------------------------------------------ #
    # Verification                                                         #
    # ------------------------------------------------------------------ #

    def verify(self, target: Any, count: CountMatcher | None = None) -> Verifier:
        return Verifier(self._own(target), count)

    def in_order(self, *results: VerificationResult) -> tuple[InvocationRecord, ...]:
        return _in_order(*results)

    def mark_verified(self, records: Iterable[InvocationRecord]) -> None:
        self.guard.mark_verified(records)

    def verify_no_interaction(self, *targets: Any) -> None:
        self.guard.verify_no_interaction(self._own(t) for t in targets)

    def verify_no_further_interaction(self, *targets: Any) -> None:
        self.guard.verify_no_further_interaction(self._own(t) for t in targets)

    def verify_no_other_interactions(self, *targets: Any) -> None:
        self.guard.verify_no_other_interactions(self._own(t) for t in targets)

    def check_checkpoints(self) -> None:
        self.guard.check_checkpoints()

    # ------------------------------------------------------------------ #
    # Debug                                                                #
    # ------------------------------------------------------------------ #

    def records(self) -> list[InvocationRecord]:
        """Every record of every mock, in global sequence order."""
        merged = [r for h in self._handles.values() for r in h.ledger.snapshot()]
        merged.sort(key=lambda r: r.sequence)
        return merged

    def summary(self) -> str:
        records = self.records()
        lines = [
            f"Session        : {self.name}",
            f"Mocks          : {[h.name for h in self._handles.values()]}",
            f"Calls recorded : {len(records)}",
        ]
        lines.extend(f"  #{r.sequence} {r.describe()}" for r in records)
        return "\n".join(lines)

    def print_summary(self) -> None:
        print("\n" + self.summary())


_default_session: Session | None = None


def default_session() -> Session:
    """Session used by mocks created without one."""
    global _default_session
    if _default_session is None:
        _default_session = Session("default")
    return _default_session


def reset_default_session(session: Session | None = None) -> Session:
    """Replace the default session, with *session* or a fresh one."""
    global _default_session
    _default_session = session if session is not None else Session("default")
    return _default_session


# ---------------------------------------------------------------------- #
# Module-level API — each call routes to the session owning the mock     #
# ---------------------------------------------------------------------- #


def verify(target: Any, count: CountMatcher | None = None) -> Verifier:
    """``verify(mock, count).op(*args)`` checks how often ``op(*args)`` was recorded."""
    return handle_of(target).session.verify(target, count)


def in_order(*results: VerificationResult) -> tuple[InvocationRecord, ...]:
    return _in_order(*results)


def verify_no_interaction(*targets: Any) -> None:
    for target in targets:
        handle_of(target).session.verify_no_interaction(target)


def verify_no_further_interaction(*targets: Any) -> None:
    for target in targets:
        handle_of(target).session.verify_no_further_interaction(target)


def verify_no_other_interactions(*targets: Any) -> None:
    for target in targets:
        handle_of(target).session.verify_no_other_interactions(target)
