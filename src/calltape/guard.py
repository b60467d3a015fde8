from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from calltape.errors import VerificationFailure, format_records
from calltape.records import InvocationRecord

if TYPE_CHECKING:
    from calltape.session import MockHandle

logger = logging.getLogger(__name__)


class InteractionGuard:
    """Bookkeeping for "no interaction" checks.

    Never blocks a call: checkpoints only change what later checks report.
    """

    def __init__(self) -> None:
        self._checkpoints: dict[str, tuple[MockHandle, int]] = {}
        self._verified: set[int] = set()

    def verify_no_interaction(self, handles: Iterable[MockHandle]) -> None:
        for handle in handles:
            records = handle.ledger.snapshot()
            if records:
                raise VerificationFailure(
                    f"Expected no interaction with {handle.name}, "
                    f"but got {len(records)} call(s):\n{format_records(records)}",
                    operation=handle.name,
                    expected=0,
                    actual=len(records),
                    records=records,
                )

    def verify_no_further_interaction(self, handles: Iterable[MockHandle]) -> None:
        for handle in handles:
            length = len(handle.ledger)
            self._checkpoints[handle.mock_id] = (handle, length)
            logger.debug("Checkpoint for %s at %d call(s)", handle.name, length)

    def check_checkpoints(self) -> None:
        """Fail if a checkpointed ledger grew after its checkpoint."""
        extra: list[InvocationRecord] = []
        names: list[str] = []
        for handle, length in self._checkpoints.values():
            records = handle.ledger.snapshot()[length:]
            if records:
                names.append(handle.name)
                extra.extend(records)
        if not extra:
            return
        extra.sort(key=lambda r: r.sequence)
        logger.warning(
            "Calls after a no-further-interaction checkpoint: %s",
            [r.describe() for r in extra],
        )
        raise VerificationFailure(
            f"Expected no further interaction with {', '.join(names)}, "
            f"but got:\n{format_records(extra)}",
            operation=", ".join(names),
            expected="no calls after checkpoint",
            actual=len(extra),
            records=tuple(extra),
        )

    @property
    def has_checkpoints(self) -> bool:
        return bool(self._checkpoints)

    def mark_verified(self, records: Iterable[InvocationRecord]) -> None:
        self._verified.update(r.sequence for r in records)

    def unverified(self, handle: MockHandle) -> tuple[InvocationRecord, ...]:
        return tuple(
            r for r in handle.ledger.snapshot() if r.sequence not in self._verified
        )

    def verify_no_other_interactions(self, handles: Iterable[MockHandle]) -> None:
        for handle in handles:
            leftover = self.unverified(handle)
            if leftover:
                raise VerificationFailure(
                    f"Expected every call to {handle.name} to be verified, "
                    f"but {len(leftover)} were not:\n{format_records(leftover)}",
                    operation=handle.name,
                    expected=0,
                    actual=len(leftover),
                    records=leftover,
                )
