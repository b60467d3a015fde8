from __future__ import annotations

import logging

from calltape.errors import EmptyOrderQuery, OrderViolation
from calltape.records import InvocationRecord
from calltape.verification import VerificationResult

logger = logging.getLogger(__name__)


def in_order(*results: VerificationResult) -> tuple[InvocationRecord, ...]:
    """Assert the verified calls happened in this relative order.

    One record is placed per result, each with a larger sequence number than
    the previous placement. The earliest usable record is always taken, which
    never rules out a placement that some later choice would have allowed.
    Unrelated calls in between and repeated calls are fine.

    Returns the placed records.
    """
    if not results:
        return ()
    sessions = {id(r.session) for r in results}
    if len(sessions) > 1:
        raise ValueError(
            "in_order() got results from different sessions; their sequence "
            "numbers are not comparable."
        )

    for index, result in enumerate(results, start=1):
        if not result.records:
            raise EmptyOrderQuery(
                f"In-order check #{index} {result.query.describe()} matched no calls, "
                f"so there is nothing to order.",
                operation=result.query.describe(),
                expected="at least 1 call",
                actual=0,
            )

    placed: list[InvocationRecord] = []
    last = -1
    for index, result in enumerate(results, start=1):
        pick = next((r for r in result.records if r.sequence > last), None)
        if pick is None:
            previous = placed[-1]
            raise OrderViolation(
                f"Expected {result.query.describe()} (check #{index}) to be called "
                f"after {previous.describe()} (#{previous.sequence}), "
                f"but its calls were at {result.sequences}.",
                operation=result.query.describe(),
                expected=f"a call after #{previous.sequence}",
                actual=result.sequences,
                records=tuple(placed),
            )
        placed.append(pick)
        last = pick.sequence

    logger.debug("In order: %s", [r.sequence for r in placed])
    return tuple(placed)
