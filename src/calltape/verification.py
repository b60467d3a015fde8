from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from calltape.counts import CountMatcher, once
from calltape.errors import VerificationFailure
from calltape.matchers import ANY_ARGS, ArgumentMatcher, Capture, as_matcher
from calltape.records import InvocationRecord, Ledger, format_call

if TYPE_CHECKING:
    from calltape.session import MockHandle, Session

logger = logging.getLogger(__name__)


class VerificationQuery:
    """Selects the records of one operation whose arguments satisfy the matchers.

    Args:
        mock_name: Display name of the mock, used in messages only.
        name:      Operation name to select.
        matchers:  Positional matchers, or None to accept any arguments.
        keywords:  Keyword matchers by name (ignored when matchers is None).
    """

    def __init__(
        self,
        mock_name: str,
        name: str,
        matchers: Sequence[ArgumentMatcher] | None,
        keywords: Mapping[str, ArgumentMatcher] | None = None,
    ) -> None:
        self.mock_name = mock_name
        self.name = name
        self.matchers = tuple(matchers) if matchers is not None else None
        self.keywords = dict(keywords or {})

    @classmethod
    def build(
        cls,
        mock_name: str,
        name: str,
        args: Sequence[Any],
        kwargs: Mapping[str, Any],
    ) -> VerificationQuery:
        """Wrap raw values in Literal matchers; ``ANY_ARGS`` alone matches anything."""
        if len(args) == 1 and args[0] is ANY_ARGS and not kwargs:
            return cls(mock_name, name, None)
        return cls(
            mock_name,
            name,
            [as_matcher(a) for a in args],
            {k: as_matcher(v) for k, v in kwargs.items()},
        )

    def accepts(self, record: InvocationRecord) -> bool:
        if record.name != self.name:
            return False
        if self.matchers is None:
            return True
        if len(record.arguments) != len(self.matchers) or set(record.keywords) != set(
            self.keywords
        ):
            logger.debug(
                "Arity mismatch, excluding #%d %s from %s",
                record.sequence,
                record.describe(),
                self.describe(),
            )
            return False
        pairs = list(zip(self.matchers, record.arguments))
        pairs.extend((m, record.keywords[k]) for k, m in self.keywords.items())
        for matcher, value in pairs:
            try:
                matched = matcher.matches(value)
            except Exception as exc:
                logger.debug(
                    "%s raised on #%d %s, treating as no match: %r",
                    matcher.describe(),
                    record.sequence,
                    record.describe(),
                    exc,
                )
                return False
            if not matched:
                return False
        return True

    def scan(self, ledger: Ledger) -> tuple[InvocationRecord, ...]:
        return tuple(r for r in ledger.snapshot() if self.accepts(r))

    def near_misses(self, ledger: Ledger) -> tuple[InvocationRecord, ...]:
        """Records of the same operation that the matchers rejected."""
        return tuple(
            r for r in ledger.snapshot() if r.name == self.name and not self.accepts(r)
        )

    def capture(self, records: Sequence[InvocationRecord]) -> None:
        if self.matchers is None:
            return
        for record in records:
            for matcher, value in zip(self.matchers, record.arguments):
                if isinstance(matcher, Capture):
                    matcher.capture(value)
            for key, matcher in self.keywords.items():
                if isinstance(matcher, Capture):
                    matcher.capture(record.keywords[key])

    def describe(self) -> str:
        full_name = f"{self.mock_name}.{self.name}"
        if self.matchers is None:
            return f"{full_name}(ANY_ARGS)"
        return format_call(full_name, self.matchers, self.keywords)

    def __repr__(self) -> str:
        return f"<VerificationQuery {self.describe()}>"


@dataclass(frozen=True)
class VerificationResult:
    """Records that satisfied a verification, in sequence order."""

    query: VerificationQuery
    count: CountMatcher
    records: tuple[InvocationRecord, ...]
    session: Session

    def __iter__(self) -> Iterator[InvocationRecord]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)

    @property
    def sequences(self) -> list[int]:
        return [r.sequence for r in self.records]

    def describe(self) -> str:
        return f"{self.query.describe()} [{self.count.describe()}]"


class Verifier:
    """Captures the next call and verifies it against the mock's ledger.

    Returned by ``verify(mock, count)``; ``verify(mock).send("a")`` checks that
    ``send("a")`` was recorded as many times as ``count`` demands.
    """

    def __init__(self, handle: MockHandle, count: CountMatcher | None = None) -> None:
        self._handle = handle
        self._count = count if count is not None else once()

    def __getattr__(self, name: str) -> Any:
        if name.startswith("__") and name.endswith("__"):
            raise AttributeError(name)

        def capture(*args: Any, **kwargs: Any) -> VerificationResult:
            return self._check(name, args, kwargs)

        return capture

    def __call__(self, *args: Any, **kwargs: Any) -> VerificationResult:
        return self._check("__call__", args, kwargs)

    def __getitem__(self, key: Any) -> VerificationResult:
        return self._check("__getitem__", (key,), {})

    def _check(
        self, name: str, args: tuple[Any, ...], kwargs: dict[str, Any]
    ) -> VerificationResult:
        handle = self._handle
        query = VerificationQuery.build(handle.name, name, args, kwargs)
        matched = query.scan(handle.ledger)
        if not self._count.evaluate(len(matched)):
            raise VerificationFailure.count_mismatch(
                query.describe(),
                self._count.describe(),
                len(matched),
                query.near_misses(handle.ledger),
            )
        query.capture(matched)
        handle.session.mark_verified(matched)
        logger.debug(
            "Verified %s %s (%d match(es))",
            query.describe(),
            self._count.describe(),
            len(matched),
        )
        return VerificationResult(query, self._count, matched, handle.session)
