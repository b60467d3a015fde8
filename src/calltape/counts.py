from __future__ import annotations


class CountMatcher:
    """A condition on how many recorded calls matched a query."""

    def __init__(self, n: int) -> None:
        if isinstance(n, bool) or not isinstance(n, int):
            raise ValueError(f"Call count must be an integer, got {n!r}.")
        if n < 0:
            raise ValueError(f"Call count must be >= 0, got {n}.")
        self.n = n

    def evaluate(self, actual: int) -> bool:
        raise NotImplementedError

    def describe(self) -> str:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.n})"

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and self.n == other.n  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.n))


def _times(n: int) -> str:
    return "1 time" if n == 1 else f"{n} times"


class Exactly(CountMatcher):
    def evaluate(self, actual: int) -> bool:
        return actual == self.n

    def describe(self) -> str:
        if self.n == 0:
            return "never"
        return f"exactly {_times(self.n)}"


class AtLeast(CountMatcher):
    def evaluate(self, actual: int) -> bool:
        return actual >= self.n

    def describe(self) -> str:
        return f"at least {_times(self.n)}"


class AtMost(CountMatcher):
    def evaluate(self, actual: int) -> bool:
        return actual <= self.n

    def describe(self) -> str:
        return f"at most {_times(self.n)}"


def times(n: int) -> Exactly:
    return Exactly(n)


def once() -> Exactly:
    return Exactly(1)


def at_least(n: int) -> AtLeast:
    return AtLeast(n)


def at_most(n: int) -> AtMost:
    return AtMost(n)


def never() -> Exactly:
    return Exactly(0)
