"""Argument matchers — predicates over one recorded argument value.

Raw values passed to a verification are wrapped in :class:`Literal`. Richer
checks (regexes, ranges, ...) are just :class:`Predicate` instances::

    verify(mailer).send(Predicate(lambda s: s.startswith("Hi"), "greeting"))
"""

from __future__ import annotations

from typing import Any, Callable


class ArgumentMatcher:
    """Base class. Subclasses implement :meth:`matches` and :meth:`describe`."""

    def matches(self, value: Any) -> bool:
        raise NotImplementedError

    def describe(self) -> str:
        raise NotImplementedError

    def __repr__(self) -> str:
        return self.describe()


class Literal(ArgumentMatcher):
    """Matches iff the argument equals ``value``."""

    def __init__(self, value: Any) -> None:
        self.value = value

    def matches(self, value: Any) -> bool:
        return bool(value == self.value)

    def describe(self) -> str:
        return repr(self.value)


class AnyValue(ArgumentMatcher):
    def matches(self, value: Any) -> bool:
        return True

    def describe(self) -> str:
        return "ANY"


class InstanceOf(ArgumentMatcher):
    def __init__(self, *types: type) -> None:
        if not types:
            raise ValueError("InstanceOf needs at least one type.")
        self.types = types

    def matches(self, value: Any) -> bool:
        return isinstance(value, self.types)

    def describe(self) -> str:
        names = ", ".join(t.__name__ for t in self.types)
        return f"<instance of {names}>"


class Predicate(ArgumentMatcher):
    """Matches iff ``fn(argument)`` is truthy.

    Args:
        fn:          Called with the recorded argument.
        description: Shown in failure messages instead of the function name.
    """

    def __init__(self, fn: Callable[[Any], Any], description: str | None = None) -> None:
        self.fn = fn
        self.description = description or getattr(fn, "__name__", repr(fn))

    def matches(self, value: Any) -> bool:
        return bool(self.fn(value))

    def describe(self) -> str:
        return f"<{self.description}>"


class Capture(ArgumentMatcher):
    """Matches anything and keeps the values of the calls that matched.

    Values are collected only once the whole call matched, so a captor next to
    a failing literal does not pick anything up.
    """

    def __init__(self) -> None:
        self.values: list[Any] = []

    def matches(self, value: Any) -> bool:
        return True

    def capture(self, value: Any) -> None:
        self.values.append(value)

    @property
    def value(self) -> Any:
        if not self.values:
            raise LookupError("Nothing captured yet.")
        return self.values[-1]

    def describe(self) -> str:
        return "<captor>"


class _AnyArguments:
    def __repr__(self) -> str:
        return "ANY_ARGS"


ANY = AnyValue()

# Sole positional argument of a query: match any arguments at all.
ANY_ARGS = _AnyArguments()


def as_matcher(value: Any) -> ArgumentMatcher:
    if isinstance(value, ArgumentMatcher):
        return value
    return Literal(value)


def any_value() -> AnyValue:
    return ANY


def instance_of(*types: type) -> InstanceOf:
    return InstanceOf(*types)


def matching(fn: Callable[[Any], Any], description: str | None = None) -> Predicate:
    return Predicate(fn, description)


def captor() -> Capture:
    return Capture()
