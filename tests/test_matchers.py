import pytest

from calltape import (
    ANY,
    Capture,
    InstanceOf,
    Literal,
    Predicate,
    instance_of,
    matching,
)
from calltape.matchers import as_matcher


def test_literal_uses_equality():
    assert Literal("foo").matches("foo")
    assert not Literal("foo").matches("bar")
    assert Literal([1, 2]).matches([1, 2])


def test_any_matches_everything():
    assert ANY.matches(None)
    assert ANY.matches(object())


def test_instance_of():
    assert instance_of(int, float).matches(1.5)
    assert not InstanceOf(str).matches(1)
    with pytest.raises(ValueError):
        InstanceOf()


def test_predicate():
    starts_with_hi = matching(lambda s: s.startswith("hi"), "starts with 'hi'")
    assert starts_with_hi.matches("hi there")
    assert not starts_with_hi.matches("hello")
    assert starts_with_hi.describe() == "<starts with 'hi'>"


def test_predicate_defaults_description_to_function_name():
    def is_positive(v):
        return v > 0

    assert Predicate(is_positive).describe() == "<is_positive>"


def test_as_matcher_wraps_raw_values_only():
    literal = as_matcher(3)
    assert isinstance(literal, Literal)
    assert literal.value == 3
    assert as_matcher(ANY) is ANY


def test_captor_without_values():
    c = Capture()
    assert c.matches("anything")
    assert c.values == []
    with pytest.raises(LookupError):
        c.value
