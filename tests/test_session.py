import logging

import pytest

from calltape import Session, UnknownMockError, verify


def test_on_intercept_records_into_the_mock_ledger():
    session = Session("t")
    handle = session.register("service")

    seq = session.on_intercept(handle.mock_id, "fetch", ("id-1",), {"fresh": True})

    assert seq == 0
    (record,) = handle.ledger.snapshot()
    assert record.describe() == "service.fetch('id-1', fresh=True)"


def test_on_intercept_rejects_unknown_ids():
    session = Session("t")

    with pytest.raises(UnknownMockError) as exc:
        session.on_intercept("ghost#0", "op")

    assert isinstance(exc.value, KeyError)
    assert "ghost#0" in str(exc.value)


def test_mock_ids_are_unique_per_session():
    session = Session("t")
    a = session.register("m")
    b = session.register("m")

    assert a.mock_id != b.mock_id
    assert a.ledger is not b.ledger


def test_each_session_numbers_from_zero():
    first = Session("one")
    second = Session("two")
    first.mock("m").op()
    first.mock("m").op()

    second.mock("m").op()

    assert [r.sequence for r in second.records()] == [0]


def test_records_are_merged_in_sequence_order():
    session = Session("t")
    a = session.mock("a")
    b = session.mock("b")
    a.x()
    b.y()
    a.z()

    assert [r.describe() for r in session.records()] == ["a.x()", "b.y()", "a.z()"]
    summary = session.summary()
    assert "Calls recorded : 3" in summary
    assert "#1 b.y()" in summary


def test_debug_logs_intercepted_calls(caplog):
    session = Session("t", debug=True)
    m = session.mock("m")

    with caplog.at_level(logging.DEBUG, logger="calltape.session"):
        m.op("a")

    assert "INTERCEPT #0 m.op('a')" in caplog.text


def test_debug_from_environment(monkeypatch):
    monkeypatch.setenv("CALLTAPE_DEBUG", "1")
    assert Session("t").debug

    monkeypatch.setenv("CALLTAPE_DEBUG", "0")
    assert not Session("t").debug


def test_session_methods_delegate(calltape):
    m = calltape.mock("m")
    m.op("a")
    m.op("b")

    calltape.in_order(calltape.verify(m).op("a"), calltape.verify(m).op("b"))
    calltape.verify_no_other_interactions(m)
    assert calltape.name == "test_session_methods_delegate"


def test_print_summary(capsys):
    session = Session("t")
    session.mock("m").op()

    session.print_summary()

    assert "m.op()" in capsys.readouterr().out
