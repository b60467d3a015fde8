from collections.abc import Generator

import pytest

from calltape.session import Session, reset_default_session


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("calltape")
    group.addoption(
        "--calltape-debug",
        action="store_true",
        default=False,
        help="Log every call intercepted by a calltape mock.",
    )


@pytest.fixture(autouse=True)
def _calltape_default_session() -> Generator[None, None, None]:
    """Mocks created without a session get a fresh default session per test."""
    reset_default_session()
    yield
    reset_default_session()


@pytest.fixture
def calltape(
    request: pytest.FixtureRequest,
    _calltape_default_session: None,
) -> Generator[Session, None, None]:
    """A Session named after the test, with its own sequence numbering.

    Usage:

        def test_notifies(calltape):
            mailer = calltape.mock("mailer")
            notify(mailer)
            calltape.verify(mailer).send("hi")

    Plain `Mock()` objects created during the test join this session too.
    No-further-interaction checkpoints are checked once the test passed.
    """
    debug = request.config.getoption("--calltape-debug", default=False)
    session = Session(name=request.node.name, debug=debug)
    reset_default_session(session)

    yield session

    rep = getattr(request.node, "rep_call", None)
    if rep is not None and rep.failed:
        print("\n--- calltape ledger ---")
        session.print_summary()
    elif rep is not None and rep.passed:
        session.check_checkpoints()


@pytest.hookimpl(tryfirst=True, hookwrapper=True)
def pytest_runtest_makereport(
    item: pytest.Item,
    call: pytest.CallInfo,  # noqa: ARG001
) -> Generator[None, None, None]:
    outcome = yield
    rep = outcome.get_result()
    setattr(item, f"rep_{rep.when}", rep)
