"""In-process mock handle.

Every call made through a :class:`Mock` is funnelled into its session's
``on_intercept``; mocks never return anything but ``None``::

    mailer = Mock("mailer")
    mailer.send("hi")
    verify(mailer).send("hi")
"""

from __future__ import annotations

from typing import Any

from calltape.session import MockHandle, Session, default_session


class Operation:
    """A named operation of a mock. Calling it records the call."""

    def __init__(self, handle: MockHandle, name: str) -> None:
        self._handle = handle
        self.name = name

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        self._handle.session.on_intercept(self._handle.mock_id, self.name, args, kwargs)

    def __repr__(self) -> str:
        return f"<Operation {self._handle.name}.{self.name}>"


class Mock:
    """A test double that records every call made on it.

    Args:
        name:    Display name used in failure messages.
        spec:    Optional class; only attributes it has can be called.
        session: Owning session. Defaults to the process-wide default session.
    """

    def __init__(
        self,
        name: str = "mock",
        spec: type | None = None,
        session: Session | None = None,
    ) -> None:
        session = session if session is not None else default_session()
        object.__setattr__(self, "_calltape_handle", session.register(name))
        object.__setattr__(self, "_calltape_spec", spec)

    def __getattr__(self, name: str) -> Operation:
        if name.startswith("_calltape_") or (name.startswith("__") and name.endswith("__")):
            raise AttributeError(name)
        self._check_spec(name)
        return Operation(self._calltape_handle, name)

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        self._check_spec_protocol("__call__", "callable")
        Operation(self._calltape_handle, "__call__")(*args, **kwargs)

    def __getitem__(self, key: Any) -> None:
        self._check_spec_protocol("__getitem__", "subscriptable")
        Operation(self._calltape_handle, "__getitem__")(key)

    def _check_spec(self, name: str) -> None:
        spec = self._calltape_spec
        if spec is not None and not hasattr(spec, name):
            raise AttributeError(f"{spec.__name__} has no attribute {name!r}")

    def _check_spec_protocol(self, name: str, what: str) -> None:
        # Looked up on the class body only; every class object is itself callable.
        spec = self._calltape_spec
        if spec is not None and name not in dir(spec):
            raise TypeError(f"{spec.__name__} instances are not {what}")

    # A mock passed as an argument is recorded as itself, not as a copy.
    def __copy__(self) -> Mock:
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> Mock:
        return self

    def __repr__(self) -> str:
        handle = self._calltape_handle
        return f"<Mock {handle.name} ({handle.mock_id})>"
