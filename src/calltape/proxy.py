"""HTTP test double — records every request into a session ledger.

Point the code under test at ``double.base_url``. Each request becomes one
call of the operation ``request(method, path, payload)``, where payload is
the decoded JSON body, else the text body (raw bytes when it is not UTF-8),
else the query parameters::

    async with HttpDouble(session, "billing") as billing:
        await client_under_test(base_url=billing.base_url)
    verify(billing).request("POST", "/v1/charges", {"amount": 2000})

The double always answers ``200 {}``; it does not stub responses.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from aiohttp import web

from calltape.session import Session, default_session

logger = logging.getLogger(__name__)


def _decode_payload(raw: bytes, query: Mapping[str, str]) -> Any:
    if not raw:
        return dict(query)
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError:
        return raw
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text


class HttpDouble:
    """aiohttp server standing in for an HTTP dependency.

    Args:
        session: Owning session (default session when omitted).
        name:    Display name used in failure messages.
        port:    0 = pick a random free port.
        debug:   Log request bodies.
    """

    def __init__(
        self,
        session: Session | None = None,
        name: str = "http",
        port: int = 0,
        debug: bool = False,
    ) -> None:
        self._session = session if session is not None else default_session()
        self._calltape_handle = self._session.register(name)
        self._port = port
        self._debug = debug

        self._app = web.Application()
        self._app.router.add_route("*", "/{path_info:.*}", self._handle)

        self._runner: web.AppRunner | None = None
        self._site: web.TCPSite | None = None

    @property
    def name(self) -> str:
        return self._calltape_handle.name

    @property
    def base_url(self) -> str:
        return f"http://127.0.0.1:{self._port}"

    @property
    def port(self) -> int:
        return self._port

    async def start(self) -> None:
        self._runner = web.AppRunner(self._app, access_log=None)
        await self._runner.setup()
        self._site = web.TCPSite(self._runner, "127.0.0.1", self._port)
        await self._site.start()
        sockets = self._site._server.sockets  # type: ignore[attr-defined]
        self._port = sockets[0].getsockname()[1]
        logger.info("HTTP double %s listening on %s", self.name, self.base_url)

    async def stop(self) -> None:
        if self._runner:
            await self._runner.cleanup()
            self._runner = None
            logger.info("HTTP double %s stopped", self.name)

    async def __aenter__(self) -> HttpDouble:
        await self.start()
        return self

    async def __aexit__(
        self, exc_type: type | None, exc: BaseException | None, tb: object
    ) -> None:
        await self.stop()

    async def _handle(self, request: web.Request) -> web.Response:
        raw = await request.read()
        payload = _decode_payload(raw, request.query)

        if self._debug:
            logger.debug(
                "DOUBLE ← %s %s payload=%s",
                request.method,
                request.path,
                str(payload)[:400],
            )

        self._session.on_intercept(
            self._calltape_handle.mock_id,
            "request",
            (request.method, request.path, payload),
        )
        return web.json_response({})
