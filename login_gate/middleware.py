"""HTTP middleware that applies the login gate before any route runs."""
from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable

from fastapi import Request, Response
from fastapi.responses import RedirectResponse

from .domain.decision import Allow, Redirect, decide
from .login import LoginFlow
from .logging_conf import get_logger
from .service.settings_store import SettingsStore

__all__ = ["LoginGateDispatcher", "raw_request_path"]

logger = get_logger("middleware.gate")


def raw_request_path(request: Request) -> str:
    """Return the request path with its query string, as the client sent it.

    Uses the undecoded target so an encoded "?" or "#" stays part of the path.
    Falls back to the decoded path for servers that do not set `raw_path`.
    """
    raw = request.scope.get("raw_path")
    path = raw.decode("latin-1") if raw else request.url.path
    query = request.scope.get("query_string", b"").decode("latin-1")
    return f"{path}?{query}" if query else path


class LoginGateDispatcher:
    """Per-request dispatcher for the login gate.

    Register with `app.middleware("http")(dispatcher)`. On each request it
    takes one configuration snapshot, asks `decide` what to do and performs
    at most one side effect:

    - Redirect -> 302 to the block target, routing is skipped
    - Allow    -> the login flow's response, routing is skipped
    - NoAction -> hand the request on to normal routing
    """

    def __init__(
        self,
        settings: SettingsStore,
        login_flow: LoginFlow,
        *,
        exempt_prefixes: Iterable[str] = (),
    ) -> None:
        self.settings = settings
        self.login_flow = login_flow
        self.exempt_prefixes = tuple(p for p in exempt_prefixes if p)

    async def __call__(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        path = request.url.path
        if self.exempt_prefixes and path.startswith(self.exempt_prefixes):
            return await call_next(request)

        config = self.settings.snapshot()
        decision = decide(request.method, raw_request_path(request), config)

        if isinstance(decision, Redirect):
            logger.debug(
                "gate.redirect",
                extra={
                    "event": "gate_redirect",
                    "method": request.method,
                    "path": path,
                    "outcome": "redirect",
                    "target": decision.target,
                },
            )
            return RedirectResponse(url=decision.target, status_code=302)

        if isinstance(decision, Allow):
            logger.debug(
                "gate.allow",
                extra={
                    "event": "gate_allow",
                    "method": request.method,
                    "outcome": "allow",
                },
            )
            return await self.login_flow(request)

        return await call_next(request)
