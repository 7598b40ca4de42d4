"""Login flow collaborator served at the hidden path.

Credential checking lives with the host; the gate only decides whether this
flow is reached. Hosts pass their own `LoginFlow` to `create_app`.
"""
from __future__ import annotations

import html
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from fastapi.responses import HTMLResponse

__all__ = ["LoginFlow", "LEGACY_LOGIN_ACTION", "default_login_flow"]

LoginFlow = Callable[[Request], Awaitable[Response]]

# POSTs are never gated, so the form can keep submitting to the standard endpoint.
LEGACY_LOGIN_ACTION = "/wp-login.php"

_PAGE = """<!doctype html>
<html lang="en">
<head><meta charset="utf-8"><meta name="robots" content="noindex,nofollow"><title>Log In</title></head>
<body>
<form name="loginform" method="post" action="{action}">
<input type="hidden" name="redirect_to" value="{redirect_to}">
<p><label>Username <input type="text" name="log" autocomplete="username"></label></p>
<p><label>Password <input type="password" name="pwd" autocomplete="current-password"></label></p>
<p><input type="submit" value="Log In"></p>
</form>
</body>
</html>
"""


async def default_login_flow(request: Request) -> Response:
    """Render the standard login form."""
    redirect_to = request.query_params.get("redirect_to", "/")
    body = _PAGE.format(
        action=html.escape(LEGACY_LOGIN_ACTION, quote=True),
        redirect_to=html.escape(redirect_to, quote=True),
    )
    return HTMLResponse(
        content=body,
        headers={"Cache-Control": "no-store", "X-Robots-Tag": "noindex, nofollow"},
    )
