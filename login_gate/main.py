"""FastAPI app factory: login gate middleware, request logging, health and admin routes."""
from __future__ import annotations

import os
import time
from collections.abc import Callable
from uuid import uuid4

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from login_gate.api import ADMIN_PREFIX
from login_gate.api import router as api_router
from login_gate.logging_conf import get_logger, setup_logging
from login_gate.login import LoginFlow, default_login_flow
from login_gate.middleware import LoginGateDispatcher
from login_gate.service.settings_store import SettingsStore

# Configure logging before anything else.
setup_logging()
logger = get_logger("login_gate")


def create_app(
    settings: SettingsStore | None = None,
    login_flow: LoginFlow | None = None,
) -> FastAPI:
    app = FastAPI(
        title="Hidden Login Gate",
        version=os.getenv("APP_VERSION", "0.1.0"),
    )
    app.state.settings = settings if settings is not None else SettingsStore.from_env()

    @app.on_event("startup")
    async def _on_startup() -> None:
        logger.info(
            "startup",
            extra={"event": "startup", "gate_enabled": app.state.settings.current.enabled},
        )

    @app.on_event("shutdown")
    async def _on_shutdown() -> None:
        logger.info("shutdown", extra={"event": "shutdown"})

    # Starlette runs the most recently added middleware first, so the gate is
    # added before the request logger: logger -> gate -> router.
    app.middleware("http")(
        LoginGateDispatcher(
            app.state.settings,
            login_flow or default_login_flow,
            exempt_prefixes=(f"{ADMIN_PREFIX}/",),
        )
    )

    @app.middleware("http")
    async def request_logger(request: Request, call_next: Callable[[Request], Response]):
        """Minimal JSON request logging with correlation id.

        - If the client sends X-Request-ID we propagate it; otherwise we mint one
        - Logs a start and end event with method/status/elapsed_ms
        - Attaches X-Request-ID header on the response for easy tracing
        """
        request_id = request.headers.get("X-Request-ID", str(uuid4()))
        request.state.request_id = request_id

        start = time.perf_counter()
        logger.info(
            "request.start",
            extra={
                "event": "request_start",
                "method": request.method,
                "request_id": request_id,
            },
        )
        try:
            response = await call_next(request)
        except Exception as exc:  # Log and re-raise to let FastAPI handle 500
            logger.exception(
                "request.error",
                extra={
                    "event": "request_error",
                    "method": request.method,
                    "request_id": request_id,
                },
            )
            raise exc
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000.0

        response.headers["X-Request-ID"] = request_id
        logger.info(
            "request.end",
            extra={
                "event": "request_end",
                "status_code": response.status_code,
                "elapsed_ms": round(elapsed_ms, 2),
                "request_id": request_id,
            },
        )
        return response

    @app.get("/health", summary="Liveness/readiness check")
    async def health() -> JSONResponse:
        return JSONResponse(
            content={"ok": True, "gate_enabled": app.state.settings.current.enabled}
        )

    app.include_router(api_router)

    return app


# ASGI entrypoint for uvicorn: `uvicorn login_gate.main:app --port 8000`
app = create_app()
