from __future__ import annotations

import asyncio
import time

import httpx

from login_gate.logging_conf import get_logger
from probe.types import Check, CheckError, CheckResult, HealthError
from probe.utils import evaluate

logger = get_logger("probe.client")


async def wait_for_health(
    client: httpx.AsyncClient, timeout_s: float = 20.0, poll_s: float = 0.25
) -> None:
    """Ping /health until it returns ok or raise after a timeout."""
    deadline = time.monotonic() + timeout_s
    while time.monotonic() < deadline:
        try:
            r = await client.get("/health")
            if r.status_code == 200 and r.json().get("ok") is True:
                logger.info(
                    "health.ok",
                    extra={"event": "health_ok", "gate_enabled": r.json().get("gate_enabled")},
                )
                return
        except (httpx.HTTPError, ValueError) as e:
            logger.debug("health.retry", extra={"event": "health_retry", "error": str(e)})
        await asyncio.sleep(poll_s)
    raise HealthError("Health check did not pass within timeout")


async def run_check(client: httpx.AsyncClient, check: Check, *, retries: int = 3) -> CheckResult:
    """Send one check request (redirects not followed) and evaluate it, with retry.

    - Retries transport errors only; any HTTP response is final
    - Logs each retry and the check outcome
    """
    last_err: Exception | None = None
    for attempt in range(retries):
        try:
            r = await client.request(check.method, check.path, follow_redirects=False)
        except httpx.TransportError as e:  # pragma: no cover - network flakiness
            last_err = e
            logger.warning(
                "check.retry",
                extra={
                    "event": "check_retry",
                    "check": check.name,
                    "attempt": attempt + 1,
                    "error": str(e),
                },
            )
            continue
        result = evaluate(check, r.status_code, r.headers.get("location"))
        logger.info(
            "check.done",
            extra={
                "event": "check_done",
                "check": check.name,
                "ok": result.ok,
                "status_code": result.status_code,
            },
        )
        return result
    raise CheckError(f"check {check.name} failed: {last_err}")


async def run_checks(client: httpx.AsyncClient, checks: list[Check]) -> list[CheckResult]:
    """Run checks in order; a check that gets no response counts as failed."""
    results: list[CheckResult] = []
    for check in checks:
        try:
            results.append(await run_check(client, check))
        except CheckError as e:
            results.append(
                CheckResult(name=check.name, ok=False, status_code=None, reason=str(e))
            )
    return results
