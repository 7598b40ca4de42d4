from __future__ import annotations

from login_gate.domain.decision import GateConfig, block_target
from login_gate.domain.paths import normalize_path
from probe.types import Check, CheckResult, ProbeError


def build_checks(*, hidden_path: str, block_path: str = "", site_url: str = "") -> list[Check]:
    """Return the checks for a deployment configured with the given paths."""
    hidden = normalize_path(hidden_path)
    if not hidden:
        raise ProbeError("hidden path is required; an empty one means the gate is off")

    target = block_target(
        GateConfig(
            hidden_login_path=hidden,
            block_redirect_path=normalize_path(block_path),
            site_url=site_url,
        )
    )
    return [
        Check("legacy_get", "GET", "/wp-login.php", expect_status=302, expect_location=target),
        Check(
            "legacy_get_query",
            "GET",
            "/wp-login.php?action=lostpassword",
            expect_status=302,
            expect_location=target,
        ),
        Check("legacy_get_upper", "GET", "/WP-LOGIN.PHP", expect_status=302, expect_location=target),
        Check("hidden", "GET", f"/{hidden}", expect_status=200),
        Check("hidden_slash", "GET", f"/{hidden}/", expect_status=200),
        Check("legacy_post", "POST", "/wp-login.php", forbid_location=target),
    ]


def evaluate(check: Check, status_code: int, location: str | None) -> CheckResult:
    """Compare a response against a check's expectations."""
    reason = None
    if check.expect_status is not None and status_code != check.expect_status:
        reason = f"expected status {check.expect_status}, got {status_code}"
    elif check.expect_location is not None and location != check.expect_location:
        reason = f"expected Location {check.expect_location!r}, got {location!r}"
    elif (
        check.forbid_location is not None
        and 300 <= status_code < 400
        and location == check.forbid_location
    ):
        reason = f"request was redirected to {location!r}"
    return CheckResult(
        name=check.name,
        ok=reason is None,
        status_code=status_code,
        location=location,
        reason=reason,
    )


def summarize(results: list[CheckResult]) -> tuple[dict, int]:
    """Compute summary dict and an exit code from check results."""
    passed = [r for r in results if r.ok]
    failed = [r for r in results if not r.ok]
    summary = {
        "component": "probe",
        "event": "summary",
        "checks": len(results),
        "passed": len(passed),
        "failed": len(failed),
        "failures": [
            {
                "check": r.name,
                "status_code": r.status_code,
                "location": r.location,
                "reason": r.reason,
            }
            for r in failed
        ],
    }
    exit_code = 0 if (results and not failed) else 1
    return summary, exit_code
