from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Check:
    """One request the probe sends and what it expects back."""

    name: str
    method: str
    path: str
    expect_status: int | None = None
    expect_location: str | None = None
    # Fails if the response redirects here (used for POSTs that must pass through).
    forbid_location: str | None = None


@dataclass
class CheckResult:
    """Outcome of a single check."""

    name: str
    ok: bool
    status_code: int | None
    location: str | None = None
    reason: str | None = None


class ProbeError(RuntimeError):
    """Raised when the probe cannot proceed (e.g., health never ready)."""


class HealthError(ProbeError):
    """Raised when /health does not report ok within the timeout."""


class CheckError(ProbeError):
    """Raised when a check cannot get any response after retries."""
