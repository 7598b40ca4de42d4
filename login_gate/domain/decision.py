from __future__ import annotations

from dataclasses import dataclass

from .paths import is_legacy_login, normalize_path

__all__ = [
    "GateConfig",
    "Allow",
    "Redirect",
    "NoAction",
    "Decision",
    "SITE_ROOT",
    "block_target",
    "decide",
]

SITE_ROOT = "/"


@dataclass(frozen=True)
class GateConfig:
    """Read-only configuration snapshot handed to `decide`.

    Both paths are expected in normalized form (no surrounding slashes, no
    query or fragment). An empty `hidden_login_path` disables the gate.
    """

    hidden_login_path: str = ""
    block_redirect_path: str = ""
    site_url: str = ""  # optional absolute base for redirect targets

    @property
    def enabled(self) -> bool:
        return bool(self.hidden_login_path)


@dataclass(frozen=True)
class Allow:
    """Serve the real login flow at the hidden path."""


@dataclass(frozen=True)
class Redirect:
    """Send the client elsewhere with a 302."""

    target: str


@dataclass(frozen=True)
class NoAction:
    """Not ours; let normal routing handle the request."""


Decision = Allow | Redirect | NoAction


def block_target(config: GateConfig) -> str:
    """Where visitors of the legacy login endpoint are sent.

    Site root if no block redirect path is configured, else "/<path>". When
    `site_url` is set the target is absolute against it.
    """
    path = SITE_ROOT if not config.block_redirect_path else f"/{config.block_redirect_path}"
    if config.site_url:
        return f"{config.site_url.rstrip('/')}{path}"
    return path


def decide(method: str, raw_path: str, config: GateConfig) -> Decision:
    """Classify one request against the gate configuration.

    Order (first match wins):
      1. POST                                  -> NoAction
      2. raw path contains /wp-login.php       -> Redirect(block_target)
      3. normalized path == hidden login path  -> Allow
      4. anything else                         -> NoAction

    Rules 2 and 3 only apply when a hidden login path is configured.
    """
    if (method or "").upper() == "POST":
        return NoAction()

    path = normalize_path(raw_path)
    hidden = config.hidden_login_path
    if not hidden:
        return NoAction()

    # Raw match on purpose: the legacy endpoint has a fixed literal name.
    if is_legacy_login(raw_path):
        return Redirect(target=block_target(config))

    if path == hidden:
        return Allow()

    return NoAction()
