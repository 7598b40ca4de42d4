"""Hidden login gate: move the login entry point off its well-known URL.

Exposes `__version__` when installed; the app factory lives in
`login_gate.main`.
"""
from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("hidden-login-gate")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"
