"""Pure domain logic: path normalization and the login gate decision.

These modules are free of FastAPI/HTTP concerns so they can be unit-tested
and reused by both the server middleware and the smoke probe.
"""
__all__ = ["paths", "decision"]
