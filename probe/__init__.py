"""Smoke probe that checks a running login gate from the outside."""
