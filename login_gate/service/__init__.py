"""Collaborators around the pure gate logic (settings storage)."""
