"""Determinism verification for event streams."""
