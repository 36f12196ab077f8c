"""Stable contract surface for groupstream.

Constants, failure types and stream validation that external drivers and
consumers depend on.
"""

from contract.artifacts import BUILD_EVENTS_JSONL, EVENT_SCHEMA_VERSION, LocalFileType
from contract.errors import ArtifactResolutionError, InvariantViolation


def __getattr__(name: str) -> object:
    if name in {"ValidationMessage", "ValidationResult", "validate_event_stream"}:
        from contract.validation import (
            ValidationMessage,
            ValidationResult,
            validate_event_stream,
        )

        return {
            "ValidationMessage": ValidationMessage,
            "ValidationResult": ValidationResult,
            "validate_event_stream": validate_event_stream,
        }[name]

    msg = f"module 'contract' has no attribute {name!r}"
    raise AttributeError(msg)


__all__ = [
    "BUILD_EVENTS_JSONL",
    "EVENT_SCHEMA_VERSION",
    "ArtifactResolutionError",
    "InvariantViolation",
    "LocalFileType",
    "ValidationMessage",
    "ValidationResult",
    "validate_event_stream",
]
