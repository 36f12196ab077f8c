"""Event stream contract definitions.

This module defines the stable names shared by the encoder, the stream writer
and the stream validator.
"""

from __future__ import annotations

from enum import Enum

# Schema version stamped on every encoded event.
EVENT_SCHEMA_VERSION = 1

# Default file name of a written event stream.
BUILD_EVENTS_JSONL = "build_events.jsonl"


class LocalFileType(str, Enum):
    """Why a local file is referenced by an event."""

    OUTPUT = "output"


__all__ = ["BUILD_EVENTS_JSONL", "EVENT_SCHEMA_VERSION", "LocalFileType"]
