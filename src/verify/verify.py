"""Determinism verification for written event streams."""

from __future__ import annotations

import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

import orjson

from events.write import write_event_stream

if TYPE_CHECKING:
    from artifacts.context import CompletionContext
    from events.paths import PathConverter
    from nestedset.shared_set import SharedSet


@dataclass(frozen=True)
class DeterminismResult:
    ok: bool
    mismatches: tuple[str, ...] = field(default_factory=tuple)
    missing: tuple[str, ...] = field(default_factory=tuple)
    extra: tuple[str, ...] = field(default_factory=tuple)


def _events_by_set_id(path: Path) -> dict[str, bytes]:
    events: dict[str, bytes] = {}
    with path.open("rb") as handle:
        for raw_line in handle:
            line = raw_line.strip()
            if not line:
                continue
            set_id = orjson.loads(line)["id"]["named_set"]["id"]
            events[set_id] = line
    return events


def verify_determinism(
    *,
    roots: list[SharedSet],
    completion_context: CompletionContext,
    stream_path: Path,
    path_converter: PathConverter | None = None,
) -> DeterminismResult:
    """Verify that re-encoding ``roots`` reproduces ``stream_path``.

    Re-encodes into a temporary file with a fresh namer and compares the two
    streams event by event, keyed by named set id.

    Raises:
        FileNotFoundError: If stream_path does not exist.
        IsADirectoryError: If stream_path is a directory.
    """
    if not stream_path.exists():
        msg = f"Event stream does not exist: {stream_path}"
        raise FileNotFoundError(msg)
    if stream_path.is_dir():
        msg = f"Event stream path is a directory: {stream_path}"
        raise IsADirectoryError(msg)
    with tempfile.TemporaryDirectory() as temp_dir:
        regenerated_path = Path(temp_dir) / stream_path.name
        write_event_stream(
            roots,
            completion_context,
            regenerated_path,
            path_converter=path_converter,
        )
        original = _events_by_set_id(stream_path)
        regenerated = _events_by_set_id(regenerated_path)

    missing = sorted(set(original) - set(regenerated))
    extra = sorted(set(regenerated) - set(original))
    mismatches = sorted(
        set_id
        for set_id in set(original) & set(regenerated)
        if original[set_id] != regenerated[set_id]
    )

    ok = not missing and not extra and not mismatches
    return DeterminismResult(
        ok=ok,
        mismatches=tuple(mismatches),
        missing=tuple(missing),
        extra=tuple(extra),
    )
