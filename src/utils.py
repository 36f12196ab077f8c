"""Shared serialization helpers."""

from __future__ import annotations

from typing import TYPE_CHECKING

import orjson

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path


def _to_dict(obj: object) -> object:
    """Convert object to a JSON-compatible value."""
    from dataclasses import asdict, is_dataclass

    if hasattr(obj, "model_dump"):
        return obj.model_dump(mode="json")
    if is_dataclass(obj) and not isinstance(obj, type):
        return asdict(obj)
    return obj


def dumps_line(obj: object) -> bytes:
    """Serialize one record as a newline-terminated JSON line with sorted keys."""
    return orjson.dumps(_to_dict(obj), option=orjson.OPT_SORT_KEYS) + b"\n"


def _write_jsonl(path: Path, records: Sequence[object]) -> None:
    with path.open("wb") as f:
        for rec in records:
            f.write(dumps_line(rec))
