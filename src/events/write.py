"""Writing named artifact groups to a JSONL event stream."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import partial
from typing import TYPE_CHECKING

from artifacts.expand import expand_set
from events.named_group import EncodingContext, NamedArtifactGroup
from events.namer import ArtifactGroupNamer
from events.paths import FileUriConverter
from utils import _write_jsonl

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from artifacts.context import CompletionContext
    from events.models import BuildEvent, LocalFile
    from events.paths import PathConverter
    from nestedset.shared_set import SharedSet

logger = logging.getLogger(__name__)


@dataclass
class EncodedStream:
    events: list[BuildEvent] = field(default_factory=list)
    local_files: list[LocalFile] = field(default_factory=list)


def encode_groups(
    roots: Iterable[SharedSet],
    completion_context: CompletionContext,
    *,
    path_converter: PathConverter | None = None,
    namer: ArtifactGroupNamer | None = None,
) -> EncodedStream:
    """Encode every distinct subtree reachable from ``roots`` exactly once.

    Subtrees are emitted before the sets that reference them. A subtree that was
    already named by ``namer`` (for example by an earlier call in the same
    session) is not emitted again. If any subtree fails to encode, the names
    this call claimed are released, so a later call in the same session emits
    those subtrees instead of referring to events that were never written.
    """
    ctx = EncodingContext(
        path_converter=(
            path_converter if path_converter is not None else FileUriConverter()
        ),
        namer=namer if namer is not None else ArtifactGroupNamer(),
    )
    stream = EncodedStream()

    def _emit(node: SharedSet, name: str) -> None:
        group = NamedArtifactGroup(
            name, completion_context, expand_set(completion_context, node)
        )
        event = group.as_stream_event(ctx)
        local_files = group.referenced_local_files()
        stream.events.append(event)
        stream.local_files.extend(local_files)

    claimed: list[SharedSet] = []
    try:
        for root in roots:
            for node in root.iter_nodes():
                _, created = ctx.namer.name_if_new(node, build=partial(_emit, node))
                if created:
                    claimed.append(node)
    except Exception:
        ctx.namer.release(claimed)
        logger.debug("Released %d name(s) after a failed encode", len(claimed))
        raise
    logger.debug(
        "Encoded %d named set(s) referencing %d local file(s)",
        len(stream.events),
        len(stream.local_files),
    )
    return stream


def write_event_stream(
    roots: Iterable[SharedSet],
    completion_context: CompletionContext,
    out_path: Path,
    *,
    path_converter: PathConverter | None = None,
) -> EncodedStream:
    """Encode ``roots`` and write one event per line to ``out_path``."""
    stream = encode_groups(
        roots, completion_context, path_converter=path_converter
    )
    out_path.parent.mkdir(parents=True, exist_ok=True)
    _write_jsonl(out_path, stream.events)
    return stream


__all__ = ["EncodedStream", "encode_groups", "write_event_stream"]
