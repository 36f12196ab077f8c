"""Named artifact groups and their encoding onto the event stream."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from artifacts.models.entries import DirectEntry, LinkedEntry
from contract.artifacts import LocalFileType
from contract.errors import InvariantViolation
from events.ids import BuildEventId, NamedSetId, from_artifact_group_name
from events.models import BuildEvent, FileRecord, LocalFile, NamedFileSet

if TYPE_CHECKING:
    from pathlib import Path

    from artifacts.context import CompletionContext
    from events.namer import ArtifactGroupNamer
    from events.paths import PathConverter
    from nestedset.shared_set import SharedSet


@dataclass(frozen=True)
class EncodingContext:
    """Collaborators shared by every group encoded in one session."""

    path_converter: PathConverter
    namer: ArtifactGroupNamer


class NamedArtifactGroup:
    """A set of artifacts introduced on the stream under ``name``.

    The set's direct leaves must already be expanded (see
    ``artifacts.expand.expand_set``). Only those leaves are inlined and
    delivered with this event; children are referenced by the name the
    session namer gives them and are delivered by their own events.
    """

    def __init__(
        self,
        name: str,
        completion_context: CompletionContext,
        artifacts: SharedSet[DirectEntry | LinkedEntry],
    ) -> None:
        self.name = name
        self.completion_context = completion_context
        self.artifacts = artifacts

    def event_id(self) -> BuildEventId:
        return from_artifact_group_name(self.name)

    def children_events(self) -> list[BuildEventId]:
        return []

    def referenced_local_files(self) -> list[LocalFile]:
        return [
            LocalFile(path=self._local_path(entry), type=LocalFileType.OUTPUT)
            for entry in self._entries()
        ]

    def as_stream_event(self, ctx: EncodingContext) -> BuildEvent:
        """Encode this group; raises before returning anything on failure."""
        files: list[FileRecord] = []
        for entry in self._entries():
            uri = ctx.path_converter(self._local_path(entry))
            if uri is None:
                continue
            files.append(
                FileRecord(
                    name=_published_name(entry),
                    uri=uri,
                    path_prefix=entry.artifact.path_prefix,
                )
            )

        refs = [
            NamedSetId(id=ctx.namer.name_for(child))
            for child in self.artifacts.children()
        ]
        return BuildEvent(
            id=self.event_id(),
            children=self.children_events(),
            named_set_of_files=NamedFileSet(
                name=self.name, files=files, file_set_refs=refs
            ),
        )

    def _entries(self) -> list[DirectEntry | LinkedEntry]:
        entries: list[DirectEntry | LinkedEntry] = []
        for leaf in self.artifacts.leaves():
            if not isinstance(leaf, (DirectEntry, LinkedEntry)):
                msg = f"Group {self.name!r} has an unexpanded leaf: {leaf!r}"
                raise InvariantViolation(msg)
            entries.append(leaf)
        return entries

    def _local_path(self, entry: DirectEntry | LinkedEntry) -> Path:
        if isinstance(entry, LinkedEntry):
            return self.completion_context.convert_path(entry.target)
        return self.completion_context.resolve_path(entry.artifact)


def _published_name(entry: DirectEntry | LinkedEntry) -> str:
    if isinstance(entry, LinkedEntry):
        return entry.rel_name
    return entry.artifact.path


__all__ = ["EncodingContext", "NamedArtifactGroup"]
