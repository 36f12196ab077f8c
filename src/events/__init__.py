"""Encoding of named artifact groups onto a build event stream."""

from events.ids import BuildEventId, NamedSetId, from_artifact_group_name
from events.models import BuildEvent, FileRecord, LocalFile, NamedFileSet
from events.named_group import EncodingContext, NamedArtifactGroup
from events.namer import ArtifactGroupNamer
from events.paths import FileUriConverter, PathConverter, PrefixUriConverter

__all__ = [
    "ArtifactGroupNamer",
    "BuildEvent",
    "BuildEventId",
    "EncodingContext",
    "FileRecord",
    "FileUriConverter",
    "LocalFile",
    "NamedArtifactGroup",
    "NamedFileSet",
    "NamedSetId",
    "PathConverter",
    "PrefixUriConverter",
    "from_artifact_group_name",
]
