"""Wire models for named artifact groups.

A ``NamedFileSet`` inlines only its direct files; nested subtrees appear as
``file_set_refs`` naming other ``NamedFileSet`` events on the same stream.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from contract.artifacts import EVENT_SCHEMA_VERSION, LocalFileType
from events.ids import BuildEventId, NamedSetId


class FileRecord(BaseModel):
    """A single file inlined into a named set."""

    name: str
    uri: str
    path_prefix: list[str] = Field(default_factory=list)


class NamedFileSet(BaseModel):
    name: str
    files: list[FileRecord] = Field(default_factory=list)
    file_set_refs: list[NamedSetId] = Field(default_factory=list)


class BuildEvent(BaseModel):
    """Envelope written to the event stream for one named set."""

    schema_version: int = Field(default=EVENT_SCHEMA_VERSION)
    id: BuildEventId
    children: list[BuildEventId] = Field(default_factory=list)
    named_set_of_files: NamedFileSet


class LocalFile(BaseModel):
    """A file on local disk whose bytes the delivery layer must make available."""

    path: Path
    type: LocalFileType = LocalFileType.OUTPUT


__all__ = ["BuildEvent", "FileRecord", "LocalFile", "NamedFileSet"]
