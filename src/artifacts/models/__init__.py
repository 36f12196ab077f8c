"""Model namespace for artifact references and expanded entries."""

from artifacts.models.artifact import Artifact, ArtifactKind, FilesetMapping
from artifacts.models.entries import (
    RESOLVED_ENTRY_TYPES,
    DirectEntry,
    LinkedEntry,
    ResolvedEntry,
    make_entry,
)

__all__ = [
    "RESOLVED_ENTRY_TYPES",
    "Artifact",
    "ArtifactKind",
    "DirectEntry",
    "FilesetMapping",
    "LinkedEntry",
    "ResolvedEntry",
    "make_entry",
]
