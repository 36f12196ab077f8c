"""Expanded leaf forms of artifacts.

Every leaf of an expanded set is exactly one of:

- ``DirectEntry``: the artifact stands for itself.
- ``LinkedEntry``: the artifact stands for a mapping; the file lives at
  ``target`` and is published under ``rel_name``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from artifacts.models.artifact import Artifact
from contract.errors import InvariantViolation


class DirectEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["direct"] = "direct"
    artifact: Artifact


class LinkedEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["linked"] = "linked"
    artifact: Artifact
    rel_name: str
    target: Path

    @field_validator("rel_name")
    @classmethod
    def _rel_name_not_empty(cls, v: str) -> str:
        if not v:
            msg = "rel_name must be non-empty for a linked entry"
            raise ValueError(msg)
        return v


ResolvedEntry = Annotated[DirectEntry | LinkedEntry, Field(discriminator="kind")]

RESOLVED_ENTRY_TYPES = (DirectEntry, LinkedEntry)


def make_entry(
    artifact: Artifact, rel_name: str | None = None, target: Path | None = None
) -> DirectEntry | LinkedEntry:
    """Build the entry matching which of the paired link fields are present."""
    if rel_name is None and target is None:
        return DirectEntry(artifact=artifact)
    if rel_name is None or target is None:
        msg = (
            f"Linked entry for {artifact.exec_path} has rel_name={rel_name!r} "
            f"and target={target!r}; both or neither must be set"
        )
        raise InvariantViolation(msg)
    if not rel_name:
        msg = f"Linked entry for {artifact.exec_path} has an empty rel_name"
        raise InvariantViolation(msg)
    return LinkedEntry(artifact=artifact, rel_name=rel_name, target=target)


__all__ = [
    "RESOLVED_ENTRY_TYPES",
    "DirectEntry",
    "LinkedEntry",
    "ResolvedEntry",
    "make_entry",
]
