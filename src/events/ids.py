"""Build event identifiers."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class NamedSetId(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str


class BuildEventId(BaseModel):
    """Identifier of one event on the stream.

    Only the named-set variant is produced here; other event kinds are owned by
    the stream driver.
    """

    model_config = ConfigDict(frozen=True)

    named_set: NamedSetId


def from_artifact_group_name(name: str) -> BuildEventId:
    return BuildEventId(named_set=NamedSetId(id=name))


__all__ = ["BuildEventId", "NamedSetId", "from_artifact_group_name"]
