"""Raw build-output references and fileset mapping results."""

from __future__ import annotations

from pathlib import Path, PurePosixPath
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

ArtifactKind = Literal["file", "fileset", "tree"]


class Artifact(BaseModel):
    """An opaque reference to a build output, identified by its logical path."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(description="Root-relative POSIX path of the output")
    root: str = Field(
        default="",
        description="Output root the path lives under (e.g. 'bazel-out/k8-opt/bin')",
    )
    kind: ArtifactKind = "file"

    @property
    def exec_path(self) -> str:
        if not self.root:
            return self.path
        return (PurePosixPath(self.root) / self.path).as_posix()

    @property
    def path_prefix(self) -> list[str]:
        return [part for part in self.root.split("/") if part]

    def child(self, rel_path: str) -> Artifact:
        """Return the plain file artifact at ``rel_path`` under this one."""
        return Artifact(
            path=(PurePosixPath(self.path) / rel_path).as_posix(), root=self.root
        )


class FilesetMapping(BaseModel):
    """One ``rel_name -> target`` link contributed by a fileset artifact."""

    model_config = ConfigDict(frozen=True)

    fileset: Artifact
    rel_name: str
    target: Path


__all__ = ["Artifact", "ArtifactKind", "FilesetMapping"]
