"""Loading artifact sets from a JSON manifest.

A manifest describes artifacts, fileset mappings and nested sets by id::

    {
      "artifacts": {"a": {"path": "pkg/a.txt", "root": "bazel-out/bin"}},
      "filesets": {"fs": [{"rel_name": "x.txt", "target": "data/x.txt"}]},
      "missing": [],
      "sets": {"top": {"leaves": ["a"], "children": ["shared"]}},
      "groups": ["top"]
    }

Each set id is built once, so a set listed as a child of many parents is a
single shared node.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import orjson
from pydantic import BaseModel, Field, ValidationError

from artifacts.models.artifact import Artifact
from nestedset.order import Order
from nestedset.shared_set import SharedSet, SharedSetBuilder


class ManifestError(Exception):
    """Raised when a manifest cannot be read or references unknown ids."""


class FilesetLinkSpec(BaseModel):
    rel_name: str
    target: str


class SetSpec(BaseModel):
    order: Order = Order.STABLE
    leaves: list[str] = Field(default_factory=list)
    children: list[str] = Field(default_factory=list)


class ManifestFile(BaseModel):
    artifacts: dict[str, Artifact] = Field(default_factory=dict)
    filesets: dict[str, list[FilesetLinkSpec]] = Field(default_factory=dict)
    missing: list[str] = Field(default_factory=list)
    sets: dict[str, SetSpec] = Field(default_factory=dict)
    groups: list[str] = Field(default_factory=list)


@dataclass
class Manifest:
    artifacts: dict[str, Artifact] = field(default_factory=dict)
    fileset_mappings: dict[Artifact, list[tuple[str, Path]]] = field(
        default_factory=dict
    )
    missing: list[Artifact] = field(default_factory=list)
    sets: dict[str, SharedSet] = field(default_factory=dict)
    groups: list[SharedSet] = field(default_factory=list)


def load_manifest(path: Path) -> Manifest:
    try:
        raw = orjson.loads(path.read_bytes())
    except OSError as exc:
        msg = f"Failed to read manifest {path}: {exc}"
        raise ManifestError(msg) from exc
    except orjson.JSONDecodeError as exc:
        msg = f"Invalid JSON in {path}: {exc}"
        raise ManifestError(msg) from exc

    try:
        spec = ManifestFile.model_validate(raw)
    except ValidationError as exc:
        msg = f"Invalid manifest {path}: {exc}"
        raise ManifestError(msg) from exc

    return build_manifest(spec)


def build_manifest(spec: ManifestFile) -> Manifest:
    manifest = Manifest(artifacts=dict(spec.artifacts))

    for artifact_id, links in spec.filesets.items():
        fileset = _lookup(manifest.artifacts, artifact_id, "artifact")
        manifest.fileset_mappings[fileset] = [
            (link.rel_name, Path(link.target)) for link in links
        ]
    manifest.missing = [
        _lookup(manifest.artifacts, artifact_id, "artifact")
        for artifact_id in spec.missing
    ]

    building: set[str] = set()

    def _build(set_id: str) -> SharedSet:
        if set_id in manifest.sets:
            return manifest.sets[set_id]
        set_spec = _lookup(spec.sets, set_id, "set")
        if set_id in building:
            msg = f"Set {set_id!r} contains itself"
            raise ManifestError(msg)
        building.add(set_id)
        builder: SharedSetBuilder = SharedSetBuilder(set_spec.order)
        for artifact_id in set_spec.leaves:
            builder.add(_lookup(manifest.artifacts, artifact_id, "artifact"))
        for child_id in set_spec.children:
            try:
                builder.add_transitive(_build(child_id))
            except ValueError as exc:
                msg = f"Set {set_id!r}: {exc}"
                raise ManifestError(msg) from exc
        building.discard(set_id)
        manifest.sets[set_id] = builder.build()
        return manifest.sets[set_id]

    for set_id in spec.sets:
        _build(set_id)
    manifest.groups = [_build(set_id) for set_id in spec.groups]
    return manifest


def _lookup(table: dict[str, Any], key: str, kind: str) -> Any:
    try:
        return table[key]
    except KeyError:
        msg = f"Unknown {kind} id {key!r}"
        raise ManifestError(msg) from None


__all__ = [
    "Manifest",
    "ManifestError",
    "ManifestFile",
    "build_manifest",
    "load_manifest",
]
