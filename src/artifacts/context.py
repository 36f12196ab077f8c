"""Completion contexts: how raw artifacts map onto files on disk."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from artifacts.models.artifact import Artifact, FilesetMapping
from contract.errors import ArtifactResolutionError

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping

logger = logging.getLogger(__name__)


class CompletionContext(Protocol):
    """Collaborator that knows where outputs of a finished build live."""

    def resolve_path(self, artifact: Artifact) -> Path: ...

    def convert_path(self, target: Path) -> Path: ...

    def visit_artifacts(
        self, artifacts: Iterable[Artifact]
    ) -> Iterator[Artifact | FilesetMapping]: ...


class LocalCompletionContext:
    """Completion context backed by a local execution root.

    Args:
        exec_root: Directory that artifact exec paths are relative to.
        fileset_mappings: ``(rel_name, target)`` pairs per fileset artifact.
        missing: Artifacts known to have failed to materialize.
        expand_trees: Whether tree artifacts are listed file by file.
        check_exists: Whether ``resolve_path`` requires the file to exist.
    """

    def __init__(
        self,
        exec_root: Path,
        *,
        fileset_mappings: Mapping[Artifact, Iterable[tuple[str, Path]]] | None = None,
        missing: Iterable[Artifact] = (),
        expand_trees: bool = True,
        check_exists: bool = False,
    ) -> None:
        self.exec_root = exec_root
        self.fileset_mappings = {
            fileset: tuple(links)
            for fileset, links in (fileset_mappings or {}).items()
        }
        self.missing = frozenset(missing)
        self.expand_trees = expand_trees
        self.check_exists = check_exists

    def resolve_path(self, artifact: Artifact) -> Path:
        if artifact in self.missing:
            raise ArtifactResolutionError(artifact, "output was not produced")
        path = self.exec_root / artifact.exec_path
        if self.check_exists and not path.exists():
            raise ArtifactResolutionError(artifact, f"no such file {path}")
        return path

    def convert_path(self, target: Path) -> Path:
        if target.is_absolute():
            return target
        return self.exec_root / target

    def visit_artifacts(
        self, artifacts: Iterable[Artifact]
    ) -> Iterator[Artifact | FilesetMapping]:
        for artifact in artifacts:
            if artifact.kind == "fileset":
                yield from self._fileset_links(artifact)
            elif artifact.kind == "tree" and self.expand_trees:
                yield from self._tree_children(artifact)
            else:
                yield artifact

    def _fileset_links(self, fileset: Artifact) -> Iterator[FilesetMapping]:
        if fileset in self.missing:
            raise ArtifactResolutionError(fileset, "fileset was not produced")
        links = self.fileset_mappings.get(fileset, ())
        logger.debug("Fileset %s has %d mapping(s)", fileset.exec_path, len(links))
        for rel_name, target in links:
            yield FilesetMapping(fileset=fileset, rel_name=rel_name, target=target)

    def _tree_children(self, tree: Artifact) -> Iterator[Artifact]:
        directory = self.resolve_path(tree)
        if not directory.is_dir():
            raise ArtifactResolutionError(tree, f"{directory} is not a directory")
        files = sorted(
            path.relative_to(directory).as_posix()
            for path in directory.rglob("*")
            if path.is_file()
        )
        logger.debug("Tree %s expanded to %d file(s)", tree.exec_path, len(files))
        for rel_path in files:
            yield tree.child(rel_path)


__all__ = ["CompletionContext", "LocalCompletionContext"]
