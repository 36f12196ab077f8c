"""Shallow expansion of raw artifact leaves into resolved entries."""

from __future__ import annotations

from typing import TYPE_CHECKING

from artifacts.models.artifact import Artifact, FilesetMapping
from artifacts.models.entries import (
    RESOLVED_ENTRY_TYPES,
    DirectEntry,
    LinkedEntry,
    make_entry,
)
from contract.errors import InvariantViolation
from nestedset.order import Order
from nestedset.shared_set import SharedSet

if TYPE_CHECKING:
    from artifacts.context import CompletionContext


def expand_set(
    ctx: CompletionContext, artifacts: SharedSet[Artifact | DirectEntry | LinkedEntry]
) -> SharedSet[DirectEntry | LinkedEntry]:
    """Return a set whose direct leaves are all resolved entries.

    Entries already resolved pass through unchanged. Raw artifacts are resolved
    through ``ctx`` into one direct entry, or one linked entry per mapping.
    Children are carried over as-is: each child is expected to be expanded
    once, when it is emitted as a group of its own.

    Raises:
        InvariantViolation: If a leaf is neither an artifact nor an entry.
        ArtifactResolutionError: If ``ctx`` cannot resolve an artifact.
    """
    entries: dict[DirectEntry | LinkedEntry, None] = {}
    for leaf in artifacts.leaves():
        if isinstance(leaf, RESOLVED_ENTRY_TYPES):
            entries.setdefault(leaf, None)
        elif isinstance(leaf, Artifact):
            for resolved in ctx.visit_artifacts([leaf]):
                entries.setdefault(_to_entry(resolved), None)
        else:
            msg = f"Unexpected type in artifact set: {leaf!r}"
            raise InvariantViolation(msg)
    if not entries and not artifacts.children():
        return SharedSet.empty(Order.STABLE)
    # Built directly so a lone child is never collapsed into the result.
    return SharedSet(Order.STABLE, tuple(entries), artifacts.children())


def _to_entry(resolved: Artifact | FilesetMapping) -> DirectEntry | LinkedEntry:
    if isinstance(resolved, FilesetMapping):
        return make_entry(resolved.fileset, resolved.rel_name, resolved.target)
    if isinstance(resolved, Artifact):
        return make_entry(resolved)
    msg = f"Completion context produced unexpected result: {resolved!r}"
    raise InvariantViolation(msg)


__all__ = ["expand_set"]
