from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from pydantic import ValidationError

from artifacts.context import LocalCompletionContext
from artifacts.expand import expand_set
from artifacts.models import (
    Artifact,
    ArtifactKind,
    DirectEntry,
    FilesetMapping,
    LinkedEntry,
    make_entry,
)
from contract.errors import ArtifactResolutionError, InvariantViolation
from nestedset import Order, SharedSet, SharedSetBuilder

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator


def _artifact(path: str, kind: ArtifactKind = "file") -> Artifact:
    return Artifact(path=path, root="bazel-out/bin", kind=kind)


def _assert_paired(entries: Iterable[object]) -> None:
    for entry in entries:
        if isinstance(entry, LinkedEntry):
            assert entry.rel_name
            assert entry.target is not None
        else:
            assert isinstance(entry, DirectEntry)


def test_plain_artifacts_become_direct_entries_in_order(tmp_path: Path) -> None:
    a, b, c = _artifact("a.txt"), _artifact("b.txt"), _artifact("c.txt")
    ctx = LocalCompletionContext(tmp_path)

    expanded = expand_set(ctx, SharedSet.from_leaves([a, b, c]))

    assert expanded.leaves() == (
        DirectEntry(artifact=a),
        DirectEntry(artifact=b),
        DirectEntry(artifact=c),
    )


def test_expansion_is_idempotent(tmp_path: Path) -> None:
    fileset = _artifact("fs", kind="fileset")
    ctx = LocalCompletionContext(
        tmp_path,
        fileset_mappings={fileset: [("x.txt", Path("data/x.txt"))]},
    )
    once = expand_set(ctx, SharedSet.from_leaves([_artifact("a.txt"), fileset]))

    twice = expand_set(ctx, once)

    assert twice.leaves() == once.leaves()
    assert [type(e) for e in twice.leaves()] == [DirectEntry, LinkedEntry]


def test_fileset_yields_one_linked_entry_per_mapping(tmp_path: Path) -> None:
    fileset = _artifact("fs", kind="fileset")
    ctx = LocalCompletionContext(
        tmp_path,
        fileset_mappings={
            fileset: [("one.txt", Path("t/1")), ("two.txt", Path("t/2"))]
        },
    )
    before, after = _artifact("before.txt"), _artifact("after.txt")

    expanded = expand_set(ctx, SharedSet.from_leaves([before, fileset, after]))

    assert expanded.leaves() == (
        DirectEntry(artifact=before),
        LinkedEntry(artifact=fileset, rel_name="one.txt", target=Path("t/1")),
        LinkedEntry(artifact=fileset, rel_name="two.txt", target=Path("t/2")),
        DirectEntry(artifact=after),
    )
    _assert_paired(expanded.leaves())


def test_fileset_without_mappings_contributes_nothing(tmp_path: Path) -> None:
    fileset = _artifact("fs", kind="fileset")
    ctx = LocalCompletionContext(tmp_path)

    expanded = expand_set(ctx, SharedSet.from_leaves([fileset, _artifact("a")]))

    assert expanded.leaves() == (DirectEntry(artifact=_artifact("a")),)


def test_tree_artifact_lists_files_sorted(tmp_path: Path) -> None:
    tree = _artifact("gen", kind="tree")
    tree_dir = tmp_path / "bazel-out" / "bin" / "gen"
    (tree_dir / "sub").mkdir(parents=True)
    (tree_dir / "z.txt").write_text("z", encoding="utf-8")
    (tree_dir / "sub" / "a.txt").write_text("a", encoding="utf-8")
    ctx = LocalCompletionContext(tmp_path)

    expanded = expand_set(ctx, SharedSet.from_leaves([tree]))

    assert [e.artifact.path for e in expanded.leaves()] == [
        "gen/sub/a.txt",
        "gen/z.txt",
    ]


def test_tree_artifact_kept_whole_when_tree_expansion_disabled(tmp_path: Path) -> None:
    tree = _artifact("gen", kind="tree")
    ctx = LocalCompletionContext(tmp_path, expand_trees=False)

    expanded = expand_set(ctx, SharedSet.from_leaves([tree]))

    assert expanded.leaves() == (DirectEntry(artifact=tree),)


def test_children_pass_through_unaltered(tmp_path: Path) -> None:
    child = SharedSet.from_leaves([_artifact("c.txt")])
    top = SharedSetBuilder().add(_artifact("a.txt")).add_transitive(child).build()

    expanded = expand_set(LocalCompletionContext(tmp_path), top)

    assert expanded.children() == (child,)
    assert expanded.children()[0] is child
    assert child.leaves() == (_artifact("c.txt"),)


def test_lone_child_is_not_collapsed(tmp_path: Path) -> None:
    child = SharedSet.from_leaves([_artifact("c.txt")], Order.COMPILE)
    top = SharedSet.union([child])

    expanded = expand_set(LocalCompletionContext(tmp_path), top)

    assert expanded is not child
    assert expanded.leaves() == ()
    assert expanded.children() == (child,)


def test_input_set_is_not_mutated(tmp_path: Path) -> None:
    a = _artifact("a.txt")
    original = SharedSet.from_leaves([a])

    expand_set(LocalCompletionContext(tmp_path), original)

    assert original.leaves() == (a,)


def test_empty_set_expands_to_empty(tmp_path: Path) -> None:
    assert expand_set(LocalCompletionContext(tmp_path), SharedSet.empty()).is_empty()


def test_unexpected_leaf_type_is_fatal(tmp_path: Path) -> None:
    bogus = SharedSet.from_leaves(["not-an-artifact"])

    with pytest.raises(InvariantViolation, match="Unexpected type"):
        expand_set(LocalCompletionContext(tmp_path), bogus)  # type: ignore[arg-type]


def test_missing_output_propagates(tmp_path: Path) -> None:
    tree = _artifact("gen", kind="tree")
    ctx = LocalCompletionContext(tmp_path, missing=[tree])

    with pytest.raises(ArtifactResolutionError) as excinfo:
        expand_set(ctx, SharedSet.from_leaves([tree]))

    assert excinfo.value.artifact == tree


def test_unexpected_context_result_is_fatal(tmp_path: Path) -> None:
    class _BrokenContext(LocalCompletionContext):
        def visit_artifacts(
            self, artifacts: Iterable[Artifact]
        ) -> Iterator[Artifact | FilesetMapping]:
            yield "garbage"  # type: ignore[misc]

    with pytest.raises(InvariantViolation, match="unexpected result"):
        expand_set(_BrokenContext(tmp_path), SharedSet.from_leaves([_artifact("a")]))


def test_make_entry_rejects_half_linked() -> None:
    a = _artifact("a")

    with pytest.raises(InvariantViolation, match="both or neither"):
        make_entry(a, rel_name="x", target=None)
    with pytest.raises(InvariantViolation, match="both or neither"):
        make_entry(a, rel_name=None, target=Path("t"))


def test_make_entry_variants() -> None:
    a = _artifact("a")

    assert make_entry(a) == DirectEntry(artifact=a)
    assert make_entry(a, "x", Path("t")) == LinkedEntry(
        artifact=a, rel_name="x", target=Path("t")
    )


def test_linked_entry_rejects_empty_rel_name() -> None:
    with pytest.raises(ValidationError):
        LinkedEntry(artifact=_artifact("a"), rel_name="", target=Path("t"))


def test_make_entry_rejects_empty_rel_name() -> None:
    with pytest.raises(InvariantViolation, match="empty rel_name"):
        make_entry(_artifact("a"), rel_name="", target=Path("t"))


def test_fileset_mapping_with_empty_name_is_fatal(tmp_path: Path) -> None:
    fileset = _artifact("fs", kind="fileset")
    ctx = LocalCompletionContext(
        tmp_path, fileset_mappings={fileset: [("", Path("t/1"))]}
    )

    with pytest.raises(InvariantViolation, match="empty rel_name"):
        expand_set(ctx, SharedSet.from_leaves([fileset]))
