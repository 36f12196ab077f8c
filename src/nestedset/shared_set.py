"""Immutable, structurally shared nested sets.

A ``SharedSet`` holds a tuple of direct leaves and a tuple of child sets.
Children are held by reference, never copied, so a subtree that is reachable
from many parents exists exactly once in memory. Equality and hashing are by
identity: two sets with the same contents are still two distinct subtrees.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Generic, TypeVar

from contract.errors import InvariantViolation
from nestedset.order import Order

if TYPE_CHECKING:
    from collections.abc import Hashable, Iterable, Iterator

T = TypeVar("T", bound="Hashable")


class SharedSet(Generic[T]):
    """An immutable node of a nested-set DAG.

    Instances are created through ``SharedSetBuilder``, ``from_leaves`` or
    ``union``; there are no mutating operations.
    """

    __slots__ = ("_children", "_leaves", "_order")

    def __init__(
        self,
        order: Order,
        leaves: tuple[T, ...],
        children: tuple[SharedSet[T], ...],
    ) -> None:
        self._order = order
        self._leaves = leaves
        self._children = children

    def __setattr__(self, name: str, value: object) -> None:
        if hasattr(self, name):
            msg = f"SharedSet is immutable; cannot reassign {name!r}"
            raise AttributeError(msg)
        super().__setattr__(name, value)

    def __repr__(self) -> str:
        return (
            f"SharedSet(order={self._order.value}, leaves={len(self._leaves)}, "
            f"children={len(self._children)})"
        )

    @property
    def order(self) -> Order:
        return self._order

    def leaves(self) -> tuple[T, ...]:
        """Direct members of this node, in insertion order."""
        return self._leaves

    def children(self) -> tuple[SharedSet[T], ...]:
        """Child nodes, distinct by identity, in insertion order."""
        return self._children

    def is_empty(self) -> bool:
        return not self._leaves and not self._children

    @classmethod
    def empty(cls, order: Order = Order.STABLE) -> SharedSet[T]:
        return _EMPTY_SETS[order]

    @classmethod
    def from_leaves(
        cls, items: Iterable[T], order: Order = Order.STABLE
    ) -> SharedSet[T]:
        return SharedSetBuilder(order).add_all(items).build()

    @classmethod
    def union(
        cls, sets: Iterable[SharedSet[T]], order: Order = Order.STABLE
    ) -> SharedSet[T]:
        """Combine ``sets`` as children of a new node without copying them."""
        builder = SharedSetBuilder(order)
        for member in sets:
            builder.add_transitive(member)
        return builder.build()

    def iter_nodes(self) -> Iterator[SharedSet[T]]:
        """Yield every distinct reachable node once, children before parents."""
        return _postorder_nodes(self, reverse=False)

    def to_list(self) -> list[T]:
        """Flatten the DAG into a value-deduplicated list following ``order``."""
        seen: set[T] = set()
        result: list[T] = []

        def _take(items: Iterable[T]) -> None:
            for item in items:
                if item not in seen:
                    seen.add(item)
                    result.append(item)

        if self._order is Order.NAIVE_LINK:
            for node in _preorder_nodes(self):
                _take(node.leaves())
            return result

        if self._order is Order.LINK:
            for node in _postorder_nodes(self, reverse=True):
                _take(reversed(node.leaves()))
            result.reverse()
            return result

        for node in _postorder_nodes(self, reverse=False):
            _take(node.leaves())
        return result


class SharedSetBuilder(Generic[T]):
    """Accumulates leaves and child sets for a single new ``SharedSet``."""

    def __init__(self, order: Order = Order.STABLE) -> None:
        self._order = order
        self._leaves: dict[T, None] = {}
        self._children: dict[int, SharedSet[T]] = {}

    @property
    def order(self) -> Order:
        return self._order

    def add(self, item: T) -> SharedSetBuilder[T]:
        if item is None:
            msg = "SharedSet leaves cannot be None"
            raise ValueError(msg)
        self._leaves.setdefault(item, None)
        return self

    def add_all(self, items: Iterable[T]) -> SharedSetBuilder[T]:
        for item in items:
            self.add(item)
        return self

    def add_transitive(self, subset: SharedSet[T]) -> SharedSetBuilder[T]:
        if not self._order.is_compatible(subset.order):
            msg = (
                f"Order mismatch: cannot add a {subset.order.value} set "
                f"to a {self._order.value} builder"
            )
            raise ValueError(msg)
        if not subset.is_empty():
            self._children.setdefault(id(subset), subset)
        return self

    def build(self) -> SharedSet[T]:
        if not self._leaves and not self._children:
            return SharedSet.empty(self._order)
        if not self._leaves and len(self._children) == 1:
            (only,) = self._children.values()
            if only.order is self._order:
                return only
        return SharedSet(
            self._order, tuple(self._leaves), tuple(self._children.values())
        )


def _postorder_nodes(root: SharedSet[T], *, reverse: bool) -> Iterator[SharedSet[T]]:
    # Iterative so deep chains do not hit the recursion limit.
    visited: set[int] = {id(root)}
    stack: list[tuple[SharedSet[T], Iterator[SharedSet[T]]]] = [
        (root, _child_iter(root, reverse=reverse))
    ]
    while stack:
        node, pending = stack[-1]
        for child in pending:
            if id(child) not in visited:
                visited.add(id(child))
                stack.append((child, _child_iter(child, reverse=reverse)))
                break
        else:
            stack.pop()
            yield node


def _preorder_nodes(root: SharedSet[T]) -> Iterator[SharedSet[T]]:
    visited: set[int] = set()
    stack: list[SharedSet[T]] = [root]
    while stack:
        node = stack.pop()
        if id(node) in visited:
            continue
        visited.add(id(node))
        yield node
        stack.extend(reversed(node.children()))


def _child_iter(node: SharedSet[T], *, reverse: bool) -> Iterator[SharedSet[T]]:
    children = node.children()
    return reversed(children) if reverse else iter(children)


def assert_acyclic(root: SharedSet[T]) -> None:
    """Raise ``InvariantViolation`` if ``root`` reaches itself through children."""
    done: set[int] = set()
    on_path: set[int] = {id(root)}
    stack: list[tuple[SharedSet[T], Iterator[SharedSet[T]]]] = [
        (root, iter(root.children()))
    ]
    while stack:
        node, pending = stack[-1]
        for child in pending:
            if id(child) in on_path:
                msg = f"Cycle detected through {child!r}"
                raise InvariantViolation(msg)
            if id(child) not in done:
                on_path.add(id(child))
                stack.append((child, iter(child.children())))
                break
        else:
            stack.pop()
            on_path.discard(id(node))
            done.add(id(node))


_EMPTY_SETS: dict[Order, SharedSet] = {
    order: SharedSet(order, (), ()) for order in Order
}


__all__ = ["SharedSet", "SharedSetBuilder", "assert_acyclic"]
