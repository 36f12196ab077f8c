"""Traversal orders for shared sets."""

from __future__ import annotations

from enum import Enum


class Order(str, Enum):
    """Iteration order of a flattened shared set.

    ``STABLE`` makes no promise about the relative order of transitive members
    but keeps direct leaves in insertion order. It may be combined with any
    other order.
    """

    STABLE = "stable"
    COMPILE = "compile"
    LINK = "link"
    NAIVE_LINK = "naive_link"

    def is_compatible(self, other: Order) -> bool:
        return self is other or self is Order.STABLE or other is Order.STABLE


__all__ = ["Order"]
