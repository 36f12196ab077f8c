"""Structurally shared nested sets."""

from nestedset.order import Order
from nestedset.shared_set import SharedSet, SharedSetBuilder, assert_acyclic

__all__ = ["Order", "SharedSet", "SharedSetBuilder", "assert_acyclic"]
