"""Identity-keyed naming of shared subtrees for one encoding session."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from nestedset.shared_set import SharedSet

logger = logging.getLogger(__name__)


class ArtifactGroupNamer:
    """Assigns each distinct ``SharedSet`` node a stable name.

    Nodes are keyed by identity, not content. The registry keeps a reference to
    every named node so an ``id()`` can never be recycled for another node
    during the session. A name is never handed out twice, even after release.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._names: dict[int, tuple[SharedSet, str]] = {}
        self._guards: dict[int, threading.Lock] = {}
        self._next = 0

    def __len__(self) -> int:
        return len(self._names)

    def get(self, node: SharedSet) -> str | None:
        entry = self._names.get(id(node))
        return entry[1] if entry is not None else None

    def name_for(self, node: SharedSet) -> str:
        return self.name_if_new(node)[0]

    def name_if_new(
        self, node: SharedSet, build: Callable[[str], object] | None = None
    ) -> tuple[str, bool]:
        """Return ``(name, created)``; ``created`` is True for exactly one caller.

        When ``build`` is given it runs with the candidate name before the node
        is registered. If it raises, the node stays unnamed and the exception
        propagates; the candidate name is discarded, not reused. Concurrent
        callers for the same node wait for the builder; other nodes do not.
        """
        key = id(node)
        entry = self._names.get(key)
        if entry is not None:
            return entry[1], False
        with self._lock:
            entry = self._names.get(key)
            if entry is not None:
                return entry[1], False
            guard = self._guards.setdefault(key, threading.Lock())

        with guard:
            entry = self._names.get(key)
            if entry is not None:
                return entry[1], False
            with self._lock:
                name = str(self._next)
                self._next += 1
            if build is not None:
                build(name)
            with self._lock:
                self._names[key] = (node, name)
                self._guards.pop(key, None)
        logger.debug("Named %r as %s", node, name)
        return name, True

    def release(self, nodes: Iterable[SharedSet]) -> None:
        """Drop names whose events were never published.

        Released names are not handed out again; a released node gets a fresh
        name the next time it is encoded.
        """
        with self._lock:
            for node in nodes:
                entry = self._names.get(id(node))
                if entry is not None and entry[0] is node:
                    del self._names[id(node)]


__all__ = ["ArtifactGroupNamer"]
