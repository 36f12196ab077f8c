"""Converters from local paths to URIs published on the event stream."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from pathlib import Path


class PathConverter(Protocol):
    """Maps a local path to a URI, or ``None`` when the path is not published."""

    def __call__(self, path: Path) -> str | None: ...


class FileUriConverter:
    """Publishes every path as a ``file://`` URI."""

    def __call__(self, path: Path) -> str | None:
        return path.absolute().as_uri()


class PrefixUriConverter:
    """Publishes paths under ``local_root`` beneath ``uri_prefix``.

    Paths are resolved first, so ``..`` segments and symlinks that leave
    ``local_root`` are declined like any other outside path.
    """

    def __init__(self, local_root: Path, uri_prefix: str) -> None:
        self.local_root = local_root.resolve()
        self.uri_prefix = uri_prefix.rstrip("/")

    def __call__(self, path: Path) -> str | None:
        try:
            rel = path.resolve().relative_to(self.local_root)
        except (OSError, ValueError):
            return None
        return f"{self.uri_prefix}/{rel.as_posix()}"


__all__ = ["FileUriConverter", "PathConverter", "PrefixUriConverter"]
