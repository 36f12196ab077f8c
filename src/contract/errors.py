"""Failure types shared by the set, expansion and encoding layers."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from artifacts.models.artifact import Artifact


class InvariantViolation(AssertionError):
    """Raised when a structure was built in a way that can never be valid.

    These indicate a construction bug upstream and are never retried.
    """


class ArtifactResolutionError(Exception):
    """Raised when the completion context cannot locate an artifact at all."""

    def __init__(self, artifact: Artifact, reason: str) -> None:
        self.artifact = artifact
        self.reason = reason
        super().__init__(f"Cannot resolve artifact {artifact.exec_path}: {reason}")


__all__ = ["ArtifactResolutionError", "InvariantViolation"]
