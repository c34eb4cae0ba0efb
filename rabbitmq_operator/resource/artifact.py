"""Artifact types for the server configuration."""

from abc import ABC
from collections.abc import Mapping
from dataclasses import dataclass, field


@dataclass(frozen=True, kw_only=True)
class Artifact(ABC):
    """Base class for all artifacts."""


@dataclass(frozen=True, kw_only=True)
class ServerConfigArtifact(Artifact):
    """Artifact representing the rendered server configuration files.

    Attributes:
        data: Mapping of file name to file contents, in a fixed key order.
    """

    data: dict[str, str] = field(default_factory=dict)

    def changed(self, current: Mapping[str, str] | None) -> bool:
        """Return True if the stored data differs from this artifact."""
        if current is None:
            return True
        return dict(current) != self.data
