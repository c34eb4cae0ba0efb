"""Resource module.

This module renders the child objects of a RabbitmqCluster from its declared
state.
"""

from .artifact import Artifact, ServerConfigArtifact
from .server_config import (
    REQUIRED_PLUGINS,
    append_if_unique,
    build_server_config,
    server_config_map,
    write_server_config,
)

__all__ = [
    "Artifact",
    "ServerConfigArtifact",
    "REQUIRED_PLUGINS",
    "append_if_unique",
    "build_server_config",
    "server_config_map",
    "write_server_config",
]
