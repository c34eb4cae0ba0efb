"""Rendering of the RabbitMQ server configuration.

The server configuration is a set of files mounted into every broker pod and
read at startup:

  - `rabbitmq.conf`: the generated base settings, the TLS settings when
    enabled, followed by the user supplied `additional_config`.
  - `enabled_plugins`: the required plugins plus any additional plugins, as an
    Erlang list terminated by a period.
  - `advanced.config`: only present when the cluster declares one.

Rendering is a pure function of the cluster so the output is stable across
reconcile passes and can be compared against the stored ConfigMap.
"""

from collections.abc import Iterable
import logging
from pathlib import Path

import aiofiles
import aiofiles.os

from rabbitmq_operator.manifest import ConfigMap, RabbitmqCluster

from .artifact import ServerConfigArtifact

__all__ = [
    "REQUIRED_PLUGINS",
    "append_if_unique",
    "build_server_config",
    "server_config_map",
    "write_server_config",
]

_LOGGER = logging.getLogger(__name__)

SERVER_CONFIG_MAP_NAME = "server-conf"
RABBITMQ_CONF_KEY = "rabbitmq.conf"
ENABLED_PLUGINS_KEY = "enabled_plugins"
ADVANCED_CONFIG_KEY = "advanced.config"

TLS_MOUNT_DIR = "/etc/rabbitmq-tls/"

DEFAULT_RABBITMQ_CONF = """\
cluster_formation.peer_discovery_backend = rabbit_peer_discovery_k8s
cluster_formation.k8s.host = kubernetes.default
cluster_formation.k8s.address_type = hostname
cluster_formation.node_cleanup.interval = 30
cluster_formation.node_cleanup.only_log_warning = true
cluster_partition_handling = pause_minority
queue_master_locator = min-masters
"""

DEFAULT_TLS_CONF = f"""
ssl_options.certfile={TLS_MOUNT_DIR}tls.crt
ssl_options.keyfile={TLS_MOUNT_DIR}tls.key
listeners.ssl.default=5671
"""

DEFAULT_MUTUAL_TLS_CONF = """
ssl_options.verify = verify_peer
"""

REQUIRED_PLUGINS = (
    "rabbitmq_peer_discovery_k8s",  # required for clustering
    "rabbitmq_prometheus",  # enforce prometheus metrics
    "rabbitmq_management",
)


def append_if_unique(required: Iterable[str], additional: Iterable[str]) -> list[str]:
    """Return the plugins in first seen order with duplicates removed."""
    # dict preserves insertion order
    return list(dict.fromkeys([*required, *additional]))


def _rabbitmq_conf(cluster: RabbitmqCluster) -> str:
    """Render the rabbitmq.conf contents."""
    parts = [DEFAULT_RABBITMQ_CONF, f"cluster_name = {cluster.name}\n"]
    if cluster.tls_enabled:
        _LOGGER.debug("Rendering TLS settings for %s", cluster.resource_id)
        parts.append(DEFAULT_TLS_CONF)
    if cluster.mutual_tls_enabled:
        _LOGGER.debug("Rendering mutual TLS settings for %s", cluster.resource_id)
        ca_cert_name = cluster.ca_cert_name or ""
        parts.append(f"ssl_options.cacertfile={TLS_MOUNT_DIR}{ca_cert_name}\n")
        parts.append(DEFAULT_MUTUAL_TLS_CONF)
    # rabbitmq.conf takes the last value when a key is repeated, so the
    # additional config is appended without deduplication to allow overrides
    parts.append(cluster.additional_config)
    return "".join(parts)


def _enabled_plugins(cluster: RabbitmqCluster) -> str:
    """Render the enabled_plugins contents."""
    plugins = append_if_unique(REQUIRED_PLUGINS, cluster.additional_plugins)
    return "[" + ",".join(plugins) + "]."


def build_server_config(cluster: RabbitmqCluster) -> ServerConfigArtifact:
    """Render the server configuration files for the cluster."""
    data = {
        ENABLED_PLUGINS_KEY: _enabled_plugins(cluster),
        RABBITMQ_CONF_KEY: _rabbitmq_conf(cluster),
    }
    if cluster.advanced_config:
        data[ADVANCED_CONFIG_KEY] = cluster.advanced_config
    return ServerConfigArtifact(data=data)


def server_config_map(cluster: RabbitmqCluster) -> ConfigMap:
    """Return the ConfigMap holding the server configuration of the cluster."""
    artifact = build_server_config(cluster)
    return ConfigMap(
        name=cluster.child_resource_name(SERVER_CONFIG_MAP_NAME),
        namespace=cluster.namespace,
        data=dict(artifact.data),
    )


async def write_server_config(
    directory: Path, artifact: ServerConfigArtifact
) -> list[str]:
    """Write the artifact files to a directory, skipping unchanged files.

    An `advanced.config` file left over from a previous pass is removed when the
    artifact no longer has one. Returns the names of files written or removed.
    """
    changed: list[str] = []
    for key, content in artifact.data.items():
        path = directory / key
        if await aiofiles.os.path.exists(path):
            async with aiofiles.open(path, newline="") as current_file:
                if await current_file.read() == content:
                    _LOGGER.debug("Skipping unchanged %s", path)
                    continue
        async with aiofiles.open(path, mode="w", newline="") as config_file:
            await config_file.write(content)
        changed.append(key)
    stale = directory / ADVANCED_CONFIG_KEY
    if ADVANCED_CONFIG_KEY not in artifact.data and await aiofiles.os.path.exists(
        stale
    ):
        await aiofiles.os.remove(stale)
        changed.append(ADVANCED_CONFIG_KEY)
    return changed
