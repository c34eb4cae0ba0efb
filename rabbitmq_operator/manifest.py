"""Representation of the Kubernetes objects consumed and produced by the operator.

The objects here are snapshots supplied by the surrounding reconcile loop: the
declared `RabbitmqCluster`, the `Endpoints` observed for its client service, and
the `ConfigMap` holding the rendered server configuration. They may be parsed
from raw Kubernetes documents, or read from YAML files on local disk.
"""

from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Any, ClassVar

import aiofiles
import yaml
from mashumaro import DataClassDictMixin
from mashumaro.codecs.yaml import yaml_decode, yaml_encode
from mashumaro.config import BaseConfig

from .config import ReadConfig
from .exceptions import InputException

__all__ = [
    "read_objects",
    "parse_raw_obj",
    "NamedResource",
    "RabbitmqCluster",
    "ConfigMap",
    "Endpoints",
    "EndpointSubset",
    "EndpointAddress",
    "RawObject",
]

_LOGGER = logging.getLogger(__name__)


# Match a prefix of apiVersion to ensure we have the right type of object.
# We don't check specific versions for forward compatibility on upgrade.
RABBITMQ_DOMAIN = "rabbitmq.com"
CORE_VERSION = "v1"
RABBITMQ_CLUSTER_KIND = "RabbitmqCluster"
CONFIG_MAP_KIND = "ConfigMap"
ENDPOINTS_KIND = "Endpoints"
LIST_KIND = "List"


def _check_version(doc: dict[str, Any], version: str) -> None:
    """Assert that the resource has the specified version."""
    if not (api_version := doc.get("apiVersion")):
        raise InputException(f"Invalid object missing apiVersion: {doc}")
    if not api_version.startswith(version):
        raise InputException(f"Invalid object expected '{version}': {doc}")


def _metadata_name(cls: type, doc: dict[str, Any]) -> tuple[str, str | None]:
    """Return the name and namespace of a raw kubernetes object."""
    if not (metadata := doc.get("metadata")):
        raise InputException(f"Invalid {cls.__name__} missing metadata: {doc}")
    if not (name := metadata.get("name")):
        raise InputException(f"Invalid {cls.__name__} missing metadata.name: {doc}")
    return name, metadata.get("namespace")


@dataclass
class BaseManifest(DataClassDictMixin):
    """Base class for all manifest objects."""

    @classmethod
    def parse_yaml(cls, content: str) -> "BaseManifest":
        """Parse a serialized manifest."""
        return yaml_decode(content, cls)

    def yaml(self) -> str:
        """Return a YAML string representation of the object."""
        return yaml_encode(self, self.__class__)  # type: ignore[return-value]

    class Config(BaseConfig):
        omit_none = True


@dataclass(frozen=True, order=True)
class NamedResource:
    """Identifier for a kubernetes resource."""

    kind: str
    namespace: str | None
    name: str

    @property
    def namespaced_name(self) -> str:
        """Return the name prefixed by the namespace when set."""
        if self.namespace:
            return f"{self.namespace}/{self.name}"
        return self.name

    def __str__(self) -> str:
        """Return the kind and namespaced name concatenated as an id."""
        return f"{self.kind}/{self.namespaced_name}"


@dataclass
class RawObject(BaseManifest):
    """Raw kubernetes object of a kind this library does not model."""

    kind: str
    """The kind of the object."""

    api_version: str
    """The apiVersion of the object."""

    name: str
    """The name of the object."""

    namespace: str | None
    """The namespace of the object."""

    spec: dict[str, Any] | None = None
    """The spec of the object."""

    @classmethod
    def parse_doc(cls, doc: dict[str, Any]) -> "RawObject":
        """Parse a RawObject from a raw kubernetes object."""
        if not (api_version := doc.get("apiVersion")):
            raise InputException(f"Invalid object missing apiVersion: {doc}")
        name, namespace = _metadata_name(cls, doc)
        return cls(
            kind=doc["kind"],
            api_version=api_version,
            name=name,
            namespace=namespace,
            spec=doc.get("spec"),
        )


@dataclass
class RabbitmqCluster(BaseManifest):
    """The declared state of a single managed RabbitMQ cluster.

    Only the fields that contribute to the server configuration are
    represented. The TLS flags are not cross checked here: a cluster may
    enable mutual TLS without enabling TLS, and it is up to admission
    validation to reject that combination.
    """

    kind: ClassVar[str] = RABBITMQ_CLUSTER_KIND
    """The kind of the object."""

    name: str
    """The name of the cluster, used to derive the names of child objects."""

    namespace: str | None = None
    """The namespace of the cluster."""

    tls_enabled: bool = False
    """Serve client connections over TLS with the mounted certificate."""

    mutual_tls_enabled: bool = False
    """Verify client certificates against the mounted CA certificate."""

    ca_cert_name: str | None = None
    """File name of the CA certificate in the TLS mount, set with mutual TLS."""

    additional_config: str = ""
    """Free-form rabbitmq.conf text appended after the generated settings."""

    advanced_config: str = ""
    """Erlang term advanced.config contents, omitted from the output when empty."""

    additional_plugins: list[str] = field(default_factory=list)
    """Plugins to enable in addition to the required plugins."""

    @property
    def resource_id(self) -> NamedResource:
        """Identifier of the cluster object."""
        return NamedResource(self.kind, self.namespace, self.name)

    def child_resource_name(self, suffix: str) -> str:
        """Return the name of a child object owned by this cluster."""
        return f"{self.name}-rabbitmq-{suffix}"

    @classmethod
    def parse_doc(cls, doc: dict[str, Any]) -> "RabbitmqCluster":
        """Parse a RabbitmqCluster from a raw kubernetes resource object."""
        _check_version(doc, RABBITMQ_DOMAIN)
        name, namespace = _metadata_name(cls, doc)
        spec = doc.get("spec") or {}
        tls = spec.get("tls") or {}
        rabbitmq = spec.get("rabbitmq") or {}
        return cls(
            name=name,
            namespace=namespace,
            tls_enabled=bool(tls.get("secretName")),
            mutual_tls_enabled=bool(tls.get("caSecretName") and tls.get("caCertName")),
            ca_cert_name=tls.get("caCertName"),
            additional_config=rabbitmq.get("additionalConfig") or "",
            advanced_config=rabbitmq.get("advancedConfig") or "",
            additional_plugins=[
                str(plugin) for plugin in rabbitmq.get("additionalPlugins") or []
            ],
        )


@dataclass
class ConfigMap(BaseManifest):
    """A ConfigMap is an API object used to store data in key-value pairs."""

    kind: ClassVar[str] = CONFIG_MAP_KIND
    """The kind of the ConfigMap."""

    name: str
    """The name of the ConfigMap."""

    namespace: str | None = None
    """The namespace of the ConfigMap."""

    data: dict[str, str] | None = None
    """The data in the ConfigMap."""

    @classmethod
    def parse_doc(cls, doc: dict[str, Any]) -> "ConfigMap":
        """Parse a config map object from a kubernetes resource."""
        _check_version(doc, CORE_VERSION)
        name, namespace = _metadata_name(cls, doc)
        return cls(name=name, namespace=namespace, data=doc.get("data"))

    def to_doc(self) -> dict[str, Any]:
        """Return the ConfigMap as a raw kubernetes object."""
        metadata: dict[str, Any] = {"name": self.name}
        if self.namespace:
            metadata["namespace"] = self.namespace
        return {
            "apiVersion": CORE_VERSION,
            "kind": self.kind,
            "metadata": metadata,
            "data": dict(self.data or {}),
        }


@dataclass
class EndpointAddress(BaseManifest):
    """A single IP address of a pod backing a service."""

    ip: str
    """The IP of this endpoint."""

    hostname: str | None = None
    """The hostname of this endpoint."""

    @classmethod
    def parse_doc(cls, doc: dict[str, Any]) -> "EndpointAddress":
        """Parse an address entry of an Endpoints subset."""
        if not (ip := doc.get("ip")):
            raise InputException(f"Invalid {cls.__name__} missing ip: {doc}")
        return cls(ip=ip, hostname=doc.get("hostname"))


@dataclass
class EndpointSubset(BaseManifest):
    """A group of addresses sharing a set of ports."""

    addresses: list[EndpointAddress] = field(default_factory=list)
    """Addresses of pods that are ready to serve traffic."""

    not_ready_addresses: list[EndpointAddress] = field(default_factory=list)
    """Addresses of pods that are not yet ready."""

    @classmethod
    def parse_doc(cls, doc: dict[str, Any]) -> "EndpointSubset":
        """Parse a subset entry of an Endpoints object."""
        return cls(
            addresses=[
                EndpointAddress.parse_doc(address)
                for address in doc.get("addresses") or []
            ],
            not_ready_addresses=[
                EndpointAddress.parse_doc(address)
                for address in doc.get("notReadyAddresses") or []
            ],
        )


@dataclass
class Endpoints(BaseManifest):
    """The set of live network addresses backing a service."""

    kind: ClassVar[str] = ENDPOINTS_KIND
    """The kind of the object."""

    name: str
    """The name of the Endpoints, matching the service name."""

    namespace: str | None = None
    """The namespace of the Endpoints."""

    subsets: list[EndpointSubset] = field(default_factory=list)
    """Address groups of the service."""

    @classmethod
    def parse_doc(cls, doc: dict[str, Any]) -> "Endpoints":
        """Parse an Endpoints object from a kubernetes resource."""
        _check_version(doc, CORE_VERSION)
        name, namespace = _metadata_name(cls, doc)
        return cls(
            name=name,
            namespace=namespace,
            subsets=[
                EndpointSubset.parse_doc(subset) for subset in doc.get("subsets") or []
            ],
        )


def parse_raw_obj(obj: dict[str, Any]) -> BaseManifest:
    """Parse a raw kubernetes object into a BaseManifest."""
    if not (kind := obj.get("kind")):
        raise InputException(f"Invalid object missing kind: {obj}")
    if kind == RABBITMQ_CLUSTER_KIND:
        return RabbitmqCluster.parse_doc(obj)
    if kind == ENDPOINTS_KIND:
        return Endpoints.parse_doc(obj)
    if kind == CONFIG_MAP_KIND:
        return ConfigMap.parse_doc(obj)
    return RawObject.parse_doc(obj)


async def read_objects(
    path: Path, config: ReadConfig | None = None
) -> list[BaseManifest]:
    """Read all objects from a multi-document YAML file."""
    if config is None:
        config = ReadConfig()
    async with aiofiles.open(str(path)) as object_file:
        content = await object_file.read()
    try:
        docs = list(yaml.safe_load_all(content))
    except yaml.YAMLError as err:
        raise InputException(f"Unable to parse YAML file {path}: {err}") from err
    objects: list[BaseManifest] = []
    while docs:
        doc = docs.pop(0)
        if not doc:
            continue
        if not isinstance(doc, dict):
            raise InputException(f"Invalid document in {path}: {doc}")
        if doc.get("kind") == LIST_KIND:
            # Output of `kubectl get -o yaml` wraps objects in a List
            docs[0:0] = doc.get("items") or []
            continue
        if config.default_namespace and (metadata := doc.get("metadata")):
            metadata.setdefault("namespace", config.default_namespace)
        objects.append(parse_raw_obj(doc))
    _LOGGER.debug("Read %d objects from %s", len(objects), path)
    return objects
