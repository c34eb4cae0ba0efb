"""Tests for manifest library."""

from pathlib import Path
from typing import Any

import pytest
import yaml

from rabbitmq_operator.config import ReadConfig
from rabbitmq_operator.exceptions import InputException
from rabbitmq_operator.manifest import (
    ConfigMap,
    EndpointAddress,
    Endpoints,
    NamedResource,
    RabbitmqCluster,
    RawObject,
    parse_raw_obj,
    read_objects,
)

POD_DOC = {
    "apiVersion": "v1",
    "kind": "Pod",
    "metadata": {"name": "abc-rabbitmq-server-0"},
    "spec": {"containers": []},
}


def test_parse_rabbitmq_cluster(cluster_doc: dict[str, Any]) -> None:
    """Test parsing a RabbitmqCluster doc."""
    cluster = RabbitmqCluster.parse_doc(cluster_doc)
    assert cluster.name == "abc"
    assert cluster.namespace == "messaging"
    assert cluster.tls_enabled
    assert cluster.mutual_tls_enabled
    assert cluster.ca_cert_name == "ca.crt"
    assert cluster.additional_plugins == ["rabbitmq_shovel"]
    assert cluster.additional_config == "cluster_partition_handling = autoheal\n"
    assert cluster.advanced_config == ""
    assert cluster.resource_id == NamedResource("RabbitmqCluster", "messaging", "abc")
    assert str(cluster.resource_id) == "RabbitmqCluster/messaging/abc"


def test_parse_rabbitmq_cluster_defaults() -> None:
    """Test parsing a RabbitmqCluster with an empty spec."""
    cluster = RabbitmqCluster.parse_doc(
        {
            "apiVersion": "rabbitmq.com/v1beta1",
            "kind": "RabbitmqCluster",
            "metadata": {"name": "plain"},
        }
    )
    assert cluster == RabbitmqCluster(name="plain")
    assert not cluster.tls_enabled
    assert not cluster.mutual_tls_enabled
    assert cluster.additional_plugins == []


def test_parse_rabbitmq_cluster_tls_only(cluster_doc: dict[str, Any]) -> None:
    """Test that mutual TLS requires both the CA secret and the CA cert name."""
    del cluster_doc["spec"]["tls"]["caSecretName"]
    cluster = RabbitmqCluster.parse_doc(cluster_doc)
    assert cluster.tls_enabled
    assert not cluster.mutual_tls_enabled


def test_parse_rabbitmq_cluster_mutual_tls_without_tls(
    cluster_doc: dict[str, Any],
) -> None:
    """Test that the TLS flags are not cross checked when parsing."""
    del cluster_doc["spec"]["tls"]["secretName"]
    cluster = RabbitmqCluster.parse_doc(cluster_doc)
    assert not cluster.tls_enabled
    assert cluster.mutual_tls_enabled


@pytest.mark.parametrize(
    ("doc", "match"),
    [
        ({"kind": "RabbitmqCluster", "metadata": {"name": "a"}}, "apiVersion"),
        (
            {"apiVersion": "apps/v1", "kind": "RabbitmqCluster", "metadata": {}},
            "expected 'rabbitmq.com'",
        ),
        (
            {"apiVersion": "rabbitmq.com/v1beta1", "kind": "RabbitmqCluster"},
            "missing metadata",
        ),
        (
            {
                "apiVersion": "rabbitmq.com/v1beta1",
                "kind": "RabbitmqCluster",
                "metadata": {"namespace": "ns"},
            },
            "missing metadata.name",
        ),
    ],
)
def test_parse_rabbitmq_cluster_invalid(doc: dict[str, Any], match: str) -> None:
    """Test parsing invalid RabbitmqCluster docs."""
    with pytest.raises(InputException, match=match):
        RabbitmqCluster.parse_doc(doc)


def test_child_resource_name() -> None:
    """Test the names given to child objects."""
    cluster = RabbitmqCluster(name="abc")
    assert cluster.child_resource_name("server-conf") == "abc-rabbitmq-server-conf"


def test_rabbitmq_cluster_yaml() -> None:
    """Test serializing a cluster omits unset values."""
    cluster = RabbitmqCluster(name="abc", additional_plugins=["rabbitmq_shovel"])
    assert cluster.to_dict() == {
        "name": "abc",
        "tls_enabled": False,
        "mutual_tls_enabled": False,
        "additional_config": "",
        "advanced_config": "",
        "additional_plugins": ["rabbitmq_shovel"],
    }
    assert RabbitmqCluster.parse_yaml(cluster.yaml()) == cluster


def test_parse_endpoints(endpoints_doc: dict[str, Any]) -> None:
    """Test parsing an Endpoints doc."""
    endpoints = Endpoints.parse_doc(endpoints_doc)
    assert endpoints.name == "abc-rabbitmq-client"
    assert endpoints.namespace == "messaging"
    assert len(endpoints.subsets) == 1
    subset = endpoints.subsets[0]
    assert subset.addresses == [
        EndpointAddress(ip="1.2.3.4", hostname="abc-rabbitmq-server-0"),
        EndpointAddress(ip="5.6.7.8"),
    ]
    assert subset.not_ready_addresses == [EndpointAddress(ip="9.10.11.12")]


def test_parse_endpoints_no_subsets() -> None:
    """Test parsing an Endpoints doc that has never had any addresses."""
    endpoints = Endpoints.parse_doc(
        {"apiVersion": "v1", "kind": "Endpoints", "metadata": {"name": "svc"}}
    )
    assert endpoints.subsets == []


def test_parse_endpoints_missing_ip(endpoints_doc: dict[str, Any]) -> None:
    """Test parsing an Endpoints doc with an invalid address."""
    endpoints_doc["subsets"][0]["addresses"].append({"hostname": "no-ip"})
    with pytest.raises(InputException, match="missing ip"):
        Endpoints.parse_doc(endpoints_doc)


def test_config_map_doc() -> None:
    """Test converting a ConfigMap to a kubernetes object and back."""
    config_map = ConfigMap(name="cm", namespace="ns", data={"key": "value"})
    doc = config_map.to_doc()
    assert doc == {
        "apiVersion": "v1",
        "kind": "ConfigMap",
        "metadata": {"name": "cm", "namespace": "ns"},
        "data": {"key": "value"},
    }
    assert ConfigMap.parse_doc(doc) == config_map


def test_parse_raw_obj(
    cluster_doc: dict[str, Any], endpoints_doc: dict[str, Any]
) -> None:
    """Test parsing objects of different kinds."""
    assert isinstance(parse_raw_obj(cluster_doc), RabbitmqCluster)
    assert isinstance(parse_raw_obj(endpoints_doc), Endpoints)
    pod = parse_raw_obj(POD_DOC)
    assert pod == RawObject(
        kind="Pod",
        api_version="v1",
        name="abc-rabbitmq-server-0",
        namespace=None,
        spec={"containers": []},
    )


def test_parse_raw_obj_missing_kind() -> None:
    """Test parsing an object without a kind."""
    with pytest.raises(InputException, match="missing kind"):
        parse_raw_obj({"apiVersion": "v1", "metadata": {"name": "x"}})


async def test_read_objects(
    tmp_path: Path, cluster_doc: dict[str, Any], endpoints_doc: dict[str, Any]
) -> None:
    """Test reading a multi-document YAML file."""
    path = tmp_path / "objects.yaml"
    path.write_text(
        yaml.dump_all([cluster_doc, None, POD_DOC, endpoints_doc], explicit_start=True)
    )
    objects = await read_objects(path)
    assert [type(obj) for obj in objects] == [RabbitmqCluster, RawObject, Endpoints]


async def test_read_objects_default_namespace(tmp_path: Path) -> None:
    """Test that a default namespace is applied to objects without one."""
    path = tmp_path / "objects.yaml"
    path.write_text(yaml.dump(POD_DOC))
    objects = await read_objects(path, ReadConfig(default_namespace="messaging"))
    assert len(objects) == 1
    assert isinstance(objects[0], RawObject)
    assert objects[0].namespace == "messaging"


async def test_read_objects_invalid_yaml(tmp_path: Path) -> None:
    """Test reading a file that is not valid YAML."""
    path = tmp_path / "objects.yaml"
    path.write_text("kind: [unterminated\n")
    with pytest.raises(InputException, match="Unable to parse YAML"):
        await read_objects(path)


async def test_read_objects_not_a_mapping(tmp_path: Path) -> None:
    """Test reading a file with a document that is not an object."""
    path = tmp_path / "objects.yaml"
    path.write_text("- a\n- b\n")
    with pytest.raises(InputException, match="Invalid document"):
        await read_objects(path)


def test_named_resource() -> None:
    """Test the string forms of a resource identifier."""
    assert NamedResource("Endpoints", "ns", "svc").namespaced_name == "ns/svc"
    assert NamedResource("Endpoints", None, "svc").namespaced_name == "svc"
    assert str(NamedResource("Endpoints", None, "svc")) == "Endpoints/svc"


async def test_read_objects_list(
    tmp_path: Path, cluster_doc: dict[str, Any], endpoints_doc: dict[str, Any]
) -> None:
    """Test reading the List wrapper written by kubectl get -o yaml."""
    path = tmp_path / "objects.yaml"
    path.write_text(
        yaml.dump_all(
            [
                {
                    "apiVersion": "v1",
                    "kind": "List",
                    "metadata": {"resourceVersion": ""},
                    "items": [POD_DOC, endpoints_doc],
                },
                cluster_doc,
                {"apiVersion": "v1", "kind": "List", "items": []},
            ],
            explicit_start=True,
        )
    )
    objects = await read_objects(path)
    assert [type(obj) for obj in objects] == [RawObject, Endpoints, RabbitmqCluster]
