"""Shared fixtures for rabbitmq-operator tests."""

from typing import Any

import pytest


@pytest.fixture
def cluster_doc() -> dict[str, Any]:
    """A RabbitmqCluster object as returned by the API server."""
    return {
        "apiVersion": "rabbitmq.com/v1beta1",
        "kind": "RabbitmqCluster",
        "metadata": {
            "name": "abc",
            "namespace": "messaging",
        },
        "spec": {
            "tls": {
                "secretName": "abc-tls",
                "caSecretName": "abc-ca",
                "caCertName": "ca.crt",
            },
            "rabbitmq": {
                "additionalPlugins": ["rabbitmq_shovel"],
                "additionalConfig": "cluster_partition_handling = autoheal\n",
            },
        },
    }


@pytest.fixture
def endpoints_doc() -> dict[str, Any]:
    """An Endpoints object of the client service with two ready pods."""
    return {
        "apiVersion": "v1",
        "kind": "Endpoints",
        "metadata": {
            "name": "abc-rabbitmq-client",
            "namespace": "messaging",
        },
        "subsets": [
            {
                "addresses": [
                    {"ip": "1.2.3.4", "hostname": "abc-rabbitmq-server-0"},
                    {"ip": "5.6.7.8"},
                ],
                "notReadyAddresses": [{"ip": "9.10.11.12"}],
            }
        ],
    }
