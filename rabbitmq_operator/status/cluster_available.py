"""Evaluation of the ClusterAvailable condition.

The cluster is available when the client service has at least one ready
endpoint address. Observations are supplied by the caller as a single
point-in-time snapshot.
"""

from collections.abc import Iterable
from dataclasses import dataclass
import logging

from rabbitmq_operator.manifest import Endpoints

from .condition import (
    CLUSTER_AVAILABLE,
    ClusterCondition,
    ConditionReason,
    ConditionStatus,
)

__all__ = [
    "ObservedChildren",
    "cluster_available_condition",
]

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ObservedChildren:
    """Snapshot of the child objects of a cluster observed in one pass."""

    endpoints: Endpoints | None = None
    """Endpoints of the client service, or None if it could not be retrieved."""

    @classmethod
    def from_objects(cls, objects: Iterable[object | None]) -> "ObservedChildren":
        """Build a snapshot from a list of observed objects of mixed kinds."""
        endpoints = next(
            (obj for obj in objects if isinstance(obj, Endpoints)),
            None,
        )
        return cls(endpoints=endpoints)


def cluster_available_condition(observed: ObservedChildren) -> ClusterCondition:
    """Return the ClusterAvailable condition for the observed children."""
    if (endpoints := observed.endpoints) is None:
        return ClusterCondition(
            type=CLUSTER_AVAILABLE,
            status=ConditionStatus.UNKNOWN,
            reason=ConditionReason.COULD_NOT_RETRIEVE_ENDPOINTS,
            message="Could not verify available service endpoints",
        )
    _LOGGER.debug(
        "Evaluating %d endpoint subsets of %s/%s",
        len(endpoints.subsets),
        endpoints.namespace,
        endpoints.name,
    )
    if any(subset.addresses for subset in endpoints.subsets):
        return ClusterCondition(
            type=CLUSTER_AVAILABLE,
            status=ConditionStatus.TRUE,
            reason=ConditionReason.AT_LEAST_ONE_ENDPOINT_AVAILABLE,
        )
    return ClusterCondition(
        type=CLUSTER_AVAILABLE,
        status=ConditionStatus.FALSE,
        reason=ConditionReason.NO_ENDPOINTS_AVAILABLE,
        message="The service has no endpoints available",
    )
