"""Condition records reported in the status of a RabbitmqCluster."""

from dataclasses import dataclass
from enum import StrEnum

from mashumaro import DataClassDictMixin

CLUSTER_AVAILABLE = "ClusterAvailable"


class ConditionStatus(StrEnum):
    """Tri-state status of a condition.

    Unknown means the state could not be observed, which is distinct from
    False meaning it was observed and is unhealthy.
    """

    TRUE = "True"
    FALSE = "False"
    UNKNOWN = "Unknown"


class ConditionReason(StrEnum):
    """Reason codes for the ClusterAvailable condition."""

    AT_LEAST_ONE_ENDPOINT_AVAILABLE = "AtLeastOneEndpointAvailable"
    NO_ENDPOINTS_AVAILABLE = "NoEndpointsAvailable"
    COULD_NOT_RETRIEVE_ENDPOINTS = "CouldNotRetrieveEndpoints"


@dataclass(frozen=True, kw_only=True)
class ClusterCondition(DataClassDictMixin):
    """A single observed aspect of cluster health."""

    type: str
    status: ConditionStatus
    reason: ConditionReason
    message: str = ""

    def __str__(self) -> str:
        """Return a string representation of the condition."""
        if self.message:
            return f"{self.type}={self.status} ({self.reason}): {self.message}"
        return f"{self.type}={self.status} ({self.reason})"
