"""Status module.

This module derives the conditions reported in the status of a RabbitmqCluster
from the child objects observed for it.
"""

from .condition import (
    CLUSTER_AVAILABLE,
    ClusterCondition,
    ConditionReason,
    ConditionStatus,
)
from .cluster_available import ObservedChildren, cluster_available_condition

__all__ = [
    "CLUSTER_AVAILABLE",
    "ClusterCondition",
    "ConditionReason",
    "ConditionStatus",
    "ObservedChildren",
    "cluster_available_condition",
]
