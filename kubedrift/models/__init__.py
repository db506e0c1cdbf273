"""Core data structures for kubedrift."""

from kubedrift.models.config import KubeDriftConfig
from kubedrift.models.events import (
    Container,
    ControlPlaneResource,
    EventCategory,
    FileProcessEvent,
    NetworkEvent,
    ResourceKind,
)
from kubedrift.models.snapshot import Cluster, Events, Namespace, Workload, WorkloadEvents

__all__ = [
    "Cluster",
    "Container",
    "ControlPlaneResource",
    "EventCategory",
    "Events",
    "FileProcessEvent",
    "KubeDriftConfig",
    "Namespace",
    "NetworkEvent",
    "ResourceKind",
    "Workload",
    "WorkloadEvents",
]
