"""Runtime-behavior event records and enumerations.

Events arrive from the telemetry backend as JSON objects; the field names
of :meth:`to_dict` are the wire names and feed the content hash, so they
must stay stable.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum


class EventCategory(StrEnum):
    """Event list held by a workload."""

    FILE = "file"
    PROCESS = "process"
    INGRESS = "ingress"
    EGRESS = "egress"
    BIND = "bind"

    @property
    def is_network(self) -> bool:
        return self in (EventCategory.INGRESS, EventCategory.EGRESS, EventCategory.BIND)


class ResourceKind(StrEnum):
    """Kubernetes workload kinds tracked per namespace.

    The value is the segment used in change paths; ``wire_key`` is the
    mapping name in the snapshot document.
    """

    DEPLOYMENT = "deployment"
    REPLICASET = "replicaset"
    STATEFULSET = "statefulset"
    DAEMONSET = "daemonset"
    JOB = "job"
    CRONJOB = "cronjob"

    @property
    def wire_key(self) -> str:
        return _WIRE_KEYS[self]


_WIRE_KEYS = {
    ResourceKind.DEPLOYMENT: "deployments",
    ResourceKind.REPLICASET: "replicaSets",
    ResourceKind.STATEFULSET: "statefulSets",
    ResourceKind.DAEMONSET: "daemonSets",
    ResourceKind.JOB: "jobs",
    ResourceKind.CRONJOB: "cronJobs",
}

# Fields compared at level 4, in comparison order.
FILE_PROCESS_FIELDS: tuple[str, ...] = ("source", "destination")
NETWORK_FIELDS: tuple[str, ...] = ("ip", "port", "protocol", "peerDomainName", "command")


def _str(data: Mapping[str, object], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise TypeError(f"field '{key}' must be a string, got {type(value).__name__}")
    return value


def _int(data: Mapping[str, object], key: str) -> int:
    value = data.get(key)
    if value is None:
        return 0
    # Counts and timestamps are int64 on the wire and may arrive quoted.
    if isinstance(value, bool) or not isinstance(value, int | str):
        raise TypeError(f"field '{key}' must be an integer, got {type(value).__name__}")
    return int(value)


def _mapping(data: Mapping[str, object], key: str) -> Mapping[str, object]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise TypeError(f"field '{key}' must be an object, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class Container:
    """Container a pod event was observed in."""

    name: str = ""
    image: str = ""

    def to_dict(self) -> dict[str, object]:
        return {"name": self.name, "image": self.image}

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Container:
        return cls(name=_str(data, "name"), image=_str(data, "image"))


@dataclass(frozen=True)
class ControlPlaneResource:
    """Control-plane object a network peer resolved to."""

    namespace: str = ""
    type: str = ""

    def to_dict(self) -> dict[str, object]:
        return {"namespace": self.namespace, "type": self.type}

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> ControlPlaneResource:
        return cls(namespace=_str(data, "namespace"), type=_str(data, "type"))


@dataclass(frozen=True)
class FileProcessEvent:
    """A file access or process execution observed in a pod."""

    pod: str = ""
    container: Container = field(default_factory=Container)
    source: str = ""
    destination: str = ""
    count: int = 0
    updated_time: int = 0

    def field_value(self, name: str) -> str:
        """Return the string form of a compared field (empty if unknown)."""
        match name:
            case "source":
                return self.source
            case "destination":
                return self.destination
            case "pod":
                return self.pod
            case "containerName":
                return self.container.name
            case "containerImage":
                return self.container.image
            case "count":
                return str(self.count)
            case "updatedTime":
                return str(self.updated_time)
        return ""

    def to_dict(self) -> dict[str, object]:
        return {
            "pod": self.pod,
            "container": self.container.to_dict(),
            "source": self.source,
            "destination": self.destination,
            "count": self.count,
            "updatedTime": self.updated_time,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> FileProcessEvent:
        return cls(
            pod=_str(data, "pod"),
            container=Container.from_dict(_mapping(data, "container")),
            source=_str(data, "source"),
            destination=_str(data, "destination"),
            count=_int(data, "count"),
            updated_time=_int(data, "updatedTime"),
        )


@dataclass(frozen=True)
class NetworkEvent:
    """An ingress, egress or bind connection observed in a pod."""

    pod: str = ""
    container: Container = field(default_factory=Container)
    type: str = ""
    ip: str = ""
    port: int = 0
    protocol: str = ""
    peer_domain_name: str = ""
    command: str = ""
    cp_resource: ControlPlaneResource | None = None
    count: int = 0
    updated_time: int = 0

    def field_value(self, name: str) -> str:
        """Return the string form of a compared field (empty if unknown)."""
        match name:
            case "ip":
                return self.ip
            case "port":
                return str(self.port)
            case "protocol":
                return self.protocol
            case "peerDomainName":
                return self.peer_domain_name
            case "command":
                return self.command
            case "pod":
                return self.pod
            case "type":
                return self.type
            case "count":
                return str(self.count)
            case "updatedTime":
                return str(self.updated_time)
        return ""

    def to_dict(self) -> dict[str, object]:
        return {
            "pod": self.pod,
            "container": self.container.to_dict(),
            "type": self.type,
            "ip": self.ip,
            "port": self.port,
            "protocol": self.protocol,
            "peerDomainName": self.peer_domain_name,
            "command": self.command,
            "cpResource": self.cp_resource.to_dict() if self.cp_resource is not None else None,
            "count": self.count,
            "updatedTime": self.updated_time,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> NetworkEvent:
        cp = data.get("cpResource")
        return cls(
            pod=_str(data, "pod"),
            container=Container.from_dict(_mapping(data, "container")),
            type=_str(data, "type"),
            ip=_str(data, "ip"),
            port=_int(data, "port"),
            protocol=_str(data, "protocol"),
            peer_domain_name=_str(data, "peerDomainName"),
            command=_str(data, "command"),
            cp_resource=ControlPlaneResource.from_dict(_mapping(data, "cpResource")) if cp is not None else None,
            count=_int(data, "count"),
            updated_time=_int(data, "updatedTime"),
        )
