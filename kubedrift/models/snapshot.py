"""Snapshot tree: workload -> cluster -> namespace -> resource -> events.

Every level exposes ``content_hash``, a digest of its canonical serialized
subtree.  Two subtrees hash equal iff they are value-equal, which lets the
comparator skip identical subtrees without walking them.  Trees are treated
as immutable once built, so the digest is computed once and cached.

Names of clusters, namespaces and resources live only in the parent
mapping keys; they are not part of a subtree's own hash.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from functools import cached_property

from kubedrift.diff.hashing import compute_hash
from kubedrift.models.events import (
    EventCategory,
    FileProcessEvent,
    NetworkEvent,
    ResourceKind,
)


def _mapping(data: Mapping[str, object], key: str) -> Mapping[str, object]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise TypeError(f"'{key}' must be an object, got {type(value).__name__}")
    return value


def _list(data: Mapping[str, object], key: str) -> list[object]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise TypeError(f"'{key}' must be a list, got {type(value).__name__}")
    return value


def _children(data: Mapping[str, object], key: str) -> Iterator[tuple[str, Mapping[str, object]]]:
    for name, child in _mapping(data, key).items():
        if child is None:
            continue
        if not isinstance(child, Mapping):
            raise TypeError(f"'{key}.{name}' must be an object, got {type(child).__name__}")
        yield name, child


def _file_events(data: Mapping[str, object], key: str) -> tuple[FileProcessEvent | None, ...]:
    return tuple(
        None if item is None else FileProcessEvent.from_dict(_as_mapping(item, key)) for item in _list(data, key)
    )


def _network_events(data: Mapping[str, object], key: str) -> tuple[NetworkEvent | None, ...]:
    return tuple(
        None if item is None else NetworkEvent.from_dict(_as_mapping(item, key)) for item in _list(data, key)
    )


def _as_mapping(item: object, key: str) -> Mapping[str, object]:
    if not isinstance(item, Mapping):
        raise TypeError(f"'{key}' entries must be objects, got {type(item).__name__}")
    return item


def _dump(event: FileProcessEvent | NetworkEvent | None) -> dict[str, object] | None:
    return None if event is None else event.to_dict()


@dataclass(frozen=True)
class Events:
    """The five ordered event lists of one resource instance."""

    file: tuple[FileProcessEvent | None, ...] = ()
    process: tuple[FileProcessEvent | None, ...] = ()
    ingress: tuple[NetworkEvent | None, ...] = ()
    egress: tuple[NetworkEvent | None, ...] = ()
    bind: tuple[NetworkEvent | None, ...] = ()

    def get(self, category: EventCategory) -> tuple[FileProcessEvent | NetworkEvent | None, ...]:
        return getattr(self, category.value)  # type: ignore[no-any-return]

    def total(self) -> int:
        return sum(len(self.get(category)) for category in EventCategory)

    def to_dict(self) -> dict[str, object]:
        return {category.value: [_dump(e) for e in self.get(category)] for category in EventCategory}

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Events:
        return cls(
            file=_file_events(data, "file"),
            process=_file_events(data, "process"),
            ingress=_network_events(data, "ingress"),
            egress=_network_events(data, "egress"),
            bind=_network_events(data, "bind"),
        )


@dataclass(frozen=True)
class WorkloadEvents:
    """Telemetry collected for one resource instance (e.g. one Deployment)."""

    labels: str = ""
    events: Events = field(default_factory=Events)

    @cached_property
    def content_hash(self) -> str:
        return compute_hash(self.to_dict())

    def to_dict(self) -> dict[str, object]:
        return {"labels": self.labels, "events": self.events.to_dict()}

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> WorkloadEvents:
        labels = data.get("labels") or ""
        if not isinstance(labels, str):
            raise TypeError(f"'labels' must be a string, got {type(labels).__name__}")
        return cls(labels=labels, events=Events.from_dict(_mapping(data, "events")))


@dataclass(frozen=True)
class Namespace:
    """Resource instances of one namespace, keyed by kind then name."""

    resources: Mapping[ResourceKind, Mapping[str, WorkloadEvents]] = field(default_factory=dict)

    def of_kind(self, kind: ResourceKind) -> Mapping[str, WorkloadEvents]:
        return self.resources.get(kind, {})

    def total_events(self) -> int:
        return sum(we.events.total() for kind in ResourceKind for we in self.of_kind(kind).values())

    @cached_property
    def content_hash(self) -> str:
        return compute_hash(self.to_dict())

    def to_dict(self) -> dict[str, object]:
        return {
            kind.wire_key: {name: we.to_dict() for name, we in self.of_kind(kind).items()} for kind in ResourceKind
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Namespace:
        return cls(
            resources={
                kind: {name: WorkloadEvents.from_dict(we) for name, we in _children(data, kind.wire_key)}
                for kind in ResourceKind
            }
        )


@dataclass(frozen=True)
class Cluster:
    """Namespaces of one cluster, keyed by namespace name."""

    namespaces: Mapping[str, Namespace] = field(default_factory=dict)

    @cached_property
    def content_hash(self) -> str:
        return compute_hash(self.to_dict())

    def to_dict(self) -> dict[str, object]:
        return {"namespaces": {name: ns.to_dict() for name, ns in self.namespaces.items()}}

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Cluster:
        return cls(namespaces={name: Namespace.from_dict(ns) for name, ns in _children(data, "namespaces")})


@dataclass(frozen=True)
class Workload:
    """Root of a snapshot: clusters keyed by cluster name."""

    clusters: Mapping[str, Cluster] = field(default_factory=dict)

    @cached_property
    def content_hash(self) -> str:
        return compute_hash(self.to_dict())

    def total_events(self) -> int:
        return sum(ns.total_events() for cluster in self.clusters.values() for ns in cluster.namespaces.values())

    def to_dict(self) -> dict[str, object]:
        return {"clusters": {name: cluster.to_dict() for name, cluster in self.clusters.items()}}

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Workload:
        return cls(clusters={name: Cluster.from_dict(cluster) for name, cluster in _children(data, "clusters")})
