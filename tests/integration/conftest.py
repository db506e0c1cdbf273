"""Shared fixtures for kubedrift integration tests.

Builds a realistic latest/baseline pair covering every kind of drift the
engine reports: changed fields, moved events, grown and shrunk lists, a new
namespace and a removed cluster.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from kubedrift.models.events import Container, FileProcessEvent, NetworkEvent, ResourceKind
from kubedrift.models.snapshot import Cluster, Events, Namespace, Workload, WorkloadEvents

# ---------------------------------------------------------------------------
# Event factory helpers
# ---------------------------------------------------------------------------

_NGINX = Container(name="nginx", image="nginx:1.25")


def make_file_event(source: str, destination: str = "", pod: str = "web-7b4f8c6d-x2kj") -> FileProcessEvent:
    """Create a FileProcessEvent with sensible defaults for testing."""
    return FileProcessEvent(pod=pod, container=_NGINX, source=source, destination=destination, count=1)


def make_network_event(
    ip: str,
    port: int = 443,
    command: str = "curl",
    protocol: str = "TCP",
    peer: str = "",
) -> NetworkEvent:
    """Create a NetworkEvent with sensible defaults for testing."""
    return NetworkEvent(
        pod="web-7b4f8c6d-x2kj",
        container=_NGINX,
        ip=ip,
        port=port,
        protocol=protocol,
        peer_domain_name=peer,
        command=command,
        count=1,
    )


def _workload(web: Events, api: Events, extra_namespaces: dict[str, Namespace], clusters: dict[str, Cluster]) -> Workload:
    default = Namespace(
        resources={
            ResourceKind.DEPLOYMENT: {
                "web": WorkloadEvents(labels="app=web", events=web),
                "api": WorkloadEvents(labels="app=api", events=api),
            },
        }
    )
    return Workload(clusters={"prod": Cluster(namespaces={"default": default, **extra_namespaces}), **clusters})


# ---------------------------------------------------------------------------
# Snapshot fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def baseline() -> Workload:
    web = Events(
        file=(make_file_event("/etc/shadow"), make_file_event("/var/log/a"), make_file_event("/var/log/b")),
        process=(make_file_event("/usr/sbin/nginx"),),
        egress=(make_network_event("10.0.0.1", command="nginx"),),
    )
    api = Events(
        egress=(make_network_event("10.0.0.5", command="python"), make_network_event("10.0.0.6", command="curl")),
    )
    legacy = Cluster(namespaces={"old": Namespace()})
    return _workload(web, api, {}, {"legacy": legacy})


@pytest.fixture
def latest() -> Workload:
    web = Events(
        # index 0 changed, indices 1/2 swapped
        file=(make_file_event("/etc/passwd"), make_file_event("/var/log/b"), make_file_event("/var/log/a")),
        process=(make_file_event("/usr/sbin/nginx"), make_file_event("/bin/sh", destination="/proc/1/environ")),
        egress=(make_network_event("10.0.0.1", command="nginx"),),
    )
    api = Events(
        egress=(make_network_event("10.0.0.5", command="python"), make_network_event("93.184.216.34", command="curl")),
    )
    monitoring = Namespace(
        resources={ResourceKind.DAEMONSET: {"node-exporter": WorkloadEvents(events=Events(bind=(make_network_event("0.0.0.0", port=9100, command="node_exporter"),)))}}
    )
    return _workload(web, api, {"monitoring": monitoring}, {})


@pytest.fixture
def snapshot_files(tmp_path: Path, latest: Workload, baseline: Workload) -> tuple[Path, Path]:
    latest_path = tmp_path / "latest.json"
    baseline_path = tmp_path / "baseline.json"
    latest_path.write_text(json.dumps(latest.to_dict()), encoding="utf-8")
    baseline_path.write_text(json.dumps(baseline.to_dict()), encoding="utf-8")
    return latest_path, baseline_path
