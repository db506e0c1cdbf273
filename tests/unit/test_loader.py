"""Tests for snapshot parsing and loading."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from kubedrift.errors import SnapshotLoadError
from kubedrift.loader import load_snapshot, parse_snapshot
from kubedrift.models.events import ControlPlaneResource, ResourceKind

_DOCUMENT = {
    "clusters": {
        "prod": {
            "namespaces": {
                "default": {
                    "deployments": {
                        "web": {
                            "labels": "app=web",
                            "events": {
                                "file": [
                                    {
                                        "pod": "web-0",
                                        "container": {"name": "web", "image": "nginx:1.25"},
                                        "source": "/bin/sh",
                                        "destination": "/etc/hosts",
                                        "count": 3,
                                        "updatedTime": "1700000000",
                                    },
                                    None,
                                ],
                                "egress": [
                                    {
                                        "pod": "web-0",
                                        "ip": "10.96.0.1",
                                        "port": 443,
                                        "protocol": "TCP",
                                        "peerDomainName": "kubernetes.default",
                                        "command": "curl",
                                        "cpResource": {"namespace": "default", "type": "service"},
                                    }
                                ],
                            },
                        }
                    },
                    "cronJobs": None,
                }
            }
        }
    }
}


class TestParseSnapshot:
    def test_full_document(self) -> None:
        workload = parse_snapshot(_DOCUMENT)
        ns = workload.clusters["prod"].namespaces["default"]
        web = ns.of_kind(ResourceKind.DEPLOYMENT)["web"]
        assert web.labels == "app=web"
        file_event = web.events.file[0]
        assert file_event is not None
        assert file_event.container.image == "nginx:1.25"
        assert file_event.updated_time == 1700000000
        assert web.events.file[1] is None
        egress = web.events.egress[0]
        assert egress is not None
        assert egress.peer_domain_name == "kubernetes.default"
        assert egress.cp_resource == ControlPlaneResource(namespace="default", type="service")
        assert ns.of_kind(ResourceKind.CRONJOB) == {}
        assert workload.total_events() == 3

    def test_round_trip_keeps_hash(self) -> None:
        workload = parse_snapshot(_DOCUMENT)
        assert parse_snapshot(workload.to_dict()).content_hash == workload.content_hash

    def test_empty_document(self) -> None:
        assert parse_snapshot({}).clusters == {}

    @pytest.mark.parametrize(
        "document",
        [
            [],
            {"clusters": []},
            {"clusters": {"prod": {"namespaces": {"ns": {"jobs": {"j": {"events": {"file": "nope"}}}}}}}},
            {"clusters": {"prod": {"namespaces": {"ns": {"jobs": {"j": {"events": {"bind": [{"port": "x"}]}}}}}}}},
            {"clusters": {"prod": {"namespaces": {"ns": {"jobs": {"j": {"events": {"file": [{"source": 1}]}}}}}}}},
        ],
    )
    def test_bad_shapes_raise(self, document: object) -> None:
        with pytest.raises(SnapshotLoadError):
            parse_snapshot(document)


class TestLoadSnapshot:
    def test_loads_file(self, tmp_path: Path) -> None:
        path = tmp_path / "baseline.json"
        path.write_text(json.dumps(_DOCUMENT), encoding="utf-8")
        assert load_snapshot(path).content_hash == parse_snapshot(_DOCUMENT).content_hash

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(SnapshotLoadError) as exc_info:
            load_snapshot(tmp_path / "missing.json")
        assert "missing.json" in str(exc_info.value)

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(SnapshotLoadError, match="invalid JSON"):
            load_snapshot(path)
