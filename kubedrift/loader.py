"""Snapshot loading from JSON report files.

A stored report carries no hashes; they are derived from the parsed tree
on first use, so a loaded baseline is always hash-consistent with a freshly
collected latest snapshot.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path

from kubedrift.errors import SnapshotLoadError
from kubedrift.models.snapshot import Workload
from kubedrift.observability.logging import get_logger

_log = get_logger("loader")


def parse_snapshot(document: object, source: str = "<memory>") -> Workload:
    """Build a snapshot tree from an already-decoded JSON document."""
    if not isinstance(document, Mapping):
        raise SnapshotLoadError(source, f"top level must be an object, got {type(document).__name__}")
    try:
        return Workload.from_dict(document)
    except (TypeError, ValueError) as exc:
        raise SnapshotLoadError(source, str(exc)) from exc


def load_snapshot(path: str | Path) -> Workload:
    """Read and parse a snapshot JSON file.

    Raises:
        SnapshotLoadError: the file is unreadable, not JSON, or mis-shaped.
    """
    source = str(path)
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise SnapshotLoadError(source, exc.strerror or str(exc)) from exc

    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SnapshotLoadError(source, f"invalid JSON: {exc}") from exc

    workload = parse_snapshot(document, source)
    _log.info("snapshot loaded", path=source, clusters=len(workload.clusters), events=workload.total_events())
    return workload
