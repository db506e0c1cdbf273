"""Tests for the ``kubedrift report`` command."""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from kubedrift.cli import cli


def _run(*args: str) -> tuple[int, str, str]:
    runner = CliRunner()
    # Logging stays quiet so stderr only carries the summary line and errors.
    result = runner.invoke(cli, ["--log-level", "error", *args])
    return result.exit_code, result.stdout, result.stderr


class TestReportCommand:
    def test_prints_active_changes(self, snapshot_files: tuple[Path, Path]) -> None:
        latest, baseline = snapshot_files
        code, out, err = _run("report", "--latest", str(latest), "--baseline", str(baseline))
        assert code == 0
        nodes = json.loads(out)
        assert len(nodes) == 4
        assert {node["changetype"]["granular_event"] for node in nodes} == {"file", "process", "egress"}
        assert "4 active change(s), 2 canceled" in err

    def test_filters_and_include_canceled(self, snapshot_files: tuple[Path, Path]) -> None:
        latest, baseline = snapshot_files
        code, out, _ = _run(
            "report",
            "--latest",
            str(latest),
            "--baseline",
            str(baseline),
            "--ignore-command",
            "r:^curl$",
            "--include-canceled",
        )
        assert code == 0
        nodes = json.loads(out)
        assert len(nodes) == 6
        assert sum(node["changetype"]["canceled"] for node in nodes) == 3

    def test_fail_on_drift(self, snapshot_files: tuple[Path, Path]) -> None:
        latest, baseline = snapshot_files
        code, _, _ = _run("report", "--latest", str(latest), "--baseline", str(baseline), "--fail-on-drift")
        assert code == 1

    def test_no_drift_passes_gate(self, snapshot_files: tuple[Path, Path]) -> None:
        latest, _ = snapshot_files
        code, out, _ = _run("report", "--latest", str(latest), "--baseline", str(latest), "--fail-on-drift")
        assert code == 0
        assert json.loads(out) == []

    def test_output_file(self, snapshot_files: tuple[Path, Path], tmp_path: Path) -> None:
        latest, baseline = snapshot_files
        target = tmp_path / "reports" / "diff.json"
        code, out, _ = _run("report", "--latest", str(latest), "--baseline", str(baseline), "-o", str(target))
        assert code == 0
        assert out == ""
        assert len(json.loads(target.read_text(encoding="utf-8"))) == 4

    def test_bad_regex_is_usage_error(self, snapshot_files: tuple[Path, Path]) -> None:
        latest, baseline = snapshot_files
        code, _, err = _run("report", "--latest", str(latest), "--baseline", str(baseline), "--source", "r:[")
        assert code == 1
        assert "invalid regex" in err

    def test_missing_baseline(self, snapshot_files: tuple[Path, Path], tmp_path: Path) -> None:
        latest, _ = snapshot_files
        code, _, err = _run("report", "--latest", str(latest), "--baseline", str(tmp_path / "nope.json"))
        assert code == 1
        assert "Failed to load snapshot" in err

    def test_invalid_log_level_is_usage_error(self, snapshot_files: tuple[Path, Path]) -> None:
        latest, _ = snapshot_files
        result = CliRunner().invoke(cli, ["--log-level", "loud", "report", "--latest", str(latest)])
        assert result.exit_code == 2
        assert "Invalid log level: loud" in result.stderr
