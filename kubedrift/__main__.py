"""Entry point for `python -m kubedrift`.

Usage:
    python -m kubedrift report --latest latest.json --baseline baseline.json
"""

from __future__ import annotations

from kubedrift.cli import cli

cli(prog_name="kubedrift")
