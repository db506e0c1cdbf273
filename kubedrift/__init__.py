"""kubedrift: behavioral drift reports between Kubernetes telemetry snapshots."""

__version__ = "0.1.0"
