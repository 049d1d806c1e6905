"""Manifest custom resource status: condition patches, display and reporting."""

from kship_lib.status.conditions import (
    Applier,
    Condition,
    apply_failed,
    apply_succeeded,
    generate_failed,
    generate_succeeded,
    make_date,
    rollout_failed,
    rollout_succeeded,
)
from kship_lib.status.display import (
    ManifestStatus,
    describe_conditions,
    describe_rollout,
    format_condition,
)
from kship_lib.status.reporter import StatusReporter

__all__ = [
    "Applier",
    "Condition",
    "make_date",
    # Patches
    "generate_succeeded",
    "generate_failed",
    "apply_succeeded",
    "apply_failed",
    "rollout_succeeded",
    "rollout_failed",
    # Display
    "ManifestStatus",
    "format_condition",
    "describe_conditions",
    "describe_rollout",
    # Reporting
    "StatusReporter",
]
