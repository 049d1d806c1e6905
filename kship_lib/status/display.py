"""
Reading and formatting the status of a manifest custom resource.

Example:
-------
    >>> status = ManifestStatus.from_object(client.get("fake-ask"))
    >>> print(describe_rollout("fake-ask", "1.2.3", status))
    ==> FAKE-ASK is requesting 1.2.3 but last successful deploy used 1.2.2
    >>> for line in describe_conditions(status):
    ...     print(line)
    Generated 3m ago via jenkins (Success)
"""

from datetime import datetime
from typing import Any

import structlog
from pydantic import Field

from kship_lib.status.conditions import Condition, StatusModel, parse_date, utc_now
from kship_lib.types import LifecycleAction

LOGGER = structlog.get_logger("kship_lib.status.display")


class StatusConditions(StatusModel):
    generated: Condition | None = None
    applied: Condition | None = None
    rolledout: Condition | None = None

    def get(self, action: LifecycleAction) -> Condition | None:
        return getattr(self, action.condition_key)


class StatusSummary(StatusModel):
    last_action: str | None = None
    last_successful_generate: str | None = None
    last_failure_reason: str | None = None
    last_apply: str | None = None
    last_successful_apply: str | None = None
    last_apply_reason: str | None = None
    last_rollout: str | None = None
    last_successful_rollout: str | None = None
    last_successful_rollout_version: str | None = None


class ManifestStatus(StatusModel):
    conditions: StatusConditions = Field(default_factory=StatusConditions)
    summary: StatusSummary | None = None

    @classmethod
    def from_object(cls, obj: dict[str, Any] | None) -> "ManifestStatus":
        """Parse the ``status`` of a fetched custom resource. A missing resource or status is empty."""
        if not obj:
            return cls()
        return cls.model_validate(obj.get("status") or {})


def format_duration(seconds: float) -> str:
    """Largest whole unit: '45s', '3m', '2h', '5d'."""
    seconds = max(int(seconds), 0)
    if seconds < 60:
        return f"{seconds}s"
    if seconds < 3600:
        return f"{seconds // 60}m"
    if seconds < 86400:
        return f"{seconds // 3600}h"
    return f"{seconds // 86400}d"


def format_condition(cond: Condition, now: datetime | None = None) -> str:
    """
    Format a condition for display.

    Example:
    -------
        >>> format_condition(cond, now)
        '3m ago via jenkins (Success)'
        >>> format_condition(failed_without_timestamp)
        '(ApplyFailure: boom)'

    """
    parts = []
    if cond.last_transition is not None:
        try:
            elapsed = ((now or utc_now()) - parse_date(cond.last_transition)).total_seconds()
            parts.append(f"{format_duration(elapsed)} ago")
        except ValueError as e:
            LOGGER.warning(f"Failed to parse timestamp from condition: {e}")

    if cond.source is not None:
        parts.append(f"via {cond.source.name}")

    if cond.status:
        parts.append("(Success)")
    elif cond.reason is not None and cond.message is not None:
        parts.append(f"({cond.reason}: {cond.message})")
    else:
        parts.append("(Failure)")
    return " ".join(parts)


def describe_conditions(status: ManifestStatus, now: datetime | None = None) -> list[str]:
    """One line per recorded condition, in lifecycle order."""
    lines = []
    for action in LifecycleAction:
        cond = status.conditions.get(action)
        if cond is not None:
            lines.append(f"{action.display_name} {format_condition(cond, now)}")
    return lines


def rollout_drift(requested_version: str, status: ManifestStatus) -> str | None:
    """Return the last successfully rolled out version if it differs from the requested one."""
    if status.summary is None or status.summary.last_successful_rollout_version is None:
        return None
    deployed = status.summary.last_successful_rollout_version
    return deployed if deployed != requested_version else None


def describe_rollout(name: str, requested_version: str, status: ManifestStatus) -> str:
    """
    Describe what a service requests against what last rolled out.

    Returns one of:
    - '==> NAME is requesting V but last successful deploy used W' (drift)
    - '==> NAME is running V' (last rollout matches)
    - '==> NAME is requesting V' (never rolled out)
    """
    label = name.upper()
    drift = rollout_drift(requested_version, status)
    if drift is not None:
        return f"==> {label} is requesting {requested_version} but last successful deploy used {drift}"
    if status.summary is not None and status.summary.last_successful_rollout_version is not None:
        return f"==> {label} is running {requested_version}"
    return f"==> {label} is requesting {requested_version}"
