"""
Status conditions and status patch documents.

Every lifecycle action (generate, apply, rollout) owns one condition under
``status.conditions`` and a few summary keys under ``status.summary``. Each
function here is a pure function of the outcome returning one merge patch
``{"status": {...}}``; nothing reads the current status first.

Condition fields are always written in full (unset reason/message as null) so a
success patch clears the reason left behind by an earlier failure.
"""

import os
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from pydantic import ConfigDict

from kship_lib.manifest.base import KShipModel
from kship_lib.types import LifecycleAction

UNKNOWN_APPLIER = "unknown"

RFC3339_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


class StatusModel(KShipModel):
    """Status documents come from the cluster, so unknown keys are tolerated."""

    model_config = ConfigDict(extra="ignore")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def make_date(now: datetime | None = None) -> str:
    """
    Format a timestamp as RFC 3339 in UTC.

    Example:
    -------
        >>> make_date(datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc))
        '2026-01-02T03:04:05Z'

    """
    now = now or utc_now()
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc).strftime(RFC3339_FORMAT)


def parse_date(value: str) -> datetime:
    """
    Parse an RFC 3339 timestamp.

    Raises
    ------
        ValueError: If the value is not a valid timestamp

    """
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class Applier(StatusModel):
    """
    Who (or what CI job) performed an action.

    Example:
    -------
        >>> Applier.infer({"BUILD_URL": "https://jenkins/job/1", "JOB_NAME": "deploy"})
        Applier(name='deploy', url='https://jenkins/job/1')

    """

    name: str
    url: str | None = None

    @classmethod
    def infer(cls, environ: Mapping[str, str] | None = None) -> "Applier":
        """
        Infer the applier from CI environment variables.

        Checked in order: Jenkins, CircleCI, GitHub Actions, the local user.
        Falls back to 'unknown'.
        """
        env = os.environ if environ is None else environ

        if env.get("BUILD_URL") and env.get("JOB_NAME"):
            return cls(name=env["JOB_NAME"], url=env["BUILD_URL"])
        if env.get("CIRCLE_BUILD_URL") and env.get("CIRCLE_JOB"):
            return cls(name=env["CIRCLE_JOB"], url=env["CIRCLE_BUILD_URL"])
        if env.get("GITHUB_SERVER_URL") and env.get("GITHUB_REPOSITORY") and env.get("GITHUB_RUN_ID"):
            url = f"{env['GITHUB_SERVER_URL']}/{env['GITHUB_REPOSITORY']}/actions/runs/{env['GITHUB_RUN_ID']}"
            return cls(name=env.get("GITHUB_WORKFLOW") or env["GITHUB_REPOSITORY"], url=url)
        if env.get("USER"):
            return cls(name=env["USER"])
        return cls(name=UNKNOWN_APPLIER)


class Condition(StatusModel):
    """Timestamped outcome of one lifecycle action."""

    status: bool
    source: Applier | None = None
    last_transition: str | None = None
    reason: str | None = None
    message: str | None = None

    @classmethod
    def ok(cls, applier: Applier, now: datetime | None = None) -> "Condition":
        return cls(status=True, source=applier, last_transition=make_date(now))

    @classmethod
    def bad(cls, applier: Applier, reason: str, message: str, now: datetime | None = None) -> "Condition":
        return cls(status=False, source=applier, last_transition=make_date(now), reason=reason, message=message)

    def to_patch(self) -> dict[str, Any]:
        """Dump every field, unset ones as null."""
        return self.model_dump(mode="json", by_alias=True)


def status_patch(action: LifecycleAction, condition: Condition, summary: dict[str, Any]) -> dict[str, Any]:
    """Assemble the merge patch for one action."""
    return {
        "status": {
            "conditions": {action.condition_key: condition.to_patch()},
            "summary": {**summary, "lastAction": action.value},
        }
    }


def generate_succeeded(applier: Applier, now: datetime | None = None) -> dict[str, Any]:
    now = now or utc_now()
    return status_patch(
        LifecycleAction.GENERATE,
        Condition.ok(applier, now),
        {"lastSuccessfulGenerate": make_date(now)},
    )


def generate_failed(applier: Applier, reason: str, message: str, now: datetime | None = None) -> dict[str, Any]:
    now = now or utc_now()
    return status_patch(
        LifecycleAction.GENERATE,
        Condition.bad(applier, reason, message, now),
        {"lastFailureReason": reason},
    )


def apply_succeeded(applier: Applier, apply_reason: str, now: datetime | None = None) -> dict[str, Any]:
    """
    Record a successful apply.

    Args:
    ----
        applier: Who applied
        apply_reason: Why the apply happened (e.g. 'version change')
        now: Timestamp override

    """
    now = now or utc_now()
    date = make_date(now)
    return status_patch(
        LifecycleAction.APPLY,
        Condition.ok(applier, now),
        {"lastApply": date, "lastSuccessfulApply": date, "lastApplyReason": apply_reason},
    )


def apply_failed(
    applier: Applier, apply_reason: str, reason: str, message: str, now: datetime | None = None
) -> dict[str, Any]:
    now = now or utc_now()
    return status_patch(
        LifecycleAction.APPLY,
        Condition.bad(applier, reason, message, now),
        {"lastApply": make_date(now), "lastFailureReason": reason, "lastApplyReason": apply_reason},
    )


def rollout_succeeded(applier: Applier, version: str, now: datetime | None = None) -> dict[str, Any]:
    """Record a successful rollout of ``version`` and clear the last failure reason."""
    now = now or utc_now()
    date = make_date(now)
    return status_patch(
        LifecycleAction.ROLLOUT,
        Condition.ok(applier, now),
        {
            "lastRollout": date,
            "lastSuccessfulRollout": date,
            "lastFailureReason": None,
            "lastSuccessfulRolloutVersion": version,
        },
    )


def rollout_failed(applier: Applier, reason: str, message: str, now: datetime | None = None) -> dict[str, Any]:
    now = now or utc_now()
    return status_patch(
        LifecycleAction.ROLLOUT,
        Condition.bad(applier, reason, message, now),
        {"lastRollout": make_date(now), "lastFailureReason": reason},
    )
