"""Send lifecycle outcomes to a manifest custom resource's status."""

from collections.abc import Callable
from datetime import datetime
from typing import Any

import structlog

from kship_lib.any.protocols import ManifestObjectClient
from kship_lib.status import conditions
from kship_lib.status.conditions import Applier, utc_now

LOGGER = structlog.get_logger("kship_lib.status.reporter")


class StatusReporter:
    """
    Patch one manifest's status through a ManifestObjectClient.

    Each method builds the patch with kship_lib.status.conditions and sends it
    as a merge patch; status is never read back first.

    Example:
    -------
        ```python
        reporter = StatusReporter(client, "fake-ask")
        reporter.apply_succeeded("version change")
        reporter.rollout_failed("RolloutTimeout", "deployment did not become ready")
        ```

    """

    def __init__(
        self,
        client: ManifestObjectClient,
        name: str,
        applier: Applier | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        """
        Initialize the reporter.

        Args:
        ----
            client: Cluster object client
            name: Manifest (service) name
            applier: Credited applier (inferred from the environment if omitted)
            clock: Source of the current time (UTC now if omitted)

        """
        self.client = client
        self.name = name
        self.applier = applier or Applier.infer()
        self.clock = clock or utc_now

    def _send(self, patch: dict[str, Any]) -> dict[str, Any]:
        LOGGER.debug(f"Patching status of {self.name}: {patch['status']['summary']}")
        return self.client.patch_status(self.name, patch)

    def generate_succeeded(self) -> dict[str, Any]:
        return self._send(conditions.generate_succeeded(self.applier, self.clock()))

    def generate_failed(self, reason: str, message: str) -> dict[str, Any]:
        return self._send(conditions.generate_failed(self.applier, reason, message, self.clock()))

    def apply_succeeded(self, apply_reason: str) -> dict[str, Any]:
        return self._send(conditions.apply_succeeded(self.applier, apply_reason, self.clock()))

    def apply_failed(self, apply_reason: str, reason: str, message: str) -> dict[str, Any]:
        return self._send(conditions.apply_failed(self.applier, apply_reason, reason, message, self.clock()))

    def rollout_succeeded(self, version: str) -> dict[str, Any]:
        return self._send(conditions.rollout_succeeded(self.applier, version, self.clock()))

    def rollout_failed(self, reason: str, message: str) -> dict[str, Any]:
        return self._send(conditions.rollout_failed(self.applier, reason, message, self.clock()))
