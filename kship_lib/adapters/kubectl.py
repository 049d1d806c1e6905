"""
kubectl-backed cluster adapters.

The manifest custom resource lives in the region's namespace:

    apiVersion: kship.io/v1
    kind: ShipManifest
    metadata: {name: <service>, namespace: <namespace>}
    spec: <validated manifest>
"""

import json
from typing import Any

import structlog

from kship_lib.any.exceptions import KShipCommandError
from kship_lib.any.utils import run_tool
from kship_lib.manifest.model import Manifest

LOGGER = structlog.get_logger("kship_lib.adapters.kubectl")

CRD_RESOURCE = "shipmanifests.kship.io"
API_VERSION = "kship.io/v1"
KIND = "ShipManifest"

DEFAULT_TIMEOUT = 30


def kubectl(args: list[str], input: str | None = None, timeout: int = DEFAULT_TIMEOUT) -> str:
    """Run kubectl and return stdout, raising KShipCommandError on failure."""
    return run_tool(["kubectl", *args], input=input, timeout=timeout)


def set_context(context: str, params: list[str]) -> None:
    """
    Create or update a kube context.

    Example:
    -------
        >>> set_context("dev-uk", ["--namespace=dev", "--cluster=dev-uk-cluster", "--user=dev-uk-cluster"])

    """
    kubectl(["config", "set-context", context, *params])


def use_context(context: str) -> None:
    kubectl(["config", "use-context", context])


def manifest_resource(manifest: Manifest) -> dict[str, Any]:
    """Wrap a validated manifest in its custom resource envelope."""
    return {
        "apiVersion": API_VERSION,
        "kind": KIND,
        "metadata": {"name": manifest.name, "namespace": manifest.namespace},
        "spec": manifest.to_document(),
    }


class KubectlManifestClient:
    """
    ManifestObjectClient implementation using kubectl.

    Example:
    -------
        ```python
        client = KubectlManifestClient(namespace="dev", context="dev-uk")
        client.apply(manifest)
        client.patch_status("fake-ask", apply_succeeded(applier, "version change"))
        ```

    """

    def __init__(self, namespace: str, context: str | None = None, timeout: int = DEFAULT_TIMEOUT):
        self.namespace = namespace
        self.context = context
        self.timeout = timeout

    def _run(self, args: list[str], input: str | None = None) -> str:
        scope = ["-n", self.namespace]
        if self.context:
            scope += ["--context", self.context]
        return kubectl([*args, *scope], input=input, timeout=self.timeout)

    def get(self, name: str) -> dict[str, Any] | None:
        try:
            output = self._run(["get", CRD_RESOURCE, name, "-o", "json"])
        except KShipCommandError as e:
            if e.stderr and "NotFound" in e.stderr:
                LOGGER.debug(f"{KIND} {name} not found in {self.namespace}")
                return None
            raise
        return json.loads(output)

    def apply(self, manifest: Manifest) -> dict[str, Any]:
        LOGGER.info(f"Applying {KIND} {manifest.name} in {self.namespace}")
        output = self._run(["apply", "-f", "-", "-o", "json"], input=json.dumps(manifest_resource(manifest)))
        return json.loads(output)

    def patch_status(self, name: str, patch: dict[str, Any]) -> dict[str, Any]:
        args = ["patch", CRD_RESOURCE, name, "--subresource=status", "--type", "merge", "-p", json.dumps(patch)]
        output = self._run([*args, "-o", "json"])
        return json.loads(output)

    def delete(self, name: str) -> None:
        LOGGER.info(f"Deleting {KIND} {name} in {self.namespace}")
        self._run(["delete", CRD_RESOURCE, name, "--ignore-not-found"])

    def __repr__(self) -> str:
        return f"KubectlManifestClient(namespace={self.namespace}, context={self.context})"
