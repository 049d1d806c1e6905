"""
Runtime context detection for KShip.

Determines whether code is running inside a Kubernetes cluster or on a local machine.
In-cluster runs authenticate through the pod's service account; local runs go
through a teleport session and kubectl contexts.
"""

from functools import lru_cache
from pathlib import Path

import structlog

LOGGER = structlog.get_logger("kship_lib.any.context")

SERVICE_ACCOUNT_TOKEN = Path("/var/run/secrets/kubernetes.io/serviceaccount/token")


@lru_cache(maxsize=1)
def is_in_cluster() -> bool:
    """
    Detect if running inside a Kubernetes cluster.

    Checks for the presence of the Kubernetes service account token file,
    which is mounted into every pod in a Kubernetes cluster.

    Returns:
    -------
        True if running inside K8s cluster, False otherwise

    Note:
    ----
        Result is cached since context doesn't change during runtime.

    """
    in_cluster = SERVICE_ACCOUNT_TOKEN.exists()

    if in_cluster:
        LOGGER.debug("Detected in-cluster execution (Kubernetes)")
    else:
        LOGGER.debug("Detected local execution (dev machine)")

    return in_cluster
