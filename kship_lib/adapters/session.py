"""
Session adapters: getting kubectl pointed at a region's cluster.

Local runs log in through teleport (tsh) when the owning cluster has a teleport
proxy, then create and select a kube context named after the region. Clusters
without a teleport proxy are assumed to have a context named after the cluster
already, created by some external means.

In-cluster runs authenticate through the pod's service account and have
nothing to do.
"""

import shutil
from pathlib import Path

import structlog

from kship_lib.adapters import kubectl
from kship_lib.any.exceptions import KShipCommandError, KShipConfigurationError
from kship_lib.any.utils import run_command, run_tool
from kship_lib.config.schemas import Cluster, GlobalConfig, Region

LOGGER = structlog.get_logger("kship_lib.adapters.session")


class TeleportSession:
    """
    SessionAdapter for dev machines and CI runners.

    Example:
    -------
        ```python
        session = TeleportSession(config)
        session.ensure_logged_in(config.get_region("dev-uk"))
        ```

    """

    def __init__(self, config: GlobalConfig, home: Path | None = None):
        self.config = config
        self.home = home or Path.home()

    def ensure_logged_in(self, region: Region, force: bool = False) -> None:
        cluster = self.config.find_owning_cluster(region)
        if cluster is None:
            raise KShipConfigurationError(f"Region {region.name} does not have a cluster")

        if cluster.teleport is None:
            LOGGER.info(f"Reusing {region.cluster} context for non-teleport region {region.name}")
            self.use_context(region.cluster)
            return

        ensure_tsh()
        needs_login = self.needs_login(cluster.teleport)
        if force:
            state_file = self.home / ".tsh" / f"{cluster.teleport}.yaml"
            LOGGER.debug(f"Removing {state_file}")
            state_file.unlink(missing_ok=True)

        if needs_login or force:
            self.login(cluster.teleport)
        else:
            LOGGER.info(f"Reusing active session for {cluster.teleport}")

        self.set_context(region.name, context_params(region, cluster))
        self.use_context(region.name)

    def needs_login(self, proxy: str) -> bool:
        """
        Check ``tsh status`` for a valid session with the proxy.

        A missing profile or an expired certificate both need a login.
        """
        result = run_command(["tsh", "status"], check=False)
        lines = result.stdout.splitlines()
        for idx, line in enumerate(lines):
            if proxy in line:
                for following in lines[idx + 1 :]:
                    if "Valid until" in following:
                        LOGGER.debug(f"Checking Valid line {following.strip()}")
                        return "EXPIRED" in following
                break
        LOGGER.debug(f"No active {proxy} session found in tsh status")
        return True

    def login(self, proxy: str) -> None:
        args = ["tsh", "login", f"--proxy={proxy}:443", "--auth=github"]
        LOGGER.info(" ".join(args))
        output = run_tool(args)
        if output:
            LOGGER.debug(output)

    def set_context(self, context: str, params: list[str]) -> None:
        kubectl.set_context(context, params)

    def use_context(self, context: str) -> None:
        kubectl.use_context(context)


class InClusterSession:
    """SessionAdapter for pods: the service account is already authenticated."""

    def ensure_logged_in(self, region: Region, force: bool = False) -> None:
        LOGGER.debug(f"In-cluster: using service account for {region.name}")

    def set_context(self, context: str, params: list[str]) -> None:
        LOGGER.debug(f"In-cluster: ignoring context {context}")

    def use_context(self, context: str) -> None:
        LOGGER.debug(f"In-cluster: ignoring context {context}")


def ensure_tsh() -> None:
    """
    Check that the teleport client is installed.

    Raises
    ------
        KShipCommandError: If tsh is not on PATH

    """
    if shutil.which("tsh") is None:
        raise KShipCommandError(
            "tsh not found. Please install teleport: https://goteleport.com/download/", command=["tsh"]
        )


def context_params(region: Region, cluster: Cluster) -> list[str]:
    """kubectl config set-context arguments for a teleport-backed region."""
    name = cluster.clustername or cluster.teleport
    return [f"--namespace={region.namespace}", f"--cluster={name}", f"--user={name}"]
