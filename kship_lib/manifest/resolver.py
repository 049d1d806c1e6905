"""
Manifest resolution from a manifests repository.

Single services resolve synchronously. A whole region fans out over a thread
pool: each service is an independent load-merge-build with no shared mutable
state, and the batch joins every future before returning. A failing service
never affects the result of another.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from kship_lib.adapters.files import FileSystemSource
from kship_lib.any.exceptions import KShipBatchError, KShipError
from kship_lib.any.protocols import FileSource
from kship_lib.config.loaders import list_services
from kship_lib.config.schemas import GlobalConfig, Region
from kship_lib.gateway.generator import generate_gateway_output
from kship_lib.gateway.schemas import GatewayOutput
from kship_lib.manifest.builder import BuildContext, build_manifest
from kship_lib.manifest.layers import LayerStack
from kship_lib.manifest.model import Manifest

LOGGER = structlog.get_logger("kship_lib.manifest.resolver")


@dataclass
class RegionResolution:
    """Outcome of resolving every service of a region."""

    region: str
    manifests: dict[str, Manifest] = field(default_factory=dict)
    failures: dict[str, KShipError] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures

    def enabled(self) -> list[Manifest]:
        """Manifests enabled in this region, sorted by name."""
        return [m for _, m in sorted(self.manifests.items()) if m.enabled]

    def raise_for_failures(self) -> None:
        """Raise KShipBatchError listing every failed service, if any failed."""
        if self.failures:
            raise KShipBatchError(dict(self.failures))


def load_manifest(
    service: str,
    config: GlobalConfig,
    region: Region,
    root: Path,
    files: FileSource | None = None,
) -> Manifest:
    """
    Load, merge and build one service's manifest for a region.

    Args:
    ----
        service: Service directory name under services/
        config: Global configuration
        region: Target region
        root: Manifests repository root
        files: Config file source (defaults to the repository's filesystem)

    Returns:
    -------
        Validated Manifest

    Raises:
    ------
        KShipConfigurationError: If any layer is invalid or a required field is missing

    """
    stack = LayerStack.load(root, config, region, service)
    context = BuildContext(config=config, region=region, files=files or FileSystemSource(root))
    return build_manifest(stack.merged(), context)


def resolve_region(
    config: GlobalConfig,
    region: Region,
    root: Path,
    services: list[str] | None = None,
    max_workers: int | None = None,
    files: FileSource | None = None,
) -> RegionResolution:
    """
    Resolve every service (or the given subset) of a region concurrently.

    Args:
    ----
        config: Global configuration
        region: Target region
        root: Manifests repository root
        services: Service names to resolve (default: every service in the repository)
        max_workers: Thread pool size (default: ThreadPoolExecutor's default)
        files: Config file source shared by every build

    Returns:
    -------
        RegionResolution with successful manifests and per-service failures

    Example:
    -------
        >>> resolution = resolve_region(config, config.get_region("dev-uk"), root)
        >>> sorted(resolution.manifests)
        ['fake-ask', 'fake-storage']

    """
    names = sorted(services) if services is not None else list_services(root)
    files = files or FileSystemSource(root)
    resolution = RegionResolution(region=region.name)

    LOGGER.info(f"Resolving {len(names)} service(s) for region {region.name}")
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        futures = {name: pool.submit(load_manifest, name, config, region, root, files) for name in names}
        for name, future in futures.items():
            try:
                resolution.manifests[name] = future.result()
            except KShipError as e:
                LOGGER.debug(f"Failed to resolve {name} in {region.name}: {e}")
                resolution.failures[name] = e

    LOGGER.info(
        f"Resolved region {region.name}: {len(resolution.manifests)} ok, " f"{len(resolution.failures)} failed"
    )
    return resolution


def generate_region_gateway(config: GlobalConfig, region: Region, root: Path) -> GatewayOutput:
    """
    Generate the gateway config for a whole region.

    The batch must be complete: a gateway config missing some services would
    remove their routes, so any failure aborts.

    Raises
    ------
        KShipBatchError: If any service failed to resolve, or any route cannot be
            derived

    """
    resolution = resolve_region(config, region, root)
    resolution.raise_for_failures()
    return generate_gateway_output(resolution.enabled(), region)
