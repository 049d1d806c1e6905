"""
Validating builder: merged source + context → Manifest.

This is the single step that turns a partially-specified, merged ManifestSource
into a validated Manifest. It fails fast with a named error:

- KShipMissingFieldError: name, metadata, version (or image/imagePrefix) unset
- KShipTeamNotFoundError: metadata.team is not a team in kship.yaml
- KShipImagePrefixError: no image and no image prefix
- KShipTemplateNotFoundError: a config file exists in neither lookup location

The builder holds no state and only reads files through the FileSource, so it
can run for many services in parallel.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeVar

import structlog

from kship_lib.any.exceptions import KShipImagePrefixError, KShipMissingFieldError, KShipTeamNotFoundError
from kship_lib.any.protocols import FileSource
from kship_lib.manifest.model import KongApi, Manifest
from kship_lib.manifest.sources import ManifestSource
from kship_lib.manifest.structs import ConfigMap, DataHandling, Kafka, Metadata

if TYPE_CHECKING:
    from kship_lib.config.schemas import GlobalConfig, Region

LOGGER = structlog.get_logger("kship_lib.manifest.builder")

DEFAULT_IMAGE_SIZE = 512

T = TypeVar("T")


@dataclass(frozen=True)
class BuildContext:
    """Everything the builder needs besides the merged source."""

    config: "GlobalConfig"
    region: "Region"
    files: FileSource


def require(value: T | None, field: str, service: str | None = None) -> T:
    """Return ``value`` or raise KShipMissingFieldError naming ``field``."""
    if value is None:
        raise KShipMissingFieldError(field, service=service)
    return value


def build_manifest(source: ManifestSource, context: BuildContext) -> Manifest:
    """
    Build a validated Manifest from a merged source.

    Args:
    ----
        source: Layers already folded (see kship_lib.manifest.layers)
        context: Global config, target region and file source

    Returns:
    -------
        Validated, immutable Manifest

    Raises:
    ------
        KShipConfigurationError: Any of the named subclasses listed in the module docs

    Example:
    -------
        >>> context = BuildContext(config=config, region=config.get_region("dev-uk"), files=files)
        >>> manifest = build_manifest(stack.merged(), context)
        >>> manifest.image
        'quay.io/example/fake-ask'

    """
    region = context.region
    name = require(source.name, "name")
    metadata = build_metadata(source, context.config)
    image = build_image(source, name)
    version = require(source.version, "version", service=name)
    regions = list(source.regions or [])

    manifest = Manifest(
        name=name,
        region=region.name,
        namespace=region.namespace,
        environment=region.environment.value,
        regions=regions,
        enabled=not source.disabled and region.name in regions,
        external=bool(source.external),
        publicly_accessible=bool(source.publicly_accessible),
        metadata=metadata,
        image=image,
        version=version,
        image_size=source.image_size if source.image_size is not None else DEFAULT_IMAGE_SIZE,
        chart=source.chart,
        command=list(source.command or []),
        language=source.language,
        resources=source.resources,
        replica_count=source.replica_count,
        auto_scaling=source.auto_scaling,
        env=dict(source.env),
        secret_files=dict(source.secret_files),
        configs=build_configs(source, name, context.files),
        labels=dict(source.labels),
        http_port=source.http_port,
        ports=list(source.ports or []),
        external_port=source.external_port,
        health=source.health,
        readiness_probe=source.readiness_probe,
        liveness_probe=source.liveness_probe,
        hosts=list(source.hosts or []),
        dependencies=list(source.dependencies or []),
        data_handling=build_data_handling(source.data_handling),
        kafka=build_kafka(source.kafka, name, region),
        kong_apis=build_kong_apis(source, name),
    )
    LOGGER.debug(f"Built manifest for {name} in {region.name} (enabled={manifest.enabled})")
    return manifest


def build_metadata(source: ManifestSource, config: "GlobalConfig") -> Metadata:
    """
    Validate metadata against the team directory and inherit team contacts.

    Unset ``support`` and ``notifications`` are taken from the team; values the
    manifest already sets are kept.
    """
    metadata = require(source.metadata, "metadata", service=source.name)
    team = config.find_team(metadata.team)
    if team is None:
        raise KShipTeamNotFoundError(metadata.team, known=[t.name for t in config.teams])

    inherited = {}
    if metadata.support is None:
        inherited["support"] = team.support
    if metadata.notifications is None:
        inherited["notifications"] = team.notifications
    return metadata.model_copy(update=inherited)


def build_image(source: ManifestSource, service: str) -> str:
    """Explicit image, else ``<imagePrefix>/<service>``."""
    if source.image is not None:
        return source.image
    if source.image_prefix is not None:
        return f"{source.image_prefix}/{service}"
    raise KShipImagePrefixError(service)


def build_data_handling(data_handling: DataHandling | None) -> DataHandling | None:
    if data_handling is None:
        return None
    return data_handling.implicits()


def build_kafka(kafka: Kafka | None, service: str, region: "Region") -> Kafka | None:
    if kafka is None:
        return None
    return kafka.implicits(service, region)


def build_configs(source: ManifestSource, service: str, files: FileSource) -> ConfigMap | None:
    """Fill in every config file's content from the service directory or shared templates."""
    if source.configs is None:
        return None
    resolved = [
        config_file.model_copy(update={"value": files.read_config_file(service, config_file.name)})
        for config_file in source.configs.files
    ]
    return source.configs.model_copy(update={"files": resolved})


def build_kong_apis(source: ManifestSource, service: str) -> list[KongApi]:
    """
    Build gateway route descriptors.

    A route exists only when the merged kong settings are enabled. Its hosts are
    the kong hosts, else the service's top-level hosts. Without uris
    or hosts the route defaults to ``/<service>``.
    """
    kong = source.kong
    if not kong.enabled:
        return []

    uris = kong.uris
    hosts = list(kong.hosts if kong.hosts is not None else source.hosts or [])
    if not uris and not hosts:
        uris = [f"/{service}"]

    return [
        KongApi(
            name=service,
            uris=uris,
            hosts=hosts,
            strip_uri=bool(kong.strip_uri),
            preserve_host=kong.preserve_host if kong.preserve_host is not None else True,
            upstream_url=kong.upstream_url,
            plugins=kong.plugins,
        )
    ]
