"""
The validated manifest.

A Manifest is the fully resolved description of one service in one region. It is
only ever produced by kship_lib.manifest.builder.build_manifest, and is immutable.
"""

from pydantic import Field

from kship_lib.manifest.base import KShipModel
from kship_lib.manifest.kong import KongPlugins
from kship_lib.manifest.structs import (
    AutoScaling,
    ConfigMap,
    DataHandling,
    Dependency,
    HealthCheck,
    Kafka,
    Metadata,
    Port,
    Probe,
    ResourceRequirements,
)


class KongApi(KShipModel):
    """
    A gateway route descriptor.

    ``hosts`` are kept as written in the layers; short hosts are expanded
    with the region's host pattern when the gateway config is generated.
    """

    name: str
    uris: list[str] | None = None
    hosts: list[str] = Field(default_factory=list)
    strip_uri: bool = False
    preserve_host: bool = True
    upstream_url: str | None = None
    plugins: KongPlugins = KongPlugins()


class Manifest(KShipModel):
    """Fully resolved deployment description of one service in one region."""

    # identity
    name: str
    region: str
    namespace: str
    environment: str
    regions: list[str] = Field(default_factory=list)
    enabled: bool = True
    external: bool = False
    publicly_accessible: bool = False
    metadata: Metadata

    # image
    image: str
    version: str
    image_size: int = 512
    chart: str | None = None
    command: list[str] = Field(default_factory=list)
    language: str | None = None

    # runtime
    resources: ResourceRequirements | None = None
    replica_count: int | None = None
    auto_scaling: AutoScaling | None = None
    env: dict[str, str] = Field(default_factory=dict)
    secret_files: dict[str, str] = Field(default_factory=dict)
    configs: ConfigMap | None = None
    labels: dict[str, str] = Field(default_factory=dict)

    # networking
    http_port: int | None = None
    ports: list[Port] = Field(default_factory=list)
    external_port: int | None = None
    health: HealthCheck | None = None
    readiness_probe: Probe | None = None
    liveness_probe: Probe | None = None
    hosts: list[str] = Field(default_factory=list)
    dependencies: list[Dependency] = Field(default_factory=list)

    # enriched
    data_handling: DataHandling | None = None
    kafka: Kafka | None = None

    kong_apis: list[KongApi] = Field(default_factory=list)
