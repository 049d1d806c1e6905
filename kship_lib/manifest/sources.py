"""
Configuration layer models.

Three kinds of layer exist, each a superset of the previous one:
- ManifestDefaults: global defaults (kship.yaml) and regional defaults (regions[].defaults)
- ManifestOverrides: service override files (services/<svc>/<env>.yml, <region>.yml)
- ManifestSource: the service manifest itself (services/<svc>/manifest.yml)

Every field is optional; required fields are only enforced by the builder.
"""

from typing import Any

from pydantic import Field

from kship_lib.manifest.base import SourceModel
from kship_lib.manifest.kong import KongSource
from kship_lib.manifest.merge import merge_mapping, merge_optional
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


class ManifestDefaults(SourceModel):
    """Values that global and regional config may default for every service."""

    image_prefix: str | None = None
    chart: str | None = None
    replica_count: int | None = None
    env: dict[str, str] = Field(default_factory=dict)
    kong: KongSource = KongSource()

    def _merge_fields(self, other: "ManifestDefaults") -> dict[str, Any]:
        return {
            "image_prefix": merge_optional(self.image_prefix, other.image_prefix),
            "chart": merge_optional(self.chart, other.chart),
            "replica_count": merge_optional(self.replica_count, other.replica_count),
            "env": merge_mapping(self.env, other.env),
            "kong": self.kong.merge(other.kong),
        }


class ManifestOverrides(ManifestDefaults):
    """Values a service may set, per environment or per region."""

    publicly_accessible: bool | None = None
    image: str | None = None
    image_size: int | None = None
    version: str | None = None
    command: list[str] | None = None
    data_handling: DataHandling | None = None
    language: str | None = None
    resources: ResourceRequirements | None = None
    secret_files: dict[str, str] = Field(default_factory=dict)
    configs: ConfigMap | None = None
    http_port: int | None = None
    ports: list[Port] | None = None
    external_port: int | None = None
    health: HealthCheck | None = None
    dependencies: list[Dependency] | None = None
    readiness_probe: Probe | None = None
    liveness_probe: Probe | None = None
    auto_scaling: AutoScaling | None = None
    hosts: list[str] | None = None
    kafka: Kafka | None = None
    labels: dict[str, str] = Field(default_factory=dict)

    def _merge_fields(self, other: "ManifestOverrides") -> dict[str, Any]:
        fields = super()._merge_fields(other)
        fields.update(
            {
                "publicly_accessible": merge_optional(self.publicly_accessible, other.publicly_accessible),
                "image": merge_optional(self.image, other.image),
                "image_size": merge_optional(self.image_size, other.image_size),
                "version": merge_optional(self.version, other.version),
                "command": merge_optional(self.command, other.command),
                "data_handling": merge_optional(self.data_handling, other.data_handling),
                "language": merge_optional(self.language, other.language),
                "resources": merge_optional(self.resources, other.resources),
                "secret_files": merge_mapping(self.secret_files, other.secret_files),
                "configs": merge_optional(self.configs, other.configs),
                "http_port": merge_optional(self.http_port, other.http_port),
                "ports": merge_optional(self.ports, other.ports),
                "external_port": merge_optional(self.external_port, other.external_port),
                "health": merge_optional(self.health, other.health),
                "dependencies": merge_optional(self.dependencies, other.dependencies),
                "readiness_probe": merge_optional(self.readiness_probe, other.readiness_probe),
                "liveness_probe": merge_optional(self.liveness_probe, other.liveness_probe),
                "auto_scaling": merge_optional(self.auto_scaling, other.auto_scaling),
                "hosts": merge_optional(self.hosts, other.hosts),
                "kafka": merge_optional(self.kafka, other.kafka),
                "labels": merge_mapping(self.labels, other.labels),
            }
        )
        return fields


class ManifestSource(ManifestOverrides):
    """The service manifest, and the merged source the builder consumes."""

    name: str | None = None
    external: bool | None = None
    disabled: bool | None = None
    regions: list[str] | None = None
    metadata: Metadata | None = None

    def _merge_fields(self, other: "ManifestSource") -> dict[str, Any]:
        fields = super()._merge_fields(other)
        fields.update(
            {
                "name": merge_optional(self.name, other.name),
                "external": merge_optional(self.external, other.external),
                "disabled": merge_optional(self.disabled, other.disabled),
                "regions": merge_optional(self.regions, other.regions),
                "metadata": merge_optional(self.metadata, other.metadata),
            }
        )
        return fields

    def merge_overrides(self, overrides: ManifestOverrides) -> "ManifestSource":
        """Merge a service override file over this manifest."""
        return self.model_copy(update=ManifestOverrides._merge_fields(self, overrides))

    def with_defaults(self, defaults: ManifestDefaults) -> "ManifestSource":
        """Place already-merged global/regional defaults underneath this manifest."""
        return self.model_copy(update=ManifestDefaults._merge_fields(defaults, self))
