"""
Global configuration schemas.

This module defines Pydantic models for kship.yaml:
- Teams (ownership directory used to validate manifest metadata)
- Clusters (how to log in: teleport proxy, cluster name)
- Regions (namespace, environment, regional defaults, gateway and kafka settings)
- Global manifest defaults
"""

from typing import Annotated
from urllib.parse import urlparse

from pydantic import Field, field_validator, model_validator

from kship_lib.any.exceptions import KShipRegionNotFoundError
from kship_lib.manifest.base import KShipModel
from kship_lib.manifest.sources import ManifestDefaults
from kship_lib.types import KShipEnvironment


class Team(KShipModel):
    """
    A team that can own services.

    Example:
    -------
        name: platform
        support: "#platform-support"
        notifications: "#platform-alerts"

    """

    name: Annotated[str, Field(description="Team name referenced by manifest metadata.team")]
    support: str | None = None
    notifications: str | None = None
    owners: list[str] = Field(default_factory=list)


class Cluster(KShipModel):
    """
    A Kubernetes cluster hosting one or more regions.

    Example:
    -------
        name: kind-shipcat
        teleport: teleport.example.com
        clustername: dev-uk-cluster
        regions: [dev-uk]

    """

    name: str
    teleport: Annotated[
        str | None, Field(default=None, description="Teleport proxy host. None means contexts are managed externally")
    ]
    clustername: str | None = None
    regions: list[str] = Field(default_factory=list)


class KafkaRegionConfig(KShipModel):
    brokers: list[str] = Field(default_factory=list)


class OAuth2Consumer(KShipModel):
    oauth2_client_id: str
    oauth2_client_secret: str


class JwtConsumer(KShipModel):
    kid: Annotated[str, Field(description="Issuer key matched against the token's key claim")]
    public_key: str
    algorithm: str = "RS256"


class KongRegionConfig(KShipModel):
    """
    Gateway settings for a region.

    Example:
    -------
        configUrl: https://admin.dev.example.com
        hostPattern: "{{host}}.dev.example.com"
        consumers:
          fake-ask:
            oauth2ClientId: FAKEASKID
            oauth2ClientSecret: FAKEASKSECRET
        jwtConsumers:
          my-idp:
            kid: https://my-issuer/
            publicKey: "-----BEGIN PUBLIC KEY-----..."

    """

    config_url: Annotated[str, Field(description="Kong admin URL for this region")]
    host_pattern: Annotated[
        str,
        Field(
            default="{{host}}",
            description="Pattern for short hosts. Variables: host, service, region, environment",
        ),
    ]
    consumers: dict[str, OAuth2Consumer] = Field(default_factory=dict)
    jwt_consumers: dict[str, JwtConsumer] = Field(default_factory=dict)

    @property
    def admin_host(self) -> str:
        """Hostname of the admin URL (e.g., 'admin.dev.example.com')."""
        return urlparse(self.config_url).hostname or self.config_url


class Region(KShipModel):
    """
    A deployment target: one namespace in one cluster.

    Example:
    -------
        name: dev-uk
        namespace: dev
        environment: dev
        cluster: kind-shipcat
        defaults:
          replicaCount: 2
        kafka:
          brokers: [kafka.dev:9092]

    """

    name: str
    namespace: str
    environment: KShipEnvironment
    cluster: str
    defaults: ManifestDefaults = ManifestDefaults()
    kong: KongRegionConfig | None = None
    kafka: KafkaRegionConfig = Field(default_factory=KafkaRegionConfig)

    @field_validator("environment", mode="before")
    @classmethod
    def _parse_environment(cls, value: object) -> object:
        if isinstance(value, str):
            return KShipEnvironment.from_string(value)
        return value


class GlobalConfig(KShipModel):
    """
    Global configuration (kship.yaml at the repository root).

    Example:
    -------
        defaults:
          imagePrefix: quay.io/example
          chart: base
        teams:
          - name: platform
        clusters:
          kind-shipcat:
            regions: [dev-uk]
        regions:
          - name: dev-uk
            namespace: dev
            environment: dev
            cluster: kind-shipcat

    """

    defaults: ManifestDefaults = ManifestDefaults()
    teams: list[Team] = Field(default_factory=list)
    clusters: dict[str, Cluster] = Field(default_factory=dict)
    regions: list[Region] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _name_clusters(cls, data: object) -> object:
        # clusters are keyed by name in YAML
        if isinstance(data, dict) and isinstance(data.get("clusters"), dict):
            clusters = {}
            for name, cluster in data["clusters"].items():
                if isinstance(cluster, dict):
                    cluster = {"name": name, **cluster}
                clusters[name] = cluster
            data = {**data, "clusters": clusters}
        return data

    @model_validator(mode="after")
    def _validate_region_clusters(self) -> "GlobalConfig":
        names = [r.name for r in self.regions]
        duplicates = {n for n in names if names.count(n) > 1}
        if duplicates:
            raise ValueError(f"Duplicate region names: {sorted(duplicates)}")
        for region in self.regions:
            if region.cluster not in self.clusters:
                raise ValueError(
                    f"Region '{region.name}' references unknown cluster '{region.cluster}'. "
                    f"Available: {list(self.clusters.keys())}"
                )
        return self

    def get_region(self, name: str) -> Region:
        """
        Look up a region by name.

        Raises
        ------
            KShipRegionNotFoundError: If no region has that name

        """
        for region in self.regions:
            if region.name == name:
                return region
        raise KShipRegionNotFoundError(
            f"Region '{name}' not found in kship.yaml. " f"Available: {[r.name for r in self.regions]}"
        )

    def find_team(self, name: str) -> Team | None:
        """Find a team by exact name."""
        for team in self.teams:
            if team.name == name:
                return team
        return None

    def find_owning_cluster(self, region: Region) -> Cluster | None:
        """Find the cluster a region runs in."""
        return self.clusters.get(region.cluster)
