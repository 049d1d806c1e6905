"""
Manifest substructures.

These are set as whole values by a layer (a higher layer replaces the lower
layer's value), and reused unchanged in the validated Manifest.
"""

from typing import TYPE_CHECKING, Any

from pydantic import Field, field_validator

from kship_lib.manifest.base import KShipModel

if TYPE_CHECKING:
    from kship_lib.config.schemas import Region

DEFAULT_CIPHER = "AES256"

DEFAULT_KAFKA_PROPERTY_ENV_MAPPING = {
    "bootstrap.servers": "KAFKA_BROKERS",
    "group.id": "KAFKA_GROUP_ID",
}


class Metadata(KShipModel):
    """Ownership metadata. ``team`` must match a team in kship.yaml."""

    team: str
    repo: str | None = None
    support: str | None = None
    notifications: str | None = None
    maintainers: list[str] = Field(default_factory=list)
    description: str | None = None


class Resources(KShipModel):
    cpu: str | None = None
    memory: str | None = None

    @field_validator("cpu", "memory", mode="before")
    @classmethod
    def _relaxed_string(cls, value: Any) -> Any:
        # YAML turns `cpu: 1` into an int
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class ResourceRequirements(KShipModel):
    requests: Resources = Field(default_factory=Resources)
    limits: Resources = Field(default_factory=Resources)


class Port(KShipModel):
    name: str
    port: int
    target_port: int | None = None
    protocol: str = "TCP"


class HealthCheck(KShipModel):
    uri: str
    wait: int = 30
    port: int | None = None


class ProbeHttpGet(KShipModel):
    path: str
    port: int | str = "http"


class Probe(KShipModel):
    http_get: ProbeHttpGet | None = None
    initial_delay_seconds: int = 30
    period_seconds: int = 10
    timeout_seconds: int = 1
    failure_threshold: int = 3
    success_threshold: int = 1


class AutoScaling(KShipModel):
    min_replicas: int
    max_replicas: int
    target_cpu_utilization_percentage: int | None = None


class Dependency(KShipModel):
    name: str
    api: str = "v1"
    contract: str | None = None
    protocol: str = "http"
    intent: str | None = None


class ConfigMappedFile(KShipModel):
    """A config file mounted into the container. ``value`` is filled in at build time."""

    name: str
    dest: str
    value: str | None = None


class ConfigMap(KShipModel):
    mount: str
    files: list[ConfigMappedFile] = Field(default_factory=list)


class DataField(KShipModel):
    name: str
    pii: bool = False
    spii: bool = False
    encrypted: bool | None = None


class DataStore(KShipModel):
    backend: str
    encrypted: bool | None = None
    cipher: str | None = None
    retention_period: str | None = None
    fields: list[DataField] = Field(default_factory=list)

    def implicits(self) -> "DataStore":
        encrypted = bool(self.encrypted)
        fields = [
            field.model_copy(
                update={
                    "pii": field.pii or field.spii,
                    "encrypted": encrypted if field.encrypted is None else field.encrypted,
                }
            )
            for field in self.fields
        ]
        cipher = self.cipher
        if encrypted and cipher is None:
            cipher = DEFAULT_CIPHER
        return self.model_copy(update={"encrypted": encrypted, "cipher": cipher, "fields": fields})


class DataProcess(KShipModel):
    field: str
    source: str
    purpose: str | None = None


class DataHandling(KShipModel):
    """
    Data classification for a service.

    ``implicits`` fills in derivable values and is idempotent:
    - fields inherit their store's ``encrypted`` flag unless set
    - ``spii`` (sensitive PII) implies ``pii``
    - encrypted stores default to the AES256 cipher
    """

    stores: list[DataStore] = Field(default_factory=list)
    processes: list[DataProcess] = Field(default_factory=list)

    def implicits(self) -> "DataHandling":
        return self.model_copy(update={"stores": [store.implicits() for store in self.stores]})


class Kafka(KShipModel):
    """
    Kafka (streaming topic) settings for a service.

    ``implicits`` fills in values derivable from the service and region and is idempotent:
    - brokers default to the region's brokers
    - the consumer group defaults to ``<service>-<region>``
    - the standard client properties are mapped to env vars unless already mapped
    """

    brokers: list[str] | None = None
    consumer_group: str | None = None
    topics: list[str] = Field(default_factory=list)
    mount_pod_ip: bool = False
    property_env_mapping: dict[str, str] = Field(default_factory=dict)

    def implicits(self, service: str, region: "Region") -> "Kafka":
        brokers = self.brokers if self.brokers is not None else list(region.kafka.brokers)
        consumer_group = self.consumer_group or f"{service}-{region.name}"
        mapping = dict(DEFAULT_KAFKA_PROPERTY_ENV_MAPPING)
        mapping.update(self.property_env_mapping)
        return self.model_copy(
            update={"brokers": brokers, "consumer_group": consumer_group, "property_env_mapping": mapping}
        )
