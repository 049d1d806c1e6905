"""KShip configuration management."""

from kship_lib.config.loaders import (
    list_services,
    load_global_config,
    load_service_source,
)
from kship_lib.config.root import find_config_root
from kship_lib.config.schemas import (
    Cluster,
    GlobalConfig,
    JwtConsumer,
    KafkaRegionConfig,
    KongRegionConfig,
    OAuth2Consumer,
    Region,
    Team,
)
from kship_lib.types import KShipEnvironment

__all__ = [
    "KShipEnvironment",
    # Schemas
    "GlobalConfig",
    "Team",
    "Cluster",
    "Region",
    "KongRegionConfig",
    "OAuth2Consumer",
    "JwtConsumer",
    "KafkaRegionConfig",
    # Loaders
    "load_global_config",
    "load_service_source",
    "list_services",
    "find_config_root",
]
