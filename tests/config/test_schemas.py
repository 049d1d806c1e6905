"""Tests for global configuration schemas."""

import pytest
from pydantic import ValidationError

from kship_lib.config.schemas import GlobalConfig, KongRegionConfig, Region
from kship_lib.types import KShipEnvironment

CLUSTERS = {"kind-shipcat": {"teleport": "teleport.example.com", "regions": ["dev-uk"]}}


def region(**overrides) -> dict:
    return {"name": "dev-uk", "namespace": "dev", "environment": "dev", "cluster": "kind-shipcat", **overrides}


class TestRegion:
    """Tests for Region."""

    def test_minimal(self):
        """Test a region with only required fields."""
        parsed = Region.model_validate(region())
        assert parsed.environment is KShipEnvironment.DEVELOPMENT
        assert parsed.kong is None
        assert parsed.kafka.brokers == []

    def test_environment_alias(self):
        """Test that long environment names are accepted."""
        assert Region.model_validate(region(environment="production")).environment is KShipEnvironment.PRODUCTION

    def test_invalid_environment(self):
        """Test that an unknown environment is rejected."""
        with pytest.raises(ValidationError):
            Region.model_validate(region(environment="moon"))

    def test_defaults_are_a_layer(self):
        """Test that regional defaults parse as a manifest defaults layer."""
        parsed = Region.model_validate(region(defaults={"replicaCount": 3, "kong": {"plugins": {"oauth2": False}}}))
        assert parsed.defaults.replica_count == 3
        assert parsed.defaults.kong.plugins.oauth2.is_removed


class TestKongRegionConfig:
    """Tests for KongRegionConfig."""

    def test_admin_host(self):
        """Test extracting the admin host from the config URL."""
        kong = KongRegionConfig(config_url="https://admin.dev.example.com:8444/")
        assert kong.admin_host == "admin.dev.example.com"

    def test_default_pattern(self):
        """Test that the default host pattern is the bare host."""
        assert KongRegionConfig(config_url="https://admin").host_pattern == "{{host}}"

    def test_consumers(self):
        """Test parsing OAuth2 and JWT consumers."""
        kong = KongRegionConfig.model_validate(
            {
                "configUrl": "https://admin",
                "consumers": {"svc": {"oauth2ClientId": "ID", "oauth2ClientSecret": "SECRET"}},
                "jwtConsumers": {"idp": {"kid": "https://issuer/", "publicKey": "KEY"}},
            }
        )
        assert kong.consumers["svc"].oauth2_client_id == "ID"
        assert kong.jwt_consumers["idp"].algorithm == "RS256"


class TestGlobalConfig:
    """Tests for GlobalConfig."""

    def test_clusters_named_from_keys(self):
        """Test that clusters take their name from the mapping key."""
        config = GlobalConfig.model_validate({"clusters": CLUSTERS, "regions": [region()]})
        cluster = config.find_owning_cluster(config.get_region("dev-uk"))
        assert cluster.name == "kind-shipcat"
        assert cluster.teleport == "teleport.example.com"

    def test_duplicate_regions(self):
        """Test that region names must be unique."""
        with pytest.raises(ValidationError, match="Duplicate region names"):
            GlobalConfig.model_validate({"clusters": CLUSTERS, "regions": [region(), region()]})

    def test_unknown_cluster(self):
        """Test that regions must reference a known cluster."""
        with pytest.raises(ValidationError, match="unknown cluster"):
            GlobalConfig.model_validate({"regions": [region()]})

    def test_find_team(self, global_config):
        """Test team lookup by exact name."""
        assert global_config.find_team("platform").support == "#platform-support"
        assert global_config.find_team("Platform") is None

    def test_rejects_unknown_keys(self):
        """Test that misspelled top-level keys are rejected."""
        with pytest.raises(ValidationError):
            GlobalConfig.model_validate({"region": []})

    def test_frozen(self, global_config):
        """Test that the parsed configuration cannot be mutated."""
        with pytest.raises(ValidationError):
            global_config.teams = []
