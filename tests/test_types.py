"""Tests for types module."""

import pytest

from kship_lib.types import KShipEnvironment, LifecycleAction


class TestKShipEnvironment:
    """Tests for KShipEnvironment enum."""

    def test_environment_values(self):
        """Test that environment enum values are correct."""
        assert KShipEnvironment.DEVELOPMENT.value == "dev"
        assert KShipEnvironment.QA.value == "qa"
        assert KShipEnvironment.STAGING.value == "staging"
        assert KShipEnvironment.PREPROD.value == "preprod"
        assert KShipEnvironment.PRODUCTION.value == "prod"

    def test_from_string_short(self):
        """Test from_string with short names in any case."""
        assert KShipEnvironment.from_string("dev") == KShipEnvironment.DEVELOPMENT
        assert KShipEnvironment.from_string("PROD") == KShipEnvironment.PRODUCTION
        assert KShipEnvironment.from_string("  staging\n") == KShipEnvironment.STAGING

    def test_from_string_aliases(self):
        """Test from_string with long aliases."""
        assert KShipEnvironment.from_string("development") == KShipEnvironment.DEVELOPMENT
        assert KShipEnvironment.from_string("Production") == KShipEnvironment.PRODUCTION
        assert KShipEnvironment.from_string("pre-production") == KShipEnvironment.PREPROD
        assert KShipEnvironment.from_string("test") == KShipEnvironment.QA

    def test_from_string_invalid(self):
        """Test from_string raises ValueError for invalid input."""
        with pytest.raises(ValueError, match="Invalid environment"):
            KShipEnvironment.from_string("invalid-environment")


class TestLifecycleAction:
    """Tests for LifecycleAction enum."""

    def test_values(self):
        """Test that values are what lands in lastAction."""
        assert [a.value for a in LifecycleAction] == ["Generate", "Apply", "Rollout"]

    def test_condition_keys(self):
        """Test each action's condition key."""
        assert LifecycleAction.GENERATE.condition_key == "generated"
        assert LifecycleAction.APPLY.condition_key == "applied"
        assert LifecycleAction.ROLLOUT.condition_key == "rolledout"

    def test_display_name(self):
        """Test the labels used when printing conditions."""
        assert LifecycleAction.ROLLOUT.display_name == "RolledOut"
