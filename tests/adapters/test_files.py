"""Tests for the filesystem config file source."""

import pytest

from kship_lib.adapters.files import FileSystemSource
from kship_lib.any.exceptions import KShipConfigurationError, KShipTemplateNotFoundError


class TestFileSystemSource:
    """Tests for FileSystemSource."""

    def test_service_file(self, manifests_root):
        """Test reading a file from the service directory."""
        assert FileSystemSource(manifests_root).read_config_file("fake-ask", "app.conf") == "listen = 8000\n"

    def test_shared_template(self, manifests_root):
        """Test falling back to the shared templates directory."""
        assert FileSystemSource(manifests_root).read_config_file("fake-ask", "newrelic.yml") == "license_key: shared\n"

    def test_service_file_wins(self, manifests_root):
        """Test that the service's own copy shadows the shared one."""
        (manifests_root / "services" / "fake-ask" / "newrelic.yml").write_text("license_key: own\n")
        assert FileSystemSource(manifests_root).read_config_file("fake-ask", "newrelic.yml") == "license_key: own\n"

    def test_not_utf8(self, manifests_root):
        """Test that undecodable bytes are a configuration error naming the file."""
        path = manifests_root / "services" / "fake-ask" / "app.conf"
        path.write_bytes(b"\xff\xfe bad")
        with pytest.raises(KShipConfigurationError) as exc_info:
            FileSystemSource(manifests_root).read_config_file("fake-ask", "app.conf")
        assert str(path) in str(exc_info.value)

    def test_missing(self, manifests_root):
        """Test that a missing file names both candidate paths."""
        with pytest.raises(KShipTemplateNotFoundError) as exc_info:
            FileSystemSource(manifests_root).read_config_file("fake-ask", "missing.conf")

        message = str(exc_info.value)
        assert str(manifests_root / "services" / "fake-ask" / "missing.conf") in message
        assert str(manifests_root / "templates" / "missing.conf") in message
