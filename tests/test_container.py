"""Tests for DI container and adapter selection."""

from unittest.mock import MagicMock, patch

import pytest

from kship_lib.adapters.files import FileSystemSource
from kship_lib.adapters.kubectl import KubectlManifestClient
from kship_lib.adapters.session import InClusterSession, TeleportSession
from kship_lib.adapters.templates import JinjaTemplateRenderer
from kship_lib.any.protocols import FileSource, ManifestObjectClient, SessionAdapter, TemplateRenderer
from kship_lib.config.root import ROOT_ENV_VAR
from kship_lib.container import KShipIoCContainer


@pytest.fixture
def container(manifests_root):
    container = KShipIoCContainer()
    container.root.override(manifests_root)
    return container


class TestContainerContext:
    """Test session selection by context."""

    @patch("kship_lib.container.is_in_cluster", return_value=False)
    def test_local_session(self, mock_in_cluster, container):
        """Test that the teleport session is wired on a dev machine."""
        session = container.session()
        assert isinstance(session, TeleportSession)
        assert session.config is container.global_config()

    @patch("kship_lib.container.is_in_cluster", return_value=True)
    def test_cluster_session(self, mock_in_cluster, container):
        """Test that the in-cluster session is wired inside a pod."""
        assert isinstance(container.session(), InClusterSession)

    @patch("kship_lib.container.is_in_cluster", return_value=False)
    def test_session_is_singleton(self, mock_in_cluster, container):
        """Test that the session is created once."""
        assert container.session() is container.session()


class TestContainerWiring:
    """Test the default adapters."""

    def test_global_config(self, container):
        """Test that kship.yaml is loaded from the overridden root."""
        assert container.global_config().get_region("dev-uk").namespace == "dev"

    def test_root_from_env(self, monkeypatch, manifests_root):
        """Test that the root is discovered through KSHIP_ROOT."""
        monkeypatch.setenv(ROOT_ENV_VAR, str(manifests_root))
        assert KShipIoCContainer().root() == manifests_root

    def test_file_source(self, container, manifests_root):
        """Test the filesystem file source."""
        files = container.file_source()
        assert isinstance(files, FileSystemSource)
        assert isinstance(files, FileSource)
        assert files.root == manifests_root

    def test_template_renderer(self, container, manifests_root):
        """Test that templates are read from the repository's templates directory."""
        renderer = container.template_renderer()
        assert isinstance(renderer, JinjaTemplateRenderer)
        assert isinstance(renderer, TemplateRenderer)
        assert renderer.template_dirs == [manifests_root / "templates"]

    def test_manifest_client_factory(self, container):
        """Test that each call makes a new client for the given namespace."""
        first = container.manifest_client(namespace="dev", context="dev-uk")
        second = container.manifest_client(namespace="staging")
        assert isinstance(first, KubectlManifestClient)
        assert isinstance(first, ManifestObjectClient)
        assert first is not second
        assert (first.namespace, first.context) == ("dev", "dev-uk")
        assert second.context is None

    def test_override_session(self, container):
        """Test swapping an adapter for tests."""
        fake = MagicMock(spec=SessionAdapter)
        container.session.override(fake)
        assert container.session() is fake
