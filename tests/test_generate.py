"""Tests for values rendering."""

import pytest

from kship_lib.adapters.templates import JinjaTemplateRenderer
from kship_lib.any.exceptions import KShipTemplateNotFoundError
from kship_lib.generate import DEFAULT_BOOTTIME, render_values, values_context
from kship_lib.manifest.resolver import load_manifest


@pytest.fixture
def renderer(manifests_root):
    return JinjaTemplateRenderer([manifests_root / "templates"])


class TestValuesContext:
    """Tests for values_context()."""

    def test_mounts_and_boottime(self, manifests_root, global_config, dev_uk):
        """Test that mounts are keyed by destination and boottime follows health.wait."""
        manifest = load_manifest("fake-ask", global_config, dev_uk, manifests_root)
        context = values_context(manifest)
        assert context["mounts"] == {"app.conf": "listen = 8000\n", "newrelic.yml": "license_key: shared\n"}
        assert context["boottime"] == 20
        assert context["mf"]["name"] == "fake-ask"

    def test_defaults(self, manifests_root, global_config, dev_uk):
        """Test a manifest without configs or health check."""
        manifest = load_manifest("fake-storage", global_config, dev_uk, manifests_root)
        context = values_context(manifest)
        assert context["mounts"] == {}
        assert context["boottime"] == DEFAULT_BOOTTIME


class TestRenderValues:
    """Tests for render_values()."""

    def test_render(self, manifests_root, global_config, dev_uk, renderer):
        """Test rendering the deployment template."""
        manifest = load_manifest("fake-ask", global_config, dev_uk, manifests_root)
        assert render_values(manifest, renderer) == (
            "image: quay.io/example/fake-ask:1.2.0\n" "boottime: 20\n" "mount: app.conf\n" "mount: newrelic.yml\n"
        )

    def test_missing_template(self, manifests_root, global_config, dev_uk, renderer):
        """Test that a missing template is reported."""
        manifest = load_manifest("fake-ask", global_config, dev_uk, manifests_root)
        with pytest.raises(KShipTemplateNotFoundError):
            render_values(manifest, renderer, template_name="statefulset.yaml.j2")
