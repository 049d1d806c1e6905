"""
Values rendering: a validated manifest through a named template.

The template sees:
- ``mf``: the manifest document (camelCase keys)
- ``mounts``: config file contents keyed by their destination
- ``boottime``: seconds to wait before health checking (health.wait, default 30)
"""

from typing import Any

import structlog

from kship_lib.any.protocols import TemplateRenderer
from kship_lib.manifest.model import Manifest

LOGGER = structlog.get_logger("kship_lib.generate")

DEFAULT_TEMPLATE = "deployment.yaml.j2"
DEFAULT_BOOTTIME = 30


def values_context(manifest: Manifest) -> dict[str, Any]:
    mounts = {}
    if manifest.configs is not None:
        mounts = {f.dest: f.value for f in manifest.configs.files}
    return {
        "mf": manifest.to_document(),
        "mounts": mounts,
        "boottime": manifest.health.wait if manifest.health is not None else DEFAULT_BOOTTIME,
    }


def render_values(manifest: Manifest, renderer: TemplateRenderer, template_name: str = DEFAULT_TEMPLATE) -> str:
    """
    Render deployment values for a manifest.

    Args:
    ----
        manifest: Validated manifest
        renderer: Template renderer (see kship_lib.adapters.templates)
        template_name: Template to render

    Returns:
    -------
        Rendered text

    Raises:
    ------
        KShipTemplateNotFoundError: If the template does not exist
        KShipConfigurationError: If the template references anything undefined

    """
    LOGGER.debug(f"Rendering {template_name} for {manifest.name} in {manifest.region}")
    return renderer.render(template_name, values_context(manifest))
