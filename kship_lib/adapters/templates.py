"""Jinja2 template rendering."""

from pathlib import Path
from typing import Any

import structlog
from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError, TemplateNotFound

from kship_lib.any.exceptions import KShipConfigurationError, KShipTemplateNotFoundError

LOGGER = structlog.get_logger("kship_lib.adapters.templates")


class JinjaTemplateRenderer:
    """
    TemplateRenderer implementation backed by Jinja2.

    Undefined variables are errors, never empty strings.

    Example:
    -------
        ```python
        renderer = JinjaTemplateRenderer([root / "templates"])
        values = renderer.render("deployment.yaml.j2", {"mf": manifest.to_document()})
        ```

    """

    def __init__(self, template_dirs: list[Path]):
        self.template_dirs = list(template_dirs)
        self.environment = Environment(
            loader=FileSystemLoader([str(d) for d in self.template_dirs]),
            autoescape=False,
            undefined=StrictUndefined,
            keep_trailing_newline=True,
        )

    def render(self, template_name: str, context: dict[str, Any]) -> str:
        try:
            template = self.environment.get_template(template_name)
        except TemplateNotFound as e:
            raise KShipTemplateNotFoundError(
                template_name, [str(d / template_name) for d in self.template_dirs]
            ) from e

        LOGGER.debug(f"Rendering {template_name} with keys {sorted(context)}")
        try:
            return template.render(**context)
        except TemplateError as e:
            raise KShipConfigurationError(f"Failed to render {template_name}: {e}") from e
