"""
Configuration loading functions.

This module loads and validates the YAML files of a manifests repository:
- Global configuration (kship.yaml at the repository root)
- Service layers (services/<svc>/manifest.yml, <environment>.yml, <region>.yml)

Every file is parsed with yaml.safe_load and validated with Pydantic. Both
parse and validation failures raise KShipConfigurationError naming the file.
"""

from pathlib import Path
from typing import Any, TypeVar

import structlog
import yaml
from pydantic import BaseModel, ValidationError

from kship_lib.any.exceptions import KShipConfigurationError
from kship_lib.config.schemas import GlobalConfig, Region
from kship_lib.manifest.merge import fold_layers
from kship_lib.manifest.sources import ManifestOverrides, ManifestSource

LOGGER = structlog.get_logger("kship_lib.config.loaders")

GLOBAL_CONFIG_FILE = "kship.yaml"
SERVICES_DIR = "services"
TEMPLATES_DIR = "templates"
MANIFEST_FILE = "manifest.yml"

ModelT = TypeVar("ModelT", bound=BaseModel)


def read_yaml(path: Path) -> dict[str, Any]:
    """
    Parse a YAML mapping from a file.

    An empty file is an empty mapping.

    Raises
    ------
        KShipConfigurationError: If the file cannot be read, is not valid YAML,
            or does not hold a mapping

    """
    LOGGER.debug(f"Reading {path}")
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        raise KShipConfigurationError(f"Failed to parse {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise KShipConfigurationError(f"Expected a mapping at the top of {path}, got {type(data).__name__}")
    return data


def load_model(path: Path, model: type[ModelT]) -> ModelT:
    """Parse a YAML file and validate it as ``model``."""
    data = read_yaml(path)
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise KShipConfigurationError(f"Invalid configuration in {path}: {e}") from e


def load_global_config(root: Path) -> GlobalConfig:
    """
    Load kship.yaml from the repository root.

    Args:
    ----
        root: Manifests repository root

    Returns:
    -------
        Validated GlobalConfig

    Raises:
    ------
        KShipConfigurationError: If the file is missing, malformed or invalid

    """
    config_file = root / GLOBAL_CONFIG_FILE
    if not config_file.exists():
        raise KShipConfigurationError(f"Global configuration not found: {config_file}")

    config = load_model(config_file, GlobalConfig)
    LOGGER.debug(f"Loaded {config_file}: {len(config.regions)} region(s), {len(config.teams)} team(s)")
    return config


def service_dir(root: Path, service: str) -> Path:
    return root / SERVICES_DIR / service


def list_services(root: Path) -> list[str]:
    """
    List the services of a manifests repository.

    A service is a directory under services/ that holds a manifest.yml.

    Returns
    -------
        Service names, sorted

    """
    services_root = root / SERVICES_DIR
    if not services_root.is_dir():
        return []
    return sorted(p.name for p in services_root.iterdir() if (p / MANIFEST_FILE).is_file())


def load_service_source(root: Path, service: str, region: Region) -> ManifestSource:
    """
    Load a service's own layer for a region.

    Folds, lowest precedence first:
    1. services/<svc>/manifest.yml (required)
    2. services/<svc>/<environment>.yml (optional)
    3. services/<svc>/<region>.yml (optional)

    The service name defaults to the directory name when manifest.yml does not set it.

    Args:
    ----
        root: Manifests repository root
        service: Service directory name
        region: Target region (selects the override files)

    Returns:
    -------
        The merged service layer (no defaults applied)

    Raises:
    ------
        KShipConfigurationError: If manifest.yml is missing or any file is malformed or invalid

    Example:
    -------
        >>> source = load_service_source(root, "fake-ask", config.get_region("dev-uk"))
        >>> source.name
        'fake-ask'

    """
    directory = service_dir(root, service)
    manifest_file = directory / MANIFEST_FILE
    if not manifest_file.exists():
        raise KShipConfigurationError(f"Service manifest not found: {manifest_file}")

    source = load_model(manifest_file, ManifestSource)
    if source.name is None:
        source = source.model_copy(update={"name": service})

    override_files = [directory / f"{region.environment.value}.yml", directory / f"{region.name}.yml"]
    overrides = [load_model(path, ManifestOverrides) for path in override_files if path.exists()]
    if overrides:
        LOGGER.debug(f"Applying {len(overrides)} override file(s) for {service} in {region.name}")
        source = source.merge_overrides(fold_layers(overrides, ManifestOverrides()))
    return source
