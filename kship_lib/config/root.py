"""
Manifests repository root discovery.

The root is the directory holding kship.yaml. Resolution order:
1. KSHIP_ROOT environment variable
2. Walk up from the current working directory (10 levels)
"""

import os
from pathlib import Path

import structlog

from kship_lib.any.exceptions import KShipConfigurationError
from kship_lib.config.loaders import GLOBAL_CONFIG_FILE

LOGGER = structlog.get_logger("kship_lib.config.root")

ROOT_ENV_VAR = "KSHIP_ROOT"
MAX_SEARCH_DEPTH = 10


def find_config_root(start: Path | None = None) -> Path:
    """
    Find the manifests repository root.

    Args:
    ----
        start: Directory to start searching from (defaults to the working directory)

    Returns:
    -------
        Directory containing kship.yaml

    Raises:
    ------
        KShipConfigurationError: If KSHIP_ROOT points to a directory without
            kship.yaml, or no kship.yaml is found while walking up

    """
    explicit = os.environ.get(ROOT_ENV_VAR)
    if explicit:
        root = Path(explicit).expanduser()
        if not (root / GLOBAL_CONFIG_FILE).exists():
            raise KShipConfigurationError(f"{ROOT_ENV_VAR}={explicit} does not contain {GLOBAL_CONFIG_FILE}")
        LOGGER.debug(f"Using {ROOT_ENV_VAR}: {root}")
        return root

    current = (start or Path.cwd()).resolve()
    for _ in range(MAX_SEARCH_DEPTH):
        if (current / GLOBAL_CONFIG_FILE).exists():
            LOGGER.debug(f"Found {GLOBAL_CONFIG_FILE} at: {current}")
            return current
        if current.parent == current:
            break
        current = current.parent

    raise KShipConfigurationError(
        f"Could not find {GLOBAL_CONFIG_FILE} in directory tree. "
        f"Set {ROOT_ENV_VAR} to the manifests repository root."
    )
