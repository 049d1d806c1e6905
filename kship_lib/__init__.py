"""
KShip Library - Service manifest resolution for Kubernetes deployments.

This library turns layered, partially-specified service configuration into
validated manifests and derives declarative artifacts from them:
- Manifest resolution: global defaults, regional defaults and service overrides
  merged with strict precedence, then validated (kship_lib.manifest)
- Gateway (Kong) configuration for a whole region (kship_lib.gateway)
- Status condition patches for the manifest custom resource (kship_lib.status)
- Default kubectl, teleport, Jinja2 and filesystem adapters wired by an IoC
  container (kship_lib.adapters, kship_lib.container)
"""

from importlib.metadata import PackageNotFoundError, version

# ============================================================================
# CORE EXPORTS (from any/)
# ============================================================================

from kship_lib.any.exceptions import (
    KShipBatchError,
    KShipCommandError,
    KShipDerivationError,
    KShipError,
    KShipMissingFieldError,
    KShipTeamNotFoundError,
)
from kship_lib.any.exceptions import (
    KShipConfigurationError as ConfigurationError,
)
from kship_lib.any.utils import run_command

try:
    __version__ = version("kship-lib")
except PackageNotFoundError:
    __version__ = "0.0.0.dev0"

__all__ = [
    # Exceptions
    "KShipError",
    "ConfigurationError",
    "KShipMissingFieldError",
    "KShipTeamNotFoundError",
    "KShipCommandError",
    "KShipDerivationError",
    "KShipBatchError",
    # Utils
    "run_command",
    # Version
    "__version__",
]
