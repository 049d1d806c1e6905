"""
Any - Context-agnostic components for KShip.

This module contains code that works in BOTH cluster and local contexts.
It defines protocols, exceptions and utilities used throughout kship-lib.
"""

from kship_lib.any.context import is_in_cluster
from kship_lib.any.exceptions import (
    KShipBatchError,
    KShipCommandError,
    KShipConfigurationError,
    KShipDerivationError,
    KShipError,
    KShipImagePrefixError,
    KShipMissingFieldError,
    KShipRegionNotFoundError,
    KShipTeamNotFoundError,
    KShipTemplateNotFoundError,
)
from kship_lib.any.protocols import (
    FileSource,
    ManifestObjectClient,
    SessionAdapter,
    TemplateRenderer,
)
from kship_lib.any.utils import resolve_template_variables, run_command, run_tool

__all__ = [
    # Context detection
    "is_in_cluster",
    # Exceptions
    "KShipError",
    "KShipConfigurationError",
    "KShipMissingFieldError",
    "KShipTeamNotFoundError",
    "KShipImagePrefixError",
    "KShipTemplateNotFoundError",
    "KShipRegionNotFoundError",
    "KShipCommandError",
    "KShipDerivationError",
    "KShipBatchError",
    # Protocols
    "SessionAdapter",
    "ManifestObjectClient",
    "TemplateRenderer",
    "FileSource",
    # Utils
    "run_command",
    "run_tool",
    "resolve_template_variables",
]
