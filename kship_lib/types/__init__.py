"""KShip type definitions (enums)."""

from kship_lib.types.actions import LifecycleAction
from kship_lib.types.environments import KShipEnvironment

__all__ = [
    "KShipEnvironment",
    "LifecycleAction",
]
