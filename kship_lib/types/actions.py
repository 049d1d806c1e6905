"""KShip lifecycle action type definitions."""

from enum import Enum


class LifecycleAction(Enum):
    """
    Lifecycle actions tracked in a manifest's status.

    Each action owns exactly one condition in the status document. The enum value
    is what lands in summary.lastAction.
    """

    GENERATE = "Generate"
    APPLY = "Apply"
    ROLLOUT = "Rollout"

    @property
    def condition_key(self) -> str:
        """
        Get the key of this action's condition under status.conditions.

        Returns
        -------
            Condition key (e.g., 'rolledout')

        """
        return {
            LifecycleAction.GENERATE: "generated",
            LifecycleAction.APPLY: "applied",
            LifecycleAction.ROLLOUT: "rolledout",
        }[self]

    @property
    def display_name(self) -> str:
        """Get the label used when printing conditions."""
        return {
            LifecycleAction.GENERATE: "Generated",
            LifecycleAction.APPLY: "Applied",
            LifecycleAction.ROLLOUT: "RolledOut",
        }[self]
