"""KShip environment type definitions."""

from enum import Enum


class KShipEnvironment(Enum):
    """
    KShip deployment environments.

    Every region belongs to exactly one environment. Service override files
    named after the environment (e.g. services/<svc>/dev.yml) apply to all of
    its regions.
    """

    DEVELOPMENT = "dev"
    QA = "qa"
    STAGING = "staging"
    PREPROD = "preprod"
    PRODUCTION = "prod"

    @classmethod
    def from_string(cls, value: str) -> "KShipEnvironment":
        """
        Get environment from string (supports long aliases and short names).

        Accepts multiple formats:
        - Short names: 'dev', 'qa', 'staging', 'preprod', 'prod'
        - Long aliases: 'development', 'production', 'pre-production'

        Args:
        ----
            value: Environment string in any supported format (case-insensitive)

        Returns:
        -------
            Corresponding KShipEnvironment

        Raises:
        ------
            ValueError: If value doesn't match any environment

        Example:
        -------
            >>> KShipEnvironment.from_string('development')
            <KShipEnvironment.DEVELOPMENT: 'dev'>
            >>> KShipEnvironment.from_string('PROD')
            <KShipEnvironment.PRODUCTION: 'prod'>

        """
        value_lower = value.lower().strip()

        alias_map = {
            "development": cls.DEVELOPMENT,
            "production": cls.PRODUCTION,
            "pre-production": cls.PREPROD,
            "test": cls.QA,
        }
        if value_lower in alias_map:
            return alias_map[value_lower]

        try:
            return cls(value_lower)
        except ValueError:
            pass

        valid = ", ".join(e.value for e in cls)
        raise ValueError(f"Invalid environment: '{value}'. " f"Valid environments: {valid}")
