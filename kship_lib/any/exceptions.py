"""
KShip exception classes.

This module defines custom exceptions for KShip so that manifest resolution failures
never masquerade as built-in Python errors.

All KShip exceptions follow the naming convention KShip*Error. Three families exist:
- Configuration errors: missing fields, unresolved references, missing files
- External errors: a command (kubectl, tsh) failed or is not installed
- Derivation errors: a validated manifest cannot be turned into a gateway entry
"""


class KShipError(Exception):
    """
    Base exception for all KShip errors.

    All KShip exceptions inherit from this, allowing users to catch all KShip-specific
    errors with a single except clause while not catching unrelated Python errors.
    """

    pass


class KShipConfigurationError(KShipError):
    """
    Raised when there is an error in KShip configuration.

    This includes malformed YAML files, schema violations and unresolved references.
    """

    pass


class KShipMissingFieldError(KShipConfigurationError):
    """
    Raised when a required manifest field is unset after all layers are merged.

    Example:
    -------
        >>> build_manifest(ManifestSource(), context)
        KShipMissingFieldError: Required field 'name' is not defined

    """

    def __init__(self, field: str, service: str | None = None):
        self.field = field
        self.service = service
        where = f" for service '{service}'" if service else ""
        super().__init__(f"Required field '{field}' is not defined{where}")


class KShipTeamNotFoundError(KShipConfigurationError):
    """Raised when manifest metadata names a team that is not in kship.yaml."""

    def __init__(self, team: str, known: list[str] | None = None):
        self.team = team
        message = f"The team name '{team}' must match one of the team names in kship.yaml"
        if known:
            message += f". Known teams: {', '.join(known)}"
        super().__init__(message)


class KShipImagePrefixError(KShipConfigurationError):
    """Raised when neither an explicit image nor an image prefix is defined."""

    def __init__(self, service: str | None = None):
        self.service = service
        where = f" (service '{service}' has no explicit image)" if service else ""
        super().__init__(f"Image prefix is not defined{where}")


class KShipTemplateNotFoundError(KShipConfigurationError):
    """
    Raised when a config file or template cannot be found.

    Carries every path that was tried so the message is actionable.
    """

    def __init__(self, name: str, paths: list[str]):
        self.name = name
        self.paths = paths
        super().__init__(f"Template {name} does not exist in neither {' nor '.join(paths)}")


class KShipRegionNotFoundError(KShipConfigurationError):
    """Raised when a region name does not match any region in kship.yaml."""

    pass


class KShipCommandError(KShipError):
    """
    Raised when an external command fails or is not installed.

    Example:
    -------
        >>> session.ensure_logged_in(region)
        KShipCommandError: tsh login failed: access denied

    """

    def __init__(self, message: str, command: list[str] | None = None, stderr: str | None = None):
        self.command = command or []
        self.stderr = stderr
        super().__init__(message)


class KShipDerivationError(KShipError):
    """
    Raised when a derived artifact cannot be produced for a service.

    The offending service name is kept so batch generation can report it.
    """

    def __init__(self, service: str, message: str):
        self.service = service
        super().__init__(f"{service}: {message}")


class KShipBatchError(KShipError):
    """Raised when a region batch must be complete but some services failed."""

    def __init__(self, failures: dict[str, Exception]):
        self.failures = failures
        lines = [f"  {name}: {error}" for name, error in sorted(failures.items())]
        super().__init__(f"{len(failures)} service(s) failed to resolve:\n" + "\n".join(lines))
