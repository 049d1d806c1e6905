"""
Protocol definitions for KShip.

These protocols define the contracts that external collaborator adapters must implement.
The resolution pipeline only ever talks to these protocols, so tests and alternative
backends can swap adapters through the IoC container.

All protocols follow PEP 544 (Structural Subtyping / Protocol).
"""

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from kship_lib.config.schemas import Region
    from kship_lib.manifest.model import Manifest


@runtime_checkable
class SessionAdapter(Protocol):
    """
    Protocol for authenticating against a region's cluster and selecting its context.

    Implementations:
    - adapters/session.py - TeleportSession (tsh + kubectl config)
    - adapters/session.py - InClusterSession (service account, nothing to do)

    All operations are idempotent and safe to call when already logged in.
    """

    def ensure_logged_in(self, region: "Region", force: bool = False) -> None:
        """
        Make sure there is an active session for the region's owning cluster.

        Raises
        ------
            KShipCommandError: If the login tool is missing or login fails
            KShipConfigurationError: If the region has no owning cluster

        """
        ...

    def set_context(self, context: str, params: list[str]) -> None:
        """Create or update a kube context with the given kubectl config arguments."""
        ...

    def use_context(self, context: str) -> None:
        """Switch the current kube context."""
        ...


@runtime_checkable
class ManifestObjectClient(Protocol):
    """
    Protocol for the manifest custom resource in a cluster.

    Implementations:
    - adapters/kubectl.py - KubectlManifestClient

    Note:
    ----
        patch_status uses merge-patch semantics: partial documents never clobber
        unrelated status fields. Callers never read status back to decide what to write.

    """

    def get(self, name: str) -> dict[str, Any] | None:
        """Fetch the custom resource, or None if it does not exist."""
        ...

    def apply(self, manifest: "Manifest") -> dict[str, Any]:
        """Create or update the custom resource from a validated manifest."""
        ...

    def patch_status(self, name: str, patch: dict[str, Any]) -> dict[str, Any]:
        """Merge-patch the status subresource and return the updated object."""
        ...

    def delete(self, name: str) -> None:
        """Delete the custom resource."""
        ...


@runtime_checkable
class TemplateRenderer(Protocol):
    """
    Protocol for rendering named templates.

    Implementations:
    - adapters/templates.py - JinjaTemplateRenderer
    """

    def render(self, template_name: str, context: dict[str, Any]) -> str:
        """
        Render a named template with a context mapping.

        Raises
        ------
            KShipTemplateNotFoundError: If the template does not exist
            KShipConfigurationError: If rendering fails

        """
        ...


@runtime_checkable
class FileSource(Protocol):
    """
    Protocol for reading service config files.

    Implementations:
    - adapters/files.py - FileSystemSource
    """

    def read_config_file(self, service: str, file_name: str) -> str:
        """
        Read a config file for a service.

        Looks in the service's own directory first, then in the shared templates.

        Raises
        ------
            KShipTemplateNotFoundError: If neither location has the file

        """
        ...
