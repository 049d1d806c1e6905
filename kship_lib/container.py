"""
Dependency injection container for KShip.

This container wires the default adapters, choosing the session adapter by
context (in-cluster vs local). Uses dependency-injector with singletons.
"""

from pathlib import Path

from dependency_injector import containers, providers

from kship_lib.adapters.files import FileSystemSource
from kship_lib.adapters.kubectl import KubectlManifestClient
from kship_lib.adapters.session import InClusterSession, TeleportSession
from kship_lib.adapters.templates import JinjaTemplateRenderer
from kship_lib.any.context import is_in_cluster
from kship_lib.any.protocols import FileSource, SessionAdapter, TemplateRenderer
from kship_lib.config.loaders import TEMPLATES_DIR, load_global_config
from kship_lib.config.root import find_config_root
from kship_lib.config.schemas import GlobalConfig


def _context_selector() -> str:
    """Return 'cluster' or 'local' based on context for Selector provider."""
    return "cluster" if is_in_cluster() else "local"


def _template_dirs(root: Path) -> list[Path]:
    return [root / TEMPLATES_DIR]


class KShipIoCContainer(containers.DeclarativeContainer):
    """
    Inversion of Control (IoC) container for KShip.

    Example:
    -------
        ```python
        from kship_lib.container import KShipIoCContainer

        container = KShipIoCContainer()
        config = container.global_config()
        region = config.get_region("dev-uk")

        container.session().ensure_logged_in(region)
        client = container.manifest_client(namespace=region.namespace, context=region.name)
        ```

        Tests override the root instead of relying on discovery:

        ```python
        container = KShipIoCContainer()
        container.root.override(tmp_path)
        ```

    """

    # Manifests repository root (KSHIP_ROOT or directory walk)
    root = providers.Singleton(find_config_root)

    # Singleton: Parsed kship.yaml
    global_config = providers.Singleton(load_global_config, root=root)

    # Singleton: Config file source for the builder
    file_source = providers.Singleton(FileSystemSource, root=root)

    # Singleton: Session adapter
    # Auto-selects InClusterSession or TeleportSession
    session = providers.Singleton(
        providers.Selector(
            _context_selector,
            cluster=providers.Factory(InClusterSession),
            local=providers.Factory(TeleportSession, config=global_config),
        )
    )

    # Singleton: Template renderer over <root>/templates
    template_renderer = providers.Singleton(
        JinjaTemplateRenderer,
        template_dirs=providers.Callable(_template_dirs, root),
    )

    # Factory: one client per namespace/context
    manifest_client = providers.Factory(KubectlManifestClient)


# Global singleton container instance
container = KShipIoCContainer()


def get_global_config() -> GlobalConfig:
    """
    Get the parsed kship.yaml (singleton).

    Example:
    -------
        ```python
        from kship_lib.container import get_global_config

        region = get_global_config().get_region("dev-uk")
        ```

    """
    return container.global_config()


def get_session() -> SessionAdapter:
    """Get the session adapter for the current context (singleton)."""
    return container.session()


def get_file_source() -> FileSource:
    return container.file_source()


def get_template_renderer() -> TemplateRenderer:
    return container.template_renderer()


def get_manifest_client(namespace: str, context: str | None = None) -> KubectlManifestClient:
    """Create a manifest client for a namespace (and optionally a kube context)."""
    return container.manifest_client(namespace=namespace, context=context)
