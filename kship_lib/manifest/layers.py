"""
The layer stack for one service in one region.

Precedence, lowest first:
1. Global defaults (``defaults`` in kship.yaml)
2. Regional defaults (``regions[].defaults``)
3. The service layer (manifest.yml, then <environment>.yml, then <region>.yml)
"""

from dataclasses import dataclass
from pathlib import Path

from kship_lib.config.loaders import load_service_source
from kship_lib.config.schemas import GlobalConfig, Region
from kship_lib.manifest.merge import fold_layers
from kship_lib.manifest.sources import ManifestDefaults, ManifestSource


@dataclass(frozen=True)
class LayerStack:
    """
    All configuration layers contributing to one service in one region.

    Example:
    -------
        >>> stack = LayerStack.load(root, config, config.get_region("dev-uk"), "fake-ask")
        >>> source = stack.merged()

    """

    global_defaults: ManifestDefaults
    regional_defaults: ManifestDefaults
    service: ManifestSource

    @classmethod
    def load(cls, root: Path, config: GlobalConfig, region: Region, service: str) -> "LayerStack":
        """Read the service layer from disk and pair it with the configured defaults."""
        return cls(
            global_defaults=config.defaults,
            regional_defaults=region.defaults,
            service=load_service_source(root, service, region),
        )

    def defaults(self) -> ManifestDefaults:
        """Global defaults with regional defaults merged over them."""
        return fold_layers([self.global_defaults, self.regional_defaults], ManifestDefaults())

    def merged(self) -> ManifestSource:
        """Fold every layer into one merged source. No validation happens here."""
        return self.service.with_defaults(self.defaults())
