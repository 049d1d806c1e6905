"""Base pydantic models shared by layer sources and validated manifests."""

from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

S = TypeVar("S", bound="SourceModel")


class KShipModel(BaseModel):
    """Immutable model with camelCase YAML/JSON keys."""

    model_config = ConfigDict(frozen=True, extra="forbid", alias_generator=to_camel, populate_by_name=True)

    def to_document(self) -> dict[str, Any]:
        """Dump to a JSON-compatible dict with camelCase keys, leaving out unset values."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class SourceModel(KShipModel):
    """
    A partially-specified configuration layer.

    Subclasses list their fields in ``_merge_fields`` using the helpers in
    kship_lib.manifest.merge; ``merge`` rebuilds the layer from that mapping.
    """

    def _merge_fields(self, other: Any) -> dict[str, Any]:
        return {}

    def merge(self: S, other: S) -> S:
        """Return a new layer with ``other`` merged over this one."""
        return type(self)(**self._merge_fields(other))
