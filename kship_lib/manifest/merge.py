"""
Merge rules for partially-specified configuration layers.

Every layer field is either unset (None, or an empty mapping) or set. Combining a
lower-precedence ``base`` with a higher-precedence ``override`` keeps every set
field of ``override`` and falls back to ``base`` for the rest:

- plain optional values: override if set, else base
- mappings: union of keys, override wins on collision, nothing dropped
- tri-state plugins: unspecified yields, removed and present both override

All three rules are associative and have the all-unset value as a two-sided
identity, so folding layers gives the same result however the fold is grouped.
Source models implement ``merge`` field by field with these helpers.
"""

from collections.abc import Iterable, Mapping
from functools import reduce
from typing import Protocol, TypeVar

T = TypeVar("T")
K = TypeVar("K")
V = TypeVar("V")
M = TypeVar("M", bound="Mergeable")


class Mergeable(Protocol):
    """A layer type that knows how to merge a higher-precedence layer over itself."""

    def merge(self: M, other: M) -> M:
        ...


def merge_optional(base: T | None, override: T | None) -> T | None:
    """Return ``override`` if it is set, otherwise ``base``."""
    return override if override is not None else base


def merge_mapping(base: Mapping[K, V] | None, override: Mapping[K, V] | None) -> dict[K, V]:
    """
    Union two mappings, letting ``override`` win on key collisions.

    Keys keep their first-seen order: base keys first, then keys only the
    override has. An absent mapping behaves like an empty one.
    """
    merged: dict[K, V] = dict(base or {})
    merged.update(override or {})
    return merged


def merge_plugin(base: T | None, override: T | None) -> T | None:
    """
    Merge two tri-state plugin fields.

    ``None`` is "unspecified" and always yields. An explicit value (present with
    attributes, or removed) from the higher layer replaces whatever the lower
    layer had, so an override can retract a plugin a default layer enabled.
    """
    return merge_optional(base, override)


def fold_layers(layers: Iterable[M], empty: M) -> M:
    """
    Fold layers from lowest to highest precedence.

    Args:
    ----
        layers: Layers ordered lowest precedence first
        empty: The all-unset layer of the same type (identity of merge)

    Returns:
    -------
        The merged layer

    """
    return reduce(lambda merged, layer: merged.merge(layer), layers, empty)
