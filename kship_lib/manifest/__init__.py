"""
Manifest resolution.

Partially-specified configuration layers are merged (merge, sources) and
validated into an immutable Manifest (builder, model). Loading layers from disk
and resolving whole regions lives in kship_lib.manifest.layers and
kship_lib.manifest.resolver.
"""

from kship_lib.manifest.builder import BuildContext, build_manifest
from kship_lib.manifest.kong import KongPlugins, KongSource
from kship_lib.manifest.merge import fold_layers, merge_mapping, merge_optional, merge_plugin
from kship_lib.manifest.model import KongApi, Manifest
from kship_lib.manifest.plugins import Plugin, PluginKind, PluginState
from kship_lib.manifest.sources import ManifestDefaults, ManifestOverrides, ManifestSource

__all__ = [
    # Merge algebra
    "merge_optional",
    "merge_mapping",
    "merge_plugin",
    "fold_layers",
    # Layers
    "ManifestDefaults",
    "ManifestOverrides",
    "ManifestSource",
    "KongSource",
    "KongPlugins",
    "Plugin",
    "PluginKind",
    "PluginState",
    # Validated manifest
    "Manifest",
    "KongApi",
    "BuildContext",
    "build_manifest",
]
