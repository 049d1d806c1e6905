"""Gateway (Kong) configuration as it appears in a configuration layer."""

from typing import Any

from pydantic import field_validator

from kship_lib.manifest.base import SourceModel
from kship_lib.manifest.merge import merge_optional, merge_plugin
from kship_lib.manifest.plugins import (
    CorrelationIdConfig,
    JsonCookiesCsrfConfig,
    JsonCookiesToHeadersConfig,
    JwtConfig,
    JwtValidatorConfig,
    OAuth2Config,
    Plugin,
    PluginKind,
    RequestTransformerConfig,
    TcpLogConfig,
)


class KongPlugins(SourceModel):
    """
    Tri-state plugin fields, one per plugin kind.

    Example layer YAML:
    -------
        plugins:
          oauth2: false            # removed
          jwt: true                # present, default attributes
          jwtValidator:            # present, these attributes
            expected_region: dev-uk

    """

    correlation_id: Plugin[CorrelationIdConfig] | None = None
    tcp_log: Plugin[TcpLogConfig] | None = None
    oauth2: Plugin[OAuth2Config] | None = None
    jwt: Plugin[JwtConfig] | None = None
    jwt_validator: Plugin[JwtValidatorConfig] | None = None
    json_cookies_to_headers: Plugin[JsonCookiesToHeadersConfig] | None = None
    json_cookies_csrf: Plugin[JsonCookiesCsrfConfig] | None = None
    request_transformer: Plugin[RequestTransformerConfig] | None = None

    def _merge_fields(self, other: "KongPlugins") -> dict[str, Any]:
        return {
            "correlation_id": merge_plugin(self.correlation_id, other.correlation_id),
            "tcp_log": merge_plugin(self.tcp_log, other.tcp_log),
            "oauth2": merge_plugin(self.oauth2, other.oauth2),
            "jwt": merge_plugin(self.jwt, other.jwt),
            "jwt_validator": merge_plugin(self.jwt_validator, other.jwt_validator),
            "json_cookies_to_headers": merge_plugin(self.json_cookies_to_headers, other.json_cookies_to_headers),
            "json_cookies_csrf": merge_plugin(self.json_cookies_csrf, other.json_cookies_csrf),
            "request_transformer": merge_plugin(self.request_transformer, other.request_transformer),
        }

    def get(self, kind: PluginKind) -> Plugin | None:
        """Get the plugin field for a kind (None when unspecified)."""
        return getattr(self, kind.field_name)


class KongSource(SourceModel):
    """
    Gateway route settings for a service, merged across layers.

    Global and regional defaults usually only carry plugins; a service turns
    the route on with ``enabled: true`` and sets its uris/hosts.
    """

    enabled: bool | None = None
    uris: list[str] | None = None
    hosts: list[str] | None = None
    strip_uri: bool | None = None
    preserve_host: bool | None = None
    upstream_url: str | None = None
    plugins: KongPlugins = KongPlugins()

    @field_validator("uris", "hosts", mode="before")
    @classmethod
    def _single_string_to_list(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value]
        return value

    def _merge_fields(self, other: "KongSource") -> dict[str, Any]:
        return {
            "enabled": merge_optional(self.enabled, other.enabled),
            "uris": merge_optional(self.uris, other.uris),
            "hosts": merge_optional(self.hosts, other.hosts),
            "strip_uri": merge_optional(self.strip_uri, other.strip_uri),
            "preserve_host": merge_optional(self.preserve_host, other.preserve_host),
            "upstream_url": merge_optional(self.upstream_url, other.upstream_url),
            "plugins": self.plugins.merge(other.plugins),
        }
