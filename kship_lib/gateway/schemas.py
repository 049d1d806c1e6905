"""
Gateway declarative output schemas.

These models mirror the kongfig document consumed by the gateway sync tool:
an admin host, ordered consumers and ordered APIs with their plugin entries.
Keys are Kong's own snake_case names.
"""

from enum import Enum
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, SerializeAsAny

from kship_lib.manifest.plugins import PluginConfig, PluginKind

ANONYMOUS_CONSUMER = "anonymous"
UNUSED_REDIRECT_URI = "http://example.com/unused"


class GatewayModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class Ensure(str, Enum):
    PRESENT = "present"
    REMOVED = "removed"


class OAuth2CredentialAttributes(GatewayModel):
    name: str
    client_id: str
    client_secret: str
    redirect_uri: list[str] = Field(default_factory=lambda: [UNUSED_REDIRECT_URI])


class OAuth2Credential(GatewayModel):
    name: Literal["oauth2"] = "oauth2"
    attributes: OAuth2CredentialAttributes


class JwtCredentialAttributes(GatewayModel):
    key: str
    algorithm: str = "RS256"
    rsa_public_key: str


class JwtCredential(GatewayModel):
    name: Literal["jwt"] = "jwt"
    attributes: JwtCredentialAttributes


class Consumer(GatewayModel):
    """A gateway consumer and its credentials."""

    username: str
    credentials: list[OAuth2Credential | JwtCredential] = Field(default_factory=list)


class ApiAttributes(GatewayModel):
    uris: list[str] | None = None
    hosts: list[str] = Field(default_factory=list)
    strip_uri: bool = False
    preserve_host: bool = True
    upstream_url: str


class PluginAttributes(GatewayModel):
    enabled: bool = True
    config: SerializeAsAny[PluginConfig]


class ApiPlugin(GatewayModel):
    """
    One plugin entry on an API.

    Present entries carry attributes; removed entries only carry ``ensure: removed``
    so the sync tool deletes a plugin a previous run created.
    """

    name: str
    ensure: Ensure = Ensure.PRESENT
    attributes: PluginAttributes | None = None

    @classmethod
    def present(cls, kind: PluginKind, config: PluginConfig) -> "ApiPlugin":
        return cls(name=kind.value, attributes=PluginAttributes(config=config))

    @classmethod
    def removed(cls, kind: PluginKind) -> "ApiPlugin":
        return cls(name=kind.value, ensure=Ensure.REMOVED)

    @property
    def is_removed(self) -> bool:
        return self.ensure is Ensure.REMOVED


class Api(GatewayModel):
    name: str
    attributes: ApiAttributes
    plugins: list[ApiPlugin] = Field(default_factory=list)

    def plugin(self, kind: PluginKind) -> ApiPlugin | None:
        """Get the entry for a plugin kind, or None if the API has none."""
        for entry in self.plugins:
            if entry.name == kind.value:
                return entry
        return None


class GatewayOutput(GatewayModel):
    """
    The full gateway configuration of a region.

    Example:
    -------
        >>> output = generate_gateway_output(manifests, region)
        >>> print(output.to_yaml())
        host: admin.dev.example.com
        consumers:
        - username: fake-ask
        ...

    """

    host: str
    consumers: list[Consumer] = Field(default_factory=list)
    apis: list[Api] = Field(default_factory=list)

    def to_document(self) -> dict[str, Any]:
        """Dump to a kongfig document, leaving out unset values."""
        return self.model_dump(mode="json", exclude_none=True)

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.to_document(), sort_keys=False, default_flow_style=False)
