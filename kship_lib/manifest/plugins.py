"""
Kong plugin definitions.

A plugin field in a layer is tri-state:
- present: the plugin is active with the given attributes
- removed: the plugin is explicitly disabled, overriding a lower layer
- unspecified: the field is absent (None) and inherits from lower layers

In YAML the shorthand ``false`` means removed, ``true`` means present with default
attributes, and a mapping means present with those attributes.

Plugin configs keep Kong's own snake_case keys.
"""

from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

ConfigT = TypeVar("ConfigT", bound=BaseModel)


class PluginState(str, Enum):
    """Explicit state of a plugin field."""

    PRESENT = "present"
    REMOVED = "removed"


class Plugin(BaseModel, Generic[ConfigT]):
    """
    Tri-state plugin field (the unspecified state is represented by None).

    Example:
    -------
        >>> Plugin[JwtConfig].model_validate(False).is_removed
        True
        >>> Plugin[JwtConfig].model_validate({"key_claim_name": "iss"}).attributes.key_claim_name
        'iss'

    """

    model_config = ConfigDict(frozen=True)

    state: PluginState
    attributes: ConfigT | None = None

    @model_validator(mode="before")
    @classmethod
    def _expand_shorthand(cls, value: Any) -> Any:
        if isinstance(value, bool):
            if value:
                return {"state": PluginState.PRESENT, "attributes": {}}
            return {"state": PluginState.REMOVED}
        if isinstance(value, dict) and "state" not in value:
            return {"state": PluginState.PRESENT, "attributes": value}
        return value

    @model_validator(mode="after")
    def _check_attributes(self) -> "Plugin[ConfigT]":
        if self.state is PluginState.PRESENT and self.attributes is None:
            raise ValueError("A present plugin needs attributes")
        if self.state is PluginState.REMOVED and self.attributes is not None:
            raise ValueError("A removed plugin cannot carry attributes")
        return self

    @classmethod
    def present(cls, attributes: ConfigT) -> "Plugin[ConfigT]":
        """Build a present plugin."""
        return cls(state=PluginState.PRESENT, attributes=attributes)

    @classmethod
    def removed(cls) -> "Plugin[ConfigT]":
        """Build a removed plugin."""
        return cls(state=PluginState.REMOVED)

    @property
    def is_present(self) -> bool:
        return self.state is PluginState.PRESENT

    @property
    def is_removed(self) -> bool:
        return self.state is PluginState.REMOVED


class PluginConfig(BaseModel):
    """Base for Kong plugin configs."""

    model_config = ConfigDict(frozen=True, extra="forbid")


class CorrelationIdConfig(PluginConfig):
    header_name: str = "x-request-id"
    generator: str = "uuid#counter"
    echo_downstream: bool = True


class TcpLogConfig(PluginConfig):
    host: str
    port: int
    timeout: int = 10000
    keepalive: int = 60000


class OAuth2Config(PluginConfig):
    scopes: list[str] = Field(default_factory=list)
    mandatory_scope: bool = False
    token_expiration: int = 7200
    enable_authorization_code: bool = False
    enable_client_credentials: bool = True
    enable_implicit_grant: bool = False
    enable_password_grant: bool = False
    global_credentials: bool = True
    provision_key: str | None = None
    anonymous: str | None = ""


class JwtConfig(PluginConfig):
    uri_param_names: list[str] = Field(default_factory=list)
    claims_to_verify: list[str] = Field(default_factory=lambda: ["exp"])
    key_claim_name: str = "kid"
    secret_is_base64: bool = False
    anonymous: str | None = ""
    run_on_preflight: bool = True


class JwtValidatorConfig(PluginConfig):
    allowed_audiences: list[str] = Field(default_factory=list)
    expected_region: str = ""
    expected_scope: str = "internal"
    allow_invalid_tokens: bool = False


class JsonCookiesToHeadersConfig(PluginConfig):
    field_name: str = "kong_token"
    cookie_name: str = "autologin_token"


class JsonCookiesCsrfConfig(PluginConfig):
    cookie_name: str = "autologin_info"
    csrf_field_name: str = "csrf_token"
    csrf_header_name: str = "x-security-token"
    strict: bool = True


class HeadersQueryBody(PluginConfig):
    headers: list[str] | None = None
    querystring: list[str] | None = None
    body: list[str] | None = None


class RequestTransformerConfig(PluginConfig):
    http_method: str | None = None
    remove: HeadersQueryBody = Field(default_factory=HeadersQueryBody)
    replace: HeadersQueryBody = Field(default_factory=HeadersQueryBody)
    add: HeadersQueryBody = Field(default_factory=HeadersQueryBody)
    append: HeadersQueryBody = Field(default_factory=HeadersQueryBody)
    rename: HeadersQueryBody = Field(default_factory=HeadersQueryBody)


class PluginKind(Enum):
    """
    Kong plugin kinds, in the order they appear on every API.

    Consumers of the generated gateway config rely on this order.
    """

    CORRELATION_ID = "correlation-id"
    TCP_LOG = "tcp-log"
    OAUTH2 = "oauth2"
    JWT = "jwt"
    JWT_VALIDATOR = "jwt-validator"
    JSON_COOKIES_TO_HEADERS = "json-cookies-to-headers"
    JSON_COOKIES_CSRF = "json-cookies-csrf"
    REQUEST_TRANSFORMER = "request-transformer"

    @property
    def field_name(self) -> str:
        """Get the attribute name of this plugin on KongPlugins."""
        return self.name.lower()

    @classmethod
    def sequence(cls) -> list["PluginKind"]:
        """Get all plugin kinds in output order."""
        return list(cls)
