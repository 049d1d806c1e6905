"""Gateway (Kong) configuration derived from validated manifests."""

from kship_lib.gateway.generator import generate_gateway_output
from kship_lib.gateway.schemas import (
    Api,
    ApiAttributes,
    ApiPlugin,
    Consumer,
    Ensure,
    GatewayOutput,
    JwtCredential,
    OAuth2Credential,
)

__all__ = [
    "generate_gateway_output",
    "GatewayOutput",
    "Consumer",
    "OAuth2Credential",
    "JwtCredential",
    "Api",
    "ApiAttributes",
    "ApiPlugin",
    "Ensure",
]
