"""
Gateway (Kong) configuration generator.

Turns the enabled manifests of a region into one GatewayOutput:
- consumers: OAuth2 consumers, then JWT issuers, then ``anonymous`` (always last)
- apis: one per route descriptor, manifests sorted by name
- plugins: fixed order (see PluginKind), removed plugins kept as ``ensure: removed``

Every route with plugins gets a request transformer that adds an
``Upstream-Service`` header naming the service, unless the transformer is
explicitly removed.
"""

import re

import structlog

from kship_lib.any.exceptions import KShipBatchError, KShipConfigurationError, KShipDerivationError
from kship_lib.any.utils import resolve_template_variables
from kship_lib.config.schemas import KongRegionConfig, Region
from kship_lib.gateway.schemas import (
    ANONYMOUS_CONSUMER,
    Api,
    ApiAttributes,
    ApiPlugin,
    Consumer,
    GatewayOutput,
    JwtCredential,
    JwtCredentialAttributes,
    OAuth2Credential,
    OAuth2CredentialAttributes,
)
from kship_lib.manifest.kong import KongPlugins
from kship_lib.manifest.model import KongApi, Manifest
from kship_lib.manifest.plugins import PluginKind, RequestTransformerConfig

LOGGER = structlog.get_logger("kship_lib.gateway.generator")

UPSTREAM_SERVICE_HEADER = "Upstream-Service"

_HOSTNAME_LABEL = re.compile(r"^(?!-)[A-Za-z0-9-]{1,63}(?<!-)$")


def generate_gateway_output(manifests: list[Manifest], region: Region) -> GatewayOutput:
    """
    Generate the gateway configuration for a region.

    Args:
    ----
        manifests: Validated manifests to route (callers pass enabled manifests only)
        region: Region whose gateway settings apply

    Returns:
    -------
        GatewayOutput ready to serialise with to_yaml()

    Raises:
    ------
        KShipConfigurationError: If the region has no gateway settings
        KShipBatchError: Listing every service whose hosts cannot be resolved

    """
    if region.kong is None:
        raise KShipConfigurationError(f"Region '{region.name}' has no kong configuration")

    apis = []
    failures: dict[str, Exception] = {}
    for manifest in sorted(manifests, key=lambda m: m.name):
        try:
            apis.extend(build_api(manifest, kong_api, region) for kong_api in manifest.kong_apis)
        except KShipDerivationError as e:
            LOGGER.warning(f"Cannot route {manifest.name} in {region.name}: {e}")
            failures[manifest.name] = e
    if failures:
        raise KShipBatchError(failures)

    LOGGER.debug(f"Generated gateway config for {region.name}: {len(apis)} api(s)")
    return GatewayOutput(host=region.kong.admin_host, consumers=build_consumers(region.kong), apis=apis)


def build_consumers(kong: KongRegionConfig) -> list[Consumer]:
    consumers = [
        Consumer(
            username=name,
            credentials=[
                OAuth2Credential(
                    attributes=OAuth2CredentialAttributes(
                        name=name,
                        client_id=consumer.oauth2_client_id,
                        client_secret=consumer.oauth2_client_secret,
                    )
                )
            ],
        )
        for name, consumer in kong.consumers.items()
    ]
    consumers.extend(
        Consumer(
            username=name,
            credentials=[
                JwtCredential(
                    attributes=JwtCredentialAttributes(
                        key=consumer.kid,
                        algorithm=consumer.algorithm,
                        rsa_public_key=consumer.public_key,
                    )
                )
            ],
        )
        for name, consumer in kong.jwt_consumers.items()
    )
    consumers.append(Consumer(username=ANONYMOUS_CONSUMER))
    return consumers


def build_api(manifest: Manifest, kong_api: KongApi, region: Region) -> Api:
    upstream_url = kong_api.upstream_url or f"http://{manifest.name}.{manifest.namespace}.svc.cluster.local"
    return Api(
        name=kong_api.name,
        attributes=ApiAttributes(
            uris=kong_api.uris,
            hosts=[resolve_host(host, manifest, region) for host in kong_api.hosts],
            strip_uri=kong_api.strip_uri,
            preserve_host=kong_api.preserve_host,
            upstream_url=upstream_url,
        ),
        plugins=build_plugins(manifest.name, kong_api.plugins),
    )


def resolve_host(host: str, manifest: Manifest, region: Region) -> str:
    """
    Expand a short host with the region's host pattern.

    Hosts containing a dot are already fully qualified and kept verbatim.

    Raises
    ------
        KShipDerivationError: If the pattern references an unknown variable or
            the result is not a valid hostname

    """
    if "." in host:
        return host

    pattern = region.kong.host_pattern if region.kong else "{{host}}"
    context = {
        "host": host,
        "service": manifest.name,
        "region": region.name,
        "environment": region.environment.value,
    }
    try:
        resolved = resolve_template_variables(pattern, context)
    except KShipConfigurationError as e:
        raise KShipDerivationError(manifest.name, f"cannot resolve host '{host}': {e}") from e

    if not is_valid_hostname(resolved):
        raise KShipDerivationError(manifest.name, f"host '{host}' resolves to invalid hostname '{resolved}'")
    return resolved


def is_valid_hostname(hostname: str) -> bool:
    if not hostname or len(hostname) > 253:
        return False
    return all(_HOSTNAME_LABEL.match(label) for label in hostname.split("."))


def build_plugins(service: str, plugins: KongPlugins) -> list[ApiPlugin]:
    """
    Build the ordered plugin entries of one API.

    Unspecified plugins get no entry. The request transformer comes last and is
    handled by upstream_header_transform.
    """
    entries = []
    for kind in PluginKind.sequence():
        if kind is PluginKind.REQUEST_TRANSFORMER:
            continue
        plugin = plugins.get(kind)
        if plugin is None:
            continue
        if plugin.is_removed:
            entries.append(ApiPlugin.removed(kind))
        else:
            entries.append(ApiPlugin.present(kind, plugin.attributes))

    transformer = plugins.request_transformer
    if transformer is not None and transformer.is_removed:
        entries.append(ApiPlugin.removed(PluginKind.REQUEST_TRANSFORMER))
    elif entries or transformer is not None:
        configured = transformer.attributes if transformer is not None else None
        transform = upstream_header_transform(service, configured)
        entries.append(ApiPlugin.present(PluginKind.REQUEST_TRANSFORMER, transform))
    return entries


def upstream_header_transform(service: str, config: RequestTransformerConfig | None = None) -> RequestTransformerConfig:
    """
    Put ``Upstream-Service: <service>`` first in the added and replaced headers.

    Headers the layers configured follow the injected one.
    """
    config = config or RequestTransformerConfig()
    header = f"{UPSTREAM_SERVICE_HEADER}: {service}"
    add = config.add.model_copy(update={"headers": [header, *(config.add.headers or [])]})
    replace = config.replace.model_copy(update={"headers": [header, *(config.replace.headers or [])]})
    return config.model_copy(update={"add": add, "replace": replace})
