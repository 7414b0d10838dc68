"""
Registration — Runtime logic behind the generated registration helper.

Builds the connection spec at base url + the binding's uri segment,
applies the default reconnect policy only when the caller supplied
none, and registers the binding under a lifetime (singleton unless
told otherwise).
"""

from typing import Optional

from hubgen.core.errors import MissingRequiredField
from hubgen.core.logging import LogChannel, get_logger
from hubgen.ir.bindings import DEFAULT_RECONNECT_POLICY, ReconnectPolicy
from hubgen.ir.enums import ServiceLifetime
from hubgen.runtime.connection import ConnectionFactory, ConnectionSpec, ServiceCollection

log = get_logger(LogChannel.RUNTIME)


def hub_url(base_url: str, uri: str) -> str:
    """
    Join a base url and a hub uri segment.

    hub_url("https://host/", "/chat") -> "https://host/chat"
    """
    return f"{base_url.rstrip('/')}/{uri.lstrip('/')}"


def add_hub_client(
    services: ServiceCollection,
    binding_cls: type,
    connection_factory: ConnectionFactory,
    base_url: str,
    *,
    reconnect_policy: Optional[ReconnectPolicy] = None,
    lifetime: Optional[ServiceLifetime] = None,
    headers: Optional[dict[str, str]] = None,
    default_policy: ReconnectPolicy = DEFAULT_RECONNECT_POLICY,
    default_lifetime: ServiceLifetime = ServiceLifetime.SINGLETON,
) -> ConnectionSpec:
    """
    Register one generated client with a DI container.

    Args:
        services: The container
        binding_cls: Generated client class (carries hub_uri)
        connection_factory: Builds the transport connection from a spec
        base_url: Server base url
        reconnect_policy: Caller's policy; default_policy is used only if None
        lifetime: Caller's lifetime; default_lifetime is used only if None
        headers: Extra connection headers

    Returns:
        The ConnectionSpec the factory will be called with

    Raises:
        MissingRequiredField: If binding_cls has no hub_uri
    """
    uri = getattr(binding_cls, "hub_uri", "")
    if not uri:
        raise MissingRequiredField(f"{binding_cls.__name__} has no hub_uri")

    spec = ConnectionSpec(
        url=hub_url(base_url, uri),
        reconnect_policy=reconnect_policy if reconnect_policy is not None else default_policy,
        headers=dict(headers or {}),
    )
    lifetime = lifetime if lifetime is not None else default_lifetime

    def factory():
        return binding_cls(connection_factory(spec), url=spec.url)

    services.register(binding_cls, factory, lifetime)

    log.verbose(
        "hub_client_registered",
        client=binding_cls.__name__,
        url=spec.url,
        lifetime=lifetime.value,
        reconnect_attempts=spec.reconnect_policy.total_attempts,
    )
    return spec
