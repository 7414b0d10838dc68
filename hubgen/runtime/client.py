"""
HubClientBase — Base class of every generated hub client.

A generated client subclasses HubClientBase, declares one callback slot
and dispatch thunk per push method and one invoke wrapper per invoke
method, and carries its manifest as ``__manifest__``.

build_client_class() realizes the same class straight from a manifest,
without emitting source.
"""

from typing import Any, ClassVar, Optional, Sequence

from hubgen.core.errors import HubNotStarted
from hubgen.core.logging import LogChannel, get_logger
from hubgen.ir.bindings import BindingManifest, MemberDescriptor
from hubgen.runtime.cancellation import CancellationToken
from hubgen.runtime.connection import HubConnection

log = get_logger(LogChannel.RUNTIME)


class HubClientBase:
    """
    Shared plumbing: connection lifecycle, invoke, event routing.

    Subclasses override _register_hub_methods() to route each push
    wire name to its thunk; the default reads the manifest.
    """

    hub_uri: ClassVar[str] = ""
    __manifest__: ClassVar[Optional[BindingManifest]] = None

    def __init__(self, connection: HubConnection, url: Optional[str] = None):
        self._connection = connection
        self._url = url
        self._started = False
        self._register_hub_methods()

    @property
    def connection(self) -> HubConnection:
        return self._connection

    @property
    def url(self) -> Optional[str]:
        """The full hub url this client was built for, if known."""
        return self._url

    @property
    def started(self) -> bool:
        return self._started

    async def start(self) -> None:
        await self._connection.start()
        self._started = True
        log.info("hub_client_started", client=type(self).__name__, url=self._url)

    async def stop(self) -> None:
        if not self._started:
            return
        await self._connection.stop()
        self._started = False
        log.info("hub_client_stopped", client=type(self).__name__)

    def _on(self, wire_name: str, handler) -> None:
        self._connection.on(wire_name, handler)

    async def _invoke(
        self,
        wire_name: str,
        args: Sequence[Any],
        cancellation: Optional[CancellationToken] = None,
    ) -> Any:
        if not self._started:
            raise HubNotStarted(
                f"{type(self).__name__}.start() must be awaited before invoking '{wire_name}'"
            )
        if cancellation is not None:
            cancellation.raise_if_cancelled()
        log.debug("hub_invoke", client=type(self).__name__, method=wire_name)
        return await self._connection.invoke(wire_name, tuple(args), cancellation)

    def _register_hub_methods(self) -> None:
        manifest = type(self).__manifest__
        if manifest is None:
            return
        for descriptor in manifest.push:
            self._on(descriptor.wire_name, getattr(self, descriptor.handler))


# =============================================================================
# Runtime class factory
# =============================================================================

def payload_arity(descriptor: MemberDescriptor, cancellation_type: str) -> int:
    """Number of leading parameters that are payload, not cancellation."""
    count = len(descriptor.parameters)
    while count and descriptor.parameters[count - 1].type == cancellation_type:
        count -= 1
    return count


def _make_thunk(descriptor: MemberDescriptor):
    slot = descriptor.attribute

    async def thunk(self, *args):
        callback = getattr(self, slot)
        if callback is None:
            return
        await callback(*args)

    thunk.__name__ = descriptor.handler
    return thunk


def _make_invoke(descriptor: MemberDescriptor, cancellation_type: str):
    wire_name = descriptor.wire_name
    arity = payload_arity(descriptor, cancellation_type)

    async def invoke(self, *args, cancellation: Optional[CancellationToken] = None):
        if len(args) != arity:
            raise TypeError(f"{descriptor.attribute}() takes {arity} argument(s), got {len(args)}")
        return await self._invoke(wire_name, args, cancellation)

    invoke.__name__ = descriptor.attribute
    return invoke


def build_client_class(manifest: BindingManifest, base: type = HubClientBase) -> type:
    """
    Realize a binding class from its manifest.

    The class matches what the rendered source defines: same slots,
    thunks, wrappers, hub_uri and __manifest__.
    """
    namespace: dict[str, Any] = {
        "__module__": manifest.binding_module,
        "__doc__": f"Hub client for {manifest.contract_name} at {manifest.hub_uri}.",
        "hub_uri": manifest.hub_uri,
        "__manifest__": manifest,
    }
    for descriptor in manifest.push:
        namespace[descriptor.attribute] = None
        namespace[descriptor.handler] = _make_thunk(descriptor)
    for descriptor in manifest.invoke:
        namespace[descriptor.attribute] = _make_invoke(descriptor, manifest.cancellation_type)

    return type(manifest.binding_name, (base,), namespace)
