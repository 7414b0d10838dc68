"""
Connection Contracts — What generated clients need from the outside.

The messaging transport and the DI container are external; generated
code only talks to these protocols.
"""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional, Protocol, Sequence

from hubgen.ir.bindings import ReconnectPolicy
from hubgen.ir.enums import ServiceLifetime
from hubgen.runtime.cancellation import CancellationToken


@dataclass
class ConnectionSpec:
    """Everything a transport needs to open one hub connection."""

    url: str
    reconnect_policy: Optional[ReconnectPolicy] = None
    headers: dict[str, str] = field(default_factory=dict)
    query: dict[str, str] = field(default_factory=dict)


class HubConnection(Protocol):
    """A messaging connection exposing start/stop/invoke/on."""

    async def start(self) -> None:
        ...

    async def stop(self) -> None:
        ...

    async def invoke(
        self,
        method: str,
        args: Sequence[Any],
        cancellation: Optional[CancellationToken] = None,
    ) -> Any:
        """Call a server method by wire name and await its result."""
        ...

    def on(self, method: str, handler: Callable[..., Awaitable[None]]) -> None:
        """Route a server-sent event by wire name to handler."""
        ...


class ConnectionFactory(Protocol):
    """Builds a HubConnection from a ConnectionSpec."""

    def __call__(self, spec: ConnectionSpec) -> HubConnection:
        ...


class ServiceCollection(Protocol):
    """A DI container that registers factories under a lifetime."""

    def register(
        self,
        service_type: type,
        factory: Callable[[], Any],
        lifetime: ServiceLifetime,
    ) -> None:
        ...
