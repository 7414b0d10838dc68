"""
Runtime — Support code imported by generated clients.
"""

from hubgen.runtime.cancellation import CancellationToken
from hubgen.runtime.client import HubClientBase, build_client_class
from hubgen.runtime.connection import (
    ConnectionFactory,
    ConnectionSpec,
    HubConnection,
    ServiceCollection,
)
from hubgen.runtime.registration import add_hub_client, hub_url

__all__ = [
    "CancellationToken",
    "HubClientBase",
    "build_client_class",
    "HubConnection",
    "ConnectionFactory",
    "ConnectionSpec",
    "ServiceCollection",
    "add_hub_client",
    "hub_url",
]
