"""
Tests for HubClientBase and runtime-built binding classes.
"""

import pytest

from hubgen.core.context import CompileRequest, ContractContext
from hubgen.core.errors import HubNotStarted, OperationCanceled
from hubgen.core.options import GeneratorOptions
from hubgen.ir.schema import (
    ContractDeclaration,
    MethodSetDeclaration,
    MethodSignature,
    Parameter,
    ReturnType,
    ValidatedContract,
)
from hubgen.passes import synthesize_binding, walk
from hubgen.runtime import CancellationToken, HubClientBase, build_client_class


def _make_manifest():
    contract = ContractDeclaration(
        name="IChatHubContract",
        uri="/chat",
        friendly_name="ChatHubClient",
        push_set=MethodSetDeclaration(name="IEvents", methods=(
            MethodSignature(name="UserJoined", parameters=(Parameter(name="user", type="str"),)),
            MethodSignature(name="Typing", parameters=(
                Parameter(name="user", type="str"),
                Parameter(name="active", type="bool"),
            )),
        )),
        invoke_set=MethodSetDeclaration(name="ICommands", methods=(
            MethodSignature(name="SendMessage", parameters=(Parameter(name="message", type="str"),)),
            MethodSignature(name="CountUsers", returns=ReturnType.value_async("int")),
        )),
    )
    ctx = walk(ContractContext.from_request(CompileRequest(contract=contract)))
    validated = ValidatedContract(
        contract=contract,
        push=tuple(ctx.push_methods),
        invoke=tuple(ctx.invoke_methods),
    )
    return synthesize_binding(validated, GeneratorOptions()).manifest


class TestBuildClientClass:
    """Tests for build_client_class."""

    def test_class_surface(self):
        manifest = _make_manifest()
        cls = build_client_class(manifest)

        assert cls.__name__ == "ChatHubClient"
        assert issubclass(cls, HubClientBase)
        assert cls.hub_uri == "/chat"
        assert cls.__manifest__ is manifest
        assert cls.on_user_joined is None
        assert cls.on_typing is None

    def test_registers_push_handlers(self, connection):
        client = build_client_class(_make_manifest())(connection)
        assert set(connection.handlers) == {"UserJoined", "Typing"}

    @pytest.mark.asyncio
    async def test_thunk_awaits_slot(self, connection):
        client = build_client_class(_make_manifest())(connection)
        received = []

        async def on_typing(user, active):
            received.append((user, active))

        client.on_typing = on_typing
        await connection.handlers["Typing"]("bob", True)
        await connection.handlers["UserJoined"]("alice")

        assert received == [("bob", True)]

    @pytest.mark.asyncio
    async def test_invoke_delegates(self, connection):
        connection.results["CountUsers"] = 3
        client = build_client_class(_make_manifest())(connection)
        await client.start()

        token = CancellationToken()
        await client.invoke_send_message("hi", cancellation=token)
        count = await client.invoke_count_users()

        assert count == 3
        assert connection.invocations == [
            ("SendMessage", ("hi",), token),
            ("CountUsers", (), None),
        ]

    @pytest.mark.asyncio
    async def test_invoke_arity_checked(self, connection):
        client = build_client_class(_make_manifest())(connection)
        await client.start()
        with pytest.raises(TypeError):
            await client.invoke_send_message()


class TestHubClientBase:
    """Lifecycle and invoke guards."""

    @pytest.mark.asyncio
    async def test_invoke_before_start(self, connection):
        client = build_client_class(_make_manifest())(connection)
        with pytest.raises(HubNotStarted):
            await client.invoke_send_message("hi")
        assert connection.invocations == []

    @pytest.mark.asyncio
    async def test_cancelled_token_fails_fast(self, connection):
        client = build_client_class(_make_manifest())(connection)
        await client.start()
        with pytest.raises(OperationCanceled):
            await client.invoke_send_message("hi", cancellation=CancellationToken.canceled())
        assert connection.invocations == []

    @pytest.mark.asyncio
    async def test_start_stop(self, connection):
        client = build_client_class(_make_manifest())(connection, url="https://host/chat")
        assert client.url == "https://host/chat"
        assert not client.started

        await client.start()
        assert client.started and connection.started

        await client.stop()
        assert not client.started and not connection.started

    def test_base_without_manifest(self, connection):
        HubClientBase(connection)
        assert connection.handlers == {}
