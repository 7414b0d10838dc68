"""
Tests for rendered Python source.
"""

import pytest

from hubgen import __version__
from hubgen.runtime import HubClientBase


def _exec_module(source):
    namespace = {"__name__": "generated"}
    exec(compile(source, "<generated>", "exec"), namespace)
    return namespace


class TestRenderClient:
    """The rendered binding module."""

    def test_header(self, engine, chat_document):
        source = engine.compile(chat_document).contract("IChatHubContract").source
        lines = source.splitlines()
        assert lines[0] == f"# Generated by hubgen {__version__}. Do not edit."
        assert "from __future__ import annotations" in lines

    def test_defines_binding_class(self, engine, chat_document):
        compiled = engine.compile(chat_document).contract("IChatHubContract")
        namespace = _exec_module(compiled.source)

        cls = namespace["ChatHubClient"]
        assert issubclass(cls, HubClientBase)
        assert cls.hub_uri == "/chat"
        assert cls.__manifest__ == compiled.binding.manifest
        assert cls.on_user_joined is None
        assert callable(cls._user_joined_handler)
        assert callable(cls.invoke_send_message)

    @pytest.mark.asyncio
    async def test_rendered_client_routes_and_invokes(self, engine, chat_document, connection):
        namespace = _exec_module(engine.compile(chat_document).contract("IChatHubContract").source)
        client = namespace["ChatHubClient"](connection, url="https://host/chat")

        assert set(connection.handlers) == {"UserJoined"}

        received = []

        async def on_joined(user):
            received.append(user)

        client.on_user_joined = on_joined
        await connection.handlers["UserJoined"]("alice")
        assert received == ["alice"]

        await client.start()
        await client.invoke_send_message("hello")
        assert connection.invocations == [("SendMessage", ("hello",), None)]

    @pytest.mark.asyncio
    async def test_unset_slot_is_noop(self, engine, chat_document, connection):
        namespace = _exec_module(engine.compile(chat_document).contract("IChatHubContract").source)
        namespace["ChatHubClient"](connection)
        await connection.handlers["UserJoined"]("alice")

    def test_source_is_deterministic(self, engine, chat_document):
        first = engine.compile(chat_document).contract("IChatHubContract").source
        engine.clear_cache()
        second = engine.compile(chat_document).contract("IChatHubContract").source
        assert first == second


class TestRenderOtherModules:
    """Registration, fake and package sources compile."""

    def test_registration_source(self, engine, chat_document):
        source = engine.compile(chat_document).registration_source
        compile(source, "registration.py", "exec")
        assert "from .chat_hub_client import ChatHubClient" in source
        assert "def with_chat_hub_client(" in source
        assert "def register_hub_clients(" in source
        assert "BackoffTier(attempts=10, delay_seconds=1.0)," in source
        assert "DEFAULT_LIFETIME = ServiceLifetime.SINGLETON" in source

    def test_fake_source(self, engine, chat_document):
        source = engine.compile(chat_document).fake("ChatHubClient").source
        compile(source, "fake_chat_hub_client.py", "exec")
        assert "class FakeChatHubClient(FakeHubClientBase, ChatHubClient):" in source
        assert "async def simulate_user_joined(self, user: str) -> None:" in source
        assert "async def wait_for_user_joined(" in source
        assert "async def invoke_send_message(" in source

    def test_package_init(self, engine, chat_document):
        from hubgen.render import render_package_init

        source = render_package_init(engine.compile(chat_document).registration)
        compile(source, "__init__.py", "exec")
        assert "from .chat_hub_client import ChatHubClient" in source
        assert "'register_hub_clients'," in source
