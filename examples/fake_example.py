#!/usr/bin/env python3
"""
Fake Example

Builds the chat client and its fake at run time (no generated files)
and drives both sides of the fake.

Usage:
    python examples/fake_example.py
"""

import asyncio
from pathlib import Path

from hubgen.core.engine import compile_document
from hubgen.discovery.loader import load_document
from hubgen.runtime import build_client_class
from hubgen.testing import build_fake_class

HERE = Path(__file__).parent


async def run():
    result = compile_document(load_document(HERE / "chat_hub.yaml"))
    binding = result.contract("ChatHubClient").binding

    client_cls = build_client_class(binding.manifest)
    fake = build_fake_class(client_cls)()

    async def on_message(user, text):
        print(f"  {user}: {text}")

    fake.on_message_received = on_message
    fake.get_users_behavior = lambda: ["alice", "bob"]

    await fake.invoke_send_message("hello")
    print(f"Users: {await fake.invoke_get_users()}")
    print(f"Sent: {fake.send_message_calls}")

    await fake.simulate_message_received("alice", "hi there")
    print(f"Next event: {await fake.wait_for_message_received()}")


if __name__ == "__main__":
    asyncio.run(run())
