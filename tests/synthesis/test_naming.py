"""
Tests for identifier derivation.
"""

import pytest

from hubgen.synthesis import naming


@pytest.mark.parametrize("name,expected", [
    ("UserJoined", "user_joined"),
    ("SendMessage", "send_message"),
    ("GetHTTPStatus", "get_http_status"),
    ("ping", "ping"),
    ("Ping2Server", "ping2_server"),
    ("user-left", "user_left"),
])
def test_snake_case(name, expected):
    assert naming.snake_case(name) == expected


def test_safe_identifier():
    assert naming.safe_identifier("from") == "from_"
    assert naming.safe_identifier("self") == "self_"
    assert naming.safe_identifier("cancellation") == "cancellation_"
    assert naming.safe_identifier("1st") == "_1st"
    assert naming.safe_identifier("message") == "message"


def test_member_names():
    assert naming.slot_name("user_joined") == "on_user_joined"
    assert naming.thunk_name("user_joined") == "_user_joined_handler"
    assert naming.invoke_name("send_message") == "invoke_send_message"
    assert naming.builder_method_name("ChatHubClient") == "with_chat_hub_client"
    assert naming.module_name("ChatHubClient") == "chat_hub_client"


def test_unique_bases():
    assert naming.unique_bases(["Send", "Send", "Ping", "Send"]) == ["send", "send_2", "ping", "send_3"]


def test_strip_prefix():
    assert naming.strip_prefix("invoke_send", "invoke_") == "send"
    assert naming.strip_prefix("invoke_", "invoke_") == "invoke_"
    assert naming.strip_prefix("send", "invoke_") == "send"


def test_safe_identifier_replaces_invalid_characters():
    assert naming.safe_identifier("user-name") == "user_name"
    assert naming.safe_identifier("first name") == "first_name"
    assert naming.safe_identifier("") == "_"


def test_is_identifier():
    assert naming.is_identifier("ChatHubClient")
    assert not naming.is_identifier("Chat Client")
    assert not naming.is_identifier("class")
    assert not naming.is_identifier("")


def test_unique_bases_skips_names_already_taken():
    assert naming.unique_bases(["Send", "Send_2", "Send"]) == ["send", "send_2", "send_3"]
    assert naming.unique_bases(["Send", "Send", "Send_2"]) == ["send", "send_2", "send_2_2"]


def test_unique_names():
    assert naming.unique_names(["a_b", "a_b", "a_b"]) == ["a_b", "a_b_2", "a_b_3"]
