"""
Naming — Python identifiers derived from declared method names.

    UserJoined  -> on_user_joined, _user_joined_handler, simulate_user_joined
    SendMessage -> invoke_send_message, send_message_calls
"""

import keyword
import re
from typing import Iterable

_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_INVALID = re.compile(r"[^0-9a-zA-Z_]")


def snake_case(name: str) -> str:
    """UserJoined -> user_joined, GetHTTPStatus -> get_http_status."""
    name = _INVALID.sub("_", name)
    return _BOUNDARY.sub("_", name).lower().strip("_") or "_"


def safe_identifier(name: str) -> str:
    """
    Make a declared name usable as a Python parameter.

        user-name -> user_name, from -> from_, 1st -> _1st
    """
    name = _INVALID.sub("_", name) or "_"
    if keyword.iskeyword(name) or name in ("self", "cancellation"):
        return f"{name}_"
    if name[:1].isdigit():
        return f"_{name}"
    return name


def is_identifier(name: str) -> bool:
    """True for names usable as a Python class or function name."""
    return name.isidentifier() and not keyword.iskeyword(name)


def unique_names(names: Iterable[str]) -> list[str]:
    """Suffix repeats until every name is distinct: [a, a_2, a] -> [a, a_2, a_3]."""
    taken: set[str] = set()
    counts: dict[str, int] = {}
    out = []
    for name in names:
        candidate = name
        n = counts.get(name, 1)
        while candidate in taken:
            n += 1
            candidate = f"{name}_{n}"
        counts[name] = n
        taken.add(candidate)
        out.append(candidate)
    return out


def module_name(binding_name: str) -> str:
    return snake_case(binding_name)


def slot_name(base: str) -> str:
    return f"on_{base}"


def thunk_name(base: str) -> str:
    return f"_{base}_handler"


def invoke_name(base: str) -> str:
    return f"invoke_{base}"


def builder_method_name(binding_name: str) -> str:
    return f"with_{snake_case(binding_name)}"


def unique_bases(names: Iterable[str]) -> list[str]:
    """
    Snake-case each name, suffixing repeats so overloads stay distinct.

    ["Send", "Send", "Ping"] -> ["send", "send_2", "ping"]
    """
    return unique_names(snake_case(name) for name in names)


def strip_prefix(attribute: str, prefix: str) -> str:
    """invoke_send_message -> send_message (when prefixed)."""
    if attribute.startswith(prefix) and len(attribute) > len(prefix):
        return attribute[len(prefix):]
    return attribute
