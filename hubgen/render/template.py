"""
Template Helpers — Shared pieces of generated Python source.

Fully deterministic: the same model always renders to the same text.
No timestamps, no absolute paths.
"""

from typing import Iterable, Optional

from hubgen import __version__
from hubgen.ir.schema import Parameter

INDENT = "    "


def header(subject: str) -> list[str]:
    """Leading comment block of every generated module."""
    return [
        f"# Generated by hubgen {__version__}. Do not edit.",
        f"# {doc_text(subject)}",
        "",
        "from __future__ import annotations",
        "",
    ]


def doc_text(text: str) -> str:
    """Declared text made safe inside a one-line comment or docstring."""
    text = " ".join(text.split())
    return text.replace("\\", "\\\\").replace('"', '\\"')


def indent(lines: Iterable[str], level: int = 1) -> list[str]:
    prefix = INDENT * level
    return [f"{prefix}{line}" if line else "" for line in lines]


def signature(
    parameters: Iterable[Parameter],
    cancellation_type: Optional[str] = None,
) -> str:
    """
    Parameter list after self.

        (message: str) -> "self, message: str"
        with cancellation -> "..., cancellation: Optional[CancellationToken] = None"
    """
    parts = ["self"] + [f"{p.name}: {p.type}" for p in parameters]
    if cancellation_type:
        parts.append(f"cancellation: Optional[{cancellation_type}] = None")
    return ", ".join(parts)


def args_tuple(parameters: Iterable[Parameter]) -> str:
    """(a) -> "(a,)", (a, b) -> "(a, b)", () -> "()"."""
    names = [p.name for p in parameters]
    if len(names) == 1:
        return f"({names[0]},)"
    return f"({', '.join(names)})"


def call_args(parameters: Iterable[Parameter]) -> str:
    return ", ".join(p.name for p in parameters)


def callable_type(parameters: Iterable[Parameter]) -> str:
    """The slot type for a push method."""
    types = ", ".join(p.type for p in parameters)
    return f"Optional[Callable[[{types}], Awaitable[None]]]"


def recorded_type(parameters: tuple[Parameter, ...]) -> str:
    """Type of a recorded value: the single parameter, or a tuple."""
    if len(parameters) == 1:
        return parameters[0].type
    if not parameters:
        return "tuple[()]"
    return f"tuple[{', '.join(p.type for p in parameters)}]"


def join(lines: list[str]) -> str:
    """Join lines into module text ending with exactly one newline."""
    while lines and lines[-1] == "":
        lines.pop()
    return "\n".join(lines) + "\n"
