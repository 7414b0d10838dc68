"""
Client Source — Render a ClientBinding as a Python module.

The module defines one HubClientBase subclass with the binding's
callback slots, dispatch thunks and invoke wrappers, and embeds the
manifest as ``__manifest__``.
"""

from hubgen.ir.bindings import ClientBinding
from hubgen.render import template


def render_client(binding: ClientBinding) -> str:
    """
    Render the binding module.

    Args:
        binding: The synthesized client binding

    Returns:
        Python source text
    """
    manifest = binding.manifest
    cancellation_type = manifest.cancellation_type

    lines = template.header(f"Hub client for {binding.contract_name}")
    lines += [
        "from typing import Awaitable, Callable, Optional",
        "",
        "from hubgen.ir.bindings import BindingManifest",
        "from hubgen.runtime import CancellationToken, HubClientBase",
        "",
        f"_MANIFEST_JSON = {manifest.model_dump_json()!r}",
        "",
        "",
        f"class {binding.name}(HubClientBase):",
        f'    """Hub client for {template.doc_text(binding.contract_name)} at {template.doc_text(binding.uri)}."""',
        "",
        f"    hub_uri = {binding.uri!r}",
        "    __manifest__ = BindingManifest.model_validate_json(_MANIFEST_JSON)",
        "",
    ]

    body: list[str] = []

    for member in binding.push:
        body.append(f"{member.slot_name}: {template.callable_type(member.parameters)} = None")
    if binding.push:
        body.append("")
        body.append("def _register_hub_methods(self) -> None:")
        for registration in binding.registrations:
            body.append(f"    self._on({registration.wire_name!r}, self.{registration.thunk_name})")
        body.append("")

    for member in binding.push:
        body += [
            f"async def {member.thunk_name}({template.signature(member.parameters)}) -> None:",
            f"    callback = self.{member.slot_name}",
            "    if callback is None:",
            "        return",
            f"    await callback({template.call_args(member.parameters)})",
            "",
        ]

    for member in binding.invoke:
        returns = member.result_type or "None"
        call = (
            f"self._invoke({member.wire_name!r}, "
            f"{template.args_tuple(member.parameters)}, cancellation)"
        )
        body += [
            f"async def {member.method_name}"
            f"({template.signature(member.parameters, cancellation_type)}) -> {returns}:",
            f"    return await {call}" if member.result_type else f"    await {call}",
            "",
        ]

    lines += template.indent(body)
    return template.join(lines)
