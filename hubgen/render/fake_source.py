"""
Fake Source — Render a FakeBinding as a Python module.

The fake subclasses FakeHubClientBase and the binding, and spells out
each invoke, simulate and wait method so the fake reads like
hand-written test code.
"""

from typing import Optional

from hubgen.ir.bindings import FakeBinding
from hubgen.render import template


def render_fake(
    fake: FakeBinding,
    cancellation_type: str = "CancellationToken",
    binding_package: Optional[str] = None,
) -> str:
    """
    Render the fake module.

    Args:
        fake: The synthesized fake model
        cancellation_type: Name used in wrapper annotations
        binding_package: Absolute package of the binding module;
            None imports it relatively

    Returns:
        Python source text
    """
    if binding_package:
        binding_import = f"from {binding_package}.{fake.binding_module} import {fake.binding_name}"
    else:
        binding_import = f"from .{fake.binding_module} import {fake.binding_name}"

    lines = template.header(f"Test double for {fake.binding_name}")
    lines += [
        "from typing import Optional",
        "",
        "from hubgen.ir.bindings import FakeBinding",
        "from hubgen.runtime import CancellationToken",
        "from hubgen.testing import FakeHubClientBase",
        "",
        binding_import,
        "",
        f"_FAKE_JSON = {fake.model_dump_json()!r}",
        "",
        "",
        f"class {fake.name}(FakeHubClientBase, {fake.binding_name}):",
        f'    """Test double for {fake.binding_name}."""',
        "",
        "    __fake__ = FakeBinding.model_validate_json(_FAKE_JSON)",
        "",
    ]

    body: list[str] = []

    for member in fake.invoke:
        body += [
            f"async def {member.method_name}"
            f"({template.signature(member.parameters, cancellation_type)}):",
            f"    return await self._fake_invoke({member.wire_name!r}, "
            f"{template.args_tuple(member.parameters)}, {member.default_result})",
            "",
        ]

    for member in fake.push:
        body += [
            f"async def {member.simulate_name}({template.signature(member.parameters)}) -> None:",
            f"    await self._simulate({member.wire_name!r}, {template.args_tuple(member.parameters)})",
            "",
            f"async def {member.wait_name}"
            f"(self, cancellation: Optional[{cancellation_type}] = None) "
            f"-> {template.recorded_type(member.parameters)}:",
            f"    return await self._wait_for({member.wire_name!r}, cancellation)",
            "",
        ]

    lines += template.indent(body)
    return template.join(lines)
