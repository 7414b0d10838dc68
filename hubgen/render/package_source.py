"""
Package Source — The __init__.py of a generated output package.
"""

from hubgen.ir.bindings import RegistrationHelper
from hubgen.render import template


def render_package_init(helper: RegistrationHelper) -> str:
    """Re-export every generated client and the registration entry point."""
    lines = template.header("Generated hub clients")
    exports = []
    for entry in helper.entries:
        lines.append(f"from .{entry.binding_module} import {entry.binding_name}")
        exports.append(entry.binding_name)
    lines.append(f"from .registration import {helper.builder_name}, {helper.function_name}")
    exports += [helper.builder_name, helper.function_name]

    lines += ["", "__all__ = ["]
    lines += [f"    {name!r}," for name in exports]
    lines.append("]")
    return template.join(lines)
