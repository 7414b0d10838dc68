"""
Registration Source — Render the aggregate registration helper module.
"""

from hubgen.ir.bindings import RegistrationHelper
from hubgen.render import template


def _policy_literal(helper: RegistrationHelper) -> list[str]:
    lines = ["DEFAULT_RECONNECT_POLICY = ReconnectPolicy(tiers=("]
    for tier in helper.reconnect_policy.tiers:
        lines.append(
            f"    BackoffTier(attempts={tier.attempts}, delay_seconds={tier.delay_seconds!r}),"
        )
    lines.append("))")
    return lines


def render_registration(helper: RegistrationHelper) -> str:
    """
    Render registration.py for a set of bindings.

    Bindings are imported relatively, so the module lives in the same
    package as the generated clients.
    """
    lines = template.header("Hub client registrations")
    lines += [
        "from typing import Optional",
        "",
        "from hubgen.ir.bindings import BackoffTier, ReconnectPolicy",
        "from hubgen.ir.enums import ServiceLifetime",
        "from hubgen.runtime import ConnectionFactory, ServiceCollection, add_hub_client",
        "",
    ]
    for entry in helper.entries:
        lines.append(f"from .{entry.binding_module} import {entry.binding_name}")
    if helper.entries:
        lines.append("")

    lines += _policy_literal(helper)
    lines += [
        f"DEFAULT_LIFETIME = ServiceLifetime.{helper.default_lifetime.name}",
        "",
        "",
        f"class {helper.builder_name}:",
        '    """Registers generated hub clients with a service collection."""',
        "",
        "    def __init__(",
        "        self,",
        "        services: ServiceCollection,",
        "        connection_factory: ConnectionFactory,",
        "        base_url: str,",
        "    ):",
        "        self.services = services",
        "        self.connection_factory = connection_factory",
        "        self.base_url = base_url",
        "",
    ]

    for entry in helper.entries:
        lines += template.indent([
            f"def {entry.method_name}(",
            "    self,",
            "    *,",
            "    reconnect_policy: Optional[ReconnectPolicy] = None,",
            "    lifetime: Optional[ServiceLifetime] = None,",
            "    headers: Optional[dict[str, str]] = None,",
            f") -> {helper.builder_name}:",
            f'    """Register {entry.binding_name} at <base_url>{template.doc_text(entry.hub_uri)}."""',
            "    add_hub_client(",
            "        self.services,",
            f"        {entry.binding_name},",
            "        self.connection_factory,",
            "        self.base_url,",
            "        reconnect_policy=reconnect_policy,",
            "        lifetime=lifetime,",
            "        headers=headers,",
            "        default_policy=DEFAULT_RECONNECT_POLICY,",
            "        default_lifetime=DEFAULT_LIFETIME,",
            "    )",
            "    return self",
            "",
        ])

    lines += [
        "",
        f"def {helper.function_name}(",
        "    services: ServiceCollection,",
        "    connection_factory: ConnectionFactory,",
        "    base_url: str,",
        f") -> {helper.builder_name}:",
        '    """Entry point: chain with_<client>() calls on the returned builder."""',
        f"    return {helper.builder_name}(services, connection_factory, base_url)",
    ]
    return template.join(lines)
