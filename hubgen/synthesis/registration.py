"""
Registration Synthesis — One helper for every generated binding.

The helper is a builder with a with_<binding>() method per binding and
a register function returning it. Defaults (reconnect tiers, lifetime,
names) come from GeneratorOptions.
"""

from typing import Iterable

from hubgen.core.logging import LogChannel, get_logger
from hubgen.core.options import GeneratorOptions
from hubgen.ir.bindings import ClientBinding, RegistrationEntry, RegistrationHelper
from hubgen.synthesis import naming

log = get_logger(LogChannel.SYNTHESIS)


def synthesize_registration(
    bindings: Iterable[ClientBinding],
    options: GeneratorOptions,
) -> RegistrationHelper:
    """
    Build the aggregate registration helper.

    Args:
        bindings: Successfully synthesized bindings, in document order
        options: Generator options

    Returns:
        RegistrationHelper (possibly with no entries)
    """
    entries = []
    used: set[str] = set()
    for binding in bindings:
        method_name = naming.builder_method_name(binding.name)
        suffix = 2
        while method_name in used:
            method_name = f"{naming.builder_method_name(binding.name)}_{suffix}"
            suffix += 1
        used.add(method_name)
        entries.append(RegistrationEntry(
            binding_name=binding.name,
            binding_module=binding.module_name,
            hub_uri=binding.uri,
            method_name=method_name,
        ))

    helper = RegistrationHelper(
        function_name=options.registration_function,
        builder_name=options.registration_builder,
        entries=tuple(entries),
        reconnect_policy=options.reconnect_policy,
        default_lifetime=options.default_lifetime,
    )

    log.verbose("registration_synthesized", entries=len(entries))
    return helper
