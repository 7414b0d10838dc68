"""
Fake Synthesis — BindingManifest -> FakeBinding.

The fake synthesizer only looks at the manifest emitted beside a
binding, never at contract declarations, so it works the same for a
rendered binding module and for a class built at runtime.

Trailing parameters of the manifest's cancellation type are plumbing
and are excluded from recorded arguments.
"""

import json
import re
from typing import Optional, Union

from pydantic import ValidationError

from hubgen import __manifest_version__
from hubgen.core.errors import ManifestError
from hubgen.core.logging import LogChannel, get_logger
from hubgen.core.options import GeneratorOptions
from hubgen.ir.bindings import (
    BindingManifest,
    FakeBinding,
    FakeInvokeMember,
    FakePushMember,
    MemberDescriptor,
)
from hubgen.ir.enums import Role
from hubgen.ir.schema import Parameter
from hubgen.synthesis import naming

log = get_logger(LogChannel.SYNTHESIS)

ManifestSource = Union[BindingManifest, dict, str, type]

# Literal returned by a non-strict fake, by declared result type
DEFAULT_RESULTS = {
    "int": "0",
    "float": "0.0",
    "complex": "0j",
    "str": "''",
    "bytes": "b''",
    "bool": "False",
    "list": "[]",
    "List": "[]",
    "Sequence": "[]",
    "dict": "{}",
    "Dict": "{}",
    "Mapping": "{}",
    "tuple": "()",
    "Tuple": "()",
}

_GENERIC_HEAD = re.compile(r"^(?:typing\.)?([A-Za-z_][A-Za-z0-9_]*)")


def default_result_literal(result_type: Optional[str]) -> str:
    """
    The Python literal a non-strict fake resolves with.

        None        -> "None"
        "int"       -> "0"
        "list[str]" -> "[]"
        "ChatUser"  -> "None"
    """
    if not result_type:
        return "None"
    match = _GENERIC_HEAD.match(result_type.strip())
    if match is None:
        return "None"
    return DEFAULT_RESULTS.get(match.group(1), "None")


def load_manifest_source(source: ManifestSource) -> BindingManifest:
    """
    Accept a manifest, its dict or JSON form, or a binding class.

    Raises:
        ManifestError: If no manifest can be read from source
    """
    if isinstance(source, BindingManifest):
        return source

    if isinstance(source, type):
        manifest = getattr(source, "__manifest__", None)
        if manifest is None:
            raise ManifestError(f"{source.__name__} carries no __manifest__")
        return load_manifest_source(manifest)

    try:
        if isinstance(source, str):
            return BindingManifest.model_validate_json(source)
        if isinstance(source, dict):
            return BindingManifest.model_validate(source)
    except (ValidationError, json.JSONDecodeError) as e:
        raise ManifestError(f"Unrecognized manifest: {e}") from e

    raise ManifestError(f"Unrecognized manifest source: {type(source).__name__}")


def check_manifest(manifest: BindingManifest) -> None:
    """
    Reject manifests whose shape the fake can't mirror.

    Raises:
        ManifestError: On version, role, or name collisions
    """
    if manifest.version != __manifest_version__:
        raise ManifestError(
            f"{manifest.binding_name}: manifest version {manifest.version!r} "
            f"is not supported (expected {__manifest_version__!r})"
        )

    for role, descriptors in ((Role.PUSH, manifest.push), (Role.INVOKE, manifest.invoke)):
        for descriptor in descriptors:
            if descriptor.role != role:
                raise ManifestError(
                    f"{manifest.binding_name}: '{descriptor.wire_name}' is listed as "
                    f"{role.value} but describes a {descriptor.role.value} member"
                )
            if role == Role.PUSH and not descriptor.handler:
                raise ManifestError(
                    f"{manifest.binding_name}: push member '{descriptor.wire_name}' has no handler"
                )

    attributes = attributes_of(manifest)
    duplicates = sorted({a for a in attributes if attributes.count(a) > 1})
    if duplicates:
        raise ManifestError(
            f"{manifest.binding_name}: duplicate attribute(s): {', '.join(duplicates)}"
        )

    for descriptors in (manifest.push, manifest.invoke):
        wire_names = [d.wire_name for d in descriptors]
        if len(set(wire_names)) != len(wire_names):
            raise ManifestError(f"{manifest.binding_name}: duplicate wire names")


def recorded_parameters(
    descriptor: MemberDescriptor,
    cancellation_type: str,
) -> tuple[Parameter, ...]:
    params = list(descriptor.parameters)
    while params and params[-1].type == cancellation_type:
        params.pop()
    return tuple(params)


def synthesize_fake(
    source: ManifestSource,
    options: Optional[GeneratorOptions] = None,
) -> FakeBinding:
    """
    Build the fake model for a binding.

    Args:
        source: BindingManifest, its dict/JSON form, or a binding class
        options: Generator options (fake class prefix)

    Raises:
        ManifestError: If the manifest shape is not recognized
    """
    options = options or GeneratorOptions()
    manifest = load_manifest_source(source)
    check_manifest(manifest)

    invoke = []
    for descriptor in manifest.invoke:
        base = naming.strip_prefix(descriptor.attribute, "invoke_")
        invoke.append(FakeInvokeMember(
            identifier=descriptor.identifier,
            wire_name=descriptor.wire_name,
            method_name=descriptor.attribute,
            calls_attribute=f"{base}_calls",
            behavior_attribute=f"{base}_behavior",
            parameters=recorded_parameters(descriptor, manifest.cancellation_type),
            default_result=default_result_literal(descriptor.result_type),
        ))

    push = []
    for descriptor in manifest.push:
        base = naming.strip_prefix(descriptor.attribute, "on_")
        push.append(FakePushMember(
            identifier=descriptor.identifier,
            wire_name=descriptor.wire_name,
            slot_name=descriptor.attribute,
            events_attribute=f"{base}_events",
            simulate_name=f"simulate_{base}",
            wait_name=f"wait_for_{base}",
            parameters=recorded_parameters(descriptor, manifest.cancellation_type),
        ))

    fake = FakeBinding(
        name=f"{options.fake_prefix}{manifest.binding_name}",
        binding_name=manifest.binding_name,
        binding_module=manifest.binding_module,
        invoke=tuple(invoke),
        push=tuple(push),
    )

    names = fake_attribute_names(fake) + attributes_of(manifest)
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise ManifestError(
            f"{manifest.binding_name}: fake members collide: {', '.join(duplicates)}"
        )

    log.verbose("fake_synthesized", fake=fake.name, invoke=len(invoke), push=len(push))
    return fake


def attributes_of(manifest: BindingManifest) -> list[str]:
    return [d.attribute for d in manifest.push + manifest.invoke] + [d.handler for d in manifest.push]


def fake_attribute_names(fake: FakeBinding) -> list[str]:
    """Every attribute the fake adds on top of the binding."""
    names: list[str] = []
    for member in fake.invoke:
        names += [member.calls_attribute, member.behavior_attribute]
    for member in fake.push:
        names += [member.events_attribute, member.simulate_name, member.wait_name]
    return names
