"""
Pass 40 — Binding Synthesis

Maps a ValidatedContract to a ClientBinding and its manifest.

Per push method: a callback slot (on_<name>, default None), a dispatch
thunk (_<name>_handler) and a wire-name -> thunk registration.
Per invoke method: an async wrapper (invoke_<name>) that takes a
trailing cancellation argument and delegates to the connection.

Declared parameters of the cancellation type at the end of a signature
are plumbing, not payload: they are folded into the wrapper's own
cancellation argument.

Synthesis is total over a validated contract.
"""

from hubgen.core.context import ContractContext
from hubgen.core.logging import get_pass_logger
from hubgen.core.options import GeneratorOptions
from hubgen.ir.bindings import (
    BindingManifest,
    ClientBinding,
    InvokeMember,
    MemberDescriptor,
    PushMember,
    Registration,
)
from hubgen.ir.enums import DiagnosticCode, DiagnosticLevel, ReturnKind, Role
from hubgen.ir.schema import DiagnosticLocation, Parameter, ValidatedContract
from hubgen.synthesis import naming

PASS_NAME = "p40_synthesize"
log = get_pass_logger(PASS_NAME)

CANCELLATION_PARAMETER = "cancellation"


def payload_parameters(
    parameters: tuple[Parameter, ...],
    cancellation_type: str,
) -> tuple[Parameter, ...]:
    """Drop trailing cancellation-typed parameters and make names safe and distinct."""
    params = list(parameters)
    while params and params[-1].type == cancellation_type:
        params.pop()
    names = naming.unique_names(naming.safe_identifier(p.name) for p in params)
    return tuple(
        Parameter(name=name, type=p.type)
        for name, p in zip(names, params)
    )


def synthesize_binding(
    validated: ValidatedContract,
    options: GeneratorOptions,
) -> ClientBinding:
    """
    Build the client binding for a validated contract.

    Args:
        validated: The contract, after walk, dedup and validation
        options: Generator options (cancellation type name)

    Returns:
        ClientBinding with its BindingManifest
    """
    contract = validated.contract
    binding_name = contract.binding_name
    module = naming.module_name(binding_name)
    cancellation = Parameter(name=CANCELLATION_PARAMETER, type=options.cancellation_type)

    push_members = []
    push_descriptors = []
    registrations = []
    for walked, base in zip(validated.push, naming.unique_bases(w.method.name for w in validated.push)):
        method = walked.method
        params = payload_parameters(method.parameters, options.cancellation_type)
        member = PushMember(
            identifier=method.name,
            wire_name=method.name,
            slot_name=naming.slot_name(base),
            thunk_name=naming.thunk_name(base),
            parameters=params,
        )
        push_members.append(member)
        registrations.append(Registration(wire_name=member.wire_name, thunk_name=member.thunk_name))
        push_descriptors.append(MemberDescriptor(
            identifier=member.identifier,
            wire_name=member.wire_name,
            role=Role.PUSH,
            attribute=member.slot_name,
            handler=member.thunk_name,
            parameters=params,
        ))

    invoke_members = []
    invoke_descriptors = []
    for walked, base in zip(validated.invoke, naming.unique_bases(w.method.name for w in validated.invoke)):
        method = walked.method
        params = payload_parameters(method.parameters, options.cancellation_type)
        result_type = (
            method.returns.type_name
            if method.returns.kind == ReturnKind.VALUE_ASYNC
            else None
        )
        member = InvokeMember(
            identifier=method.name,
            wire_name=method.name,
            method_name=naming.invoke_name(base),
            parameters=params,
            result_type=result_type,
        )
        invoke_members.append(member)
        invoke_descriptors.append(MemberDescriptor(
            identifier=member.identifier,
            wire_name=member.wire_name,
            role=Role.INVOKE,
            attribute=member.method_name,
            parameters=params + (cancellation,),
            result_type=result_type,
        ))

    manifest = BindingManifest(
        binding_name=binding_name,
        binding_module=module,
        contract_name=contract.name,
        hub_uri=contract.uri,
        cancellation_type=options.cancellation_type,
        push=tuple(push_descriptors),
        invoke=tuple(invoke_descriptors),
    )

    return ClientBinding(
        name=binding_name,
        contract_name=contract.name,
        uri=contract.uri,
        module_name=module,
        push=tuple(push_members),
        invoke=tuple(invoke_members),
        registrations=tuple(registrations),
        manifest=manifest,
    )


def synthesize(ctx: ContractContext) -> ContractContext:
    """Build ctx.binding from ctx.validated."""
    if ctx.validated is None:
        raise ValueError(f"Contract '{ctx.contract.name}' reached synthesis without validation")

    ctx.binding = synthesize_binding(ctx.validated, ctx.options)

    # Overloads share a wire name; every incoming event runs all of their thunks
    first_thunk: dict[str, str] = {}
    for registration in ctx.binding.registrations:
        if registration.wire_name not in first_thunk:
            first_thunk[registration.wire_name] = registration.thunk_name
            continue
        log.warning("shared_wire_name", wire_name=registration.wire_name)
        ctx.add_diagnostic(
            level=DiagnosticLevel.WARNING,
            code=DiagnosticCode.SHARED_WIRE_NAME,
            message=(
                f"Push methods {first_thunk[registration.wire_name]} and "
                f"{registration.thunk_name} both handle '{registration.wire_name}'; "
                f"each incoming event runs both, and no fake can be generated"
            ),
            source=PASS_NAME,
            location=DiagnosticLocation(
                declaration=ctx.contract.name,
                method=registration.wire_name,
            ),
        )

    log.verbose(
        "binding_synthesized",
        binding=ctx.binding.name,
        push=len(ctx.binding.push),
        invoke=len(ctx.binding.invoke),
    )

    ctx.add_trace(
        pass_name=PASS_NAME,
        action="synthesized_binding",
        after=f"{ctx.binding.module_name}.{ctx.binding.name}",
        affected_ids=[r.wire_name for r in ctx.binding.registrations],
    )
    return ctx
