"""
Bridge Rules

- NO_METHODS_ON_BRIDGE (HG0001): a separated contract's bridge declares
  no methods of its own. Each method found on the bridge (or on what the
  bridge itself extends) is reported once, with a "move" fix for every
  side set the contract references.

Unified contracts are exempt: there the bridge's methods are the contract.
"""

from typing import List

from hubgen.core.context import ContractContext
from hubgen.ir.enums import DiagnosticCode, FixKind
from hubgen.ir.schema import DiagnosticLocation
from hubgen.passes.p10_walk import walk_method_set
from hubgen.validation.rules import Rule, RuleRegistry, RuleViolation, make_fix


def check_no_methods_on_bridge(ctx: ContractContext) -> List[RuleViolation]:
    """
    Rule: methods belong in the push or invoke set, never on the bridge.

    Examples:
        bridge IChatHub {push: IChatEvents, invoke: IChatCommands}        OK
        bridge IChatHub {push: ..., invoke: ...} declaring Ping()        HG0001
    """
    contract = ctx.contract
    if not contract.is_separated:
        return []

    targets = []
    if contract.push_set is not None:
        targets.append((FixKind.MOVE_TO_PUSH, contract.push_set.name))
    if contract.invoke_set is not None:
        targets.append((FixKind.MOVE_TO_INVOKE, contract.invoke_set.name))

    violations = []
    for walked in walk_method_set(contract.own_set()):
        method = walked.method
        fixes = tuple(
            make_fix(
                kind,
                f"Move '{method.name}' to {target}",
                walked.provenance,
                method,
                target,
            )
            for kind, target in targets
        )
        violations.append(RuleViolation(
            message=(
                f"Method '{method.name}' is declared on hub client '{walked.provenance}'; "
                f"move it to the push or invoke set"
            ),
            location=DiagnosticLocation(declaration=walked.provenance, method=method.name),
            fixes=fixes,
        ))
    return violations


NO_METHODS_ON_BRIDGE = Rule(
    id="NO_METHODS_ON_BRIDGE",
    code=DiagnosticCode.METHOD_ON_BRIDGE,
    description="A separated hub client declares no methods of its own",
    check_fn=check_no_methods_on_bridge,
)

RuleRegistry.register(NO_METHODS_ON_BRIDGE)
