"""
Shape Rules

- PUSH_RETURNS_UNIT (HG0002): push methods return Awaitable[None]
- INVOKE_IS_ASYNC (HG0003): invoke methods return Awaitable[None] or
  Awaitable[T]

Both run over the deduplicated lists, so each offending signature is
reported exactly once.
"""

from typing import List

from hubgen.core.context import ContractContext
from hubgen.ir.enums import DiagnosticCode, FixKind, ReturnKind
from hubgen.ir.schema import DiagnosticLocation, ReturnType
from hubgen.validation.rules import Rule, RuleRegistry, RuleViolation, make_fix

UNIT_ASYNC_TEXT = str(ReturnType.unit_async())


def check_push_returns_unit(ctx: ContractContext) -> List[RuleViolation]:
    """
    Rule: a push method carries no result.

    Examples:
        UserJoined(user) -> Awaitable[None]     OK
        UserJoined(user) -> Awaitable[int]      HG0002, fix: drop payload
        UserJoined(user) -> None                HG0002, fix: wrap in Awaitable[None]
    """
    violations = []
    for walked in ctx.push_methods:
        method = walked.method
        returns = method.returns
        if returns.kind == ReturnKind.UNIT_ASYNC:
            continue

        if returns.kind == ReturnKind.VALUE_ASYNC:
            fix = make_fix(
                FixKind.DROP_PAYLOAD,
                f"Drop the payload of '{method.name}' and return {UNIT_ASYNC_TEXT}",
                walked.provenance,
                method,
                UNIT_ASYNC_TEXT,
            )
        else:
            fix = make_fix(
                FixKind.WRAP_UNIT_ASYNC,
                f"Change the return type of '{method.name}' to {UNIT_ASYNC_TEXT}",
                walked.provenance,
                method,
                UNIT_ASYNC_TEXT,
            )

        violations.append(RuleViolation(
            message=(
                f"Push method '{method.name}' on '{walked.provenance}' must return "
                f"{UNIT_ASYNC_TEXT}, not {returns}"
            ),
            location=DiagnosticLocation(declaration=walked.provenance, method=method.name),
            fixes=(fix,),
        ))
    return violations


def check_invoke_is_async(ctx: ContractContext) -> List[RuleViolation]:
    """
    Rule: an invoke method is awaitable.

    The fix keeps the payload type: ``int`` becomes ``Awaitable[int]``.
    """
    violations = []
    for walked in ctx.invoke_methods:
        method = walked.method
        returns = method.returns
        if returns.is_async:
            continue

        if returns.kind == ReturnKind.VALUE:
            new_type = str(ReturnType.value_async(returns.type_name))
            fix = make_fix(
                FixKind.WRAP_VALUE_ASYNC,
                f"Change the return type of '{method.name}' to {new_type}",
                walked.provenance,
                method,
                new_type,
            )
        else:
            fix = make_fix(
                FixKind.WRAP_UNIT_ASYNC,
                f"Change the return type of '{method.name}' to {UNIT_ASYNC_TEXT}",
                walked.provenance,
                method,
                UNIT_ASYNC_TEXT,
            )

        violations.append(RuleViolation(
            message=(
                f"Invoke method '{method.name}' on '{walked.provenance}' must return "
                f"an awaitable, not {returns}"
            ),
            location=DiagnosticLocation(declaration=walked.provenance, method=method.name),
            fixes=(fix,),
        ))
    return violations


PUSH_RETURNS_UNIT = Rule(
    id="PUSH_RETURNS_UNIT",
    code=DiagnosticCode.PUSH_RETURN_SHAPE,
    description="Push methods return Awaitable[None]",
    check_fn=check_push_returns_unit,
)

INVOKE_IS_ASYNC = Rule(
    id="INVOKE_IS_ASYNC",
    code=DiagnosticCode.INVOKE_RETURN_SHAPE,
    description="Invoke methods return an awaitable",
    check_fn=check_invoke_is_async,
)

RuleRegistry.register(PUSH_RETURNS_UNIT)
RuleRegistry.register(INVOKE_IS_ASYNC)
