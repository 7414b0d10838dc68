"""
Pass 30 — Contract Validation

Evaluates every registered rule over the walked, deduplicated contract.
All rules run; nothing short-circuits. If any error was reported so far
(including a missing uri from p00), the contract fails here and the
engine stops before synthesis. Otherwise the ValidatedContract is built.
"""

from hubgen.core.context import ContractContext
from hubgen.core.logging import get_pass_logger
from hubgen.ir.enums import CompileStatus, DiagnosticLevel
from hubgen.ir.schema import ValidatedContract
from hubgen.validation import RuleRegistry

PASS_NAME = "p30_validate"
log = get_pass_logger(PASS_NAME)


def validate(ctx: ContractContext) -> ContractContext:
    """Run every rule and build the ValidatedContract on success."""
    results = RuleRegistry.check_all(ctx)

    for rule, violation in results:
        log.verbose(
            "rule_violated",
            rule=rule.id,
            code=rule.code.value,
            location=str(violation.location),
            fixes=len(violation.fixes),
        )
        ctx.add_diagnostic(
            level=DiagnosticLevel.ERROR,
            code=rule.code,
            message=violation.message,
            source=PASS_NAME,
            location=violation.location,
            fixes=violation.fixes,
        )

    if ctx.has_errors():
        ctx.status = CompileStatus.FAILED
        log.info(
            "contract_rejected",
            violations=len(results),
            errors=sum(1 for d in ctx.diagnostics if d.is_error),
        )
    else:
        ctx.validated = ValidatedContract(
            contract=ctx.contract,
            push=tuple(ctx.push_methods),
            invoke=tuple(ctx.invoke_methods),
        )
        log.verbose("contract_validated", rules=len(RuleRegistry.list_all()))

    ctx.add_trace(
        pass_name=PASS_NAME,
        action="validated",
        after=f"violations={len(results)}, status={ctx.status.value}",
    )
    return ctx
