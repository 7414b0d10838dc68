"""
Pass 90 — Packaging

Final check that a successful contract produced everything downstream
consumers need: the validated contract, the binding and its source.
"""

from hubgen.core.context import ContractContext
from hubgen.core.logging import get_pass_logger
from hubgen.ir.enums import CompileStatus, DiagnosticCode, DiagnosticLevel

PASS_NAME = "p90_package"
log = get_pass_logger(PASS_NAME)


def package(ctx: ContractContext) -> ContractContext:
    """Set the final status."""
    missing: list[str] = []
    if ctx.validated is None:
        missing.append("validated contract")
    if ctx.binding is None:
        missing.append("binding")
    if ctx.source is None:
        missing.append("source")

    if missing:
        for what in missing:
            ctx.add_diagnostic(
                level=DiagnosticLevel.ERROR,
                code=DiagnosticCode.PASS_ERROR,
                message=f"No {what} produced for '{ctx.contract.name}'",
                source=PASS_NAME,
            )
        ctx.status = CompileStatus.FAILED

    log.verbose(
        "packaged",
        status=ctx.status.value,
        push=len(ctx.push_methods),
        invoke=len(ctx.invoke_methods),
        diagnostics=len(ctx.diagnostics),
    )

    ctx.add_trace(
        pass_name=PASS_NAME,
        action="packaged",
        after=f"status={ctx.status.value}",
    )
    return ctx
