"""
Pass 00 — Bridge Marker Check

The bridge marker must carry a non-empty uri segment, and the binding
name must be usable as a Python class name. A missing uri
is an error for this contract; the remaining passes still run so the
contract's rule violations are reported alongside it.
"""

from hubgen.core.context import ContractContext
from hubgen.core.logging import get_pass_logger
from hubgen.ir.enums import DiagnosticCode, DiagnosticLevel
from hubgen.ir.schema import DiagnosticLocation
from hubgen.synthesis import naming

PASS_NAME = "p00_check_marker"
log = get_pass_logger(PASS_NAME)


def check_marker(ctx: ContractContext) -> ContractContext:
    """Report an absent or blank uri segment and an unusable binding name."""
    contract = ctx.contract

    if not contract.uri.strip():
        log.warning("missing_uri", contract=contract.name)
        ctx.add_diagnostic(
            level=DiagnosticLevel.ERROR,
            code=DiagnosticCode.MISSING_URI,
            message=f"Hub client '{contract.name}' has no uri segment",
            source=PASS_NAME,
            location=DiagnosticLocation(declaration=contract.name),
        )

    if not naming.is_identifier(contract.binding_name):
        log.warning("invalid_binding_name", contract=contract.name, binding=contract.binding_name)
        ctx.add_diagnostic(
            level=DiagnosticLevel.ERROR,
            code=DiagnosticCode.INVALID_BINDING_NAME,
            message=f"Binding name '{contract.binding_name}' is not a usable class name",
            source=PASS_NAME,
            location=DiagnosticLocation(declaration=contract.name),
        )

    ctx.add_trace(
        pass_name=PASS_NAME,
        action="checked_marker",
        after=f"uri={contract.uri!r}",
    )
    return ctx
