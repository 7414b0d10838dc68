"""
Pass 20 — Signature Deduplication

Key = method name plus ordered parameter types; return types are
ignored. The first occurrence in traversal order wins and the order of
first occurrences is kept. Each role list is deduplicated on its own.

Dropped duplicates are reported as HG0005 at info level (warning when
the warn_on_duplicate_signatures option is set). Never an error.
"""

from hubgen.core.context import ContractContext
from hubgen.core.logging import get_pass_logger
from hubgen.ir.enums import DiagnosticCode, DiagnosticLevel
from hubgen.ir.schema import DiagnosticLocation, WalkedMethod

PASS_NAME = "p20_dedup"
log = get_pass_logger(PASS_NAME)


def deduplicate(
    methods: list[WalkedMethod],
) -> tuple[list[WalkedMethod], list[tuple[WalkedMethod, WalkedMethod]]]:
    """
    Drop signature duplicates.

    Returns:
        (kept, dropped) where dropped pairs each duplicate with the
        method that shadowed it
    """
    first: dict[str, WalkedMethod] = {}
    kept: list[WalkedMethod] = []
    dropped: list[tuple[WalkedMethod, WalkedMethod]] = []

    for walked in methods:
        key = walked.signature_key
        if key in first:
            dropped.append((walked, first[key]))
            continue
        first[key] = walked
        kept.append(walked)

    return kept, dropped


def dedup(ctx: ContractContext) -> ContractContext:
    """Deduplicate both role lists in place."""
    level = (
        DiagnosticLevel.WARNING
        if ctx.options.warn_on_duplicate_signatures
        else DiagnosticLevel.INFO
    )

    before = len(ctx.push_methods) + len(ctx.invoke_methods)
    ctx.push_methods, push_dropped = deduplicate(ctx.push_methods)
    ctx.invoke_methods, invoke_dropped = deduplicate(ctx.invoke_methods)

    for duplicate, winner in push_dropped + invoke_dropped:
        ctx.dropped.append(duplicate)
        log.verbose(
            "duplicate_dropped",
            signature=duplicate.signature_key,
            dropped_from=duplicate.provenance,
            kept_from=winner.provenance,
        )
        ctx.add_diagnostic(
            level=level,
            code=DiagnosticCode.DUPLICATE_SIGNATURE,
            message=(
                f"{duplicate.role.value.capitalize()} method '{duplicate.signature_key}' "
                f"from '{duplicate.provenance}' is ignored; "
                f"'{winner.provenance}' declares it first"
            ),
            source=PASS_NAME,
            location=DiagnosticLocation(
                declaration=duplicate.provenance,
                method=duplicate.method.name,
            ),
        )

    after = len(ctx.push_methods) + len(ctx.invoke_methods)
    ctx.add_trace(
        pass_name=PASS_NAME,
        action="deduplicated",
        before=f"{before} methods",
        after=f"{after} methods",
        affected_ids=[d.signature_key for d in ctx.dropped],
    )
    return ctx
