"""
Fix Application — Batch-apply fix suggestions to a declaration document.

A pure map: the input document is never modified; a new document is
returned. Fixes address methods by signature key, so a fix whose method
has already been moved or rewritten is skipped.
"""

from typing import Iterable, Optional

from hubgen.core.logging import LogChannel, get_logger
from hubgen.ir.enums import FixKind
from hubgen.ir.schema import (
    DeclarationDocument,
    Diagnostic,
    FixSuggestion,
    ReturnType,
)

log = get_logger(LogChannel.VALIDATE)

MOVE_KINDS = (FixKind.MOVE_TO_PUSH, FixKind.MOVE_TO_INVOKE)


def select_fixes(
    diagnostics: Iterable[Diagnostic],
    keys: Optional[Iterable[str]] = None,
) -> list[FixSuggestion]:
    """
    Pick the fixes to apply.

    With keys=None, the first fix of every diagnostic that has one.
    Otherwise exactly the fixes whose keys are listed.

    Raises:
        ValueError: If a requested key matches no fix
    """
    diagnostics = list(diagnostics)

    if keys is None:
        return [d.fixes[0] for d in diagnostics if d.fixes]

    wanted = list(dict.fromkeys(keys))
    available = {fix.key: fix for d in diagnostics for fix in d.fixes}
    missing = [k for k in wanted if k not in available]
    if missing:
        raise ValueError(f"Unknown fix key(s): {', '.join(missing)}")
    return [available[k] for k in wanted]


def apply_fix(document: DeclarationDocument, fix: FixSuggestion) -> DeclarationDocument:
    """Apply one fix, returning a new document."""
    decl = document.get(fix.declaration)
    if decl is None:
        raise ValueError(f"Fix {fix.key} targets unknown declaration '{fix.declaration}'")

    method = next((m for m in decl.methods if m.signature_key == fix.method), None)
    if method is None:
        log.warning("fix_skipped", key=fix.key, reason="method no longer present")
        return document

    if fix.kind in MOVE_KINDS:
        target = document.get(fix.target)
        if target is None:
            raise ValueError(f"Fix {fix.key} moves to unknown declaration '{fix.target}'")

        moved = method.model_copy(update={"owner": target.name, "invoke": False})
        document = document.replace(decl.model_copy(update={
            "methods": tuple(m for m in decl.methods if m is not method),
        }))
        document = document.replace(target.model_copy(update={
            "methods": target.methods + (moved,),
        }))
    else:
        rewritten = method.model_copy(update={"returns": ReturnType.parse(fix.target)})
        document = document.replace(decl.model_copy(update={
            "methods": tuple(rewritten if m is method else m for m in decl.methods),
        }))

    log.verbose("fix_applied", key=fix.key, kind=fix.kind.value)
    return document


def apply_fixes(
    document: DeclarationDocument,
    diagnostics: Iterable[Diagnostic],
    keys: Optional[Iterable[str]] = None,
) -> DeclarationDocument:
    """
    Apply fixes from a batch of diagnostics.

    Args:
        document: The document the diagnostics were produced from
        diagnostics: Diagnostics carrying fix suggestions
        keys: Fix keys to apply; None applies each diagnostic's first fix

    Returns:
        A new DeclarationDocument
    """
    for fix in select_fixes(diagnostics, keys):
        document = apply_fix(document, fix)
    return document
