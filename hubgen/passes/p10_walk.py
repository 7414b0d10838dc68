"""
Pass 10 — Graph Walk

Flattens the contract's method-set graph into two ordered lists.

Traversal is depth-first preorder: a set's own methods, then each
ancestor in declaration order. Sets are visited at most once (by name),
so diamonds and repeated references don't repeat methods. Signature
collisions across distinct sets are left for p20_dedup.

Role comes from the side of the contract the root occupies. A unified
contract (no side sets) is walked from the bridge itself and each method
is classified by its invoke marker, defaulting to push.
"""

from typing import Optional

from hubgen.core.context import ContractContext
from hubgen.core.logging import get_pass_logger
from hubgen.ir.enums import Role
from hubgen.ir.schema import MethodSetDeclaration, WalkedMethod

PASS_NAME = "p10_walk"
log = get_pass_logger(PASS_NAME)


def walk_method_set(
    root: Optional[MethodSetDeclaration],
    role: Optional[Role] = None,
) -> list[WalkedMethod]:
    """
    Walk a method set and its ancestors.

    Args:
        root: The set to start from; None yields an empty list
        role: Role for every method, or None to classify per method

    Returns:
        Methods in traversal order, tagged with role and provenance
    """
    if root is None:
        return []

    walked: list[WalkedMethod] = []
    visited: set[str] = set()
    stack = [root]

    while stack:
        current = stack.pop()
        if current.name in visited:
            continue
        visited.add(current.name)

        for method in current.methods:
            method_role = role
            if method_role is None:
                method_role = Role.INVOKE if method.invoke else Role.PUSH
            walked.append(WalkedMethod(
                method=method,
                role=method_role,
                provenance=current.name,
            ))

        # Reversed so the first ancestor is popped first
        stack.extend(reversed(current.ancestors))

    return walked


def walk(ctx: ContractContext) -> ContractContext:
    """Populate push_methods and invoke_methods."""
    contract = ctx.contract

    if contract.is_separated:
        ctx.push_methods = walk_method_set(contract.push_set, Role.PUSH)
        ctx.invoke_methods = walk_method_set(contract.invoke_set, Role.INVOKE)
        mode = "separated"
    else:
        walked = walk_method_set(contract.own_set())
        ctx.push_methods = [w for w in walked if w.role == Role.PUSH]
        ctx.invoke_methods = [w for w in walked if w.role == Role.INVOKE]
        mode = "unified"

    log.verbose(
        "walked",
        mode=mode,
        push=len(ctx.push_methods),
        invoke=len(ctx.invoke_methods),
    )

    ctx.add_trace(
        pass_name=PASS_NAME,
        action="walked_graph",
        after=f"{mode}: {len(ctx.push_methods)} push, {len(ctx.invoke_methods)} invoke",
    )
    return ctx
