"""
Marker Registry — Discovery pre-pass over a declaration document.

Scans the document once, records every marker by kind, then resolves
each hub-client declaration into a nested ContractDeclaration. A
reference that can't be resolved, or an inheritance cycle, fails only
the contract that reaches it.
"""

from dataclasses import dataclass, field
from typing import Optional

from hubgen.core.logging import LogChannel, get_logger
from hubgen.ir.enums import DiagnosticCode, DiagnosticLevel, MarkerKind
from hubgen.ir.schema import (
    ContractDeclaration,
    Declaration,
    DeclarationDocument,
    Diagnostic,
    DiagnosticLocation,
    MethodSetDeclaration,
)
from hubgen.synthesis import naming

SOURCE = "discovery"

# Module names the output package already uses
RESERVED_MODULES = {"registration"}

log = get_logger(LogChannel.DISCOVERY)


class MarkerRegistry:
    """
    Declarations indexed by marker kind.

    HUB_CLIENT and GENERATE_FAKE entries are declaration/binding names;
    INVOKE_METHOD entries are "Declaration.method".
    """

    def __init__(self) -> None:
        self._entries: dict[MarkerKind, list[str]] = {kind: [] for kind in MarkerKind}

    def register(self, kind: MarkerKind, name: str) -> None:
        self._entries[kind].append(name)

    def get(self, kind: MarkerKind) -> list[str]:
        """Names registered under a marker kind, in discovery order."""
        return list(self._entries[kind])

    def count(self, kind: MarkerKind) -> int:
        return len(self._entries[kind])

    def summary(self) -> dict[str, int]:
        return {kind.value: len(names) for kind, names in self._entries.items()}


@dataclass
class DiscoveryResult:
    """Resolved contracts plus per-contract discovery failures."""

    document: DeclarationDocument
    registry: MarkerRegistry
    order: list[str] = field(default_factory=list)
    contracts: dict[str, ContractDeclaration] = field(default_factory=dict)
    failures: dict[str, list[Diagnostic]] = field(default_factory=dict)

    def contract(self, name: str) -> Optional[ContractDeclaration]:
        return self.contracts.get(name)


def scan_markers(document: DeclarationDocument) -> MarkerRegistry:
    """Populate a MarkerRegistry from every marker in the document."""
    registry = MarkerRegistry()
    for decl in document.declarations:
        if decl.hub_client is not None:
            registry.register(MarkerKind.HUB_CLIENT, decl.name)
        for method in decl.methods:
            if method.invoke:
                registry.register(MarkerKind.INVOKE_METHOD, f"{decl.name}.{method.name}")
    for target in document.fakes:
        registry.register(MarkerKind.GENERATE_FAKE, target)
    return registry


class _Resolver:
    """Resolves names to nested MethodSetDeclarations, collecting errors."""

    def __init__(self, document: DeclarationDocument, contract: str):
        self.document = document
        self.contract = contract
        self.errors: list[tuple[DiagnosticCode, str, str]] = []
        self._resolved: dict[str, MethodSetDeclaration] = {}

    def resolve(self, name: str, referrer: str, trail: tuple[str, ...] = ()) -> Optional[MethodSetDeclaration]:
        if name in trail:
            cycle = " -> ".join(trail[trail.index(name):] + (name,))
            self.errors.append((
                DiagnosticCode.INHERITANCE_CYCLE,
                f"Inheritance cycle: {cycle}",
                referrer,
            ))
            return None

        if name in self._resolved:
            return self._resolved[name]

        decl = self.document.get(name)
        if decl is None:
            self.errors.append((
                DiagnosticCode.UNRESOLVED_REFERENCE,
                f"'{referrer}' references '{name}', which is not declared",
                referrer,
            ))
            return None

        ancestors = self.resolve_all(decl, trail + (name,))
        if ancestors is None:
            return None

        resolved = MethodSetDeclaration(name=decl.name, methods=decl.methods, ancestors=ancestors)
        self._resolved[name] = resolved
        return resolved

    def resolve_all(self, decl: Declaration, trail: tuple[str, ...]) -> Optional[tuple[MethodSetDeclaration, ...]]:
        """Resolve every ancestor of decl; None if any failed."""
        ancestors = []
        failed = False
        for parent in decl.extends:
            resolved = self.resolve(parent, decl.name, trail)
            if resolved is None:
                failed = True
            else:
                ancestors.append(resolved)
        return None if failed else tuple(ancestors)


def resolve_contract(
    document: DeclarationDocument,
    decl: Declaration,
) -> tuple[Optional[ContractDeclaration], list[Diagnostic]]:
    """
    Resolve one hub-client declaration.

    Returns the ContractDeclaration, or None with the error diagnostics.
    """
    marker = decl.hub_client
    resolver = _Resolver(document, decl.name)

    push_set = resolver.resolve(marker.push, decl.name) if marker.push else None
    invoke_set = resolver.resolve(marker.invoke, decl.name) if marker.invoke else None
    ancestors = resolver.resolve_all(decl, (decl.name,))

    if resolver.errors:
        diagnostics = [
            Diagnostic(
                id=f"{decl.name}:d{i:03d}",
                code=code,
                level=DiagnosticLevel.ERROR,
                message=message,
                source=SOURCE,
                location=DiagnosticLocation(declaration=referrer),
            )
            for i, (code, message, referrer) in enumerate(resolver.errors, start=1)
        ]
        return None, diagnostics

    contract = ContractDeclaration(
        name=decl.name,
        uri=marker.uri,
        friendly_name=marker.name,
        push_set=push_set,
        invoke_set=invoke_set,
        methods=decl.methods,
        ancestors=ancestors,
    )
    return contract, []


def binding_name_of(decl: Declaration) -> str:
    """The binding name a hub-client declaration will produce."""
    return ContractDeclaration(name=decl.name, friendly_name=decl.hub_client.name).binding_name


def check_binding_name(decl: Declaration, claimed: dict[str, str]) -> Optional[Diagnostic]:
    """
    Reject a binding name that isn't a Python identifier, or whose module
    an earlier hub client already claimed (equal names share a module).

    claimed maps module names to the declaration that owns them; an
    accepted declaration is added to it.
    """
    binding = binding_name_of(decl)
    module = naming.module_name(binding)

    if not naming.is_identifier(binding) or module in RESERVED_MODULES:
        code = DiagnosticCode.INVALID_BINDING_NAME
        message = f"Hub client '{decl.name}' would produce binding '{binding}', which is not a usable class name"
    else:
        owner = claimed.get(module)
        if owner is None:
            claimed[module] = decl.name
            return None
        code = DiagnosticCode.DUPLICATE_BINDING_NAME
        message = (
            f"Hub client '{decl.name}' would produce binding '{binding}' "
            f"(module {module}), which clashes with '{owner}'"
        )

    return Diagnostic(
        id=f"{decl.name}:d001",
        code=code,
        level=DiagnosticLevel.ERROR,
        message=message,
        source=SOURCE,
        location=DiagnosticLocation(declaration=decl.name),
    )


def discover(document: DeclarationDocument) -> DiscoveryResult:
    """
    Run the discovery pre-pass.

    Every hub-client declaration appears in ``order``; it lands either in
    ``contracts`` or in ``failures``.
    """
    registry = scan_markers(document)
    result = DiscoveryResult(document=document, registry=registry)
    claimed: dict[str, str] = {}

    for name in registry.get(MarkerKind.HUB_CLIENT):
        result.order.append(name)
        decl = document.get(name)

        diagnostic = check_binding_name(decl, claimed)
        if diagnostic is not None:
            log.warning("binding_name_rejected", contract=name, code=diagnostic.code.value)
            result.failures[name] = [diagnostic]
            continue

        contract, diagnostics = resolve_contract(document, decl)
        if contract is None:
            log.warning("contract_unresolved", contract=name, errors=len(diagnostics))
            result.failures[name] = diagnostics
        else:
            log.verbose("contract_resolved", contract=name, separated=contract.is_separated)
            result.contracts[name] = contract

    log.info("discovery_complete", markers=registry.summary(), failed=len(result.failures))
    return result
