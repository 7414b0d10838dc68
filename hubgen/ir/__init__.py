"""
IR — Intermediate Representation

Declarations, diagnostics and the models the synthesizers produce.
Generated source is a rendering of these models.
"""

from hubgen.ir.bindings import (
    DEFAULT_RECONNECT_POLICY,
    BackoffTier,
    BindingManifest,
    ClientBinding,
    FakeBinding,
    FakeInvokeMember,
    FakePushMember,
    InvokeMember,
    MemberDescriptor,
    PushMember,
    ReconnectPolicy,
    Registration,
    RegistrationEntry,
    RegistrationHelper,
)
from hubgen.ir.enums import (
    CompileStatus,
    DiagnosticCode,
    DiagnosticLevel,
    FixKind,
    MarkerKind,
    ReturnKind,
    Role,
    ServiceLifetime,
)
from hubgen.ir.results import CompilationResult, CompiledContract, CompiledFake
from hubgen.ir.schema import (
    ContractDeclaration,
    Declaration,
    DeclarationDocument,
    Diagnostic,
    DiagnosticLocation,
    FixSuggestion,
    HubClientMarker,
    MethodSetDeclaration,
    MethodSignature,
    Parameter,
    ReturnType,
    TraceEntry,
    ValidatedContract,
    WalkedMethod,
)

__all__ = [
    # Enums
    "CompileStatus",
    "DiagnosticCode",
    "DiagnosticLevel",
    "FixKind",
    "MarkerKind",
    "ReturnKind",
    "Role",
    "ServiceLifetime",
    # Declarations
    "Parameter",
    "ReturnType",
    "MethodSignature",
    "MethodSetDeclaration",
    "ContractDeclaration",
    "WalkedMethod",
    "ValidatedContract",
    "HubClientMarker",
    "Declaration",
    "DeclarationDocument",
    # Diagnostics
    "Diagnostic",
    "DiagnosticLocation",
    "FixSuggestion",
    "TraceEntry",
    # Bindings
    "MemberDescriptor",
    "BindingManifest",
    "PushMember",
    "InvokeMember",
    "Registration",
    "ClientBinding",
    "BackoffTier",
    "ReconnectPolicy",
    "DEFAULT_RECONNECT_POLICY",
    "RegistrationEntry",
    "RegistrationHelper",
    "FakeInvokeMember",
    "FakePushMember",
    "FakeBinding",
    # Results
    "CompiledContract",
    "CompiledFake",
    "CompilationResult",
]
