"""
IR Schema — Pydantic models for contract declarations and diagnostics.

Every model is frozen and every collection is a tuple, so two structurally
equal declaration graphs compare and hash equal. The engine's cache relies
on that.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from hubgen.ir.enums import (
    DiagnosticCode,
    DiagnosticLevel,
    FixKind,
    ReturnKind,
    Role,
)

# Wrappers recognized as "asynchronous" in declaration text
ASYNC_WRAPPERS = ("Awaitable", "Task")


class IRModel(BaseModel):
    """Base for all immutable IR models."""

    model_config = ConfigDict(frozen=True)


# ============================================================================
# Signatures
# ============================================================================

class Parameter(IRModel):
    """A single method parameter."""

    name: str = Field(..., description="Parameter name")
    type: str = Field(..., description="Type name as written in the declaration")


class ReturnType(IRModel):
    """
    Declared return type of a method.

    Only UNIT_ASYNC and VALUE_ASYNC are legal in a validated contract.
    """

    kind: ReturnKind
    type_name: Optional[str] = Field(None, description="Payload type for VALUE/VALUE_ASYNC")

    @property
    def is_async(self) -> bool:
        return self.kind in (ReturnKind.UNIT_ASYNC, ReturnKind.VALUE_ASYNC)

    @property
    def has_payload(self) -> bool:
        return self.kind in (ReturnKind.VALUE, ReturnKind.VALUE_ASYNC)

    @classmethod
    def unit_async(cls) -> "ReturnType":
        return cls(kind=ReturnKind.UNIT_ASYNC)

    @classmethod
    def value_async(cls, type_name: str) -> "ReturnType":
        return cls(kind=ReturnKind.VALUE_ASYNC, type_name=type_name)

    @classmethod
    def parse(cls, text: Optional[str]) -> "ReturnType":
        """
        Parse declaration text into a ReturnType.

        Examples:
            "Awaitable[None]" -> UNIT_ASYNC
            "Awaitable[str]"  -> VALUE_ASYNC(str)
            "None"            -> VOID
            "int"             -> VALUE(int)
        """
        text = (text or "").strip()
        if text in ("", "None"):
            return cls(kind=ReturnKind.VOID)

        for wrapper in ASYNC_WRAPPERS:
            if text == wrapper:
                return cls(kind=ReturnKind.UNIT_ASYNC)
            if text.startswith(wrapper + "[") and text.endswith("]"):
                inner = text[len(wrapper) + 1:-1].strip()
                if inner in ("", "None"):
                    return cls(kind=ReturnKind.UNIT_ASYNC)
                return cls(kind=ReturnKind.VALUE_ASYNC, type_name=inner)

        return cls(kind=ReturnKind.VALUE, type_name=text)

    def __str__(self) -> str:
        if self.kind == ReturnKind.UNIT_ASYNC:
            return "Awaitable[None]"
        if self.kind == ReturnKind.VALUE_ASYNC:
            return f"Awaitable[{self.type_name}]"
        if self.kind == ReturnKind.VOID:
            return "None"
        return self.type_name or "None"


class MethodSignature(IRModel):
    """A method declared on a method set (or, illegally, on a bridge)."""

    name: str = Field(..., description="Method identifier, also the wire name")
    parameters: tuple[Parameter, ...] = Field(default_factory=tuple)
    returns: ReturnType = Field(default_factory=ReturnType.unit_async)
    owner: str = Field("", description="Identity of the declaring set")
    invoke: bool = Field(False, description="Role-override marker: force invoke classification")

    @property
    def parameter_types(self) -> tuple[str, ...]:
        return tuple(p.type for p in self.parameters)

    @property
    def signature_key(self) -> str:
        """Canonical structural signature: name plus ordered parameter types."""
        return f"{self.name}({','.join(self.parameter_types)})"


def _claim_methods(methods: tuple[MethodSignature, ...], info: ValidationInfo) -> tuple[MethodSignature, ...]:
    """Stamp the declaring name onto methods that don't carry an owner yet."""
    owner = info.data.get("name", "")
    return tuple(
        m if m.owner else m.model_copy(update={"owner": owner})
        for m in methods
    )


# ============================================================================
# Resolved Declarations
# ============================================================================

class MethodSetDeclaration(IRModel):
    """
    A named, inheritable collection of method signatures.

    Ancestors are held by value, so the whole subgraph takes part in
    equality. Identity for traversal purposes is the name.
    """

    name: str
    methods: tuple[MethodSignature, ...] = Field(default_factory=tuple)
    ancestors: tuple[MethodSetDeclaration, ...] = Field(default_factory=tuple)

    @field_validator("methods")
    @classmethod
    def _own_methods(cls, methods, info: ValidationInfo):
        return _claim_methods(methods, info)


class ContractDeclaration(IRModel):
    """
    A bridge declaration: addressing metadata plus up to two method sets.

    A contract with neither side set is "unified": its own methods (and
    ancestors) are classified per method via the invoke marker.
    """

    name: str
    uri: str = Field("", description="Relative hub address; required, checked by the pipeline")
    friendly_name: Optional[str] = Field(None, description="Optional binding name override")
    push_set: Optional[MethodSetDeclaration] = None
    invoke_set: Optional[MethodSetDeclaration] = None
    methods: tuple[MethodSignature, ...] = Field(default_factory=tuple)
    ancestors: tuple[MethodSetDeclaration, ...] = Field(default_factory=tuple)

    @field_validator("methods")
    @classmethod
    def _own_methods(cls, methods, info: ValidationInfo):
        return _claim_methods(methods, info)

    @property
    def is_separated(self) -> bool:
        """True when at least one side set is referenced."""
        return self.push_set is not None or self.invoke_set is not None

    @property
    def binding_name(self) -> str:
        """Friendly name, or the declaration name by convention (IChatHub -> ChatHubClient)."""
        if self.friendly_name:
            return self.friendly_name
        name = self.name
        if len(name) > 1 and name[0] == "I" and name[1].isupper():
            name = name[1:]
        return f"{name}Client"

    def own_set(self) -> MethodSetDeclaration:
        """The bridge's own methods as a method set (for unified contracts)."""
        return MethodSetDeclaration(
            name=self.name,
            methods=self.methods,
            ancestors=self.ancestors,
        )


class WalkedMethod(IRModel):
    """A method reached by the graph walker, tagged with role and provenance."""

    method: MethodSignature
    role: Role
    provenance: str = Field(..., description="Identity of the set that declared it")

    @property
    def signature_key(self) -> str:
        return self.method.signature_key


class ValidatedContract(IRModel):
    """A contract whose flattened, deduplicated lists passed every rule."""

    contract: ContractDeclaration
    push: tuple[WalkedMethod, ...] = Field(default_factory=tuple)
    invoke: tuple[WalkedMethod, ...] = Field(default_factory=tuple)


# ============================================================================
# Flat Declaration Document (as discovered from markers)
# ============================================================================

class HubClientMarker(IRModel):
    """The bridge marker: uri, optional name, and the referenced side sets."""

    uri: str = ""
    name: Optional[str] = None
    push: Optional[str] = None
    invoke: Optional[str] = None


class Declaration(IRModel):
    """
    One entry of a declaration document.

    Ancestors are referenced by name here; discovery resolves them into
    nested MethodSetDeclarations.
    """

    name: str
    methods: tuple[MethodSignature, ...] = Field(default_factory=tuple)
    extends: tuple[str, ...] = Field(default_factory=tuple)
    hub_client: Optional[HubClientMarker] = None

    @field_validator("methods")
    @classmethod
    def _own_methods(cls, methods, info: ValidationInfo):
        return _claim_methods(methods, info)


class DeclarationDocument(IRModel):
    """A full compilation input: declarations plus the fake-generation marker."""

    declarations: tuple[Declaration, ...] = Field(default_factory=tuple)
    fakes: tuple[str, ...] = Field(default_factory=tuple, description="Binding names to fake")

    def get(self, name: str) -> Optional[Declaration]:
        """Get a declaration by name."""
        for decl in self.declarations:
            if decl.name == name:
                return decl
        return None

    def replace(self, declaration: Declaration) -> "DeclarationDocument":
        """Return a copy with the same-named declaration swapped out."""
        return self.model_copy(update={
            "declarations": tuple(
                declaration if d.name == declaration.name else d
                for d in self.declarations
            )
        })


# ============================================================================
# Diagnostics
# ============================================================================

class DiagnosticLocation(IRModel):
    """Where a diagnostic points: a declaration and optionally one of its methods."""

    declaration: str
    method: Optional[str] = None

    def __str__(self) -> str:
        if self.method:
            return f"{self.declaration}.{self.method}"
        return self.declaration


class FixSuggestion(IRModel):
    """
    A mechanical fix proposed by a diagnostic.

    The key is stable across runs so fixes can be selected and applied
    in batch.
    """

    key: str
    kind: FixKind
    title: str
    declaration: str = Field(..., description="Declaration that owns the method")
    method: str = Field(..., description="Signature key of the method to rewrite")
    target: str = Field(..., description="Destination set, or the new return type text")


class Diagnostic(IRModel):
    """A diagnostic message."""

    id: str
    code: DiagnosticCode
    level: DiagnosticLevel
    message: str
    source: str
    location: Optional[DiagnosticLocation] = None
    fixes: tuple[FixSuggestion, ...] = Field(default_factory=tuple)

    @property
    def is_error(self) -> bool:
        return self.level == DiagnosticLevel.ERROR


class TraceEntry(IRModel):
    """A single compilation trace entry."""

    id: str
    pass_name: str
    action: str
    before: Optional[str] = None
    after: Optional[str] = None
    affected_ids: tuple[str, ...] = Field(default_factory=tuple)


MethodSetDeclaration.model_rebuild()
