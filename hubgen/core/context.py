"""
ContractContext — Mutable state passed between pipeline passes.

One context per contract. Each pass reads prior artifacts and mutates
only the fields it is responsible for. Diagnostic and trace ids are
derived from the contract name and a running counter, so two runs over
the same contract produce identical results.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from hubgen.core.options import GeneratorOptions
from hubgen.ir.bindings import ClientBinding
from hubgen.ir.enums import CompileStatus, DiagnosticCode, DiagnosticLevel
from hubgen.ir.results import CompiledContract
from hubgen.ir.schema import (
    ContractDeclaration,
    Diagnostic,
    DiagnosticLocation,
    FixSuggestion,
    TraceEntry,
    ValidatedContract,
    WalkedMethod,
)


@dataclass
class CompileRequest:
    """Input to the contract pipeline."""

    contract: ContractDeclaration
    options: GeneratorOptions = field(default_factory=GeneratorOptions)
    request_id: Optional[str] = None

    def __post_init__(self) -> None:
        if self.request_id is None:
            self.request_id = self.contract.name


@dataclass
class ContractContext:
    """
    Mutable context passed through pipeline passes.

    Each pass may read all fields but should only mutate
    the fields it is responsible for.
    """

    # Input
    request: CompileRequest
    contract: ContractDeclaration
    options: GeneratorOptions

    # Walker output (p10), deduplicated in place by p20
    push_methods: list[WalkedMethod] = field(default_factory=list)
    invoke_methods: list[WalkedMethod] = field(default_factory=list)
    dropped: list[WalkedMethod] = field(default_factory=list)

    # Validator output (p30)
    validated: Optional[ValidatedContract] = None

    # Synthesis output (p40, p50)
    binding: Optional[ClientBinding] = None
    source: Optional[str] = None

    # Trace and diagnostics
    trace: list[TraceEntry] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    status: CompileStatus = CompileStatus.SUCCESS

    @classmethod
    def from_request(cls, request: CompileRequest) -> "ContractContext":
        """Create a context from a compile request."""
        return cls(
            request=request,
            contract=request.contract,
            options=request.options,
        )

    def add_trace(self, pass_name: str, action: str, **kwargs: Any) -> None:
        """Add a trace entry."""
        self.trace.append(
            TraceEntry(
                id=f"{self.contract.name}:t{len(self.trace) + 1:03d}",
                pass_name=pass_name,
                action=action,
                before=kwargs.get("before"),
                after=kwargs.get("after"),
                affected_ids=tuple(kwargs.get("affected_ids", ())),
            )
        )

    def add_diagnostic(
        self,
        level: DiagnosticLevel,
        code: DiagnosticCode,
        message: str,
        source: str,
        location: Optional[DiagnosticLocation] = None,
        fixes: tuple[FixSuggestion, ...] = (),
    ) -> Diagnostic:
        """Add a diagnostic message."""
        diagnostic = Diagnostic(
            id=f"{self.contract.name}:d{len(self.diagnostics) + 1:03d}",
            level=DiagnosticLevel(level),
            code=DiagnosticCode(code),
            message=message,
            source=source,
            location=location,
            fixes=tuple(fixes),
        )
        self.diagnostics.append(diagnostic)
        return diagnostic

    def has_errors(self) -> bool:
        return any(d.is_error for d in self.diagnostics)

    def to_result(self) -> CompiledContract:
        """Convert context to the final CompiledContract."""
        return CompiledContract(
            contract_name=self.contract.name,
            status=self.status,
            validated=self.validated,
            binding=self.binding,
            source=self.source,
            diagnostics=tuple(self.diagnostics),
            trace=tuple(self.trace),
        )
