"""
Compilation Results — The complete output of a hubgen run.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from hubgen import __version__
from hubgen.ir.bindings import BindingManifest, ClientBinding, FakeBinding, RegistrationHelper
from hubgen.ir.enums import CompileStatus
from hubgen.ir.schema import Diagnostic, IRModel, TraceEntry, ValidatedContract


class CompiledContract(IRModel):
    """Everything produced for one contract."""

    contract_name: str
    status: CompileStatus
    validated: Optional[ValidatedContract] = None
    binding: Optional[ClientBinding] = None
    source: Optional[str] = Field(None, description="Rendered binding module")
    diagnostics: tuple[Diagnostic, ...] = Field(default_factory=tuple)
    trace: tuple[TraceEntry, ...] = Field(default_factory=tuple)

    @property
    def manifest(self) -> Optional[BindingManifest]:
        return self.binding.manifest if self.binding else None


class CompiledFake(IRModel):
    """Everything produced for one fake target."""

    target: str
    fake: Optional[FakeBinding] = None
    source: Optional[str] = None
    diagnostics: tuple[Diagnostic, ...] = Field(default_factory=tuple)


class CompilationResult(IRModel):
    """The complete output of compiling one declaration document."""

    version: str = __version__
    status: CompileStatus = CompileStatus.SUCCESS
    contracts: tuple[CompiledContract, ...] = Field(default_factory=tuple)
    registration: Optional[RegistrationHelper] = None
    registration_source: Optional[str] = None
    fakes: tuple[CompiledFake, ...] = Field(default_factory=tuple)
    diagnostics: tuple[Diagnostic, ...] = Field(
        default_factory=tuple,
        description="Every diagnostic from discovery, contracts and fakes",
    )

    def contract(self, name: str) -> Optional[CompiledContract]:
        """Get a compiled contract by contract or binding name."""
        for compiled in self.contracts:
            if compiled.contract_name == name:
                return compiled
            if compiled.binding and compiled.binding.name == name:
                return compiled
        return None

    def fake(self, target: str) -> Optional[CompiledFake]:
        for compiled in self.fakes:
            if compiled.target == target:
                return compiled
        return None

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.is_error]
