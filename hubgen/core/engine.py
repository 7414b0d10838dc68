"""
Engine — Pipeline orchestration.

The engine runs discovery, compiles each contract through a pipeline of
passes, then builds the registration helper and the requested fakes.

Compiled contracts and fakes are memoized on structural equality of
their inputs (frozen models), so an unchanged contract reuses its
previous output object as is.

The engine is NOT where domain logic lives.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from hubgen.core.context import CompileRequest, ContractContext
from hubgen.core.errors import ManifestError
from hubgen.core.logging import CompileLogger, LogChannel, get_logger
from hubgen.core.options import GeneratorOptions
from hubgen.discovery.registry import binding_name_of, discover
from hubgen.ir.bindings import BindingManifest
from hubgen.ir.enums import CompileStatus, DiagnosticCode, DiagnosticLevel
from hubgen.ir.results import CompilationResult, CompiledContract, CompiledFake
from hubgen.ir.schema import (
    ContractDeclaration,
    DeclarationDocument,
    Diagnostic,
    DiagnosticLocation,
)
from hubgen.render.fake_source import render_fake
from hubgen.render.registration_source import render_registration
from hubgen.synthesis.fakes import synthesize_fake
from hubgen.synthesis.registration import synthesize_registration

# Type alias for a pass function
PassFn = Callable[[ContractContext], ContractContext]

log = get_logger(LogChannel.PIPELINE)


@dataclass
class Pipeline:
    """A named sequence of passes."""

    id: str
    name: str
    passes: list[PassFn]


class Engine:
    """
    Pipeline orchestrator.

    Runs passes in order, handles errors, caches and packages results.
    """

    def __init__(self) -> None:
        self._pipelines: dict[str, Pipeline] = {}
        self._contract_cache: dict[tuple, CompiledContract] = {}
        self._fake_cache: dict[tuple, CompiledFake] = {}

    def register_pipeline(self, pipeline: Pipeline) -> None:
        """Register a pipeline by ID. Replacing a pipeline drops its cached results."""
        self._pipelines[pipeline.id] = pipeline
        self._contract_cache = {
            key: value for key, value in self._contract_cache.items()
            if key[0] != pipeline.id
        }

    def list_pipelines(self) -> list[str]:
        return list(self._pipelines.keys())

    def clear_cache(self) -> None:
        self._contract_cache.clear()
        self._fake_cache.clear()

    @property
    def cache_size(self) -> int:
        return len(self._contract_cache) + len(self._fake_cache)

    # -------------------------------------------------------------------------
    # Contracts
    # -------------------------------------------------------------------------

    def compile_contract(
        self,
        contract: ContractDeclaration,
        options: Optional[GeneratorOptions] = None,
        pipeline_id: Optional[str] = None,
    ) -> CompiledContract:
        """
        Compile one resolved contract, reusing a cached result when an
        equal contract was compiled with equal options before.
        """
        options = options or GeneratorOptions()
        pipeline_id = pipeline_id or "default"

        key = (pipeline_id, contract, options)
        cached = self._contract_cache.get(key)
        if cached is not None:
            log.verbose("cache_hit", contract=contract.name)
            return cached

        result = self._run(CompileRequest(contract=contract, options=options), pipeline_id)
        self._contract_cache[key] = result
        return result

    def _run(self, request: CompileRequest, pipeline_id: str) -> CompiledContract:
        ctx = ContractContext.from_request(request)

        if pipeline_id not in self._pipelines:
            ctx.status = CompileStatus.FAILED
            ctx.add_diagnostic(
                level=DiagnosticLevel.ERROR,
                code=DiagnosticCode.PASS_ERROR,
                message=f"Pipeline '{pipeline_id}' not registered",
                source="engine",
            )
            return ctx.to_result()

        pipeline = self._pipelines[pipeline_id]
        clog = CompileLogger(request.request_id)

        for pass_fn in pipeline.passes:
            pass_name = pass_fn.__name__
            try:
                clog.pass_start(pass_name)
                ctx = pass_fn(ctx)
                clog.pass_end(pass_name)

                # No partial synthesis
                if ctx.status == CompileStatus.FAILED:
                    ctx.add_trace(pass_name=pass_name, action="pipeline_halted")
                    break

            except Exception as e:
                clog.pass_error(pass_name, e)
                ctx.status = CompileStatus.FAILED
                ctx.add_diagnostic(
                    level=DiagnosticLevel.ERROR,
                    code=DiagnosticCode.PASS_ERROR,
                    message=f"Pass '{pass_name}' failed: {e}",
                    source="engine",
                    location=DiagnosticLocation(declaration=ctx.contract.name),
                )
                ctx.add_trace(pass_name=pass_name, action="error")
                break

        clog.compile_complete(
            status=ctx.status.value,
            push=len(ctx.push_methods),
            invoke=len(ctx.invoke_methods),
            diagnostics=len(ctx.diagnostics),
        )
        return ctx.to_result()

    # -------------------------------------------------------------------------
    # Fakes
    # -------------------------------------------------------------------------

    def compile_fake(
        self,
        manifest: BindingManifest,
        options: Optional[GeneratorOptions] = None,
        target: Optional[str] = None,
    ) -> CompiledFake:
        """
        Synthesize and render the fake for one manifest.

        An unrecognized manifest becomes an HG0006 diagnostic on the
        returned CompiledFake instead of an exception.
        """
        options = options or GeneratorOptions()
        target = target or manifest.binding_name

        key = (target, manifest, options)
        cached = self._fake_cache.get(key)
        if cached is not None:
            return cached

        try:
            fake = synthesize_fake(manifest, options)
        except ManifestError as e:
            log.warning("fake_skipped", target=target, error=str(e))
            result = CompiledFake(
                target=target,
                diagnostics=(_fake_diagnostic(target, DiagnosticCode.UNRECOGNIZED_MANIFEST, str(e)),),
            )
        else:
            result = CompiledFake(
                target=target,
                fake=fake,
                source=render_fake(fake, manifest.cancellation_type),
            )

        self._fake_cache[key] = result
        return result

    # -------------------------------------------------------------------------
    # Documents
    # -------------------------------------------------------------------------

    def compile(
        self,
        document: DeclarationDocument,
        options: Optional[GeneratorOptions] = None,
        pipeline_id: Optional[str] = None,
    ) -> CompilationResult:
        """
        Compile a declaration document.

        A failing contract never blocks the others; a failing fake
        skips only that fake.
        """
        options = options or GeneratorOptions()
        discovery = discover(document)

        contracts: list[CompiledContract] = []
        for name in discovery.order:
            if name in discovery.failures:
                contracts.append(CompiledContract(
                    contract_name=name,
                    status=CompileStatus.FAILED,
                    diagnostics=tuple(discovery.failures[name]),
                ))
            else:
                contracts.append(self.compile_contract(discovery.contracts[name], options, pipeline_id))

        bindings = [c.binding for c in contracts if c.status == CompileStatus.SUCCESS and c.binding]
        registration = synthesize_registration(bindings, options)

        fakes: list[CompiledFake] = []
        by_binding = {b.name: b for b in bindings}
        declared = {c.contract_name for c in contracts}
        failed = {
            binding_name_of(document.get(c.contract_name))
            for c in contracts if c.status != CompileStatus.SUCCESS
        }
        for target in document.fakes:
            binding = by_binding.get(target)
            if binding is None:
                if target in failed:
                    reason = "its contract failed to compile"
                elif target in declared:
                    reason = "fake targets name bindings, not contracts"
                else:
                    reason = "no hub client produces it"
                fakes.append(CompiledFake(
                    target=target,
                    diagnostics=(_fake_diagnostic(
                        target,
                        DiagnosticCode.UNKNOWN_FAKE_TARGET,
                        f"Cannot generate a fake for '{target}': {reason}",
                    ),),
                ))
                continue
            fakes.append(self.compile_fake(binding.manifest, options, target))

        diagnostics = [d for c in contracts for d in c.diagnostics]
        diagnostics += [d for f in fakes for d in f.diagnostics]

        has_errors = any(d.is_error for d in diagnostics)
        produced = bool(bindings) or any(f.fake is not None for f in fakes)
        if not has_errors:
            status = CompileStatus.SUCCESS
        elif produced:
            status = CompileStatus.PARTIAL
        else:
            status = CompileStatus.FAILED

        log.info(
            "compilation_complete",
            status=status.value,
            contracts=len(contracts),
            bindings=len(bindings),
            fakes=sum(1 for f in fakes if f.fake is not None),
            errors=sum(1 for d in diagnostics if d.is_error),
        )

        return CompilationResult(
            status=status,
            contracts=tuple(contracts),
            registration=registration,
            registration_source=render_registration(registration),
            fakes=tuple(fakes),
            diagnostics=tuple(diagnostics),
        )


def _fake_diagnostic(target: str, code: DiagnosticCode, message: str) -> Diagnostic:
    return Diagnostic(
        id=f"fake:{target}:d001",
        code=code,
        level=DiagnosticLevel.ERROR,
        message=message,
        source="fakes",
        location=DiagnosticLocation(declaration=target),
    )


def setup_default_pipeline(engine: Engine) -> None:
    """Register the default contract pipeline."""
    from hubgen.passes import (
        check_marker,
        dedup,
        package,
        render,
        synthesize,
        validate,
        walk,
    )

    engine.register_pipeline(Pipeline(
        id="default",
        name="Default hubgen pipeline",
        passes=[
            check_marker,
            walk,
            dedup,
            validate,     # halts on any error so far
            synthesize,
            render,
            package,
        ],
    ))


# Global engine instance
_engine: Optional[Engine] = None


def get_engine() -> Engine:
    """Get or create the global engine instance, with the default pipeline."""
    global _engine
    if _engine is None:
        _engine = Engine()
        setup_default_pipeline(_engine)
    return _engine


def compile_document(
    document: DeclarationDocument,
    options: Optional[GeneratorOptions] = None,
) -> CompilationResult:
    """Convenience function: compile with the global engine."""
    return get_engine().compile(document, options)
