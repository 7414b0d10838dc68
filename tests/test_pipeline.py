"""
Tests for the engine and the full compilation pipeline.
"""

from hubgen.core.context import CompileRequest, ContractContext
from hubgen.core.engine import (
    Engine,
    Pipeline,
    compile_document,
    get_engine,
    setup_default_pipeline,
)
from hubgen.core.options import GeneratorOptions
from hubgen.discovery.loader import parse_declaration, parse_document
from hubgen.ir.bindings import BindingManifest
from hubgen.ir.enums import CompileStatus, DiagnosticCode, DiagnosticLevel, FixKind
from hubgen.ir.schema import ContractDeclaration
from hubgen.passes import check_marker, package, walk


def test_compile_request_defaults_id_to_contract():
    request = CompileRequest(contract=ContractDeclaration(name="IHub", uri="/hub"))
    assert request.request_id == "IHub"


def test_context_from_request():
    contract = ContractDeclaration(name="IHub", uri="/hub")
    ctx = ContractContext.from_request(CompileRequest(contract=contract))
    assert ctx.contract is contract
    assert ctx.status == CompileStatus.SUCCESS


def test_global_engine_has_default_pipeline():
    assert "default" in get_engine().list_pipelines()


class TestEndToEnd:
    """Whole-document compilations."""

    def test_chat_contract(self, engine, chat_document):
        """One push and one invoke method produce a binding, a registration and a fake."""
        result = engine.compile(chat_document)

        assert result.status == CompileStatus.SUCCESS
        assert result.diagnostics == ()

        binding = result.contract("IChatHubContract").binding
        assert binding.name == "ChatHubClient"
        assert [m.slot_name for m in binding.push] == ["on_user_joined"]
        assert [m.method_name for m in binding.invoke] == ["invoke_send_message"]
        assert [(r.wire_name, r.thunk_name) for r in binding.registrations] == [
            ("UserJoined", "_user_joined_handler"),
        ]

        assert [e.method_name for e in result.registration.entries] == ["with_chat_hub_client"]

        fake = result.fake("ChatHubClient").fake
        assert fake.name == "FakeChatHubClient"
        assert [m.calls_attribute for m in fake.invoke] == ["send_message_calls"]
        assert [m.simulate_name for m in fake.push] == ["simulate_user_joined"]

    def test_method_on_bridge(self, engine, bridge_method_document):
        """Ping() on the bridge: one HG0001 with a move fix per side, nothing emitted."""
        result = engine.compile(bridge_method_document)

        assert result.status == CompileStatus.FAILED
        assert len(result.errors) == 1

        diagnostic = result.errors[0]
        assert diagnostic.code == DiagnosticCode.METHOD_ON_BRIDGE
        assert diagnostic.location.method == "Ping"
        assert {f.kind for f in diagnostic.fixes} == {FixKind.MOVE_TO_PUSH, FixKind.MOVE_TO_INVOKE}

        compiled = result.contract("IChatHubContract")
        assert compiled.binding is None
        assert compiled.source is None
        assert result.registration.entries == ()

    def test_failing_contract_does_not_block_others(self, engine):
        document = parse_document({"declarations": [
            {"name": "IEvents", "methods": [{"name": "Joined", "returns": "int"}]},
            {"name": "IBad", "markers": {"hub_client": {"uri": "/bad", "push": "IEvents"}}},
            {"name": "IGood", "methods": [{"name": "Ping"}], "markers": {"hub_client": {"uri": "/good"}}},
            {"name": "IUnresolved", "markers": {"hub_client": {"uri": "/u", "push": "INope"}}},
        ]})
        result = engine.compile(document)

        assert result.status == CompileStatus.PARTIAL
        assert result.contract("IGood").status == CompileStatus.SUCCESS
        assert result.contract("IBad").status == CompileStatus.FAILED
        assert result.contract("IUnresolved").status == CompileStatus.FAILED
        assert [e.binding_name for e in result.registration.entries] == ["GoodClient"]
        assert {d.code for d in result.errors} == {
            DiagnosticCode.PUSH_RETURN_SHAPE,
            DiagnosticCode.UNRESOLVED_REFERENCE,
        }

    def test_duplicates_are_not_errors(self, engine):
        document = parse_document({"declarations": [
            {"name": "IBase", "methods": [{"name": "Joined"}]},
            {"name": "IEvents", "extends": ["IBase"], "methods": [{"name": "Joined"}]},
            {"name": "IHub", "markers": {"hub_client": {"uri": "/hub", "push": "IEvents"}}},
        ]})
        result = engine.compile(document)

        assert result.status == CompileStatus.SUCCESS
        assert [d.code for d in result.diagnostics] == [DiagnosticCode.DUPLICATE_SIGNATURE]
        assert result.diagnostics[0].level == DiagnosticLevel.INFO
        assert len(result.contract("IHub").binding.push) == 1

    def test_repeated_binding_name_fails_later_contract(self, engine):
        document = parse_document({"declarations": [
            {"name": "IOne", "methods": [{"name": "Ping"}],
             "markers": {"hub_client": {"uri": "/one", "name": "SharedClient"}}},
            {"name": "ITwo", "methods": [{"name": "Pong"}],
             "markers": {"hub_client": {"uri": "/two", "name": "SharedClient"}}},
        ]})
        result = engine.compile(document)

        assert result.status == CompileStatus.PARTIAL
        assert result.contract("IOne").status == CompileStatus.SUCCESS
        assert result.contract("ITwo").status == CompileStatus.FAILED
        assert [d.code for d in result.errors] == [DiagnosticCode.DUPLICATE_BINDING_NAME]
        assert [e.hub_uri for e in result.registration.entries] == ["/one"]

    def test_overloaded_push_methods_warn(self, engine):
        document = parse_document({"declarations": [
            {"name": "IEvents", "methods": [
                {"name": "Notify", "params": [{"name": "count", "type": "int"}]},
                {"name": "Notify", "params": [{"name": "text", "type": "str"}]},
            ]},
            {"name": "IHub", "markers": {"hub_client": {"uri": "/hub", "push": "IEvents"}}},
        ]})
        result = engine.compile(document)

        assert result.status == CompileStatus.SUCCESS
        assert [d.code for d in result.diagnostics] == [DiagnosticCode.SHARED_WIRE_NAME]
        assert result.diagnostics[0].level == DiagnosticLevel.WARNING

    def test_unusual_names_render_valid_source(self, engine):
        document = parse_document({"declarations": [
            {"name": "IEvents", "methods": [
                {"name": "Joined", "params": [
                    {"name": "user-name", "type": "str"},
                    {"name": "user_name", "type": "str"},
                ]},
            ]},
            {"name": "IHub", "markers": {"hub_client": {"uri": '/odd"""\\path', "push": "IEvents"}}},
        ], "fakes": ["HubClient"]})
        result = engine.compile(document)

        assert result.status == CompileStatus.SUCCESS
        compiled = result.contract("IHub")
        compile(compiled.source, "hub_client.py", "exec")
        compile(result.registration_source, "registration.py", "exec")
        compile(result.fake("HubClient").source, "fake_hub_client.py", "exec")
        assert [p.name for p in compiled.binding.push[0].parameters] == ["user_name", "user_name_2"]


class TestFakeTargets:
    """Fake targets that can't be produced."""

    def _document(self, fakes):
        return parse_document({
            "declarations": [
                {"name": "IEvents", "methods": [{"name": "Joined", "returns": "int"}]},
                {"name": "IBad", "markers": {"hub_client": {"uri": "/bad", "push": "IEvents"}}},
                {"name": "IGood", "methods": [{"name": "Ping"}], "markers": {"hub_client": {"uri": "/good"}}},
            ],
            "fakes": fakes,
        })

    def test_unknown_target(self, engine):
        result = engine.compile(self._document(["NobodyClient", "GoodClient"]))

        assert result.fake("GoodClient").fake is not None
        failed = result.fake("NobodyClient")
        assert failed.fake is None
        assert failed.diagnostics[0].code == DiagnosticCode.UNKNOWN_FAKE_TARGET
        assert "no hub client produces it" in failed.diagnostics[0].message
        assert failed.diagnostics[0].id == "fake:NobodyClient:d001"

    def test_target_of_failed_contract(self, engine):
        result = engine.compile(self._document(["BadClient"]))
        message = result.fake("BadClient").diagnostics[0].message
        assert "its contract failed to compile" in message

    def test_target_names_contract(self, engine):
        result = engine.compile(self._document(["IGood"]))
        message = result.fake("IGood").diagnostics[0].message
        assert "fake targets name bindings" in message

    def test_unrecognized_manifest(self, engine):
        manifest = BindingManifest(
            version="0",
            binding_name="OldClient",
            binding_module="old_client",
            contract_name="IOld",
            hub_uri="/old",
        )
        compiled = engine.compile_fake(manifest)
        assert compiled.fake is None
        assert compiled.diagnostics[0].code == DiagnosticCode.UNRECOGNIZED_MANIFEST


class TestEngine:
    """Caching, determinism and error containment."""

    def test_deterministic(self, chat_document):
        first = Engine()
        second = Engine()
        setup_default_pipeline(first)
        setup_default_pipeline(second)
        assert first.compile(chat_document) == second.compile(chat_document)

    def test_unchanged_contract_reuses_output(self, engine, chat_document):
        first = engine.compile(chat_document)
        size = engine.cache_size
        second = engine.compile(chat_document)

        assert second.contract("IChatHubContract") is first.contract("IChatHubContract")
        assert second.fake("ChatHubClient") is first.fake("ChatHubClient")
        assert engine.cache_size == size

    def test_reregistering_pipeline_drops_its_contracts(self, engine, chat_document):
        first = engine.compile(chat_document)
        setup_default_pipeline(engine)

        assert engine.cache_size == 1  # the fake survives
        second = engine.compile(chat_document)
        assert second.contract("IChatHubContract") is not first.contract("IChatHubContract")
        assert second.contract("IChatHubContract") == first.contract("IChatHubContract")

    def test_options_change_recompiles(self, engine, chat_document):
        first = engine.compile(chat_document)
        second = engine.compile(chat_document, GeneratorOptions(cancellation_type="StopToken"))
        assert second.contract("IChatHubContract") is not first.contract("IChatHubContract")

    def test_unrelated_edit_keeps_cached_contract(self, engine, chat_document):
        first = engine.compile(chat_document)
        other = parse_declaration(
            {"name": "IOther", "methods": [{"name": "Ping"}], "markers": {"hub_client": {"uri": "/other"}}}
        )
        edited = chat_document.model_copy(
            update={"declarations": chat_document.declarations + (other,)}
        )

        second = engine.compile(edited)

        assert second.contract("IChatHubContract") is first.contract("IChatHubContract")
        assert second.contract("IOther").status == CompileStatus.SUCCESS

    def test_pass_exception_becomes_diagnostic(self, engine):
        def explode(ctx):
            raise RuntimeError("boom")

        engine.register_pipeline(Pipeline(id="broken", name="Broken", passes=[check_marker, walk, explode, package]))
        compiled = engine.compile_contract(ContractDeclaration(name="IHub", uri="/hub"), pipeline_id="broken")

        assert compiled.status == CompileStatus.FAILED
        assert compiled.diagnostics[-1].code == DiagnosticCode.PASS_ERROR
        assert "explode" in compiled.diagnostics[-1].message
        assert compiled.trace[-1].action == "error"

    def test_unknown_pipeline(self, engine):
        compiled = engine.compile_contract(ContractDeclaration(name="IHub", uri="/hub"), pipeline_id="nope")
        assert compiled.status == CompileStatus.FAILED
        assert "not registered" in compiled.diagnostics[0].message

    def test_halts_after_failed_validation(self, engine):
        compiled = engine.compile_contract(ContractDeclaration(name="IHub", uri=""))
        passes = [t.pass_name for t in compiled.trace]
        assert "p40_synthesize" not in passes
        assert compiled.trace[-1].action == "pipeline_halted"

    def test_trace_and_ids_stable(self, engine, chat_document):
        compiled = engine.compile(chat_document).contract("IChatHubContract")
        assert [t.id for t in compiled.trace][:2] == ["IChatHubContract:t001", "IChatHubContract:t002"]
        assert [t.pass_name for t in compiled.trace] == [
            "p00_check_marker",
            "p10_walk",
            "p20_dedup",
            "p30_validate",
            "p40_synthesize",
            "p50_render",
            "p90_package",
        ]

    def test_compile_document_helper(self, chat_document):
        assert compile_document(chat_document).status == CompileStatus.SUCCESS

    def test_unusable_friendly_name(self, engine):
        compiled = engine.compile_contract(
            ContractDeclaration(name="IHub", uri="/hub", friendly_name="Chat Client")
        )
        assert compiled.status == CompileStatus.FAILED
        assert compiled.diagnostics[0].code == DiagnosticCode.INVALID_BINDING_NAME
        assert compiled.source is None
