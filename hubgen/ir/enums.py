"""
IR Enums — All roles, kinds, levels and codes.

No stringly-typed constants scattered across passes.
"""

from enum import Enum


# ============================================================================
# Declarations
# ============================================================================

class Role(str, Enum):
    """
    Which direction a method travels.

    - PUSH: server-to-client, fire-and-forget, no result
    - INVOKE: client-to-server, request with an optional result
    """

    PUSH = "push"
    INVOKE = "invoke"


class ReturnKind(str, Enum):
    """
    Shape of a declared return type.

    Only the two async kinds are legal in a valid contract; the
    synchronous kinds exist so the validator can report them.
    """

    UNIT_ASYNC = "unit_async"      # Awaitable[None]
    VALUE_ASYNC = "value_async"    # Awaitable[T]
    VOID = "void"                  # None
    VALUE = "value"                # T


class MarkerKind(str, Enum):
    """Declarative markers recognized by the discovery pre-pass."""

    HUB_CLIENT = "hub_client"        # On a bridge declaration (uri, name, sides)
    INVOKE_METHOD = "invoke_method"  # On a method: force invoke classification
    GENERATE_FAKE = "generate_fake"  # Compilation-scoped: bindings to fake


# ============================================================================
# Diagnostics
# ============================================================================

class DiagnosticLevel(str, Enum):
    """Severity levels for diagnostics."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class DiagnosticCode(str, Enum):
    """Stable diagnostic identifiers."""

    METHOD_ON_BRIDGE = "HG0001"
    PUSH_RETURN_SHAPE = "HG0002"
    INVOKE_RETURN_SHAPE = "HG0003"
    MISSING_URI = "HG0004"
    DUPLICATE_SIGNATURE = "HG0005"
    UNRECOGNIZED_MANIFEST = "HG0006"
    UNKNOWN_FAKE_TARGET = "HG0007"
    UNRESOLVED_REFERENCE = "HG0008"
    INHERITANCE_CYCLE = "HG0009"
    PASS_ERROR = "HG0010"
    DUPLICATE_BINDING_NAME = "HG0011"
    INVALID_BINDING_NAME = "HG0012"
    SHARED_WIRE_NAME = "HG0013"


class FixKind(str, Enum):
    """Kinds of mechanical fixes a diagnostic can propose."""

    MOVE_TO_PUSH = "move_to_push"
    MOVE_TO_INVOKE = "move_to_invoke"
    DROP_PAYLOAD = "drop_payload"          # Awaitable[T] -> Awaitable[None]
    WRAP_UNIT_ASYNC = "wrap_unit_async"    # X -> Awaitable[None]
    WRAP_VALUE_ASYNC = "wrap_value_async"  # T -> Awaitable[T]


# ============================================================================
# Status & Runtime
# ============================================================================

class CompileStatus(str, Enum):
    """Overall status of compiling one contract or a whole document."""

    SUCCESS = "success"
    PARTIAL = "partial"  # Some contracts or fakes failed
    FAILED = "failed"


class ServiceLifetime(str, Enum):
    """Lifetime under which a binding is registered with the DI container."""

    SINGLETON = "singleton"
    SCOPED = "scoped"
    TRANSIENT = "transient"
