"""
Binding Models — What the synthesizers produce.

ClientBinding describes one generated client. BindingManifest is the
structural surface emitted beside it, which is all the fake synthesizer
ever looks at. FakeBinding describes the generated test double.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from hubgen import __manifest_version__
from hubgen.ir.enums import Role, ServiceLifetime
from hubgen.ir.schema import IRModel, Parameter


# ============================================================================
# Manifest
# ============================================================================

class MemberDescriptor(IRModel):
    """One member of a realized binding surface."""

    identifier: str = Field(..., description="Declared method name")
    wire_name: str = Field(..., description="Name used on the wire")
    role: Role
    attribute: str = Field(..., description="Callback slot (push) or wrapper method (invoke)")
    handler: Optional[str] = Field(None, description="Dispatch thunk (push only)")
    parameters: tuple[Parameter, ...] = Field(default_factory=tuple)
    result_type: Optional[str] = Field(None, description="Awaited result type (invoke only)")


class BindingManifest(IRModel):
    """Ordered push/invoke descriptors of a generated binding."""

    version: str = __manifest_version__
    binding_name: str
    binding_module: str
    contract_name: str
    hub_uri: str
    cancellation_type: str = "CancellationToken"
    push: tuple[MemberDescriptor, ...] = Field(default_factory=tuple)
    invoke: tuple[MemberDescriptor, ...] = Field(default_factory=tuple)

    def member(self, wire_name: str) -> Optional[MemberDescriptor]:
        """Find a member by wire name in either list."""
        for descriptor in self.push + self.invoke:
            if descriptor.wire_name == wire_name:
                return descriptor
        return None


# ============================================================================
# Client Binding
# ============================================================================

class PushMember(IRModel):
    """A server-to-client method: callback slot plus dispatch thunk."""

    identifier: str
    wire_name: str
    slot_name: str
    thunk_name: str
    parameters: tuple[Parameter, ...] = Field(default_factory=tuple)


class InvokeMember(IRModel):
    """A client-to-server method: typed async call wrapper."""

    identifier: str
    wire_name: str
    method_name: str
    parameters: tuple[Parameter, ...] = Field(default_factory=tuple)
    result_type: Optional[str] = None


class Registration(IRModel):
    """Wire name -> thunk registration entry."""

    wire_name: str
    thunk_name: str


class ClientBinding(IRModel):
    """The generated client for one contract."""

    name: str
    contract_name: str
    uri: str
    module_name: str
    push: tuple[PushMember, ...] = Field(default_factory=tuple)
    invoke: tuple[InvokeMember, ...] = Field(default_factory=tuple)
    registrations: tuple[Registration, ...] = Field(default_factory=tuple)
    manifest: BindingManifest


# ============================================================================
# Registration Helper
# ============================================================================

class BackoffTier(IRModel):
    """A run of reconnect attempts sharing one delay."""

    attempts: int = Field(..., ge=0)
    delay_seconds: float = Field(..., ge=0.0)


class ReconnectPolicy(IRModel):
    """
    Tiered reconnect backoff.

    The default mirrors the usual client behavior: 10 quick retries,
    then 5 slower ones, then 2 long waits before giving up.
    """

    tiers: tuple[BackoffTier, ...] = Field(default_factory=lambda: (
        BackoffTier(attempts=10, delay_seconds=1.0),
        BackoffTier(attempts=5, delay_seconds=3.0),
        BackoffTier(attempts=2, delay_seconds=10.0),
    ))

    def delays(self) -> list[float]:
        """All delays in order, one per attempt."""
        out: list[float] = []
        for tier in self.tiers:
            out.extend([tier.delay_seconds] * tier.attempts)
        return out

    def next_delay(self, attempt: int) -> Optional[float]:
        """Delay before the given zero-based retry attempt, or None to give up."""
        delays = self.delays()
        if 0 <= attempt < len(delays):
            return delays[attempt]
        return None

    @property
    def total_attempts(self) -> int:
        return sum(t.attempts for t in self.tiers)


DEFAULT_RECONNECT_POLICY = ReconnectPolicy()


class RegistrationEntry(IRModel):
    """One binding exposed by the registration helper."""

    binding_name: str
    binding_module: str
    hub_uri: str
    method_name: str


class RegistrationHelper(IRModel):
    """The aggregate DI registration helper for all generated bindings."""

    function_name: str = "register_hub_clients"
    builder_name: str = "HubClientRegistrations"
    entries: tuple[RegistrationEntry, ...] = Field(default_factory=tuple)
    reconnect_policy: ReconnectPolicy = Field(default_factory=ReconnectPolicy)
    default_lifetime: ServiceLifetime = ServiceLifetime.SINGLETON


# ============================================================================
# Fake Binding
# ============================================================================

class FakeInvokeMember(IRModel):
    """Test-double side of an invoke method."""

    identifier: str
    wire_name: str
    method_name: str
    calls_attribute: str
    behavior_attribute: str
    parameters: tuple[Parameter, ...] = Field(default_factory=tuple)
    default_result: str = Field("None", description="Python literal returned in non-strict mode")


class FakePushMember(IRModel):
    """Test-double side of a push method."""

    identifier: str
    wire_name: str
    slot_name: str
    events_attribute: str
    simulate_name: str
    wait_name: str
    parameters: tuple[Parameter, ...] = Field(default_factory=tuple)


class FakeBinding(IRModel):
    """The generated test double for one binding."""

    name: str
    binding_name: str
    binding_module: str
    invoke: tuple[FakeInvokeMember, ...] = Field(default_factory=tuple)
    push: tuple[FakePushMember, ...] = Field(default_factory=tuple)

    def invoke_member(self, wire_name: str) -> Optional[FakeInvokeMember]:
        for member in self.invoke:
            if member.wire_name == wire_name:
                return member
        return None

    def push_member(self, wire_name: str) -> Optional[FakePushMember]:
        for member in self.push:
            if member.wire_name == wire_name:
                return member
        return None
