"""
Rule Infrastructure

- Rule: a structural check over a walked, deduplicated contract
- RuleViolation: one failure reported by a rule
- RuleRegistry: central registry the validator evaluates in full

Rules never short-circuit each other; every registered rule runs and
every violation becomes a diagnostic.
"""

from dataclasses import dataclass, field
from typing import Callable, List, Optional

from hubgen.core.context import ContractContext
from hubgen.ir.enums import DiagnosticCode, FixKind
from hubgen.ir.schema import DiagnosticLocation, FixSuggestion, MethodSignature


@dataclass
class RuleViolation:
    """A single rule failure."""

    message: str
    location: DiagnosticLocation
    fixes: tuple[FixSuggestion, ...] = field(default_factory=tuple)


@dataclass
class Rule:
    """
    A named structural rule.

    The check function receives the pipeline context after walk and
    dedup and returns one violation per offending method.
    """

    id: str                                                  # e.g. "PUSH_RETURNS_UNIT"
    code: DiagnosticCode
    description: str
    check_fn: Callable[[ContractContext], List[RuleViolation]]

    def check(self, ctx: ContractContext) -> List[RuleViolation]:
        return list(self.check_fn(ctx))


class RuleRegistry:
    """
    Central registry of contract rules.

    Usage:
        RuleRegistry.register(my_rule)
        results = RuleRegistry.check_all(ctx)
    """

    _rules: dict[str, Rule] = {}

    @classmethod
    def register(cls, rule: Rule) -> None:
        cls._rules[rule.id] = rule

    @classmethod
    def unregister(cls, rule_id: str) -> None:
        cls._rules.pop(rule_id, None)

    @classmethod
    def get(cls, rule_id: str) -> Optional[Rule]:
        return cls._rules.get(rule_id)

    @classmethod
    def list_all(cls) -> List[str]:
        """List all registered rule IDs in registration order."""
        return list(cls._rules.keys())

    @classmethod
    def check_all(cls, ctx: ContractContext) -> List[tuple[Rule, RuleViolation]]:
        """Evaluate every rule; returns (rule, violation) pairs."""
        results = []
        for rule in cls._rules.values():
            for violation in rule.check(ctx):
                results.append((rule, violation))
        return results


def make_fix(
    kind: FixKind,
    title: str,
    owner: str,
    method: MethodSignature,
    target: str,
) -> FixSuggestion:
    """Build a fix with a key that stays stable across runs."""
    return FixSuggestion(
        key=f"{kind.value}:{owner}.{method.signature_key}",
        kind=kind,
        title=title,
        declaration=owner,
        method=method.signature_key,
        target=target,
    )
