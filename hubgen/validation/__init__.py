"""
Validation Module

Structural rules checked over every contract, and batch application
of the fixes they suggest.

Importing this package registers the built-in rules.
"""

from hubgen.validation.rules import (
    Rule,
    RuleRegistry,
    RuleViolation,
    make_fix,
)

from hubgen.validation.bridge_rules import (
    NO_METHODS_ON_BRIDGE,
    check_no_methods_on_bridge,
)

from hubgen.validation.shape_rules import (
    INVOKE_IS_ASYNC,
    PUSH_RETURNS_UNIT,
    check_invoke_is_async,
    check_push_returns_unit,
)

from hubgen.validation.fixes import (
    apply_fix,
    apply_fixes,
    select_fixes,
)

__all__ = [
    # Core
    "Rule",
    "RuleRegistry",
    "RuleViolation",
    "make_fix",
    # Bridge rules
    "NO_METHODS_ON_BRIDGE",
    "check_no_methods_on_bridge",
    # Shape rules
    "PUSH_RETURNS_UNIT",
    "INVOKE_IS_ASYNC",
    "check_push_returns_unit",
    "check_invoke_is_async",
    # Fixes
    "apply_fix",
    "apply_fixes",
    "select_fixes",
]
