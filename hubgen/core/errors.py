"""
Errors — Exceptions raised by hubgen.

Compile-time contract problems are reported as diagnostics, not raised.
These exceptions cover malformed input and runtime failures.
"""


class HubGenError(Exception):
    """Base for all hubgen errors."""


class DeclarationError(HubGenError):
    """A declaration document is malformed (bad YAML shape, unknown marker)."""


class OptionsError(HubGenError):
    """A generator options file is malformed (bad YAML, wrong shape)."""


class MissingRequiredField(HubGenError):
    """A required marker field (such as the hub uri) is absent or empty."""


class ManifestError(HubGenError):
    """A binding manifest has a shape the fake synthesizer does not recognize."""


class OperationCanceled(HubGenError):
    """A wait was canceled before an item became available."""


class ChannelClosed(OperationCanceled):
    """The channel was reset while a wait on it was outstanding."""


class UnsupportedCall(HubGenError):
    """A strict fake received a call with no configured behavior."""


class HubNotStarted(HubGenError, RuntimeError):
    """A hub client was used before start() was awaited."""
