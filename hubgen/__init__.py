"""
hubgen — Hub Contract Compiler

Compiles declarative bidirectional-messaging contracts into typed client
bindings for a push/invoke protocol, and into test doubles that mimic them.

Contracts are validated structurally before anything is generated.
Generation is deterministic: the same contract always produces the same output.
"""

__version__ = "0.1.0"
__manifest_version__ = "1"
