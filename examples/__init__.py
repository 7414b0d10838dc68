"""
hubgen Examples

- chat_hub.yaml: a separated chat contract with a fake target
- chat_hub_broken.yaml: the same contract with Ping() on the bridge
- compile_example.py: compile a document, print diagnostics and fixes
- fake_example.py: drive a fake client built at run time

Usage:
    python examples/compile_example.py
    python examples/fake_example.py
"""
