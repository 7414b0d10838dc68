"""
Synthesis — Models derived from validated contracts and manifests.
"""
