#!/usr/bin/env python3
"""
Compile Example

Compiles the broken chat contract, prints every diagnostic with its
fix keys, applies the first fix of each and compiles again.

Usage:
    python examples/compile_example.py
"""

from pathlib import Path

from hubgen.cli.main import format_diagnostic
from hubgen.core.engine import Engine, setup_default_pipeline
from hubgen.discovery.loader import dump_document, load_document
from hubgen.validation.fixes import apply_fixes

HERE = Path(__file__).parent


def main():
    engine = Engine()
    setup_default_pipeline(engine)

    document = load_document(HERE / "chat_hub_broken.yaml")
    result = engine.compile(document)

    print(f"Status: {result.status.value}")
    for diagnostic in result.diagnostics:
        print(format_diagnostic(diagnostic))

    fixed = apply_fixes(document, result.diagnostics)
    print()
    print("After applying the first fix of each diagnostic:")
    print(dump_document(fixed))

    result = engine.compile(fixed)
    print(f"Status: {result.status.value}")
    print(result.contract("IChatHubContract").source)


if __name__ == "__main__":
    main()
