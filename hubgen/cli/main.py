"""
hubgen CLI — Compile, check and fix hub contract declarations.
"""

import argparse
import sys
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from hubgen import __version__
from hubgen.core.engine import get_engine
from hubgen.core.errors import DeclarationError, OptionsError
from hubgen.core.logging import configure_logging
from hubgen.core.options import GeneratorOptions, load_options
from hubgen.discovery.loader import dump_document, load_document
from hubgen.ir.enums import CompileStatus
from hubgen.ir.results import CompilationResult
from hubgen.ir.schema import Diagnostic
from hubgen.ir.serialization import save_manifest, to_json
from hubgen.render.package_source import render_package_init
from hubgen.validation.fixes import apply_fixes


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "document",
        type=str,
        help="Path to the YAML declaration document",
    )
    parser.add_argument(
        "--options",
        type=str,
        default=None,
        help="YAML generator options file",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["silent", "info", "verbose", "debug"],
        default=None,
        help="Log verbosity level (default: info, or HUBGEN_LOG_LEVEL env var)",
    )
    parser.add_argument(
        "--log-channel",
        type=str,
        default=None,
        help="Comma-separated log channels to show "
             "(pipeline,discovery,validate,synthesis,render,fake,runtime,system). Default: all",
    )
    parser.add_argument(
        "--log-format",
        choices=["console", "json"],
        default=None,
        help="Log output format (default: console, or HUBGEN_LOG_FORMAT env var)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hubgen",
        description="Hub contract compiler: typed client bindings and test fakes",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"hubgen {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    compile_parser = subparsers.add_parser("compile", help="Generate bindings, registration and fakes")
    _add_common_arguments(compile_parser)
    compile_parser.add_argument(
        "-o",
        "--output",
        type=str,
        required=True,
        help="Output package directory",
    )
    compile_parser.add_argument(
        "--json",
        action="store_true",
        help="Also write the full compilation result as compilation.json",
    )

    check_parser = subparsers.add_parser("check", help="Report diagnostics without writing output")
    _add_common_arguments(check_parser)
    check_parser.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="Diagnostic output format (default: text)",
    )

    fix_parser = subparsers.add_parser("fix", help="Apply suggested fixes to the document")
    _add_common_arguments(fix_parser)
    fix_parser.add_argument(
        "--key",
        action="append",
        default=None,
        help="Fix key to apply (repeatable). Default: the first fix of every diagnostic",
    )
    fix_parser.add_argument(
        "-o",
        "--output",
        type=str,
        default=None,
        help="Write the fixed document here (default: rewrite the input)",
    )
    fix_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the fixed document instead of writing it",
    )

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    channels = None
    if args.log_channel:
        channels = [ch.strip() for ch in args.log_channel.split(",")]
    configure_logging(
        level=args.log_level,
        format=args.log_format,
        channels=channels,
        force=True,
    )

    try:
        options = load_options(args.options)
        document = load_document(args.document)
    except (FileNotFoundError, DeclarationError, OptionsError, ValidationError) as e:
        print(f"hubgen: error: {e}", file=sys.stderr)
        return 2

    if args.command == "compile":
        return run_compile(args, document, options)
    if args.command == "check":
        return run_check(args, document, options)
    if args.command == "fix":
        return run_fix(args, document, options)

    return 0


# =============================================================================
# Commands
# =============================================================================

def format_diagnostic(diagnostic: Diagnostic) -> str:
    """One diagnostic, followed by its fixes, as plain text."""
    where = str(diagnostic.location) if diagnostic.location else diagnostic.source
    lines = [f"{where}: {diagnostic.level.value} {diagnostic.code.value}: {diagnostic.message}"]
    for fix in diagnostic.fixes:
        lines.append(f"    fix [{fix.key}]: {fix.title}")
    return "\n".join(lines)


def print_diagnostics(result: CompilationResult) -> None:
    for diagnostic in result.diagnostics:
        print(format_diagnostic(diagnostic), file=sys.stderr)


def write_outputs(result: CompilationResult, output_dir: Path) -> list[Path]:
    """
    Write every generated artifact into output_dir.

    Returns:
        Paths written, in a stable order
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []

    for compiled in result.contracts:
        if compiled.binding is None or compiled.source is None:
            continue
        module = compiled.binding.module_name
        path = output_dir / f"{module}.py"
        path.write_text(compiled.source)
        written.append(path)

        manifest_path = output_dir / f"{module}.manifest.json"
        save_manifest(compiled.binding.manifest, manifest_path)
        written.append(manifest_path)

    if result.registration is not None and result.registration_source is not None:
        path = output_dir / "registration.py"
        path.write_text(result.registration_source)
        written.append(path)

        path = output_dir / "__init__.py"
        path.write_text(render_package_init(result.registration))
        written.append(path)

    for compiled in result.fakes:
        if compiled.fake is None or compiled.source is None:
            continue
        path = output_dir / f"fake_{compiled.fake.binding_module}.py"
        path.write_text(compiled.source)
        written.append(path)

    return written


def run_compile(args: argparse.Namespace, document, options: GeneratorOptions) -> int:
    """Run the compile command."""
    result = get_engine().compile(document, options)
    print_diagnostics(result)

    written = write_outputs(result, Path(args.output))
    if args.json:
        path = Path(args.output) / "compilation.json"
        path.write_text(to_json(result))
        written.append(path)

    for path in written:
        print(path)

    return 0 if result.status == CompileStatus.SUCCESS else 1


def run_check(args: argparse.Namespace, document, options: GeneratorOptions) -> int:
    """Run the check command."""
    result = get_engine().compile(document, options)

    if args.format == "json":
        print(to_json(result))
    else:
        for diagnostic in result.diagnostics:
            print(format_diagnostic(diagnostic))
        print(f"{result.status.value}: {len(result.contracts)} contract(s), {len(result.errors)} error(s)")

    return 0 if not result.errors else 1


def run_fix(args: argparse.Namespace, document, options: GeneratorOptions) -> int:
    """Run the fix command."""
    result = get_engine().compile(document, options)

    try:
        fixed = apply_fixes(document, result.diagnostics, args.key)
    except ValueError as e:
        print(f"hubgen: error: {e}", file=sys.stderr)
        return 2

    if fixed == document:
        print("No fixes to apply.", file=sys.stderr)
        return 0

    if args.dry_run:
        print(dump_document(fixed), end="")
        return 0

    target = Path(args.output or args.document)
    dump_document(fixed, target)
    print(f"Wrote {target}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
