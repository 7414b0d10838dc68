"""
IR Serialization — JSON import/export for results and manifests.
"""

from pathlib import Path
from typing import Union

from hubgen.ir.bindings import BindingManifest
from hubgen.ir.results import CompilationResult


def to_json(result: CompilationResult, indent: int = 2) -> str:
    """Serialize a CompilationResult to JSON string."""
    return result.model_dump_json(indent=indent)


def from_json(json_str: str) -> CompilationResult:
    """Deserialize a CompilationResult from JSON string."""
    return CompilationResult.model_validate_json(json_str)


def manifest_to_json(manifest: BindingManifest, indent: int = 2) -> str:
    """Serialize a BindingManifest to JSON string."""
    return manifest.model_dump_json(indent=indent)


def save_manifest(manifest: BindingManifest, path: Union[str, Path]) -> None:
    """Save a BindingManifest beside its generated binding."""
    path = Path(path)
    path.write_text(manifest_to_json(manifest))


def load_manifest(path: Union[str, Path]) -> BindingManifest:
    """Load a BindingManifest from a JSON file."""
    path = Path(path)
    return BindingManifest.model_validate_json(path.read_text())
