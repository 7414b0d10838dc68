"""
Discovery — Declaration documents and the marker pre-pass.
"""

from hubgen.discovery.loader import (
    dump_document,
    load_document,
    load_document_from_string,
    parse_document,
)
from hubgen.discovery.registry import (
    DiscoveryResult,
    MarkerRegistry,
    discover,
    resolve_contract,
    scan_markers,
)

__all__ = [
    "load_document",
    "load_document_from_string",
    "parse_document",
    "dump_document",
    "MarkerRegistry",
    "DiscoveryResult",
    "discover",
    "resolve_contract",
    "scan_markers",
]
