"""Passes — Pipeline stages for contract compilation."""

from hubgen.passes.p00_check_marker import check_marker
from hubgen.passes.p10_walk import walk, walk_method_set
from hubgen.passes.p20_dedup import dedup, deduplicate
from hubgen.passes.p30_validate import validate
from hubgen.passes.p40_synthesize import synthesize, synthesize_binding
from hubgen.passes.p50_render import render
from hubgen.passes.p90_package import package

__all__ = [
    "check_marker",
    "walk",
    "walk_method_set",
    "dedup",
    "deduplicate",
    "validate",
    "synthesize",
    "synthesize_binding",
    "render",
    "package",
]
