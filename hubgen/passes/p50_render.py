"""
Pass 50 — Source Rendering

Renders the synthesized ClientBinding as a Python module.
"""

from hubgen.core.context import ContractContext
from hubgen.core.logging import get_pass_logger
from hubgen.render.client_source import render_client

PASS_NAME = "p50_render"
log = get_pass_logger(PASS_NAME)


def render(ctx: ContractContext) -> ContractContext:
    """Set ctx.source from ctx.binding."""
    if ctx.binding is None:
        raise ValueError(f"Contract '{ctx.contract.name}' has no binding to render")

    ctx.source = render_client(ctx.binding)

    log.verbose(
        "source_rendered",
        module=ctx.binding.module_name,
        lines=ctx.source.count("\n"),
    )

    ctx.add_trace(
        pass_name=PASS_NAME,
        action="rendered_source",
        after=f"{ctx.binding.module_name}.py",
    )
    return ctx
