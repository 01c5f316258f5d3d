# viewloader/core/templating/__init__.py
"""
Template handles, render contexts and the helper functions templates can call.
"""
from .renderer import TemplateHandle
from .context_builder import build_render_context, RENDER_ARGS_KEY
from .helpers import TEMPLATE_FUNCS, configure_helpers, slug

__all__ = [
    "TemplateHandle",
    "build_render_context",
    "RENDER_ARGS_KEY",
    "TEMPLATE_FUNCS",
    "configure_helpers",
    "slug",
]
