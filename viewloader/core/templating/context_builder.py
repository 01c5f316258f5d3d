# viewloader/core/templating/context_builder.py
"""
Builds the context a compiled template is rendered with.
"""
from collections.abc import Mapping, MutableMapping
from typing import Any, Dict, Optional

# name under which templates see the caller's own render-arg bag
RENDER_ARGS_KEY = "render_args"

def build_render_context(data: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Copies the caller's render args and exposes the original mapping as
    ``render_args`` so helpers like set/append write back into it.
    """
    if data is None:
        data = {}
    if not isinstance(data, Mapping):
        raise TypeError(f"render data must be a mapping, got {type(data).__name__}")
    context: Dict[str, Any] = dict(data)
    if isinstance(data, MutableMapping):
        context.setdefault(RENDER_ARGS_KEY, data)
    else:
        context.setdefault(RENDER_ARGS_KEY, dict(data))
    return context
