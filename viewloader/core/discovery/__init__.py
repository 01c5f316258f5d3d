# viewloader/core/discovery/__init__.py
"""
Template discovery: walks template roots and yields (logical name, path) pairs,
pruning hidden entries and honouring exclude patterns.
"""
from .walker import discover_templates
from .path_resolution import resolve_template_roots

__all__ = ["discover_templates", "resolve_template_roots"]
