# viewloader/__init__.py
"""
Discovery, compilation and lookup of view templates for server-side MVC apps.
"""
__version__ = "0.3.0"

from viewloader.core.registry import EngineRegistry, TemplateInfo, TemplateSet
from viewloader.core.loader import TemplateLoader
from viewloader.core.templating import TemplateHandle
from viewloader.core.engines import default_registry
from viewloader.exceptions import TemplateError, TemplateNotFoundError

__all__ = [
    "EngineRegistry",
    "TemplateInfo",
    "TemplateSet",
    "TemplateLoader",
    "TemplateHandle",
    "default_registry",
    "TemplateError",
    "TemplateNotFoundError",
]
