# viewloader/core/engines/__init__.py
"""
Built-in template engines and the registry wired with them.
"""
from viewloader.core.registry import EngineRegistry

from .handlebars_engine import HandlebarsEngine
from .jinja_engine import JinjaEngine

JINJA_EXTENSIONS = ("", ".htm", ".txt", ".xml", ".json")
HANDLEBARS_EXTENSIONS = (".hbs", ".handlebars")

def default_registry() -> EngineRegistry:
    """Registry with Jinja2 as the default engine (.html included) and pybars for .hbs."""
    registry = EngineRegistry()
    jinja = JinjaEngine()
    for extension in JINJA_EXTENSIONS:
        registry.register_templater(extension, jinja)
    handlebars = HandlebarsEngine()
    for extension in HANDLEBARS_EXTENSIONS:
        registry.register_templater(extension, handlebars)
    return registry

__all__ = ["HandlebarsEngine", "JinjaEngine", "default_registry"]
