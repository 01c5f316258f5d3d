# viewloader/core/engines/handlebars_engine.py
"""
Handlebars templates (.hbs) compiled with pybars.

Handlebars markers are fixed, so a custom delimiter pair is reported as an
error for each handlebars template rather than silently ignored.
"""
import functools
import re
from typing import Any, Callable, Dict, Mapping, Optional

from markupsafe import Markup
import pybars  # type: ignore
import structlog

from viewloader.core.diagnostics import COMPILATION_ERROR_TITLE, compilation_error, panic_error
from viewloader.core.registry import DEFAULT_DELIMS, Delims, TemplateSet
from viewloader.core.templating.helpers import TEMPLATE_FUNCS
from viewloader.exceptions import TemplateError

log = structlog.get_logger(__name__)

# pybars: "Error at character 12 of line 3 near ..."
_PYBARS_LINE = re.compile(r"\bline (\d+)")


def _without_scope(func: Callable[..., Any]) -> Callable[..., Any]:
    # pybars passes the current `this` scope first; the shared helpers don't take it.
    @functools.wraps(func)
    def helper(this, *args, **kwargs):
        value = func(*args, **kwargs)
        if isinstance(value, Markup):
            # strlist output is not escaped by pybars
            return pybars.strlist([str(value)])
        return value
    return helper


def adapt_helpers(helpers: Mapping[str, Callable[..., Any]]) -> Dict[str, Callable[..., Any]]:
    adapted: Dict[str, Callable[..., Any]] = {}
    for name, func in helpers.items():
        if not isinstance(name, str) or not name:
            raise TypeError(f"helper name {name!r} is not a string")
        if not callable(func):
            raise TypeError(f"value for {name!r} is not a function: {func!r}")
        adapted[name] = _without_scope(func)
    return adapted


class HandlebarsEngine:
    kind = "handlebars"

    def __init__(self, helpers: Optional[Mapping[str, Callable[..., Any]]] = None):
        self.helpers = TEMPLATE_FUNCS if helpers is None else helpers
        self._compiler = pybars.Compiler()
        self._adapted: Optional[Dict[str, Callable[..., Any]]] = None

    def adapted_helpers(self) -> Dict[str, Callable[..., Any]]:
        if self._adapted is None:
            self._adapted = adapt_helpers(self.helpers)
        return self._adapted

    def compile(self, name: str, source: str, delims: Delims) -> Callable[..., Any]:
        if tuple(delims) != DEFAULT_DELIMS:
            raise TemplateError(
                title=COMPILATION_ERROR_TITLE,
                path=name,
                description=(
                    f"handlebars templates do not support custom delimiters "
                    f"{delims[0]!r} {delims[1]!r}"
                ),
                source_lines=source.split("\n"),
            )
        try:
            self.adapted_helpers()
        except Exception as e:
            raise panic_error(name, e, fatal=True) from e
        try:
            return self._compiler.compile(source)
        except Exception as e:
            message = str(e)
            match = _PYBARS_LINE.search(message)
            line = int(match.group(1)) if match else None
            raise compilation_error(name, source, message, line=line) from e

    def partials(self, template_set: TemplateSet) -> Dict[str, Callable[..., Any]]:
        # every handlebars template is a partial, by name and by name without extension
        partials: Dict[str, Callable[..., Any]] = {}
        for entry in template_set.of_kind(self.kind):
            partials[entry.name] = entry.artifact
        for entry in template_set.of_kind(self.kind):
            stem = entry.name.rsplit(".", 1)[0]
            partials.setdefault(stem, entry.artifact)
        return partials

    def render(self, artifact: Callable[..., Any], context: Mapping[str, Any], template_set: TemplateSet) -> str:
        output = artifact(context, helpers=self.adapted_helpers(), partials=self.partials(template_set))
        return str(output)
