# viewloader/core/engines/jinja_engine.py
"""
Default engine: Jinja2 templates with the shared helper table.

One Environment is built per delimiter pair and reused. Includes and
extends resolve against the merged TemplateSet being rendered, never the
filesystem, so every template a page can reach went through the registry.
"""
import keyword
from contextvars import ContextVar
from typing import Any, Callable, Dict, Mapping, Optional

from jinja2 import BaseLoader, Environment, Template, TemplateNotFound, TemplateSyntaxError
from jinja2.defaults import BLOCK_END_STRING, BLOCK_START_STRING, COMMENT_END_STRING, COMMENT_START_STRING
import structlog

from viewloader.core.diagnostics import compilation_error, panic_error
from viewloader.core.registry import DEFAULT_DELIMS, Delims, TemplateSet
from viewloader.core.templating.helpers import FILTER_NAMES, TEMPLATE_FUNCS
from viewloader.exceptions import ConfigError

log = structlog.get_logger(__name__)

NO_AUTOESCAPE_EXTENSIONS = (".txt", ".json", ".js", ".css")
# a custom pair replaces the variable markers only; these stay in use
STATEMENT_MARKERS = (BLOCK_START_STRING, BLOCK_END_STRING, COMMENT_START_STRING, COMMENT_END_STRING)

_rendering_set: ContextVar[Optional[TemplateSet]] = ContextVar("viewloader_rendering_set", default=None)


def _autoescape(template_name: Optional[str]) -> bool:
    if template_name is None:
        return True
    return not template_name.lower().endswith(NO_AUTOESCAPE_EXTENSIONS)


class _TemplateSetLoader(BaseLoader):
    """Resolves {% include %} and {% extends %} from the set currently rendering."""

    def get_source(self, environment: Environment, template: str):
        raise TemplateNotFound(template)

    def load(self, environment: Environment, name: str, globals: Optional[Mapping[str, Any]] = None) -> Template:
        template_set = _rendering_set.get()
        if template_set is not None:
            for candidate in (name, name.lower()):
                entry = template_set.lookup(candidate)
                if entry is not None and isinstance(entry.artifact, Template):
                    return entry.artifact
        raise TemplateNotFound(name)


def check_delims(delims: Delims) -> None:
    left, right = delims
    if not left or not right:
        raise ConfigError(f"template delimiters must both be non-empty, got {left!r} {right!r}")
    if left in STATEMENT_MARKERS or right in STATEMENT_MARKERS:
        raise ConfigError(
            f"template delimiters {left!r} {right!r} collide with the statement and comment markers "
            f"{' '.join(STATEMENT_MARKERS)}"
        )


def install_helpers(env: Environment, helpers: Mapping[str, Callable[..., Any]]) -> None:
    # raises TypeError on a helper that cannot be exposed to templates.
    for name, func in helpers.items():
        if not isinstance(name, str) or not name.isidentifier() or keyword.iskeyword(name):
            raise TypeError(f"function name {name!r} is not a valid identifier")
        if not callable(func):
            raise TypeError(f"value for {name!r} is not a function: {func!r}")
        env.globals[name] = func
        if name in FILTER_NAMES:
            env.filters[name] = func


class JinjaEngine:
    kind = "jinja"

    def __init__(self, helpers: Optional[Mapping[str, Callable[..., Any]]] = None):
        self.helpers = TEMPLATE_FUNCS if helpers is None else helpers
        self._environments: Dict[Delims, Environment] = {}

    def environment(self, delims: Delims = DEFAULT_DELIMS) -> Environment:
        env = self._environments.get(delims)
        if env is None:
            env = self._build_environment(delims)
            self._environments[delims] = env
        return env

    def _build_environment(self, delims: Delims) -> Environment:
        options: Dict[str, Any] = {}
        if tuple(delims) != DEFAULT_DELIMS:
            check_delims(delims)
            left, right = delims
            options["variable_start_string"] = left
            options["variable_end_string"] = right
        env = Environment(
            loader=_TemplateSetLoader(),
            autoescape=_autoescape,
            keep_trailing_newline=True,
            # the merged set is the cache; a refresh must never see old templates
            cache_size=0,
            **options,
        )
        install_helpers(env, self.helpers)
        log.debug("jinja_environment_built", delims=list(delims), helpers=len(self.helpers))
        return env

    def compile(self, name: str, source: str, delims: Delims) -> Template:
        try:
            env = self.environment(tuple(delims))
        except ConfigError:
            raise
        except Exception as e:
            raise panic_error(name, e, fatal=True) from e
        try:
            code = env.compile(source, name=name, filename=name)
        except TemplateSyntaxError as e:
            raise compilation_error(name, source, e.message or str(e), line=e.lineno) from e
        return env.template_class.from_code(env, code, env.make_globals(None))

    def render(self, artifact: Template, context: Mapping[str, Any], template_set: TemplateSet) -> str:
        token = _rendering_set.set(template_set)
        try:
            return artifact.render(context)
        finally:
            _rendering_set.reset(token)
