# viewloader/core/templating/renderer.py
"""
TemplateHandle: what callers get back from TemplateLoader.template().
"""
import traceback
from typing import TYPE_CHECKING, Any, List, Mapping, Optional, TextIO
import structlog

from viewloader.core.registry import CompiledTemplate, TemplateSet
from viewloader.core.templating.context_builder import build_render_context
from viewloader.exceptions import StaleTemplateError, TemplateError, ViewLoaderError

if TYPE_CHECKING:
    from viewloader.core.loader import TemplateLoader

log = structlog.get_logger(__name__)

EXECUTION_ERROR_TITLE = "Template Execution Error"

class TemplateHandle:
    """
    A compiled template plus a back-reference to its loader for content lookup.

    Valid until the loader refreshes again; rendering a handle from an older
    build raises StaleTemplateError. `build_error` carries the loader's build
    error when the build had problems even though this template compiled.
    """

    def __init__(
        self,
        name: str,
        loader: "TemplateLoader",
        compiled: CompiledTemplate,
        template_set: TemplateSet,
        generation: int,
        build_error: Optional[TemplateError] = None,
    ):
        self.name = name
        self.loader = loader
        self.compiled = compiled
        self.template_set = template_set
        self.generation = generation
        self.build_error = build_error

    @property
    def kind(self) -> str:
        return self.compiled.kind

    @property
    def is_stale(self) -> bool:
        return self.generation != self.loader.generation

    def render(self, writer: TextIO, data: Optional[Mapping[str, Any]] = None) -> None:
        writer.write(self.render_to_string(data))

    def render_to_string(self, data: Optional[Mapping[str, Any]] = None) -> str:
        if self.is_stale:
            raise StaleTemplateError(f"template {self.name} belongs to a previous template build")
        context = build_render_context(data)
        log.debug("rendering_template", template=self.name, kind=self.kind, context_keys=sorted(context))
        try:
            return self.compiled.render(context, self.template_set)
        except ViewLoaderError:
            raise
        except Exception as e:
            raise self._execution_error(e) from e

    def content(self) -> List[str]:
        return self.loader.content(self.name)

    def _execution_error(self, error: Exception) -> TemplateError:
        # the innermost traceback frame that belongs to a template gives the position
        entry, line = self.compiled, -1
        for frame in traceback.extract_tb(error.__traceback__):
            found = self.template_set.lookup(frame.filename)
            if found is not None:
                entry, line = found, frame.lineno or -1
        log.error("template_execution_error", template=entry.name, line=line, error=str(error))
        return TemplateError(
            title=EXECUTION_ERROR_TITLE,
            path=entry.name,
            description=f"{type(error).__name__}: {error}",
            line=line,
            source_lines=entry.source.split("\n"),
        )

    def __repr__(self) -> str:
        return f"TemplateHandle({self.name!r}, kind={self.kind!r})"
