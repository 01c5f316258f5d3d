# viewloader/core/registry.py
"""
Engine registry: dispatches template compilation by file extension and owns
the merged set of compiled templates.

The merged set maps logical names to CompiledTemplate entries. Each entry
keeps the compiler that produced it, so templates from different engines
live side by side and rendering is dispatched per entry.
"""
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Mapping, Optional, Protocol, Sequence, Tuple
import structlog

from viewloader.core.diagnostics import panic_error
from viewloader.exceptions import ConfigError, TemplateError
from viewloader.util import read_template_source, template_extension, to_logical_name

log = structlog.get_logger(__name__)

Delims = Tuple[str, str]
DEFAULT_DELIMS: Delims = ("", "")
# .html templates fall back to the default handler
DEFAULT_HANDLER_EXTENSIONS = (".html",)


class Compiler(Protocol):
    """
    What every template engine provides.

    ``compile`` gets the logical name, the source text and the delimiter pair
    (``("", "")`` means the engine's own defaults) and returns an opaque
    artifact or raises TemplateError. ``render`` turns an artifact back into
    text; ``template_set`` is the merged set the artifact belongs to, for
    includes and partials.
    """

    kind: str

    def compile(self, name: str, source: str, delims: Delims) -> Any: ...

    def render(self, artifact: Any, context: Mapping[str, Any], template_set: "TemplateSet") -> str: ...


@dataclass(frozen=True)
class TemplateInfo:
    name: str
    path: str


@dataclass(frozen=True)
class CompiledTemplate:
    name: str
    path: str
    source: str
    compiler: Compiler
    artifact: Any

    @property
    def kind(self) -> str:
        return self.compiler.kind

    def render(self, context: Mapping[str, Any], template_set: "TemplateSet") -> str:
        return self.compiler.render(self.artifact, context, template_set)


class TemplateSet:
    """Union of every template compiled during one build, addressable by logical name."""

    def __init__(self):
        self._entries: Dict[str, CompiledTemplate] = {}

    def add(self, entry: CompiledTemplate) -> None:
        # EngineRegistry dedups names before compiling, so a collision only
        # reaches here when a TemplateSet is assembled by hand.
        existing = self._entries.get(entry.name)
        if existing is not None:
            raise TemplateError(
                title="Template Merge Error",
                path=entry.path,
                description=(
                    f"template name '{entry.name}' is already defined by {existing.path}"
                ),
                source_lines=entry.source.split("\n"),
            )
        self._entries[entry.name] = entry

    def lookup(self, name: str) -> Optional[CompiledTemplate]:
        return self._entries.get(name)

    def names(self) -> Sequence[str]:
        return sorted(self._entries)

    def of_kind(self, kind: str) -> Iterator[CompiledTemplate]:
        return (e for e in self._entries.values() if e.kind == kind)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __repr__(self) -> str:
        return f"TemplateSet({len(self._entries)} templates)"


def _normalize_extension(extension: str) -> str:
    extension = extension.strip().lower()
    if extension and not extension.startswith("."):
        extension = "." + extension
    return extension


class EngineRegistry:
    """
    Per-extension compilers plus the merged set they build.

    Not thread-safe: one build (clear + add_template calls) at a time.
    """

    def __init__(self):
        self._handlers: Dict[str, Compiler] = {}
        self._delims: Delims = DEFAULT_DELIMS
        self._seen_paths: Dict[str, str] = {}
        self._compiled: Optional[TemplateSet] = None

    def register_templater(self, extension: str, compiler: Compiler) -> None:
        # last registration for an extension wins. "" is the default handler.
        extension = _normalize_extension(extension)
        if extension in self._handlers:
            log.debug("templater_replaced", extension=extension, kind=compiler.kind)
        self._handlers[extension] = compiler

    def handler_for(self, extension: str) -> Optional[Compiler]:
        extension = _normalize_extension(extension)
        compiler = self._handlers.get(extension)
        if compiler is None and extension in DEFAULT_HANDLER_EXTENSIONS:
            compiler = self._handlers.get("")
        return compiler

    @property
    def extensions(self) -> Sequence[str]:
        return sorted(self._handlers)

    def set_delims(self, delims: Sequence[str]) -> None:
        if len(delims) != 2:
            raise ConfigError(f"Incorrect format for template delimiters: {list(delims)!r}")
        self._delims = (delims[0], delims[1])

    @property
    def delims(self) -> Delims:
        return self._delims

    def compiled_templates(self) -> Optional[TemplateSet]:
        return self._compiled

    @property
    def seen_paths(self) -> Mapping[str, str]:
        return dict(self._seen_paths)

    def clear(self) -> None:
        # compilers and delimiters survive a clear.
        self._seen_paths = {}
        self._compiled = None

    def add_template(self, info: TemplateInfo) -> None:
        """
        Compiles one template file and merges it into the set.

        A name already attempted in this build is skipped, and so is a file
        that cannot be read. Raises TemplateError when no compiler handles the
        extension or when the compiler fails. A delimiter pair the compiler
        cannot use raises ConfigError. The per-build dedup on names means the
        merge itself never sees a duplicate name here.
        """
        name = to_logical_name(info.name)
        if name in self._seen_paths:
            return
        # recorded before compiling so a failing template is tried only once per build
        self._seen_paths[name] = info.path

        try:
            source = read_template_source(info.path)
        except OSError as e:
            log.warning("template_read_failed", path=info.path, error=str(e))
            return

        extension = template_extension(info.path)
        compiler = self.handler_for(extension)
        if compiler is None:
            raise TemplateError(
                title="Template Load Error",
                path=info.path,
                description=f"No known handler for extension '{extension}'",
                line=-1,
                source_lines=source.split("\n"),
            )

        try:
            artifact = compiler.compile(name, source, self._delims)
        except TemplateError as e:
            if not e.path:
                e.path = name
            raise
        except ConfigError:
            raise
        except Exception as e:
            raise panic_error(name, e) from e

        if self._compiled is None:
            self._compiled = TemplateSet()
        self._compiled.add(CompiledTemplate(name, info.path, source, compiler, artifact))
        log.debug("template_compiled", template=name, kind=compiler.kind)
