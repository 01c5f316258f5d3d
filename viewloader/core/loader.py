# viewloader/core/loader.py
"""
TemplateLoader: walks the template roots, compiles every file through the
engine registry and serves the merged set by case-insensitive name.

One bad template does not abort a refresh. The first error of a build is
kept and reported; later ones are only logged. Only a fatal error (a helper
table that cannot be installed) stops the walk early and leaves the
previously published build in place.

A build is published as one immutable LoadedBuild: the compiled set, its
first error, the name -> path index and the generation always come from the
same refresh.
"""
import threading
from pathlib import Path
from typing import Dict, List, NamedTuple, Optional, Sequence, Union
import structlog

from viewloader.config.loader import split_delimiters
from viewloader.config.settings import DEFAULT_HIDDEN_PREFIX, LoaderSettings
from viewloader.core.discovery import discover_templates, resolve_template_roots
from viewloader.core.discovery.pattern_matching import compile_glob_patterns_to_spec
from viewloader.core.engines import default_registry
from viewloader.core.registry import EngineRegistry, TemplateInfo, TemplateSet
from viewloader.core.templating.helpers import configure_helpers
from viewloader.core.templating.renderer import TemplateHandle
from viewloader.exceptions import TemplateError, TemplateNotFoundError
from viewloader.util import read_lines

log = structlog.get_logger(__name__)


class LoadedBuild(NamedTuple):
    template_set: Optional[TemplateSet]
    compile_error: Optional[TemplateError]
    # logical name -> the file the registry attempted for that name
    template_paths: Dict[str, str]
    generation: int


EMPTY_BUILD = LoadedBuild(None, None, {}, 0)


class TemplateLoader:
    """
    Loads every file below the configured roots as a template.

    Args:
        paths: Template roots, in priority order.
        registry: Engine registry to compile with; defaults to the built-in engines.
        delimiters: Optional "<left> <right>" delimiter override.
        exclude_patterns: gitignore-style patterns of files to leave out.
        hidden_prefix: Files and directories starting with this are skipped.
    """

    def __init__(
        self,
        paths: Sequence[Union[str, Path]],
        registry: Optional[EngineRegistry] = None,
        delimiters: Optional[str] = None,
        exclude_patterns: Sequence[str] = (),
        hidden_prefix: str = DEFAULT_HIDDEN_PREFIX,
    ):
        self.paths: List[Path] = [Path(p) for p in paths]
        self.registry = registry if registry is not None else default_registry()
        self.delimiters = delimiters
        self.exclude_patterns = list(exclude_patterns)
        self.hidden_prefix = hidden_prefix

        self.build: LoadedBuild = EMPTY_BUILD
        self._refresh_lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: LoaderSettings, registry: Optional[EngineRegistry] = None) -> "TemplateLoader":
        configure_helpers(
            date_format=settings.date_format,
            datetime_format=settings.datetime_format,
            error_class=settings.error_class,
        )
        return cls(
            settings.paths,
            registry=registry,
            delimiters=settings.delimiters,
            exclude_patterns=settings.exclude_patterns,
            hidden_prefix=settings.hidden_prefix,
        )

    # read-only views of the published build
    @property
    def template_set(self) -> Optional[TemplateSet]:
        return self.build.template_set

    @property
    def compile_error(self) -> Optional[TemplateError]:
        return self.build.compile_error

    @property
    def template_paths(self) -> Dict[str, str]:
        return self.build.template_paths

    @property
    def generation(self) -> int:
        return self.build.generation

    def refresh(self) -> Optional[TemplateError]:
        """
        Recompiles everything under the roots into a fresh template set.

        Returns the build's first error, or None. A malformed delimiter
        string raises ConfigError. A fatal error is returned without
        replacing the published build.
        """
        with self._refresh_lock:
            return self._refresh()

    def _refresh(self) -> Optional[TemplateError]:
        log.debug("refreshing_templates", paths=[str(p) for p in self.paths])

        self.registry.clear()
        if self.delimiters:
            self.registry.set_delims(split_delimiters(self.delimiters))

        exclude_spec = compile_glob_patterns_to_spec(self.exclude_patterns)
        first_error: Optional[TemplateError] = None

        for root in resolve_template_roots(self.paths):
            discovered = list(discover_templates(root, self.hidden_prefix, exclude_spec))
            # lower-cased aliases only after every real name of this root is taken
            aliases = [(name.lower(), path) for name, path in discovered if name.lower() != name]

            for name, path in discovered + aliases:
                try:
                    self.registry.add_template(TemplateInfo(name, path))
                except TemplateError as e:
                    if e.fatal:
                        return self._abort(e)
                    if first_error is None:
                        first_error = e
                    log.error(
                        "template_error",
                        template=name,
                        line=e.line,
                        description=e.description,
                        retained=first_error is e,
                    )
            log.debug("template_root_loaded", root=str(root), templates=len(discovered), aliases=len(aliases))

        return self._publish(first_error)

    def _publish(self, first_error: Optional[TemplateError]) -> Optional[TemplateError]:
        template_set = self.registry.compiled_templates()
        # seen_paths holds the file each name was compiled from; later roots never replace it
        self.build = LoadedBuild(
            template_set=template_set,
            compile_error=first_error,
            template_paths=dict(self.registry.seen_paths),
            generation=self.build.generation + 1,
        )
        log.debug(
            "templates_refreshed",
            count=len(template_set) if template_set is not None else 0,
            generation=self.build.generation,
            error=str(first_error) if first_error else None,
        )
        return first_error

    def _abort(self, error: TemplateError) -> TemplateError:
        log.error("fatal_template_loader_error", template=error.path, error=str(error))
        if self.build.template_set is None:
            # nothing served yet: the fatal error becomes the lookup error
            self.build = self.build._replace(compile_error=error)
        return error

    def template(self, name: str) -> TemplateHandle:
        """
        Returns the template with the given name, matched case-insensitively.
        The name is the template's path relative to a template root.

        If the last build had an error and the template is missing, that error
        is raised; if the template exists it is returned with `build_error` set
        (it may still be usable).
        """
        name = name.lower()
        build = self.build
        entry = build.template_set.lookup(name) if build.template_set is not None else None

        if entry is None:
            if build.compile_error is not None:
                raise build.compile_error
            raise TemplateNotFoundError(f"Template {name} not found.")

        return TemplateHandle(
            name=name,
            loader=self,
            compiled=entry,
            template_set=build.template_set,
            generation=build.generation,
            build_error=build.compile_error,
        )

    def content(self, name: str) -> List[str]:
        # source lines for error pages; never raises.
        path = self.build.template_paths.get(name)
        if path is None:
            return []
        try:
            return read_lines(path)
        except OSError as e:
            log.warning("template_content_read_failed", template=name, path=path, error=str(e))
            return []

    def names(self) -> List[str]:
        template_set = self.build.template_set
        return list(template_set.names()) if template_set is not None else []
