from typing import List, Optional, Tuple


class ViewLoaderError(Exception):
    # base exception for all application-specific errors.
    pass

class ConfigError(ViewLoaderError):
    # malformed configuration, e.g. a bad delimiter spec. aborts startup.
    pass

class DiscoveryError(ViewLoaderError):
    # a template root cannot be walked at all.
    pass

class TemplateNotFoundError(ViewLoaderError):
    # lookup miss while the last build reported no error.
    pass

class StaleTemplateError(ViewLoaderError):
    # a handle outlived the refresh that produced it.
    pass

class HelperError(ViewLoaderError):
    # bad arguments passed to a template helper function.
    pass


class TemplateError(ViewLoaderError):
    """
    Structured, positional error shared by the engines, the registry and the loader.

    `line` is 1-based; -1 means no position is known. `fatal` is reserved for
    helper-registration faults, which abort a refresh instead of being
    collected as the build's first error.
    """

    def __init__(
        self,
        title: str,
        description: str,
        path: str = "",
        line: int = -1,
        source_lines: Optional[List[str]] = None,
        fatal: bool = False,
    ):
        super().__init__(f"{title}: {description}")
        self.title = title
        self.description = description
        self.path = path
        self.line = line
        self.source_lines: List[str] = list(source_lines or [])
        self.fatal = fatal

    def context(self, radius: int = 2) -> List[Tuple[int, str]]:
        # numbered source lines around the error line, for error pages.
        if self.line < 1 or not self.source_lines:
            return []
        start = max(self.line - radius, 1)
        end = min(self.line + radius, len(self.source_lines))
        return [(n, self.source_lines[n - 1]) for n in range(start, end + 1)]

    def __repr__(self) -> str:
        return f"TemplateError(title={self.title!r}, path={self.path!r}, line={self.line})"
