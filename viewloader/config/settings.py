from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

DEFAULT_HIDDEN_PREFIX = "."
DEFAULT_DATE_FORMAT = "%Y-%m-%d"
DEFAULT_DATETIME_FORMAT = "%Y-%m-%d %H:%M"
DEFAULT_ERROR_CLASS = "hasError"

@dataclass
class LoaderSettings:
    # holds all configuration parameters for one template loader.
    paths: List[Path] = field(default_factory=list)
    # "<left> <right>", e.g. "[[ ]]". None keeps each engine's defaults.
    delimiters: Optional[str] = None
    exclude_patterns: List[str] = field(default_factory=list)
    hidden_prefix: str = DEFAULT_HIDDEN_PREFIX
    date_format: str = DEFAULT_DATE_FORMAT
    datetime_format: str = DEFAULT_DATETIME_FORMAT
    error_class: str = DEFAULT_ERROR_CLASS

    def __post_init__(self):
        self.paths = [Path(p) for p in self.paths]
