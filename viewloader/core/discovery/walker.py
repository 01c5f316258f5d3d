import os
from pathlib import Path
from typing import Iterator, Optional, Tuple
import pathspec
import structlog

from viewloader.core.discovery.pattern_matching import is_excluded, watch_dir, watch_file
from viewloader.util import to_logical_name

log = structlog.get_logger(__name__)

def _log_walk_error(error: OSError) -> None:
    # unreadable directories are skipped, the walk goes on.
    log.error("error_walking_templates", path=getattr(error, "filename", None), error=str(error))

def discover_templates(
    root: Path,
    hidden_prefix: str = ".",
    exclude_spec: Optional[pathspec.PathSpec] = None,
    follow_symlinks: bool = False,
) -> Iterator[Tuple[str, str]]:
    """
    Yields (logical name, absolute path) for every template file under root.

    Logical names are root-relative with forward slashes. Hidden directories
    are pruned, hidden files skipped. Order is sorted for repeatable builds.
    """
    log.debug("template_discovery_started", root=str(root))
    for dir_path, dirs, files in os.walk(str(root), topdown=True, onerror=_log_walk_error, followlinks=follow_symlinks):
        # prune directories.
        dirs[:] = sorted(d for d in dirs if watch_dir(d, hidden_prefix))

        for file_name in sorted(files):
            if not watch_file(file_name, hidden_prefix):
                continue
            file_path = Path(dir_path, file_name)
            name = to_logical_name(os.path.relpath(file_path, root))
            if is_excluded(name, exclude_spec):
                log.debug("template_excluded_by_pattern", template=name)
                continue
            yield name, str(file_path)
