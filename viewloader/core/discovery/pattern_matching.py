from typing import List, Optional
import pathspec
import structlog

from viewloader.exceptions import DiscoveryError

log = structlog.get_logger(__name__)

def compile_glob_patterns_to_spec(glob_patterns: List[str]) -> Optional[pathspec.PathSpec]:
    # compiles a list of gitignore-style patterns into a pathspec object for matching.
    if not glob_patterns:
        return None
    try:
        return pathspec.PathSpec.from_lines(pathspec.patterns.GitWildMatchPattern, glob_patterns)
    except Exception as e:
        raise DiscoveryError(f"error compiling exclude patterns {glob_patterns}: {e}")

def watch_dir(dir_name: str, hidden_prefix: str = ".") -> bool:
    # walk all directories, except the ones starting with the hidden prefix.
    return not (hidden_prefix and dir_name.startswith(hidden_prefix))

def watch_file(file_name: str, hidden_prefix: str = ".") -> bool:
    # load all files, except the ones starting with the hidden prefix.
    return not (hidden_prefix and file_name.startswith(hidden_prefix))

def is_excluded(logical_name: str, exclude_spec: Optional[pathspec.PathSpec]) -> bool:
    return bool(exclude_spec and exclude_spec.match_file(logical_name))
