from pathlib import Path
from typing import List, Sequence, Union
import structlog

log = structlog.get_logger(__name__)

def resolve_template_roots(raw_paths: Sequence[Union[str, Path]]) -> List[Path]:
    # absolute template roots in priority order; missing roots are skipped with a warning.
    resolved: List[Path] = []
    for raw_path in raw_paths:
        try:
            abs_path = Path(raw_path).expanduser().resolve(strict=True)
        except FileNotFoundError:
            log.warning("template_root_not_found_skipped", path_str=str(raw_path))
            continue
        except OSError as e:
            log.warning("error_resolving_template_root", path_str=str(raw_path), error_message=str(e))
            continue
        if not abs_path.is_dir():
            log.warning("template_root_not_a_directory_skipped", path_str=str(abs_path))
            continue
        if abs_path not in resolved:
            resolved.append(abs_path)

    if not resolved and raw_paths:
        log.warning("no_valid_template_roots_resolved", provided_count=len(raw_paths))
    return resolved
