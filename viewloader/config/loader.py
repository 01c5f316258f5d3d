# viewloader/config/loader.py
"""
Loads LoaderSettings from TOML files.

Looked up in the working directory, first match wins:
viewloader.toml, .viewloader.toml, then the [tool.viewloader] table of pyproject.toml.
"""
import toml
from pathlib import Path
from typing import Any, Dict, Optional, Tuple
import structlog

from viewloader.exceptions import ConfigError

from .settings import LoaderSettings

log = structlog.get_logger(__name__)

PROJECT_CONFIG_FILENAMES = ["viewloader.toml", ".viewloader.toml", "pyproject.toml"]

CONFIG_KEY_TO_SETTINGS_ATTR_MAP: Dict[str, str] = {
    "paths": "paths",
    "template_paths": "paths",
    "delimiters": "delimiters",
    "template_delimiters": "delimiters",
    "exclude_patterns": "exclude_patterns",
    "hidden_prefix": "hidden_prefix",
    "date_format": "date_format",
    "datetime_format": "datetime_format",
    "error_class": "error_class",
}

def split_delimiters(spec: str) -> Tuple[str, str]:
    # "<% %>" -> ("<%", "%>"). exactly one space separates the two tokens.
    tokens = spec.split(" ")
    if len(tokens) != 2 or not all(tokens):
        raise ConfigError(f"Incorrect format for template delimiters: {spec!r} (expected '<left> <right>')")
    return tokens[0], tokens[1]

def _load_toml_file_data(file_path: Path) -> Dict[str, Any]:
    if not file_path.is_file():
        return {}
    log.debug("loading_toml_config_file", path=str(file_path))
    try:
        data = toml.load(file_path)
    except (toml.TomlDecodeError, OSError) as e:
        raise ConfigError(f"Could not read config file {file_path}: {e}")
    if file_path.name == "pyproject.toml":
        return data.get("tool", {}).get("viewloader", {})
    return data

def find_config_file(start_dir: Optional[Path] = None) -> Optional[Path]:
    base = start_dir or Path.cwd()
    for filename in PROJECT_CONFIG_FILENAMES:
        candidate = base / filename
        if candidate.is_file():
            if filename == "pyproject.toml" and not _load_toml_file_data(candidate):
                continue
            return candidate
    return None

def load_settings(config_path: Optional[Path] = None) -> LoaderSettings:
    """Builds LoaderSettings from an explicit file or the first config file found."""
    if config_path is not None and not Path(config_path).is_file():
        raise ConfigError(f"Config file not found: {config_path}")
    source_file = Path(config_path) if config_path else find_config_file()
    if source_file is None:
        log.debug("no_configuration_file_found")
        return LoaderSettings()

    raw = _load_toml_file_data(source_file)
    log.info("loading_project_config", path=str(source_file))

    options: Dict[str, Any] = {}
    for key, value in raw.items():
        attr = CONFIG_KEY_TO_SETTINGS_ATTR_MAP.get(key)
        if attr is None:
            log.warning("unknown_config_key_ignored", key=key, path=str(source_file))
            continue
        options[attr] = value

    paths = options.get("paths", [])
    if isinstance(paths, str):
        paths = [paths]
    # relative roots are relative to the config file, not the cwd.
    base_dir = source_file.resolve().parent
    options["paths"] = [base_dir / Path(p).expanduser() for p in paths]

    delims = options.get("delimiters")
    if isinstance(delims, list):
        options["delimiters"] = " ".join(str(d) for d in delims)
    if options.get("delimiters"):
        split_delimiters(options["delimiters"])

    return LoaderSettings(**options)
