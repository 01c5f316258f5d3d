import sys
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import click
from click_option_group import optgroup
from rich.console import Console as RichConsole
import structlog

from viewloader import __version__ as app_version
from viewloader.cli.console_output import print_build_summary, print_template_error, print_template_table
from viewloader.config.loader import load_settings
from viewloader.core.loader import TemplateLoader
from viewloader.exceptions import TemplateError, ViewLoaderError
from viewloader.logging_setup import configure_logging, level_for_verbosity

log = structlog.get_logger(__name__)

def loader_options(cmd):
    # options shared by every subcommand that builds a loader.
    cmd = optgroup.option("--log-json", "log_json", is_flag=True, default=False, help="Emit log events as JSON lines on stderr.")(cmd)
    cmd = optgroup.option("-v", "--verbose", "verbose", count=True, help="Increase log verbosity (-v info, -vv debug).")(cmd)
    cmd = optgroup.option("-e", "--exclude", "exclude_patterns", multiple=True, help="Gitignore-style pattern of files to skip. Repeatable.")(cmd)
    cmd = optgroup.option("--delims", "delimiters", default=None, help="Custom delimiter pair, e.g. '[[ ]]'.")(cmd)
    cmd = optgroup.option("-c", "--config", "config_path", type=click.Path(path_type=Path, dir_okay=False), default=None, help="Config file (viewloader.toml or pyproject.toml).")(cmd)
    cmd = optgroup.group("Loader Options", help="Where templates come from and how they are parsed.")(cmd)
    return cmd

def _build_loader(roots: Tuple[Path, ...], config_path: Optional[Path], delimiters: Optional[str],
                  exclude_patterns: Tuple[str, ...], verbose: int, log_json: bool = False) -> TemplateLoader:
    configure_logging(level_for_verbosity(verbose), json_output=log_json)
    settings = load_settings(config_path)
    if roots:
        settings.paths = list(roots)
    if delimiters is not None:
        settings.delimiters = delimiters
    if exclude_patterns:
        settings.exclude_patterns = list(settings.exclude_patterns) + list(exclude_patterns)
    if not settings.paths:
        raise click.UsageError("No template roots given and none configured.")
    log.info("template_loader_configured", paths=[str(p) for p in settings.paths])
    return TemplateLoader.from_settings(settings)

def _parse_vars(raw_vars: Tuple[str, ...]) -> Dict[str, Any]:
    parsed: Dict[str, Any] = {}
    for item in raw_vars:
        if "=" not in item:
            raise click.BadParameter(f"expected key=value, got {item!r}", param_hint="--var")
        key, value = item.split("=", 1)
        parsed[key.strip()] = value
    return parsed

@click.group(context_settings=dict(help_option_names=["-h", "--help"]))
@click.version_option(app_version, prog_name="viewloader")
def main_cli_group():
    """Discover, compile and render view templates."""

@main_cli_group.command("check")
@click.argument("roots", nargs=-1, type=click.Path(path_type=Path, file_okay=False))
@loader_options
def check_command(roots, config_path, delimiters, exclude_patterns, verbose, log_json):
    """Compile every template and report the first build error."""
    try:
        loader = _build_loader(roots, config_path, delimiters, exclude_patterns, verbose, log_json)
        error = loader.refresh()
    except ViewLoaderError as e:
        log.error("handled_application_error_in_cli", error_type=type(e).__name__, message=str(e))
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(2)
    print_build_summary(loader, error)
    if error is not None:
        sys.exit(1)

@main_cli_group.command("list")
@click.argument("roots", nargs=-1, type=click.Path(path_type=Path, file_okay=False))
@loader_options
def list_command(roots, config_path, delimiters, exclude_patterns, verbose, log_json):
    """Show every compiled template with its engine and source file."""
    try:
        loader = _build_loader(roots, config_path, delimiters, exclude_patterns, verbose, log_json)
        error = loader.refresh()
    except ViewLoaderError as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(2)
    print_template_table(loader, RichConsole(width=200))
    if error is not None:
        click.echo("", err=True)
        print_template_error(error)

@main_cli_group.command("render")
@click.argument("name")
@click.argument("roots", nargs=-1, type=click.Path(path_type=Path, file_okay=False))
@click.option("--var", "raw_vars", multiple=True, help="Render argument as key=value. Repeatable.")
@loader_options
def render_command(name, roots, raw_vars, config_path, delimiters, exclude_patterns, verbose, log_json):
    """Render one template to stdout."""
    render_args = _parse_vars(raw_vars)
    try:
        loader = _build_loader(roots, config_path, delimiters, exclude_patterns, verbose, log_json)
        loader.refresh()
        handle = loader.template(name)
        if handle.build_error is not None:
            log.warning("rendering_despite_build_error", template=name, error=str(handle.build_error))
        click.echo(handle.render_to_string(render_args), nl=False)
    except TemplateError as e:
        print_template_error(e)
        sys.exit(1)
    except ViewLoaderError as e:
        log.error("handled_application_error_in_cli", error_type=type(e).__name__, message=str(e))
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)
