# viewloader/cli/console_output.py
"""
Prints build results and template error reports to the console (stderr).
"""
from typing import Optional

import click
from rich.console import Console as RichConsole
from rich.table import Table
import structlog

from viewloader.core.loader import TemplateLoader
from viewloader.exceptions import TemplateError

log = structlog.get_logger(__name__)

def print_template_error(error: TemplateError, context_radius: int = 2):
    """Title, position, description and the numbered source lines around the error."""
    click.secho(f"{error.title}", fg="red", bold=True, err=True)
    location = error.path or "(unknown template)"
    if error.line > 0:
        location = f"{location}:{error.line}"
    click.echo(f"  in {location}", err=True)
    click.echo(f"  {error.description}", err=True)

    context = error.context(context_radius)
    if context:
        width = len(str(context[-1][0]))
        click.echo("", err=True)
        for number, text in context:
            marker = ">" if number == error.line else " "
            line_str = f"{marker} {number:>{width}} | {text}"
            if number == error.line:
                click.secho(line_str, fg="yellow", err=True)
            else:
                click.echo(line_str, err=True)

def print_build_summary(loader: TemplateLoader, error: Optional[TemplateError]):
    build = loader.build
    count = len(build.template_set) if build.template_set is not None else 0
    click.secho("--- template build ---", fg="cyan", err=True)
    click.echo(f"Compiled templates: {count} (from {len(build.template_paths)} names)", err=True)
    if error is not None:
        click.echo("", err=True)
        print_template_error(error)

def print_template_table(loader: TemplateLoader, console: Optional[RichConsole] = None):
    console = console or RichConsole()
    table = Table(title="Templates")
    table.add_column("Name", style="bold")
    table.add_column("Engine")
    table.add_column("Source")
    template_set = loader.build.template_set
    if template_set is not None:
        for name in template_set.names():
            entry = template_set.lookup(name)
            table.add_row(name, entry.kind, entry.path)
    console.print(table)
