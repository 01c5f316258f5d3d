# viewloader/main.py
"""Main entry point for the viewloader CLI application."""

from viewloader.cli.interface import main_cli_group


def entrypoint():
    """Function to be called by the script defined in pyproject.toml."""
    main_cli_group(prog_name="viewloader")

if __name__ == '__main__':
    entrypoint()
