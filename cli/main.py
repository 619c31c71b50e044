"""Main entry point for schema-mapper CLI tool."""

import logging

import typer

from cli import __version__
from cli.commands import config
from cli.commands.decode import decode
from cli.commands.map import map_schema

# Create main app
app = typer.Typer(
    name="schema-mapper",
    help="Map database schemas to table descriptors for code generation",
    no_args_is_help=True,
    add_completion=False,
)

# Add subcommands
app.command(name="map")(map_schema)
app.command(name="decode")(decode)
app.add_typer(config.app, name="config")


def version_callback(show_version: bool) -> None:
    """Show version and exit.

    Args:
        show_version: Whether to show version
    """
    if show_version:
        typer.echo(f"schema-mapper version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Log mapping progress to stderr"),
) -> None:
    """Map database schemas to table descriptors for code generation.

    Examples:

        # Map every table of a SQLite database
        schema-mapper map sqlite:///app.db --type sqlite --pretty

        # Use a configured connection and write YAML
        schema-mapper map @prod --type postgresql --format yaml --output schema.yaml

        # Decode a single column type
        schema-mapper decode "enum('draft','published')"

    For detailed help on each command:
        schema-mapper map --help
        schema-mapper decode --help
        schema-mapper config --help
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


if __name__ == "__main__":
    app()
