"""Config file commands."""

import typer

from cli.output import error_message, output_document, success_message

app = typer.Typer(help="Manage the schema mapper config file")


@app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite an existing config file"),
) -> None:
    """Create a config file with default values."""
    from cli.config import init_config

    try:
        config_path = init_config(force=force)
    except FileExistsError as e:
        error_message(str(e), hint="Use --force to overwrite it")
        raise typer.Exit(1) from e
    success_message(f"Config written to {config_path}")


@app.command("show")
def config_show() -> None:
    """Show the effective configuration and any problems with it."""
    from cli.config import load_config, validate_config

    try:
        config = load_config()
    except ValueError as e:
        error_message(str(e), hint="Fix the file or recreate it with 'config init --force'")
        raise typer.Exit(1) from e

    output_document(config.model_dump(by_alias=True), output_format="yaml")

    errors = validate_config(config)
    for message in errors:
        error_message(message)
    if errors:
        raise typer.Exit(1)
