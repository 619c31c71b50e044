"""Schema mapping command."""

from pathlib import Path

import typer

from cli.output import error_message, output_document
from core.exceptions import SchemaMapperError
from core.sources.database import map_database_schema


def map_schema(
    connection: str = typer.Argument(..., help="Database connection string, or @name of a configured connection"),
    database_type: str | None = typer.Option(None, "--type", "-t", help="Database type: postgresql, mysql, sqlite"),
    schema: str | None = typer.Option(None, "--schema", help="Database schema name"),
    include: list[str] | None = typer.Option(None, "--include", "-i", help="Only map this table (repeatable)"),
    exclude: list[str] | None = typer.Option(None, "--exclude", "-x", help="Leave out this table (repeatable)"),
    junction_rules: list[str] | None = typer.Option(
        None,
        "--junction-rule",
        "-j",
        help="Junction rule: composite-primary, composite-primary-only, primary-and-timestamp-only, off (repeatable)",
    ),
    junction_callback: str | None = typer.Option(
        None, "--junction-callback", help="Junction predicate as 'package.module:function'"
    ),
    no_junctions: bool = typer.Option(False, "--no-junctions", help="Disable junction table detection"),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Output file path (default: stdout)", dir_okay=False, resolve_path=True
    ),
    output_format: str | None = typer.Option(None, "--format", "-f", help="Output format: json or yaml"),
    pretty: bool | None = typer.Option(None, "--pretty", help="Pretty-print JSON output"),
) -> None:
    """Map a database schema to table descriptors with associations.

    Example:
        schema-mapper map sqlite:///app.db --type sqlite --exclude migrations --output schema.json --pretty
    """
    try:
        from cli.config import get_mapping_defaults, get_output_defaults, resolve_connection

        mapping_defaults = get_mapping_defaults()
        output_defaults = get_output_defaults()

        # Apply defaults from config if not specified via CLI
        if database_type is None:
            database_type = mapping_defaults.database_type
        if schema is None:
            schema = mapping_defaults.db_schema
        if not include:
            include = mapping_defaults.include
        if not exclude:
            exclude = mapping_defaults.exclude
        if output_format is None:
            output_format = output_defaults.format
        if pretty is None:
            pretty = output_defaults.pretty

        if database_type is None:
            error_message("Database type is required", hint="Pass --type or set defaults.mapping.database_type")
            raise typer.Exit(1)

        rules: bool | list[str | dict[str, str]] | None
        if no_junctions:
            rules = False
        elif junction_rules or junction_callback:
            rules = list(junction_rules or [])
            if junction_callback:
                rules.append({"callback": junction_callback})
        else:
            rules = mapping_defaults.junction_rules

        schema_map = map_database_schema(
            connection_string=resolve_connection(connection),
            database_type=database_type,
            schema=schema,
            include=include,
            exclude=exclude,
            junction_rules=rules,
        )

        output_document(
            schema_map.model_dump(mode="json"), output_path=output, output_format=output_format, pretty=pretty
        )

    except typer.Exit:
        raise
    except KeyError as e:
        error_message(str(e.args[0]), hint="Add the connection to your config file")
        raise typer.Exit(1) from e
    except SchemaMapperError as e:
        error_message(str(e), hint="Check that the database is reachable and the table exists")
        raise typer.Exit(1) from e
    except (ValueError, ImportError) as e:
        error_message(str(e), hint="Check the database type and junction rules")
        raise typer.Exit(1) from e
    except Exception as e:
        error_message(f"Failed to map schema: {e}")
        raise typer.Exit(1) from e
