"""Column type decoding command."""

import typer

from cli.output import output_document
from core.schema.type_mapping import decode_type


def decode(
    raw_type: str = typer.Argument(..., help="Column type as reported by the database, e.g. \"decimal(10,2)\""),
    output_format: str = typer.Option("json", "--format", "-f", help="Output format: json or yaml"),
) -> None:
    """Decode a raw column type into its normalized description.

    Example:
        schema-mapper decode "int(10) unsigned"
    """
    descriptor = decode_type(raw_type)
    output_document(descriptor.model_dump(), output_format=output_format, pretty=True)
