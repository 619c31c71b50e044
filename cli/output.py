"""Rendering and writing of CLI documents and status messages."""

import json
from pathlib import Path
from typing import Any

import typer
import yaml
from rich.console import Console
from rich.syntax import Syntax
from rich.text import Text

OUTPUT_FORMATS = ("json", "yaml")

console = Console()
err_console = Console(stderr=True)


def render_document(data: dict[str, Any], output_format: str, pretty: bool = False) -> str:
    """Serialize a dumped SchemaMap, TypeDescriptor or Config.

    Args:
        data: JSON-compatible document
        output_format: json or yaml
        pretty: Indent JSON (YAML is always block style)

    Raises:
        ValueError: If the format is not json or yaml
    """
    if output_format == "yaml":
        return yaml.safe_dump(data, default_flow_style=False, allow_unicode=True, sort_keys=False)
    if output_format == "json":
        return json.dumps(data, indent=2 if pretty else None, ensure_ascii=False)
    raise ValueError(f"Unknown output format: {output_format}. Use one of: {', '.join(OUTPUT_FORMATS)}")


def output_document(
    data: dict[str, Any],
    output_path: Path | None = None,
    output_format: str = "json",
    pretty: bool = False,
) -> None:
    """Write a document to output_path, or highlight it on stdout when no path is given"""
    try:
        text = render_document(data, output_format, pretty)
    except ValueError as e:
        error_message(str(e))
        raise typer.Exit(1) from e

    if output_path is None:
        console.print(Syntax(text, output_format, theme="monokai"))
        return

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(text, encoding="utf-8")
    success_message(f"Written to {output_path}")


def error_message(message: str, hint: str | None = None) -> None:
    err_console.print(Text(f"✗ Error: {message}", style="red"), soft_wrap=True)
    if hint:
        err_console.print(Text(f"  Hint: {hint}", style="yellow"), soft_wrap=True)


def success_message(message: str) -> None:
    console.print(Text(f"✓ {message}", style="green"), soft_wrap=True)
