"""Output helpers for the CLI."""

import json
from typing import Any

import click


def format_output(data: Any, fmt: str = "text") -> str:
    """Render a result dict as JSON or as indented ``key: value`` text."""
    if fmt == "json":
        return json.dumps(data, indent=2, default=str)
    return _format_text(data)


def _format_text(data: Any, indent: int = 0) -> str:
    pad = "  " * indent
    if isinstance(data, dict):
        lines = []
        for key, value in data.items():
            if isinstance(value, (dict, list)) and value:
                lines.append(f"{pad}{key}:")
                lines.append(_format_text(value, indent + 1))
            else:
                lines.append(f"{pad}{key}: {_scalar(value)}")
        return "\n".join(lines)
    if isinstance(data, list):
        lines = []
        for item in data:
            if isinstance(item, dict):
                inline = ", ".join(f"{k}={_scalar(v)}" for k, v in item.items())
                lines.append(f"{pad}- {inline}")
            else:
                lines.append(f"{pad}- {_scalar(item)}")
        return "\n".join(lines)
    return f"{pad}{_scalar(data)}"


def _scalar(value: Any) -> str:
    if value is None:
        return "-"
    if isinstance(value, (dict, list)):
        return json.dumps(value, default=str)
    return str(value)


def print_success(message: str) -> None:
    click.secho(f"✓ {message}", fg="green")


def print_warning(message: str) -> None:
    click.secho(f"! {message}", fg="yellow", err=True)


def print_error(message: str) -> None:
    click.secho(f"✗ {message}", fg="red", err=True)
