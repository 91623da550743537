"""Template generation CLI commands."""

import asyncio
import sys
from pathlib import Path
from typing import Optional

import click

from cli.utils.config import get_config
from cli.utils.output import format_output, print_error, print_success, print_warning
from template_generator import GenerationError, generate_template


@click.command("generate")
@click.option(
    "--project-root", "-p",
    type=click.Path(file_okay=False, path_type=Path),
    default=".",
    show_default=True,
    help="Project folder to generate into."
)
@click.option(
    "--template-root",
    default=None,
    help="Workspace folder relative to the project (default: Assets/TwinStickTemplate)."
)
def generate(project_root: Path, template_root: Optional[str]):
    """Generate the twin-stick shooter template: scripts, prefabs, scenes, build settings.

    \b
    Examples:
        twinstick-template generate
        twinstick-template generate --project-root ./MyGame
        twinstick-template --format json generate
    """
    config = get_config()

    try:
        summary = asyncio.run(generate_template(project_root, template_root=template_root))
    except GenerationError as e:
        print_error(str(e))
        sys.exit(1)

    click.echo(format_output(summary.model_dump(mode="json"), config.format))
    for warning in summary.warnings:
        print_warning(warning)
    for step in summary.degraded:
        print_warning(f"Degraded: {step}")
    print_success(f"Generated twin-stick template in {summary.workspace}")


@click.command("serve")
def serve():
    """Run the MCP server over stdio.

    \b
    Examples:
        twinstick-template serve
    """
    from services.server import create_server

    create_server().run()
