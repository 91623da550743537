"""Entry point for the ``twinstick-template`` command."""

import logging
from typing import Optional

import click

from cli.commands.template import generate, serve
from cli.utils.config import get_config


@click.group()
@click.option(
    "--format", "-f", "output_format",
    type=click.Choice(["text", "json"]),
    default=None,
    help="Output format (default: text, or TWINSTICK_OUTPUT_FORMAT)."
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Show debug logs."
)
def cli(output_format: Optional[str], verbose: bool):
    """Twin-stick shooter template generator."""
    config = get_config()
    if output_format:
        config.format = output_format
    config.verbose = verbose
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


cli.add_command(generate)
cli.add_command(serve)


def main():
    cli()


if __name__ == "__main__":
    main()
