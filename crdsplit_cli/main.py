"""CLI entrypoint."""

import sys

import click
from loguru import logger

from .commands.crd_less import crd_less
from .commands.crd_only import crd_only


@click.group()
@click.version_option(version="0.1.0", prog_name="crdsplit")
@click.option("--verbose", is_flag=True, help="Show debug logs on stderr")
def cli(verbose: bool):
    """crdsplit - split a Helm chart into CRD-less and CRD-only charts."""
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING")


cli.add_command(crd_less)
cli.add_command(crd_only)


if __name__ == "__main__":
    cli()
