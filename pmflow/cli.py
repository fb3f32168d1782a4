"""
CLI for PMFlow using .pmflow/ folder-based storage.

Uses PMFlowCore and managers exclusively.
"""
import click

from pmflow.commands.config import config
from pmflow.commands.init import init
from pmflow.commands.phase import phase
from pmflow.commands.wbs import wbs
from pmflow.logs import setup_logging


@click.group()
def cli():
    """A command-line interface for work breakdown structures and project phases."""
    setup_logging()


cli.add_command(init)
cli.add_command(wbs)
cli.add_command(phase)
cli.add_command(config)


if __name__ == '__main__':
    cli()
