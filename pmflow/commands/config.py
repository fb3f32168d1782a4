"""
Config command group for PMFlow.

Commands for viewing and editing project configuration.
"""
import json

import click

from pmflow.core import PMFlowCore
from pmflow.exceptions import PMFlowError


@click.group()
def config():
    """View and edit project configuration.

    Configuration is stored in .pmflow/config.json.
    """
    pass


@config.command(name="show")
def show_config():
    """Show current configuration."""
    core = PMFlowCore()
    click.echo(json.dumps(core.config.model_dump(mode="json"), indent=2))


@config.command(name="set")
@click.argument("key")
@click.argument("value")
def set_config(key, value):
    """Set a configuration value."""
    core = PMFlowCore()
    try:
        core.set_config(key, value)
    except PMFlowError as e:
        raise click.ClickException(str(e))
    click.echo(f"Set {key} = {value}")


@config.command(name="get")
@click.argument("key")
def get_config(key):
    """Get a configuration value."""
    core = PMFlowCore()
    values = core.config.model_dump(mode="json")
    if key not in values:
        raise click.ClickException(f"Unknown config key: '{key}'.")
    click.echo(values[key])
