"""
Phase commands for PMFlow using PMFlowCore.

Base phases come from the project mode and are read-only; custom phases
can be inserted anywhere among them.
"""
from typing import Optional

import click

from pmflow.constants import END_SENTINEL, VALID_PHASE_TYPES, VALIDATION_NAME_REQUIRED
from pmflow.core import PMFlowCore
from pmflow.exceptions import PMFlowError


@click.group()
def phase():
    """Manage project phases."""
    pass


def _require_custom(core: PMFlowCore, phase_id: str) -> None:
    if not any(p.id == phase_id for p in core.state.custom_phases):
        if core.phase_sequencer.get_phase(phase_id):
            raise click.ClickException(f"Phase '{phase_id}' is a base phase and cannot be changed.")
        raise click.ClickException(f"Phase '{phase_id}' not found.")


@phase.command(name="list")
def list_phases():
    """List base and custom phases in order."""
    core = PMFlowCore()
    click.echo(f"Phases ({core.state.mode}):")
    for p in core.get_phases():
        marker = " [custom]" if p.is_custom else ""
        click.echo(f"  {p.order:g}. {p.name} ({p.id}){marker}")


@phase.command(name="add")
@click.option("-n", "--name", required=True, help="Phase name.")
@click.option("-d", "--desc", default="", help="Phase description.")
@click.option("-t", "--type", "phase_type", type=click.Choice(VALID_PHASE_TYPES),
              default="custom", show_default=True, help="Phase type.")
@click.option("-a", "--after", default=END_SENTINEL, show_default=True,
              help="Id of the phase to insert after, or 'end'.")
def add(name: str, desc: str, phase_type: str, after: str):
    """Add a custom phase."""
    core = PMFlowCore()
    if not name.strip():
        raise click.ClickException(f"Validation Error: {VALIDATION_NAME_REQUIRED}")
    if after != END_SENTINEL and core.phase_sequencer.get_phase(after) is None:
        raise click.ClickException(f"Phase '{after}' not found.")
    try:
        added = core.add_custom_phase(
            {"name": name.strip(), "description": desc, "type": phase_type},
            after,
        )
        click.echo(f"Custom phase '{added.name}' added at position {added.order:g}.")
    except PMFlowError as e:
        raise click.ClickException(f"Error: {e}")


@phase.command(name="edit")
@click.argument("phase_id")
@click.option("-n", "--name", help="New name.")
@click.option("-d", "--desc", help="New description.")
def edit(phase_id: str, name: Optional[str], desc: Optional[str]):
    """Edit a custom phase."""
    core = PMFlowCore()
    _require_custom(core, phase_id)
    updates = {k: v for k, v in {"name": name, "description": desc}.items() if v is not None}
    if not updates:
        raise click.ClickException(
            "No update parameters provided. Specify at least one of: -n/--name, -d/--desc."
        )
    core.update_phase(phase_id, updates)
    click.echo(f"Phase '{phase_id}' updated successfully.")


@phase.command(name="delete")
@click.argument("phase_id")
@click.confirmation_option(prompt="Are you sure you want to delete this phase?")
def delete(phase_id: str):
    """Delete a custom phase."""
    core = PMFlowCore()
    _require_custom(core, phase_id)
    core.delete_phase(phase_id)
    click.echo(f"Phase '{phase_id}' deleted successfully.")
