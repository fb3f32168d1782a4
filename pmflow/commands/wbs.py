"""
WBS commands for PMFlow using PMFlowCore.

Nodes are referenced by id or by code (e.g. 1.2.3).
"""
import json
from typing import Optional

import click

from pmflow.constants import (
    DEFAULT_TREE_INDENT,
    ROOT_SENTINEL,
    VALID_NODE_STATUSES,
    VALIDATION_NAME_REQUIRED,
)
from pmflow.core import PMFlowCore
from pmflow.exceptions import PMFlowError, ValidationError
from pmflow.models.base import WBSNode


@click.group()
def wbs():
    """Manage the work breakdown structure."""
    pass


def _resolve_node(core: PMFlowCore, ref: str) -> WBSNode:
    """Resolve a node reference (id or code).

    Raises:
        click.ClickException: If no node matches.
    """
    node = core.find_node(ref)
    if node is None:
        raise click.ClickException(f"WBS node '{ref}' not found.")
    return node


def _resolve_parent(core: PMFlowCore, parent: Optional[str]) -> Optional[str]:
    """Resolve a parent reference to an id, None meaning root level.

    Raises:
        click.ClickException: If no node matches or the node is too deep to take children.
    """
    if not parent or parent == ROOT_SENTINEL:
        return None
    node = _resolve_node(core, parent)
    if node.id not in {n.id for n in core.wbs_manager.get_available_parents()}:
        raise click.ClickException(
            f"WBS node {node.code} is at the maximum depth "
            f"({core.wbs_manager.max_depth}) and cannot take children."
        )
    return node.id


def _collect_updates(**options) -> dict:
    return {key: value for key, value in options.items() if value is not None}


@wbs.command(name="add")
@click.option("-n", "--name", required=True, help="Node name.")
@click.option("-p", "--parent", help="Parent node id or code (root level if omitted).")
@click.option("-d", "--desc", help="Node description.")
@click.option("-s", "--status", type=click.Choice(VALID_NODE_STATUSES), help="Initial status.")
@click.option("--phase", "phase_id", help="Id of the project phase this work belongs to.")
@click.option("-r", "--responsible", help="Responsible person or role.")
@click.option("--budget", type=float, help="Allocated budget.")
@click.option("--hours", type=float, help="Estimated work hours.")
def add(name: str, parent: Optional[str], desc: Optional[str], status: Optional[str],
        phase_id: Optional[str], responsible: Optional[str], budget: Optional[float],
        hours: Optional[float]):
    """Add a WBS node."""
    core = PMFlowCore()
    if not name.strip():
        raise click.ClickException(f"Validation Error: {VALIDATION_NAME_REQUIRED}")
    try:
        parent_id = _resolve_parent(core, parent)
        node = core.add_node(
            _collect_updates(
                name=name.strip(),
                description=desc,
                status=status,
                phase_id=phase_id,
                responsible=responsible,
                budget=budget,
                estimated_hours=hours,
            ),
            parent_id,
        )
        click.echo(f"WBS node {node.code} '{node.name}' created successfully.")
    except ValidationError as e:
        raise click.ClickException(f"Validation Error: {e}")
    except PMFlowError as e:
        raise click.ClickException(f"Error: {e}")


@wbs.command(name="edit")
@click.argument("ref")
@click.option("-n", "--name", help="New name.")
@click.option("-d", "--desc", help="New description.")
@click.option("-s", "--status", type=click.Choice(VALID_NODE_STATUSES), help="New status.")
@click.option("--progress", type=click.IntRange(0, 100), help="Progress percentage.")
@click.option("-r", "--responsible", help="Responsible person or role.")
@click.option("--budget", type=float, help="Allocated budget.")
@click.option("--hours", type=float, help="Estimated work hours.")
def edit(ref: str, name: Optional[str], desc: Optional[str], status: Optional[str],
         progress: Optional[int], responsible: Optional[str], budget: Optional[float],
         hours: Optional[float]):
    """Edit a WBS node's attributes.

    REF is the node id or code. Only specified fields are updated.
    """
    core = PMFlowCore()
    node = _resolve_node(core, ref)
    updates = _collect_updates(
        name=name,
        description=desc,
        status=status,
        progress=progress,
        responsible=responsible,
        budget=budget,
        estimated_hours=hours,
    )
    if not updates:
        raise click.ClickException(
            "No update parameters provided. "
            "Specify at least one of: -n/--name, -d/--desc, -s/--status, --progress, "
            "-r/--responsible, --budget, --hours."
        )

    try:
        core.update_node(node.id, updates)
    except ValidationError as e:
        raise click.ClickException(f"Validation Error: {e}")
    click.echo(f"WBS node {node.code} updated successfully.")


@wbs.command(name="delete")
@click.argument("ref")
@click.confirmation_option(prompt="Are you sure you want to delete this node and all its children?")
def delete(ref: str):
    """Delete a WBS node.

    WARNING: This will delete all child nodes as well.
    """
    core = PMFlowCore()
    node = _resolve_node(core, ref)
    removed = core.delete_node(node.id)
    click.echo(f"WBS node {node.code} '{node.name}' deleted ({len(removed)} node(s) removed).")


@wbs.command(name="move")
@click.argument("ref")
@click.option("-p", "--parent", help="New parent node id or code (root level if omitted).")
def move(ref: str, parent: Optional[str]):
    """Move a WBS node under a new parent.

    The node and its subtree are renumbered under the new parent.
    """
    core = PMFlowCore()
    node = _resolve_node(core, ref)
    parent_id = _resolve_parent(core, parent)
    moved = core.move_node(node.id, parent_id)
    if moved is None:
        raise click.ClickException(f"Cannot move WBS node {node.code} to that parent.")
    click.echo(f"WBS node {node.code} moved to {moved.code}.")


@wbs.command(name="show")
@click.argument("ref")
@click.option("-j", "--json", "json_output", is_flag=True, help="Output in JSON format.")
def show(ref: str, json_output: bool):
    """Show details for a WBS node."""
    core = PMFlowCore()
    node = _resolve_node(core, ref)
    summary = core.summarize_node(node.id)
    children = core.wbs_manager.get_children(node.id)

    if json_output:
        item_dict = node.model_dump(mode="json")
        item_dict["summary"] = summary
        click.echo(json.dumps(item_dict, indent=2))
        return

    click.echo(f"{node.code} {node.name}")
    click.echo(f"Id: {node.id}")
    click.echo(f"Description: {node.description}")
    click.echo(f"Status: {node.status}")
    click.echo(f"Level: {node.level}")
    click.echo(f"Progress: {summary['progress']}%")
    if summary["budget"]:
        click.echo(f"Budget: {summary['budget']:.2f}")
    if summary["estimated_hours"]:
        click.echo(f"Estimated hours: {summary['estimated_hours']:g}")

    if children:
        click.echo("\nChildren:")
        for child in children:
            click.echo(f"  {child.code} {child.name}")
    else:
        click.echo("\nNo children.")


@wbs.command(name="tree")
def tree():
    """Show the WBS as an indented tree."""
    core = PMFlowCore()
    rows = core.get_tree()
    if not rows:
        click.echo("WBS is empty.")
        return
    for node, depth in rows:
        indent = " " * (DEFAULT_TREE_INDENT * depth)
        click.echo(f"{indent}{node.code} {node.name} [{node.status}, {node.progress}%]")


@wbs.command(name="check")
def check():
    """Check the WBS for broken parent/child links, levels and codes."""
    core = PMFlowCore()
    problems = core.check_wbs()
    if not problems:
        click.echo("WBS is consistent.")
        return
    for problem in problems:
        click.echo(f"  ⚠ {problem}")
    raise click.ClickException(f"{len(problems)} problem(s) found.")
