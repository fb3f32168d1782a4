"""
Hierarchical code generation for WBS nodes.

Codes are issued by rescanning the node collection on every call, so there
is no cached counter that could skip or collide.
"""

from typing import Iterable, Optional

from pmflow.logs import get_logger
from pmflow.models.base import WBSNode

logger = get_logger("code_generator")


def parse_code_segment(segment: Optional[str]) -> int:
    """Parse one code segment as an integer.

    Missing or non-numeric segments count as 0.

    Args:
        segment: Code segment such as "3".

    Returns:
        The integer value, or 0 if it can't be parsed.
    """
    if not segment:
        return 0
    try:
        return int(segment.strip())
    except ValueError:
        return 0


def next_code(nodes: Iterable[WBSNode], parent_id: Optional[str] = None) -> str:
    """Compute the code for a new node under parent_id (or at the root).

    Root codes are 1 + the highest existing root code. Child codes are the
    parent's code plus 1 + the highest existing sibling suffix. An unknown
    parent yields the degenerate code "1".

    Args:
        nodes: Current node collection, before the new node is added.
        parent_id: Id of the parent node, or None for a root node.

    Returns:
        The next code string.
    """
    nodes = list(nodes)

    if parent_id is None:
        highest = max(
            (parse_code_segment(n.code) for n in nodes if n.parent_id is None),
            default=0,
        )
        return str(highest + 1)

    parent = next((n for n in nodes if n.id == parent_id), None)
    if parent is None:
        logger.warning("Parent %s not found, using fallback code '1'", parent_id)
        return "1"

    highest = max(
        (parse_code_segment(n.code_suffix) for n in nodes if n.parent_id == parent.id),
        default=0,
    )
    return f"{parent.code}.{highest + 1}"
