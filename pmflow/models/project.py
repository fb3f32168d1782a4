"""
Project state for PMFlow.

In-memory collections the WBS and phase managers operate over.
Loaded from flat storage, replaced wholesale on every mutation.
"""

from typing import Dict, List, Optional

from pmflow.models.base import WBSNode
from pmflow.models.phase import Phase, get_base_phases


class ProjectState:
    """
    Explicit store for the WBS node and custom phase collections.

    Managers never patch these lists in place; each mutation assigns a new
    list, so a reference taken before an operation still sees the old state.
    """

    def __init__(
        self,
        mode: str = "waterfall",
        wbs: Optional[List[WBSNode]] = None,
        custom_phases: Optional[List[Phase]] = None,
        base_phases: Optional[List[Phase]] = None,
    ):
        self.mode = mode
        self.wbs: List[WBSNode] = list(wbs or [])
        self.custom_phases: List[Phase] = list(custom_phases or [])
        self.base_phases: List[Phase] = (
            list(base_phases) if base_phases is not None else get_base_phases(mode)
        )

    def get_node(self, node_id: Optional[str]) -> Optional[WBSNode]:
        if node_id is None:
            return None
        for node in self.wbs:
            if node.id == node_id:
                return node
        return None

    def node_map(self) -> Dict[str, WBSNode]:
        """Build an id -> node lookup for the current collection."""
        return {node.id: node for node in self.wbs}
