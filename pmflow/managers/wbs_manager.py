"""
WBSManager for PMFlow.

Applies structural operations to the Work Breakdown Structure.
"""

from collections import Counter
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError

from pmflow.constants import DEFAULT_MAX_WBS_DEPTH
from pmflow.exceptions import ValidationError
from pmflow.logs import get_logger
from pmflow.managers.code_generator import next_code
from pmflow.managers.events import EventBus, EventType, NodeEvent
from pmflow.models.base import STRUCTURAL_FIELDS, WBSNode
from pmflow.models.project import ProjectState

logger = get_logger("wbs_manager")

# Never taken from caller-supplied node data on creation.
_GENERATED_FIELDS = STRUCTURAL_FIELDS | {"parent_id", "created_at", "updated_at"}


class WBSManager:
    """
    Manages the WBS node collection held by a ProjectState.

    Every mutation is copy-on-write: a new list is built, changed nodes are
    replaced by updated copies, and the list is assigned back to the state.
    Existing node objects are never modified in place.

    Unknown ids are not errors. Adds fall back to root level, updates,
    deletes and moves become no-ops.

    Handles:
    - Adding nodes with generated codes and levels
    - Updating node attributes
    - Deleting nodes together with their whole subtree
    - Moving nodes to a new parent
    - Tree queries, roll-ups and consistency checks
    """

    def __init__(
        self,
        state: ProjectState,
        event_bus: Optional[EventBus] = None,
        max_depth: int = DEFAULT_MAX_WBS_DEPTH,
    ) -> None:
        """
        Initialize WBSManager.

        Args:
            state: ProjectState owning the node collection.
            event_bus: Bus to publish node events on. No events when None.
            max_depth: Deepest level a node may have and still be offered as a parent.
        """
        self.state = state
        self.event_bus = event_bus
        self.max_depth = max_depth

    # =========================================================================
    # Mutations
    # =========================================================================

    def add_node(
        self,
        node_data: Optional[Dict[str, Any]] = None,
        parent_id: Optional[str] = None,
    ) -> WBSNode:
        """Add a new node under parent_id, or at the root.

        Args:
            node_data: Attribute values for the new node. Structural fields are ignored.
            parent_id: Id of the parent node, or None for a root node.

        Returns:
            The newly created node.

        Raises:
            ValidationError: If node_data holds invalid attribute values.
        """
        nodes = self.state.wbs
        parent = self._find(nodes, parent_id)
        if parent_id is not None and parent is None:
            logger.warning("Parent %s not found, adding node at root level", parent_id)

        if parent:
            level = parent.level + 1
            code = next_code(nodes, parent.id)
        else:
            level = 0
            code = next_code(nodes, None)

        attributes = {
            key: value
            for key, value in (node_data or {}).items()
            if key not in _GENERATED_FIELDS
        }
        try:
            new_node = WBSNode(
                **attributes,
                code=code,
                level=level,
                parent_id=parent.id if parent else None,
                children=[],
            )
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid WBS node data: {e}")

        updated_nodes = list(nodes)
        if parent:
            updated_nodes = self._replace(
                updated_nodes,
                parent.model_copy(
                    update={"children": [*parent.children, new_node.id]}
                ),
            )
        updated_nodes.append(new_node)
        self.state.wbs = updated_nodes

        logger.debug("Added WBS node %s (%s)", new_node.code, new_node.id)
        self._emit(EventType.NODE_CREATED, new_node)
        return new_node

    def update_node(self, node_id: str, updates: Dict[str, Any]) -> Optional[WBSNode]:
        """Shallow-merge attribute updates into a node.

        id, code, level and children are never changed. A parent_id in the
        updates is stored as a plain attribute; use move_node to reparent.

        Args:
            node_id: Id of the node to update.
            updates: Attribute values to merge.

        Returns:
            The updated node, or None if node_id is unknown.

        Raises:
            ValidationError: If updates hold invalid attribute values.
        """
        nodes = self.state.wbs
        node = self._find(nodes, node_id)
        if node is None:
            logger.warning("Update of unknown WBS node %s ignored", node_id)
            return None

        merged = {
            key: value
            for key, value in updates.items()
            if key in WBSNode.model_fields and key not in STRUCTURAL_FIELDS
        }
        ignored = set(updates) - set(merged)
        if ignored:
            logger.debug("Ignoring non-attribute updates for %s: %s", node_id, sorted(ignored))
        merged["updated_at"] = datetime.now()

        try:
            updated = WBSNode.model_validate({**node.model_dump(), **merged})
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid WBS node update for {node.code}: {e}")

        self.state.wbs = self._replace(list(nodes), updated)

        self._emit(EventType.NODE_UPDATED, updated)
        return updated

    def delete_node(self, node_id: str) -> List[str]:
        """Delete a node and its entire subtree.

        Args:
            node_id: Id of the node to delete.

        Returns:
            Ids of all removed nodes, the target first. Empty if node_id is unknown.
        """
        nodes = self.state.wbs
        target = self._find(nodes, node_id)
        if target is None:
            logger.debug("Delete of unknown WBS node %s ignored", node_id)
            return []

        removed_ids = [target.id, *self.get_descendant_ids(target.id)]
        removed = set(removed_ids)
        remaining = [node for node in nodes if node.id not in removed]

        parent = self._find(remaining, target.parent_id)
        if parent:
            remaining = self._replace(
                remaining,
                parent.model_copy(
                    update={"children": [c for c in parent.children if c != target.id]}
                ),
            )
        self.state.wbs = remaining

        logger.debug("Deleted WBS node %s and %d descendants", target.code, len(removed_ids) - 1)
        self._emit(EventType.NODE_DELETED, target, removed_ids=removed_ids)
        return removed_ids

    def move_node(self, node_id: str, new_parent_id: Optional[str]) -> Optional[WBSNode]:
        """Reparent a node, re-issuing codes so they follow the new parent.

        The moved node gets the next free code under its new parent; its
        descendants keep their relative suffixes under that new prefix and
        have their levels shifted accordingly.

        Args:
            node_id: Id of the node to move.
            new_parent_id: Id of the new parent, or None to move to root level.

        Returns:
            The moved node, or None if the move was rejected.
        """
        nodes = self.state.wbs
        node = self._find(nodes, node_id)
        if node is None:
            logger.warning("Move of unknown WBS node %s ignored", node_id)
            return None

        new_parent = self._find(nodes, new_parent_id)
        if new_parent_id is not None and new_parent is None:
            logger.warning("Move target parent %s not found", new_parent_id)
            return None

        descendant_ids = self.get_descendant_ids(node.id)
        if new_parent_id == node.id or new_parent_id in descendant_ids:
            logger.warning("Cannot move WBS node %s under itself or its descendants", node.code)
            return None

        if new_parent_id == node.parent_id:
            return node

        new_code = next_code(nodes, new_parent_id)
        new_level = new_parent.level + 1 if new_parent else 0
        old_prefix = node.code + "."
        level_shift = new_level - node.level
        now = datetime.now()

        moved = node.model_copy(
            update={
                "parent_id": new_parent_id,
                "code": new_code,
                "level": new_level,
                "updated_at": now,
            }
        )
        updated_nodes = self._replace(list(nodes), moved)

        for descendant_id in descendant_ids:
            descendant = self._find(updated_nodes, descendant_id)
            code = descendant.code
            if code.startswith(old_prefix):
                code = new_code + "." + code[len(old_prefix):]
            updated_nodes = self._replace(
                updated_nodes,
                descendant.model_copy(
                    update={
                        "code": code,
                        "level": descendant.level + level_shift,
                        "updated_at": now,
                    }
                ),
            )

        old_parent = self._find(updated_nodes, node.parent_id)
        if old_parent:
            updated_nodes = self._replace(
                updated_nodes,
                old_parent.model_copy(
                    update={"children": [c for c in old_parent.children if c != node.id]}
                ),
            )
        if new_parent:
            new_parent = self._find(updated_nodes, new_parent.id)
            updated_nodes = self._replace(
                updated_nodes,
                new_parent.model_copy(
                    update={"children": [*new_parent.children, node.id]}
                ),
            )
        self.state.wbs = updated_nodes

        logger.debug("Moved WBS node %s to %s", node.code, new_code)
        self._emit(EventType.NODE_MOVED, moved, data={"old_code": node.code})
        return moved

    # =========================================================================
    # Queries
    # =========================================================================

    def get_node(self, node_id: str) -> Optional[WBSNode]:
        """Get a node by id."""
        return self.state.get_node(node_id)

    def get_roots(self) -> List[WBSNode]:
        """Get root-level nodes in collection order."""
        return [node for node in self.state.wbs if node.is_root]

    def get_children(self, node_id: str) -> List[WBSNode]:
        """Get the direct children of a node in children-list order."""
        node = self.get_node(node_id)
        if node is None:
            return []
        lookup = self.state.node_map()
        return [lookup[child_id] for child_id in node.children if child_id in lookup]

    def get_descendant_ids(self, node_id: str) -> List[str]:
        """Collect the ids of all transitive descendants of a node.

        Descendants are found by filtering on parent_id, breadth first.

        Args:
            node_id: Id of the subtree root.

        Returns:
            Descendant ids, not including node_id itself.
        """
        nodes = self.state.wbs
        found: List[str] = []
        seen = {node_id}
        frontier = [node_id]
        while frontier:
            current = frontier.pop(0)
            for node in nodes:
                if node.parent_id == current and node.id not in seen:
                    seen.add(node.id)
                    found.append(node.id)
                    frontier.append(node.id)
        return found

    def walk(self) -> List[Tuple[WBSNode, int]]:
        """Flatten the tree depth first, the way the tree view renders it.

        Returns:
            (node, depth) pairs, roots first, each followed by its subtree.
        """
        nodes = self.state.wbs
        result: List[Tuple[WBSNode, int]] = []
        visited = set()

        def _visit(node: WBSNode, depth: int) -> None:
            if node.id in visited:
                return
            visited.add(node.id)
            result.append((node, depth))
            for child in nodes:
                if child.parent_id == node.id:
                    _visit(child, depth + 1)

        for root in self.get_roots():
            _visit(root, 0)
        return result

    def get_available_parents(self) -> List[WBSNode]:
        """Get nodes that may accept new children.

        Roots always qualify; other nodes only above the maximum depth.
        """
        return [
            node for node in self.state.wbs
            if node.is_root or node.level < self.max_depth
        ]

    def summarize(self, node_id: str, round_precision: int = 1) -> Dict[str, float]:
        """Roll up cost, effort and progress over a subtree.

        Progress is the average over leaf nodes of the subtree.

        Args:
            node_id: Id of the subtree root.
            round_precision: Decimal places for the progress average.

        Returns:
            Dict with node_count, budget, actual_cost, estimated_hours,
            actual_hours and progress. Empty dict if node_id is unknown.
        """
        node = self.get_node(node_id)
        if node is None:
            return {}

        lookup = self.state.node_map()
        subtree = [node] + [lookup[i] for i in self.get_descendant_ids(node_id)]
        parent_ids = {n.parent_id for n in self.state.wbs if n.parent_id}
        leaves = [n for n in subtree if n.id not in parent_ids]

        def _total(field_name: str) -> float:
            return float(sum(getattr(n, field_name) or 0 for n in subtree))

        progress = sum(n.progress for n in leaves) / len(leaves) if leaves else 0.0
        return {
            "node_count": len(subtree),
            "budget": _total("budget"),
            "actual_cost": _total("actual_cost"),
            "estimated_hours": _total("estimated_hours"),
            "actual_hours": _total("actual_hours"),
            "progress": round(progress, round_precision),
        }

    def find_inconsistencies(self) -> List[str]:
        """Check the tree invariants.

        Returns:
            One message per violation. Empty when the tree is consistent.
        """
        nodes = self.state.wbs
        lookup = {node.id: node for node in nodes}
        problems: List[str] = []

        for node in nodes:
            if node.is_root:
                if node.level != 0:
                    problems.append(f"Root node {node.code} has level {node.level}, expected 0")
                continue

            parent = lookup.get(node.parent_id)
            if parent is None:
                problems.append(f"Node {node.code} references missing parent {node.parent_id}")
                continue
            if node.id not in parent.children:
                problems.append(f"Node {node.code} is missing from children of {parent.code}")
            if node.level != parent.level + 1:
                problems.append(
                    f"Node {node.code} has level {node.level}, expected {parent.level + 1}"
                )
            if not node.code.startswith(parent.code + "."):
                problems.append(f"Node {node.code} does not extend parent code {parent.code}")

        listed_in = Counter(child_id for node in nodes for child_id in node.children)
        for child_id, count in listed_in.items():
            if count > 1:
                problems.append(f"Node {child_id} is listed as a child {count} times")

        for node in nodes:
            for child_id in node.children:
                child = lookup.get(child_id)
                if child is None:
                    problems.append(f"Node {node.code} lists missing child {child_id}")
                elif child.parent_id != node.id:
                    problems.append(
                        f"Node {node.code} lists {child.code} whose parent is {child.parent_id}"
                    )

        sibling_codes = Counter((node.parent_id, node.code) for node in nodes)
        for (parent_id, code), count in sibling_codes.items():
            if count > 1:
                problems.append(f"Code {code} is used by {count} siblings")

        return problems

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _find(nodes: List[WBSNode], node_id: Optional[str]) -> Optional[WBSNode]:
        if node_id is None:
            return None
        return next((node for node in nodes if node.id == node_id), None)

    @staticmethod
    def _replace(nodes: List[WBSNode], updated: WBSNode) -> List[WBSNode]:
        return [updated if node.id == updated.id else node for node in nodes]

    def _emit(self, event_type: EventType, node: WBSNode, **kwargs) -> None:
        if self.event_bus is None:
            return
        self.event_bus.publish(
            NodeEvent(
                type=event_type,
                node_id=node.id,
                code=node.code,
                name=node.name,
                parent_id=node.parent_id,
                **kwargs,
            )
        )
