"""
PMFlowCore - Core business logic for PMFlow using .pmflow/ storage.

Orchestrates manager classes for all WBS and phase operations.
Uses StorageManager for .pmflow/ folder-based storage exclusively.
Uses an EventBus so storage is kept in step with every change.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError

from pmflow.constants import (
    DEFAULT_PROJECT_MODE,
    VALID_PROJECT_MODES,
    VALIDATION_INVALID_MODE,
)
from pmflow.exceptions import ValidationError
from pmflow.logs import get_logger
from pmflow.managers import (
    AutoSaveListener,
    EventBus,
    PhaseSequencer,
    StorageManager,
    WBSManager,
)
from pmflow.models.base import WBSNode
from pmflow.models.files import ConfigFile, PhasesFile, WBSFile
from pmflow.models.phase import Phase, get_base_phases
from pmflow.models.project import ProjectState

logger = get_logger("core")


class PMFlowCore:
    """
    Core class for WBS and phase operations.

    Owns the ProjectState and orchestrates:
    - StorageManager: Persistence to .pmflow/ folder
    - ConfigFile: Project settings read from config.json
    - WBSManager: WBS node add/update/delete/move and queries
    - PhaseSequencer: Custom phase insertion and ordering
    - EventBus: Change events
    - AutoSaveListener: Writes changed collections back to storage
    """

    def __init__(
        self,
        pmflow_dir: Optional[Path] = None,
        auto_save_enabled: bool = True,
    ):
        """
        Initialize the PMFlowCore with a .pmflow/ directory.

        Args:
            pmflow_dir: Path to .pmflow/ directory. Defaults to .pmflow/ in current directory.
            auto_save_enabled: Whether to save after every change.
        """
        self.storage = StorageManager(pmflow_dir)
        self.config = self.storage.load_config()

        mode = self.config.project_mode
        if mode not in VALID_PROJECT_MODES:
            logger.warning("Unknown project mode '%s', using '%s'", mode, DEFAULT_PROJECT_MODE)
            mode = DEFAULT_PROJECT_MODE

        # Load state from storage
        self.state = ProjectState(
            mode=mode,
            wbs=self.storage.load_wbs().nodes,
            custom_phases=self.storage.load_phases().custom_phases,
        )

        # Initialize managers
        self.event_bus = EventBus()
        self.wbs_manager = WBSManager(
            self.state,
            event_bus=self.event_bus,
            max_depth=self.config.max_wbs_depth,
        )
        self.phase_sequencer = PhaseSequencer(self.state, event_bus=self.event_bus)

        self.auto_save_listener = AutoSaveListener(
            self.storage,
            self.state,
            auto_save_enabled=auto_save_enabled,
        )
        self.event_bus.subscribe(self.auto_save_listener)

    def save(self) -> None:
        """Save both collections to storage."""
        self.storage.save_wbs(WBSFile(nodes=self.state.wbs))
        self.storage.save_phases(PhasesFile(custom_phases=self.state.custom_phases))

    # =========================================================================
    # WBS
    # =========================================================================

    def add_node(
        self, node_data: Optional[Dict[str, Any]] = None, parent_id: Optional[str] = None
    ) -> WBSNode:
        """Add a WBS node under parent_id, or at the root."""
        return self.wbs_manager.add_node(node_data, parent_id)

    def update_node(self, node_id: str, updates: Dict[str, Any]) -> Optional[WBSNode]:
        """Merge attribute updates into a WBS node."""
        return self.wbs_manager.update_node(node_id, updates)

    def delete_node(self, node_id: str) -> List[str]:
        """Delete a WBS node and its subtree."""
        return self.wbs_manager.delete_node(node_id)

    def move_node(self, node_id: str, new_parent_id: Optional[str]) -> Optional[WBSNode]:
        """Reparent a WBS node."""
        return self.wbs_manager.move_node(node_id, new_parent_id)

    def get_node(self, node_id: str) -> Optional[WBSNode]:
        """Get a WBS node by id."""
        return self.wbs_manager.get_node(node_id)

    def find_node(self, ref: str) -> Optional[WBSNode]:
        """Find a WBS node by id or by code."""
        node = self.wbs_manager.get_node(ref)
        if node:
            return node
        return next((n for n in self.state.wbs if n.code == ref), None)

    def get_tree(self) -> List[Tuple[WBSNode, int]]:
        """Get the WBS flattened depth first with depths."""
        return self.wbs_manager.walk()

    def summarize_node(self, node_id: str) -> Dict[str, float]:
        """Roll up cost, effort and progress over a subtree."""
        return self.wbs_manager.summarize(node_id)

    def check_wbs(self) -> List[str]:
        """List WBS invariant violations."""
        return self.wbs_manager.find_inconsistencies()

    # =========================================================================
    # Phases
    # =========================================================================

    def get_phases(self) -> List[Phase]:
        """Get base and custom phases as one ordered sequence."""
        return self.phase_sequencer.all_phases()

    def add_custom_phase(
        self,
        phase_data: Optional[Dict[str, Any]] = None,
        insert_after_phase_id: Optional[str] = None,
    ) -> Phase:
        """Insert a custom phase after the given phase, or at the end."""
        return self.phase_sequencer.add_custom_phase(phase_data, insert_after_phase_id)

    def update_phase(self, phase_id: str, updates: Dict[str, Any]) -> Optional[Phase]:
        """Merge attribute updates into a custom phase."""
        return self.phase_sequencer.update_phase(phase_id, updates)

    def delete_phase(self, phase_id: str) -> bool:
        """Remove a custom phase."""
        return self.phase_sequencer.delete_phase(phase_id)

    # =========================================================================
    # Configuration
    # =========================================================================

    def set_config(self, key: str, value: Any) -> ConfigFile:
        """Set a configuration value and persist it.

        Changing project_mode swaps the base phase set; custom phases keep
        their positions.

        Args:
            key: ConfigFile field name.
            value: New value, coerced by the ConfigFile model.

        Returns:
            The saved configuration.

        Raises:
            ValidationError: If the key is unknown or the value is invalid.
        """
        if key not in ConfigFile.model_fields:
            raise ValidationError(
                f"Unknown config key: '{key}'. "
                f"Valid keys are: {', '.join(ConfigFile.model_fields)}."
            )
        if key == "project_mode" and value not in VALID_PROJECT_MODES:
            raise ValidationError(VALIDATION_INVALID_MODE)

        try:
            updated = ConfigFile.model_validate({**self.config.model_dump(), key: value})
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid value for '{key}': {e}")

        self.storage.save_config(updated)
        self.config = updated

        if key == "project_mode":
            self.state.mode = updated.project_mode
            self.state.base_phases = get_base_phases(updated.project_mode)
        elif key == "max_wbs_depth":
            self.wbs_manager.max_depth = updated.max_wbs_depth
        return updated
