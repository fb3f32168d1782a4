"""
Auto-save listener for PMFlow.

Mirrors the in-memory collections to storage whenever they change.
"""
from typing import List

from pmflow.managers.events import Event, EventListener, EventType
from pmflow.managers.storage_manager import StorageManager
from pmflow.models.files import PhasesFile, WBSFile
from pmflow.models.project import ProjectState

_NODE_EVENTS = [
    EventType.NODE_CREATED,
    EventType.NODE_UPDATED,
    EventType.NODE_DELETED,
    EventType.NODE_MOVED,
]
_PHASE_EVENTS = [
    EventType.PHASE_CREATED,
    EventType.PHASE_UPDATED,
    EventType.PHASE_DELETED,
]


class AutoSaveListener(EventListener):
    """
    Writes the affected collection back to storage after each change.

    Node events rewrite wbs.json, phase events rewrite phases.json.
    """

    def __init__(
        self,
        storage: StorageManager,
        state: ProjectState,
        auto_save_enabled: bool = True,
    ) -> None:
        """
        Initialize AutoSaveListener.

        Args:
            storage: StorageManager to write through.
            state: ProjectState whose collections are saved.
            auto_save_enabled: Whether auto-save is enabled.
        """
        self.storage = storage
        self.state = state
        self.auto_save_enabled = auto_save_enabled

    @property
    def subscribed_events(self) -> List[EventType]:
        """Return list of events this listener handles."""
        return _NODE_EVENTS + _PHASE_EVENTS

    def handle(self, event: Event) -> None:
        """Save the collection touched by the event.

        Args:
            event: The change event.
        """
        if not self.auto_save_enabled:
            return

        if event.type in _NODE_EVENTS:
            self.storage.save_wbs(WBSFile(nodes=self.state.wbs))
        elif event.type in _PHASE_EVENTS:
            self.storage.save_phases(PhasesFile(custom_phases=self.state.custom_phases))
