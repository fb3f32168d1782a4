"""
Managers for PMFlow.

This package contains focused manager classes that handle specific aspects of PMFlow functionality:
- code_generator: Hierarchical WBS code generation
- WBSManager: WBS node add/update/delete/move, queries and consistency checks
- PhaseSequencer: Custom phase insertion and renormalization
- StorageManager: Persistence to .pmflow/ folder structure
- EventBus: Event-driven architecture for decoupled communication
- AutoSaveListener: Mirror changed collections to storage
"""

from pmflow.managers.code_generator import next_code, parse_code_segment
from pmflow.managers.wbs_manager import WBSManager
from pmflow.managers.phase_sequencer import PhaseSequencer
from pmflow.managers.storage_manager import StorageManager
from pmflow.managers.events import (
    EventBus,
    Event,
    NodeEvent,
    PhaseEvent,
    EventType,
    EventListener,
)
from pmflow.managers.auto_save import AutoSaveListener

__all__ = [
    "next_code",
    "parse_code_segment",
    "WBSManager",
    "PhaseSequencer",
    "StorageManager",
    "EventBus",
    "Event",
    "NodeEvent",
    "PhaseEvent",
    "EventType",
    "EventListener",
    "AutoSaveListener",
]
