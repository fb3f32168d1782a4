"""
Event system for PMFlow.

Allows decoupled communication between components via events and listeners.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pmflow.logs import get_logger

logger = get_logger("events")


class EventType(str, Enum):
    """Types of events in PMFlow."""
    NODE_CREATED = "node.created"
    NODE_UPDATED = "node.updated"
    NODE_DELETED = "node.deleted"
    NODE_MOVED = "node.moved"
    PHASE_CREATED = "phase.created"
    PHASE_UPDATED = "phase.updated"
    PHASE_DELETED = "phase.deleted"


@dataclass
class Event:
    """Base event class."""
    type: EventType
    timestamp: datetime = field(default_factory=datetime.now)
    data: Dict[str, Any] = field(default_factory=dict)


@dataclass
class NodeEvent(Event):
    """Event for WBS node changes."""
    node_id: str = ""
    code: str = ""
    name: str = ""
    parent_id: Optional[str] = None
    removed_ids: List[str] = field(default_factory=list)


@dataclass
class PhaseEvent(Event):
    """Event for custom phase changes."""
    phase_id: str = ""
    name: str = ""
    order: float = 0


class EventListener(ABC):
    """Base class for event listeners."""

    @abstractmethod
    def handle(self, event: Event) -> None:
        """Handle an event.

        Args:
            event: The event to handle.
        """
        pass

    @property
    @abstractmethod
    def subscribed_events(self) -> List[EventType]:
        """Return list of event types this listener subscribes to."""
        pass


class EventBus:
    """
    Event bus for publishing and subscribing to events.

    Each PMFlowCore owns its own bus.
    """

    def __init__(self) -> None:
        self._listeners: Dict[EventType, List[EventListener]] = {}

    def subscribe(self, listener: EventListener) -> None:
        """Subscribe a listener to events.

        Args:
            listener: The listener to subscribe.
        """
        for event_type in listener.subscribed_events:
            listeners = self._listeners.setdefault(event_type, [])
            if listener not in listeners:
                listeners.append(listener)

    def unsubscribe(self, listener: EventListener) -> None:
        """Unsubscribe a listener from all events.

        Args:
            listener: The listener to unsubscribe.
        """
        for event_type in self._listeners:
            if listener in self._listeners[event_type]:
                self._listeners[event_type].remove(listener)

    def publish(self, event: Event) -> None:
        """Publish an event to all subscribed listeners.

        Args:
            event: The event to publish.
        """
        listeners = list(self._listeners.get(event.type, []))
        for listener in listeners:
            try:
                listener.handle(event)
            except Exception as e:
                # Log error but don't stop other listeners
                logger.error(
                    "Listener %s failed on %s: %s",
                    listener.__class__.__name__, event.type.value, e,
                )

    def clear(self) -> None:
        """Clear all listeners (useful for testing)."""
        self._listeners.clear()
