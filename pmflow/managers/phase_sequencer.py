"""
PhaseSequencer for PMFlow.

Slots custom phases among the fixed base phases of the project mode.

A new phase gets a fractional provisional order (insertion index + 0.5) so
it sorts between its neighbours, then every custom phase is renormalized
to its 1-based position in the merged sequence. Base phases are never
modified; the merged view reports them with their effective position.
"""

from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from pmflow.constants import END_SENTINEL
from pmflow.exceptions import ValidationError
from pmflow.logs import get_logger
from pmflow.managers.events import EventBus, EventType, PhaseEvent
from pmflow.models.phase import Phase, PhaseType
from pmflow.models.project import ProjectState

logger = get_logger("phase_sequencer")

_PROTECTED_FIELDS = frozenset({"id", "order", "is_custom"})


class PhaseSequencer:
    """
    Manages custom phases in a ProjectState.

    Handles:
    - Merging base and custom phases into one ordered sequence
    - Inserting custom phases after a given phase or at the end
    - Renormalizing custom orders to consecutive integers
    - Updating and deleting custom phases (base phases are read-only)
    """

    def __init__(self, state: ProjectState, event_bus: Optional[EventBus] = None) -> None:
        """
        Initialize PhaseSequencer.

        Args:
            state: ProjectState owning the base and custom phase collections.
            event_bus: Bus to publish phase events on. No events when None.
        """
        self.state = state
        self.event_bus = event_bus

    def all_phases(self) -> List[Phase]:
        """Merge base and custom phases into a single ordered sequence.

        Custom phases are placed at the position their order names; base
        phases fill the remaining slots in their own order. Base phases are
        returned as copies carrying their effective position as order.

        Returns:
            The merged sequence.
        """
        return self._merge(self.state.base_phases, self.state.custom_phases)

    def get_phase(self, phase_id: str) -> Optional[Phase]:
        """Get a phase (base or custom) from the merged sequence by id."""
        return next((p for p in self.all_phases() if p.id == phase_id), None)

    def add_custom_phase(
        self,
        phase_data: Optional[Dict[str, Any]] = None,
        insert_after_phase_id: Optional[str] = None,
    ) -> Phase:
        """Insert a custom phase after insert_after_phase_id.

        A missing anchor, the "end" sentinel, or an unknown phase id all
        insert at the tail.

        Args:
            phase_data: Attribute values for the new phase.
            insert_after_phase_id: Id of the phase to insert after.

        Returns:
            The new phase with its renormalized order.

        Raises:
            ValidationError: If phase_data holds invalid attribute values.
        """
        merged = self.all_phases()

        insertion_index = len(merged)
        if insert_after_phase_id is not None and insert_after_phase_id != END_SENTINEL:
            anchor = next(
                (i for i, p in enumerate(merged) if p.id == insert_after_phase_id),
                None,
            )
            if anchor is None:
                logger.warning(
                    "Phase %s not found, appending custom phase at the end",
                    insert_after_phase_id,
                )
            else:
                insertion_index = anchor + 1

        attributes = {
            key: value
            for key, value in (phase_data or {}).items()
            if key not in _PROTECTED_FIELDS
        }
        attributes.setdefault("type", PhaseType.CUSTOM)
        try:
            new_phase = Phase(
                **attributes,
                order=insertion_index + 0.5,
                is_custom=True,
            )
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid phase data: {e}")

        # The effective orders of merged are 1..n, so the provisional key
        # sorts the new phase between positions insertion_index and insertion_index + 1.
        sequence = sorted([*merged, new_phase], key=lambda p: p.order)
        self.state.custom_phases = self._renormalize(sequence, extra_ids=[new_phase.id])

        added = next(p for p in self.state.custom_phases if p.id == new_phase.id)
        logger.debug("Added custom phase '%s' at position %s", added.name, int(added.order))
        self._emit(EventType.PHASE_CREATED, added)
        return added

    def update_phase(self, phase_id: str, updates: Dict[str, Any]) -> Optional[Phase]:
        """Merge attribute updates into a custom phase.

        id, order and is_custom are never changed. Base phases can't be updated.

        Args:
            phase_id: Id of the custom phase.
            updates: Attribute values to merge.

        Returns:
            The updated phase, or None if phase_id is not a custom phase.

        Raises:
            ValidationError: If updates hold invalid attribute values.
        """
        phase = next((p for p in self.state.custom_phases if p.id == phase_id), None)
        if phase is None:
            logger.warning("Update of non-custom phase %s ignored", phase_id)
            return None

        merged = {
            key: value
            for key, value in updates.items()
            if key in Phase.model_fields and key not in _PROTECTED_FIELDS
        }
        try:
            updated = Phase.model_validate({**phase.model_dump(), **merged})
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid phase update for {phase_id}: {e}")

        self.state.custom_phases = [
            updated if p.id == phase_id else p for p in self.state.custom_phases
        ]

        self._emit(EventType.PHASE_UPDATED, updated)
        return updated

    def delete_phase(self, phase_id: str) -> bool:
        """Remove a custom phase.

        The remaining custom phases are renormalized so they keep their
        place relative to the base phases. Base phases can't be deleted.

        Args:
            phase_id: Id of the custom phase.

        Returns:
            True if a phase was removed.
        """
        phase = next((p for p in self.state.custom_phases if p.id == phase_id), None)
        if phase is None:
            logger.warning("Delete of non-custom phase %s ignored", phase_id)
            return False

        sequence = [p for p in self.all_phases() if p.id != phase_id]
        self.state.custom_phases = self._renormalize(sequence)

        self._emit(EventType.PHASE_DELETED, phase)
        return True

    def renormalize(self) -> List[Phase]:
        """Rewrite every custom order to its position in the merged sequence.

        Returns:
            The renormalized custom phases.
        """
        self.state.custom_phases = self._renormalize(self.all_phases())
        return self.state.custom_phases

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _merge(base_phases: List[Phase], custom_phases: List[Phase]) -> List[Phase]:
        base = sorted(base_phases, key=lambda p: p.order)
        custom = sorted(custom_phases, key=lambda p: p.order)

        merged: List[Phase] = []
        b = c = 0
        while b < len(base) or c < len(custom):
            position = len(merged) + 1
            take_custom = c < len(custom) and (
                b >= len(base) or custom[c].order <= position
            )
            if take_custom:
                merged.append(custom[c])
                c += 1
            else:
                merged.append(base[b].model_copy(update={"order": float(position)}))
                b += 1
        return merged

    def _renormalize(self, sequence: List[Phase], extra_ids=()) -> List[Phase]:
        """Assign each custom phase (base before) + (custom before) + 1."""
        custom_ids = {p.id for p in self.state.custom_phases} | set(extra_ids)
        renormalized: List[Phase] = []
        base_before = 0
        for phase in sequence:
            if phase.id in custom_ids:
                order = base_before + len(renormalized) + 1
                renormalized.append(phase.model_copy(update={"order": float(order)}))
            else:
                base_before += 1
        return renormalized

    def _emit(self, event_type: EventType, phase: Phase) -> None:
        if self.event_bus is None:
            return
        self.event_bus.publish(
            PhaseEvent(type=event_type, phase_id=phase.id, name=phase.name, order=phase.order)
        )
