"""
Phase model for PMFlow.

Base phases come from a fixed per-mode set; custom phases are user-created
and slotted among them by order.
"""

import uuid
from enum import Enum
from typing import List

from pydantic import BaseModel, Field

from pmflow.constants import BASE_PHASES_BY_MODE, DEFAULT_PROJECT_MODE


class PhaseType(str, Enum):
    """Valid phase types."""

    INITIATION = "initiation"
    PLANNING = "planning"
    EXECUTION = "execution"
    MONITORING = "monitoring"
    CLOSING = "closing"
    CUSTOM = "custom"


class Phase(BaseModel):
    """Project phase.

    order is a sort key only and may be fractional between renormalizations.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str = ""
    type: PhaseType = PhaseType.CUSTOM
    description: str = ""
    inputs: List[str] = Field(default_factory=list)
    outputs: List[str] = Field(default_factory=list)
    tools: List[str] = Field(default_factory=list)
    order: float = 0
    is_custom: bool = False


def get_base_phases(mode: str = DEFAULT_PROJECT_MODE) -> List[Phase]:
    """Build the base phase set for a project mode.

    Unknown modes fall back to the default mode's phases.

    Args:
        mode: Project mode ('waterfall', 'agile' or 'hybrid').

    Returns:
        Fresh Phase instances with integer orders 1..N.
    """
    data = BASE_PHASES_BY_MODE.get(mode, BASE_PHASES_BY_MODE[DEFAULT_PROJECT_MODE])
    return [Phase(**phase, is_custom=False) for phase in data]
