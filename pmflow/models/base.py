"""
WBS node model for PMFlow.

Flat structure with id references for parent-child relationships.
"""

import uuid
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from pmflow.constants import DEFAULT_NODE_STATUS, VALID_NODE_STATUSES

# Fields owned by the tree itself; attribute updates never touch them.
STRUCTURAL_FIELDS = frozenset({"id", "code", "level", "children"})


class WBSNode(BaseModel):
    """
    A work package in the Work Breakdown Structure.

    Structural fields:
    - id: Unique identifier, immutable
    - code: Dot-separated hierarchical position (e.g. "2.1.3"), fixed at creation
    - parent_id: Reference to parent node, None for root-level nodes
    - level: Depth in the tree, 0 for roots
    - children: Ordered child ids, kept consistent with the children's parent_id

    Everything else is plain PMBOK attribute data.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    code: str = ""
    name: str = ""
    description: str = ""
    parent_id: Optional[str] = None
    children: List[str] = Field(default_factory=list)
    level: int = 0

    phase_id: Optional[str] = None
    responsible: Optional[str] = None
    budget: Optional[float] = None
    actual_cost: Optional[float] = None
    estimated_hours: Optional[float] = None
    actual_hours: Optional[float] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    actual_start_date: Optional[date] = None
    actual_end_date: Optional[date] = None
    status: str = DEFAULT_NODE_STATUS
    progress: int = Field(default=0, ge=0, le=100)

    linked_tasks: List[str] = Field(default_factory=list)
    linked_backlog_items: List[str] = Field(default_factory=list)
    linked_requirements: List[str] = Field(default_factory=list)
    linked_risks: List[str] = Field(default_factory=list)
    deliverables: List[str] = Field(default_factory=list)
    acceptance_criteria: List[str] = Field(default_factory=list)
    dependencies: List[str] = Field(default_factory=list)
    milestone: bool = False

    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: str) -> str:
        """Validate status against the allowed node statuses."""
        if v not in VALID_NODE_STATUSES:
            raise ValueError(
                f"Status must be one of: {', '.join(VALID_NODE_STATUSES)}"
            )
        return v

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    @property
    def code_suffix(self) -> str:
        """Last dot-segment of the code."""
        return self.code.rsplit(".", 1)[-1]
