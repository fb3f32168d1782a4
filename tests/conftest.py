"""
Test fixtures for the PMFlow test suite.

Provides:
- Temporary directory fixtures (isolated from project .pmflow/)
- Mock data builders for creating test nodes and phases
- A sample WBS mirroring the demo project data
"""

import shutil
import tempfile
from pathlib import Path
from typing import Generator, List, Optional

import pytest

from pmflow.managers.events import EventBus
from pmflow.managers.phase_sequencer import PhaseSequencer
from pmflow.managers.wbs_manager import WBSManager
from pmflow.models.base import WBSNode
from pmflow.models.phase import Phase
from pmflow.models.project import ProjectState


# =============================================================================
# Temporary Directory Fixtures
# =============================================================================


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test isolation.

    Ensures tests don't modify the project's actual .pmflow/ directory.
    """
    temp_path = Path(tempfile.mkdtemp(prefix="pmflow_test_"))
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def pmflow_dir(temp_dir: Path) -> Generator[Path, None, None]:
    """Create an empty .pmflow/ directory (no files)."""
    pmflow_path = temp_dir / ".pmflow"
    pmflow_path.mkdir(parents=True)
    yield pmflow_path


# =============================================================================
# Mock Data Builders
# =============================================================================


class MockDataBuilder:
    """Helper class for building mock PMFlow items for testing."""

    @staticmethod
    def create_node(
        id: str,
        code: str,
        name: str = "Test Node",
        parent_id: Optional[str] = None,
        level: int = 0,
        children: Optional[List[str]] = None,
        **attributes,
    ) -> WBSNode:
        """Create a mock WBSNode for testing."""
        return WBSNode(
            id=id,
            code=code,
            name=name,
            parent_id=parent_id,
            level=level,
            children=children or [],
            **attributes,
        )

    @staticmethod
    def create_phase(
        id: str,
        name: str,
        order: float,
        is_custom: bool = False,
        type: str = "custom",
    ) -> Phase:
        """Create a mock Phase for testing."""
        return Phase(id=id, name=name, order=order, is_custom=is_custom, type=type)


@pytest.fixture
def mock_data() -> MockDataBuilder:
    """Provide mock data builder for test item creation."""
    return MockDataBuilder()


# =============================================================================
# State Fixtures
# =============================================================================


@pytest.fixture
def sample_nodes(mock_data: MockDataBuilder) -> List[WBSNode]:
    """Build a consistent sample WBS.

    Structure:
        1 Project Management
        ├── 1.1 Planning
        │   ├── 1.1.1 Schedule Development
        │   └── 1.1.2 Budget Estimation
        └── 1.2 Control
            ├── 1.2.1 Status Reporting
            └── 1.2.2 Change Control
        2 Product Development
        ├── 2.1 Design
        └── 2.2 Implementation
    """
    return [
        mock_data.create_node("w1", "1", "Project Management", children=["w2", "w3"]),
        mock_data.create_node("w2", "1.1", "Planning", "w1", 1, ["w4", "w5"]),
        mock_data.create_node("w3", "1.2", "Control", "w1", 1, ["w9", "w10"]),
        mock_data.create_node(
            "w4", "1.1.1", "Schedule Development", "w2", 2,
            budget=1000, estimated_hours=40, progress=100,
        ),
        mock_data.create_node(
            "w5", "1.1.2", "Budget Estimation", "w2", 2,
            budget=500, estimated_hours=16, progress=50,
        ),
        mock_data.create_node("w6", "2", "Product Development", children=["w7", "w8"]),
        mock_data.create_node("w7", "2.1", "Design", "w6", 1),
        mock_data.create_node("w8", "2.2", "Implementation", "w6", 1),
        mock_data.create_node("w9", "1.2.1", "Status Reporting", "w3", 2),
        mock_data.create_node("w10", "1.2.2", "Change Control", "w3", 2),
    ]


@pytest.fixture
def simple_base_phases(mock_data: MockDataBuilder) -> List[Phase]:
    """Three base phases: Init(1), Plan(2), Exec(3)."""
    return [
        mock_data.create_phase("Init", "Initiation", 1, type="initiation"),
        mock_data.create_phase("Plan", "Planning", 2, type="planning"),
        mock_data.create_phase("Exec", "Execution", 3, type="execution"),
    ]


@pytest.fixture
def sample_state(sample_nodes, simple_base_phases) -> ProjectState:
    """ProjectState holding the sample WBS and the three base phases."""
    return ProjectState(wbs=sample_nodes, base_phases=simple_base_phases)


@pytest.fixture
def empty_state(simple_base_phases) -> ProjectState:
    """ProjectState with no nodes and no custom phases."""
    return ProjectState(base_phases=simple_base_phases)


@pytest.fixture
def event_bus() -> EventBus:
    """Fresh event bus per test."""
    return EventBus()


@pytest.fixture
def wbs_manager(sample_state: ProjectState, event_bus: EventBus) -> WBSManager:
    """WBSManager over the sample state."""
    return WBSManager(sample_state, event_bus=event_bus)


@pytest.fixture
def sequencer(empty_state: ProjectState, event_bus: EventBus) -> PhaseSequencer:
    """PhaseSequencer over the three simple base phases."""
    return PhaseSequencer(empty_state, event_bus=event_bus)


# =============================================================================
# Helper Functions
# =============================================================================


def codes(nodes: List[WBSNode]) -> List[str]:
    """Codes of the given nodes, in order."""
    return [node.code for node in nodes]


def phase_names(phases: List[Phase]) -> List[str]:
    """Names of the given phases, in order."""
    return [phase.name for phase in phases]


@pytest.fixture
def helpers():
    """Provide helper functions for tests."""
    return {
        "codes": codes,
        "phase_names": phase_names,
    }
