"""
Constants for the PMFlow application.

Note: These constants serve as default fallback values.
Project settings are loaded from .pmflow/config.json through StorageManager.
"""

# =============================================================================
# Default Fallback Values
# These are used if config.json doesn't exist or doesn't specify a value.
# =============================================================================

DEFAULT_PMFLOW_DIR = ".pmflow"

# Project mode defaults
DEFAULT_PROJECT_MODE = "waterfall"
VALID_PROJECT_MODES = ["waterfall", "agile", "hybrid"]

# WBS defaults
DEFAULT_MAX_WBS_DEPTH = 3
DEFAULT_NODE_STATUS = "not-started"
VALID_NODE_STATUSES = ["not-started", "in-progress", "completed", "on-hold", "cancelled"]
ROOT_SENTINEL = "__root__"

# Phase defaults
END_SENTINEL = "end"
VALID_PHASE_TYPES = ["initiation", "planning", "execution", "monitoring", "closing", "custom"]

# Display defaults
DEFAULT_TREE_INDENT = 2

# Validation error messages (not configurable)
VALIDATION_NAME_REQUIRED = "Name is required for all items."
VALIDATION_INVALID_MODE = (
    f"Project mode must be one of: {', '.join(VALID_PROJECT_MODES)}."
)

# =============================================================================
# Base Phase Sets
# Fixed per project mode, orders 1..N. Custom phases are slotted among these.
# =============================================================================

WATERFALL_PHASES = [
    {
        "id": "init",
        "name": "Initiation",
        "type": "initiation",
        "description": "Define the project at a high level and obtain authorization to start.",
        "inputs": ["Business Case", "Benefits Management Plan", "Agreements"],
        "outputs": ["Project Charter", "Stakeholder Register", "Assumption Log"],
        "tools": ["Expert Judgment", "Data Gathering", "Meetings"],
        "order": 1,
    },
    {
        "id": "plan",
        "name": "Planning",
        "type": "planning",
        "description": "Establish the scope, refine objectives, and define actions required.",
        "inputs": ["Project Charter", "Organizational Process Assets"],
        "outputs": ["Project Management Plan", "WBS", "Schedule Baseline", "Cost Baseline"],
        "tools": ["Decomposition", "Critical Path Method", "Bottom-Up Estimating"],
        "order": 2,
    },
    {
        "id": "exec",
        "name": "Execution",
        "type": "execution",
        "description": "Complete the work defined in the project management plan.",
        "inputs": ["Project Management Plan", "Approved Change Requests"],
        "outputs": ["Deliverables", "Work Performance Data", "Change Requests"],
        "tools": ["PMIS", "Virtual Teams", "Conflict Management"],
        "order": 3,
    },
    {
        "id": "mon",
        "name": "Monitoring & Control",
        "type": "monitoring",
        "description": "Track, review, and regulate progress and performance.",
        "inputs": ["Project Management Plan", "Work Performance Data"],
        "outputs": ["Work Performance Reports", "Change Requests"],
        "tools": ["Earned Value Analysis", "Variance Analysis", "Root Cause Analysis"],
        "order": 4,
    },
    {
        "id": "close",
        "name": "Closing",
        "type": "closing",
        "description": "Finalize all activities and formally close the project.",
        "inputs": ["Project Charter", "Accepted Deliverables"],
        "outputs": ["Final Report", "Organizational Process Assets Updates"],
        "tools": ["Expert Judgment", "Data Analysis", "Meetings"],
        "order": 5,
    },
]

AGILE_PHASES = [
    {
        "id": "vision",
        "name": "Product Vision",
        "type": "initiation",
        "description": "Define the product vision and initial backlog.",
        "inputs": ["Market Research", "Stakeholder Input", "Business Goals"],
        "outputs": ["Product Vision", "Initial Product Backlog", "Release Roadmap"],
        "tools": ["User Story Mapping", "Design Thinking"],
        "order": 1,
    },
    {
        "id": "release-plan",
        "name": "Release Planning",
        "type": "planning",
        "description": "Plan releases and prioritize the product backlog.",
        "inputs": ["Product Backlog", "Team Velocity", "Stakeholder Priorities"],
        "outputs": ["Release Plan", "Prioritized Backlog", "Definition of Done"],
        "tools": ["Planning Poker", "MoSCoW Prioritization", "Story Splitting"],
        "order": 2,
    },
    {
        "id": "sprint",
        "name": "Sprint Execution",
        "type": "execution",
        "description": "Execute sprints to deliver incremental value.",
        "inputs": ["Sprint Backlog", "Definition of Done", "Team Capacity"],
        "outputs": ["Working Increment", "Updated Burndown"],
        "tools": ["Daily Standups", "Pair Programming", "CI/CD"],
        "order": 3,
    },
    {
        "id": "review",
        "name": "Sprint Review & Retro",
        "type": "monitoring",
        "description": "Review the increment and improve the process.",
        "inputs": ["Working Increment", "Sprint Goals", "Stakeholder Feedback"],
        "outputs": ["Updated Backlog", "Process Improvements", "Velocity Update"],
        "tools": ["Demo Sessions", "Retrospective Techniques"],
        "order": 4,
    },
    {
        "id": "release",
        "name": "Release",
        "type": "closing",
        "description": "Release the product increment to production.",
        "inputs": ["Tested Increment", "Release Checklist"],
        "outputs": ["Production Release", "Release Notes"],
        "tools": ["Feature Flags", "Blue-Green Deployment"],
        "order": 5,
    },
]

# Hybrid: predictive framing around an iterative delivery core
HYBRID_PHASES = [
    {**WATERFALL_PHASES[0], "order": 1},
    {**WATERFALL_PHASES[1], "order": 2},
    {**AGILE_PHASES[2], "order": 3},
    {**AGILE_PHASES[3], "order": 4},
    {**WATERFALL_PHASES[4], "order": 5},
]

BASE_PHASES_BY_MODE = {
    "waterfall": WATERFALL_PHASES,
    "agile": AGILE_PHASES,
    "hybrid": HYBRID_PHASES,
}

