"""
File models for PMFlow.

Models representing the structure of JSON files in the .pmflow/ directory.
"""

from typing import List

from pydantic import BaseModel, Field

from pmflow.constants import DEFAULT_MAX_WBS_DEPTH, DEFAULT_PROJECT_MODE

from .base import WBSNode
from .phase import Phase


class WBSFile(BaseModel):
    """Model for wbs.json file.

    Flat list of all WBS nodes with parent_id references.
    """

    nodes: List[WBSNode] = Field(default_factory=list)


class PhasesFile(BaseModel):
    """Model for phases.json file.

    Only custom phases are stored; base phases are derived from the project mode.
    """

    custom_phases: List[Phase] = Field(default_factory=list)


class ConfigFile(BaseModel):
    """Model for config.json file.

    Project settings and configuration.
    """

    schema_version: str = "0.1.0"
    project_mode: str = DEFAULT_PROJECT_MODE
    max_wbs_depth: int = DEFAULT_MAX_WBS_DEPTH
