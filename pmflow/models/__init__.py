"""
Data models for PMFlow.

Import models explicitly from their modules:
    from pmflow.models.base import WBSNode
    from pmflow.models.phase import Phase, PhaseType, get_base_phases
    from pmflow.models.project import ProjectState
    from pmflow.models.files import WBSFile, PhasesFile, ConfigFile
"""
