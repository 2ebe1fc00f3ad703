"""
Core Data Models for the excavation simulation.

These models define the ontology of a dig:
- Tools: the shared equipment catalogue
- Sites: authored grids, environments and buried artifacts
- Records: grid cells, documentation entries, protocol violations
- Quests: documentation goals with one-time rewards
- Sessions: a learner's attempt and its engine state
"""

from src.models.excavation import (
    REQUIRED_ENTRY_TYPES,
    DocumentationEntry,
    EntryType,
    GridCell,
    ProtocolViolation,
    Severity,
    ViolationType,
    create_documentation_entry,
)
from src.models.quest import DocumentationQuest, QuestType, create_quest
from src.models.session import (
    EXCAVATION_GAME_TYPE,
    ActionRecord,
    ActionType,
    ExcavationState,
    GameplayConfig,
    GameSession,
    SessionStatus,
    StudentProgress,
    create_progress,
)
from src.models.site import (
    ArtifactCondition,
    ArtifactPlacement,
    Difficulty,
    EnvironmentalConditions,
    GridPosition,
    Site,
    create_placement,
    create_site,
)
from src.models.tool import DOCUMENTATION_CATEGORIES, Tool, ToolCategory

__all__ = [
    # Tool
    "Tool",
    "ToolCategory",
    "DOCUMENTATION_CATEGORIES",
    # Site
    "Site",
    "Difficulty",
    "ArtifactCondition",
    "ArtifactPlacement",
    "EnvironmentalConditions",
    "GridPosition",
    "create_site",
    "create_placement",
    # Records
    "GridCell",
    "DocumentationEntry",
    "EntryType",
    "REQUIRED_ENTRY_TYPES",
    "ProtocolViolation",
    "ViolationType",
    "Severity",
    "create_documentation_entry",
    # Quest
    "DocumentationQuest",
    "QuestType",
    "create_quest",
    # Session
    "GameSession",
    "SessionStatus",
    "ExcavationState",
    "GameplayConfig",
    "ActionRecord",
    "ActionType",
    "StudentProgress",
    "EXCAVATION_GAME_TYPE",
    "create_progress",
]
