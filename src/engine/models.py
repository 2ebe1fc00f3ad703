"""
Engine Data Models.

Configuration and the result shapes returned by engine operations:
- ExcavationOutcome: one tool use on a grid cell
- DocumentationResult: one logged field entry
- SessionSnapshot: a read-only view of a session
"""

from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, Field

from src.models.excavation import DocumentationEntry, GridCell, ProtocolViolation
from src.models.session import EXCAVATION_GAME_TYPE, ExcavationState, GameplayConfig, GameSession
from src.models.site import Site


class EngineConfig(BaseModel):
    """Engine-wide settings."""

    gameplay: GameplayConfig = Field(
        default_factory=GameplayConfig,
        description="Rules used when a session starts without its own config",
    )
    game_type: str = Field(
        default=EXCAVATION_GAME_TYPE,
        description="Game type recorded on sessions and progress",
    )


class ExcavationOutcome(BaseModel):
    """Result of applying a tool to a grid cell."""

    success: bool = True
    cell: GridCell
    discoveries: list[str] = Field(
        default_factory=list,
        description="Discovery, documentation and quest messages",
    )
    discovered_artifact_id: UUID | None = None
    violations: list[ProtocolViolation] = Field(default_factory=list)
    score: int = Field(default=0, description="Score delta for this action")

    # Only populated when time constraints are on
    time_used_seconds: int | None = None
    time_remaining_seconds: int | None = None


class DocumentationResult(BaseModel):
    """Result of logging a documentation entry."""

    success: bool = True
    entry: DocumentationEntry
    quests_completed: list[str] = Field(default_factory=list)
    bonus_score: int = 0


class SessionSnapshot(BaseModel):
    """
    Everything a client needs to render a session.

    The site carries the session layout in place of its authored
    artifact placements.
    """

    session: GameSession
    site: Site
    state: ExcavationState
