"""
Game session models.

A session is one learner's attempt at a site. Its engine state is held
as explicit typed structures; serialization happens only at the
repository boundary.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from src.models.excavation import DocumentationEntry, GridCell, ProtocolViolation
from src.models.quest import DocumentationQuest
from src.models.site import ArtifactPlacement, Difficulty

EXCAVATION_GAME_TYPE = "excavation_simulation"


class SessionStatus(str, Enum):
    """Lifecycle of a game session."""

    ACTIVE = "active"
    COMPLETED = "completed"
    ABANDONED = "abandoned"


class ActionType(str, Enum):
    """Kinds of entries in the session action log."""

    START = "start"
    EXCAVATION = "excavation"
    CHANGE_TOOL = "change_tool"
    DOCUMENTATION = "documentation"
    COMPLETE = "complete"
    ABANDON = "abandon"


class GameplayConfig(BaseModel):
    """
    Rules switches fixed at session start.

    Stored on the session so that every later action is judged by the
    same rules the session began with.
    """

    time_constraints: bool = False
    """Track simulated time against the site's time budget."""

    quests_enabled: bool = True
    """Hand out documentation quests."""

    default_tool_id: str = "soft_brush"
    max_score: int = Field(default=1000, ge=0)


class ActionRecord(BaseModel):
    """One entry in the append-only action log."""

    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    action_type: ActionType
    data: dict[str, Any] = Field(default_factory=dict)


class ExcavationState(BaseModel):
    """
    Complete mutable engine state for one session.

    Cells are stored column-major (x outer, y inner) so that index
    lookups are O(1).
    """

    site_id: UUID
    grid_width: int = Field(ge=1)
    grid_height: int = Field(ge=1)
    config: GameplayConfig = Field(default_factory=GameplayConfig)

    current_tool_id: str
    grid: list[GridCell] = Field(default_factory=list)
    layout: list[ArtifactPlacement] = Field(default_factory=list)
    """Session-specific artifact placement; replaces the site's."""

    discovered_artifacts: list[UUID] = Field(default_factory=list)
    documentation: list[DocumentationEntry] = Field(default_factory=list)
    quests: list[DocumentationQuest] = Field(default_factory=list)
    violations: list[ProtocolViolation] = Field(default_factory=list)

    # Time tracking (only advanced when time constraints are on)
    time_budget_seconds: int | None = None
    time_used_seconds: int = 0
    time_warning_issued: bool = False

    @property
    def total_cells(self) -> int:
        return self.grid_width * self.grid_height

    @property
    def excavated_count(self) -> int:
        return sum(1 for cell in self.grid if cell.excavated)

    @property
    def coverage_percent(self) -> float:
        """Share of cells excavated, 0-100."""
        return self.excavated_count / self.total_cells * 100

    @property
    def time_remaining_seconds(self) -> int | None:
        if self.time_budget_seconds is None:
            return None
        return max(0, self.time_budget_seconds - self.time_used_seconds)

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.grid_width and 0 <= y < self.grid_height

    def cell_at(self, x: int, y: int) -> GridCell:
        """Get the cell at a coordinate; the caller checks bounds."""
        return self.grid[x * self.grid_height + y]

    def artifact_at(self, x: int, y: int) -> ArtifactPlacement | None:
        """Find the session-layout artifact buried in a cell, if any."""
        for placement in self.layout:
            if placement.position.x == x and placement.position.y == y:
                return placement
        return None

    def is_discovered(self, artifact_id: UUID) -> bool:
        return artifact_id in self.discovered_artifacts


class GameSession(BaseModel):
    """
    A learner's session record.

    `version` is bumped by the repository on every save and is used for
    optimistic concurrency control.
    """

    id: UUID = Field(default_factory=uuid4)
    user_id: UUID
    site_id: UUID
    game_type: str = EXCAVATION_GAME_TYPE
    difficulty: Difficulty
    status: SessionStatus = SessionStatus.ACTIVE

    start_time: datetime = Field(default_factory=lambda: datetime.now(UTC))
    end_time: datetime | None = None

    current_score: int = 0
    max_score: int = 1000
    completion_percentage: float = 0.0

    state: ExcavationState
    actions: list[ActionRecord] = Field(default_factory=list)

    version: int = 0

    def is_active(self) -> bool:
        return self.status == SessionStatus.ACTIVE

    def log_action(self, action_type: ActionType, **data: Any) -> ActionRecord:
        """Append an entry to the action log."""
        record = ActionRecord(action_type=action_type, data=data)
        self.actions.append(record)
        return record


class StudentProgress(BaseModel):
    """A learner's standing in one game type."""

    id: UUID = Field(default_factory=uuid4)
    user_id: UUID
    game_type: str = EXCAVATION_GAME_TYPE

    best_score: int = 0
    average_score: float = 0.0
    sessions_completed: int = 0
    last_played: datetime = Field(default_factory=lambda: datetime.now(UTC))
    achievements: list[str] = Field(default_factory=list)

    def record_score(self, score: int) -> None:
        """Fold a finished session's score into the record."""
        total = self.average_score * self.sessions_completed + score
        self.sessions_completed += 1
        self.average_score = total / self.sessions_completed
        self.best_score = max(self.best_score, score)
        self.last_played = datetime.now(UTC)


def create_progress(user_id: UUID, score: int, game_type: str = EXCAVATION_GAME_TYPE) -> StudentProgress:
    """Factory function for a learner's first progress record."""
    progress = StudentProgress(user_id=user_id, game_type=game_type)
    progress.record_score(score)
    return progress
