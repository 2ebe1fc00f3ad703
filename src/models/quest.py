"""
Documentation quest models.

Quests are documentation sub-goals handed out at session start. Each
has a target count and pays its reward exactly once.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class QuestType(str, Enum):
    """What a documentation quest counts."""

    TAKE_PHOTOS = "take_photos"  # Photo entries
    RECORD_MEASUREMENTS = "record_measurements"  # Measurement entries
    DOCUMENT_ARTIFACTS = "document_artifacts"  # Discovery entries naming an artifact
    WRITE_FIELD_NOTES = "write_field_notes"  # Note entries
    COMPLETE_GRID_SURVEY = "complete_grid_survey"  # Excavated cells


class DocumentationQuest(BaseModel):
    """
    A documentation goal with a one-time reward.

    The count is capped at the target, and completion only happens
    once; later progress is ignored.
    """

    id: UUID = Field(default_factory=uuid4)
    title: str
    description: str = ""
    quest_type: QuestType

    target_count: int = Field(ge=1)
    current_count: int = Field(default=0, ge=0)
    is_complete: bool = False

    reward: int = Field(ge=0)
    """Points granted on completion."""

    completed_at: datetime | None = None

    @property
    def progress_percent(self) -> float:
        """Progress as a fraction (0.0 to 1.0)."""
        return min(1.0, self.current_count / self.target_count)

    def increment_progress(self, amount: int = 1) -> bool:
        """
        Increment progress and check completion.

        Returns True if the quest was just completed.
        """
        if self.is_complete:
            return False
        return self.set_progress(self.current_count + amount)

    def set_progress(self, count: int) -> bool:
        """
        Set progress to an absolute count (used by coverage quests).

        Returns True if the quest was just completed.
        """
        if self.is_complete:
            return False
        self.current_count = max(0, min(count, self.target_count))
        if self.current_count >= self.target_count:
            self.is_complete = True
            self.completed_at = datetime.now(UTC)
            return True
        return False


def create_quest(
    title: str,
    quest_type: QuestType,
    target_count: int,
    reward: int,
    *,
    description: str = "",
) -> DocumentationQuest:
    """
    Factory function to create a documentation quest.

    Args:
        title: Display name
        quest_type: What the quest counts
        target_count: Count needed to complete (at least 1)
        reward: Points granted on completion
        description: Longer text for the learner

    Returns:
        A new DocumentationQuest instance
    """
    return DocumentationQuest(
        title=title,
        description=description,
        quest_type=quest_type,
        target_count=target_count,
        reward=reward,
    )
