"""
Documentation Quest Tracker.

Hands out a difficulty-scaled set of documentation quests at session
start and advances them as the learner logs entries or clears cells.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from pydantic import BaseModel, Field

from src.models.excavation import DocumentationEntry, EntryType
from src.models.quest import DocumentationQuest, QuestType, create_quest
from src.models.site import Difficulty

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

PHOTO_TARGETS = {
    Difficulty.BEGINNER: 3,
    Difficulty.INTERMEDIATE: 5,
    Difficulty.ADVANCED: 8,
}
MEASUREMENT_TARGETS = {
    Difficulty.BEGINNER: 4,
    Difficulty.INTERMEDIATE: 6,
    Difficulty.ADVANCED: 10,
}
FIELD_NOTE_TARGETS = {
    Difficulty.INTERMEDIATE: 3,
    Difficulty.ADVANCED: 5,
}

QUEST_REWARDS = {
    QuestType.TAKE_PHOTOS: 50,
    QuestType.RECORD_MEASUREMENTS: 50,
    QuestType.DOCUMENT_ARTIFACTS: 100,
    QuestType.WRITE_FIELD_NOTES: 75,
    QuestType.COMPLETE_GRID_SURVEY: 150,
}

GRID_SURVEY_FRACTION = 0.5

# Entry type -> quest type it advances
_ENTRY_QUESTS = {
    EntryType.PHOTO: QuestType.TAKE_PHOTOS,
    EntryType.MEASUREMENT: QuestType.RECORD_MEASUREMENTS,
    EntryType.DISCOVERY: QuestType.DOCUMENT_ARTIFACTS,
    EntryType.NOTE: QuestType.WRITE_FIELD_NOTES,
}


# =============================================================================
# Result Models
# =============================================================================


class QuestProgressResult(BaseModel):
    """Quests completed by a single event."""

    quests_completed: list[str] = Field(default_factory=list)
    bonus_score: int = 0


# =============================================================================
# Quest Generation
# =============================================================================


def generate_documentation_quests(
    difficulty: Difficulty,
    artifact_count: int,
    total_cells: int,
) -> list[DocumentationQuest]:
    """
    Build the quest list for a new session.

    Every difficulty gets photo, measurement and artifact quests.
    Intermediate and advanced add field notes; advanced adds a survey
    of half the grid.

    Args:
        difficulty: Session difficulty
        artifact_count: Artifacts in the session layout
        total_cells: Cells on the grid

    Returns:
        Fresh, incomplete quests
    """
    quests = [
        create_quest(
            "Site Photography",
            QuestType.TAKE_PHOTOS,
            PHOTO_TARGETS[difficulty],
            QUEST_REWARDS[QuestType.TAKE_PHOTOS],
            description="Take photos to document the excavation site",
        ),
        create_quest(
            "Record Measurements",
            QuestType.RECORD_MEASUREMENTS,
            MEASUREMENT_TARGETS[difficulty],
            QUEST_REWARDS[QuestType.RECORD_MEASUREMENTS],
            description="Take accurate measurements of artifacts and features",
        ),
        create_quest(
            "Document Artifacts",
            QuestType.DOCUMENT_ARTIFACTS,
            max(1, math.ceil(artifact_count / 2)),
            QUEST_REWARDS[QuestType.DOCUMENT_ARTIFACTS],
            description="Create detailed documentation for discovered artifacts",
        ),
    ]

    if difficulty in FIELD_NOTE_TARGETS:
        quests.append(
            create_quest(
                "Field Notes",
                QuestType.WRITE_FIELD_NOTES,
                FIELD_NOTE_TARGETS[difficulty],
                QUEST_REWARDS[QuestType.WRITE_FIELD_NOTES],
                description="Write detailed field notes about excavation methods and observations",
            )
        )

    if difficulty == Difficulty.ADVANCED:
        quests.append(
            create_quest(
                "Complete Grid Survey",
                QuestType.COMPLETE_GRID_SURVEY,
                max(1, math.floor(total_cells * GRID_SURVEY_FRACTION)),
                QUEST_REWARDS[QuestType.COMPLETE_GRID_SURVEY],
                description="Document at least 50% of the excavation grid",
            )
        )

    return quests


# =============================================================================
# Quest Tracker
# =============================================================================


@dataclass
class QuestTracker:
    """
    Advances a session's quests in place.

    The tracker owns no state of its own; it operates on the quest list
    stored in the session's engine state.
    """

    quests: list[DocumentationQuest]

    def get(self, quest_type: QuestType) -> DocumentationQuest | None:
        for quest in self.quests:
            if quest.quest_type == quest_type:
                return quest
        return None

    def record_entry(self, entry: DocumentationEntry) -> QuestProgressResult:
        """
        Advance every incomplete quest matching a new entry.

        Discovery entries only count toward artifact documentation when
        they name an artifact. Sample entries advance nothing.
        """
        quest_type = _ENTRY_QUESTS.get(entry.entry_type)
        if quest_type is None:
            return QuestProgressResult()
        if quest_type == QuestType.DOCUMENT_ARTIFACTS and entry.artifact_id is None:
            return QuestProgressResult()

        result = QuestProgressResult()
        for quest in self.quests:
            if quest.quest_type != quest_type or quest.is_complete:
                continue
            if quest.increment_progress():
                self._award(quest, result)
        return result

    def record_coverage(self, excavated_count: int) -> QuestProgressResult:
        """Sync the grid survey quest with the number of excavated cells."""
        result = QuestProgressResult()
        quest = self.get(QuestType.COMPLETE_GRID_SURVEY)
        if quest is None or quest.is_complete:
            return result
        if quest.set_progress(excavated_count):
            self._award(quest, result)
        return result

    def _award(self, quest: DocumentationQuest, result: QuestProgressResult) -> None:
        result.quests_completed.append(quest.title)
        result.bonus_score += quest.reward
        logger.info(f"Quest completed: {quest.title} (+{quest.reward})")
