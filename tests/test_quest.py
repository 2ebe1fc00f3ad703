"""
Tests for documentation quest generation and tracking.
"""

from __future__ import annotations

from uuid import uuid4

import pytest

from src.models import Difficulty, EntryType, QuestType, create_documentation_entry
from src.services.quest import QuestTracker, generate_documentation_quests


def _entry(entry_type, artifact_id=None):
    return create_documentation_entry(entry_type, "field record", 0, 0, artifact_id=artifact_id)


# =============================================================================
# Generation
# =============================================================================


class TestGenerateQuests:
    """Tests for generate_documentation_quests."""

    def test_beginner_quests(self):
        """Beginners get photo, measurement and artifact quests."""
        quests = generate_documentation_quests(Difficulty.BEGINNER, 3, 36)
        targets = {q.quest_type: q.target_count for q in quests}

        assert targets == {
            QuestType.TAKE_PHOTOS: 3,
            QuestType.RECORD_MEASUREMENTS: 4,
            QuestType.DOCUMENT_ARTIFACTS: 2,
        }

    def test_intermediate_adds_field_notes(self):
        """Intermediate adds a field-notes quest."""
        quests = generate_documentation_quests(Difficulty.INTERMEDIATE, 5, 80)
        targets = {q.quest_type: q.target_count for q in quests}

        assert targets[QuestType.TAKE_PHOTOS] == 5
        assert targets[QuestType.RECORD_MEASUREMENTS] == 6
        assert targets[QuestType.DOCUMENT_ARTIFACTS] == 3
        assert targets[QuestType.WRITE_FIELD_NOTES] == 3
        assert QuestType.COMPLETE_GRID_SURVEY not in targets

    def test_advanced_adds_grid_survey(self):
        """Advanced adds a survey of half the grid."""
        quests = generate_documentation_quests(Difficulty.ADVANCED, 8, 144)
        targets = {q.quest_type: q.target_count for q in quests}

        assert targets[QuestType.TAKE_PHOTOS] == 8
        assert targets[QuestType.RECORD_MEASUREMENTS] == 10
        assert targets[QuestType.WRITE_FIELD_NOTES] == 5
        assert targets[QuestType.COMPLETE_GRID_SURVEY] == 72

    def test_rewards(self):
        """Rewards are fixed per quest type."""
        quests = generate_documentation_quests(Difficulty.ADVANCED, 8, 144)
        rewards = {q.quest_type: q.reward for q in quests}

        assert rewards == {
            QuestType.TAKE_PHOTOS: 50,
            QuestType.RECORD_MEASUREMENTS: 50,
            QuestType.DOCUMENT_ARTIFACTS: 100,
            QuestType.WRITE_FIELD_NOTES: 75,
            QuestType.COMPLETE_GRID_SURVEY: 150,
        }

    @pytest.mark.parametrize("artifacts,target", [(0, 1), (1, 1), (3, 2), (8, 4)])
    def test_artifact_target_rounds_up(self, artifacts, target):
        """The artifact quest targets half the artifacts, rounded up, minimum one."""
        quests = generate_documentation_quests(Difficulty.BEGINNER, artifacts, 16)
        quest = next(q for q in quests if q.quest_type == QuestType.DOCUMENT_ARTIFACTS)
        assert quest.target_count == target

    def test_tiny_grid_survey(self):
        """A one-cell grid still needs one cell surveyed."""
        quests = generate_documentation_quests(Difficulty.ADVANCED, 0, 1)
        quest = next(q for q in quests if q.quest_type == QuestType.COMPLETE_GRID_SURVEY)
        assert quest.target_count == 1


# =============================================================================
# Tracking
# =============================================================================


@pytest.fixture
def tracker():
    """Tracker over a fresh intermediate quest set."""
    return QuestTracker(generate_documentation_quests(Difficulty.INTERMEDIATE, 2, 80))


class TestQuestTracker:
    """Tests for QuestTracker."""

    def test_photo_quest_completes_once(self, tracker):
        """The photo quest pays out on the fifth photo and never again."""
        results = [tracker.record_entry(_entry(EntryType.PHOTO)) for _ in range(7)]

        assert [r.bonus_score for r in results] == [0, 0, 0, 0, 50, 0, 0]
        assert results[4].quests_completed == ["Site Photography"]

        quest = tracker.get(QuestType.TAKE_PHOTOS)
        assert quest.current_count == 5
        assert quest.is_complete

    def test_measurements(self, tracker):
        """Measurements advance only the measurement quest."""
        tracker.record_entry(_entry(EntryType.MEASUREMENT))

        assert tracker.get(QuestType.RECORD_MEASUREMENTS).current_count == 1
        assert tracker.get(QuestType.TAKE_PHOTOS).current_count == 0

    def test_discovery_needs_artifact(self, tracker):
        """Discovery entries without an artifact do not count."""
        result = tracker.record_entry(_entry(EntryType.DISCOVERY))

        assert result.bonus_score == 0
        assert tracker.get(QuestType.DOCUMENT_ARTIFACTS).current_count == 0

    def test_discovery_with_artifact(self, tracker):
        """One artifact documented completes the quest for two artifacts."""
        result = tracker.record_entry(_entry(EntryType.DISCOVERY, artifact_id=uuid4()))

        assert result.quests_completed == ["Document Artifacts"]
        assert result.bonus_score == 100

    def test_field_notes(self, tracker):
        """Notes advance the field-notes quest."""
        results = [tracker.record_entry(_entry(EntryType.NOTE)) for _ in range(3)]
        assert results[-1].quests_completed == ["Field Notes"]
        assert results[-1].bonus_score == 75

    def test_samples_count_for_nothing(self, tracker):
        """Sample entries advance no quest."""
        tracker.record_entry(_entry(EntryType.SAMPLE))
        assert all(q.current_count == 0 for q in tracker.quests)

    def test_coverage_without_survey_quest(self, tracker):
        """Coverage is ignored when there is no survey quest."""
        result = tracker.record_coverage(80)
        assert result.bonus_score == 0

    def test_grid_survey(self):
        """The survey quest tracks excavated cells and pays once."""
        tracker = QuestTracker(generate_documentation_quests(Difficulty.ADVANCED, 1, 10))

        assert tracker.record_coverage(4).bonus_score == 0
        assert tracker.get(QuestType.COMPLETE_GRID_SURVEY).current_count == 4

        result = tracker.record_coverage(5)
        assert result.quests_completed == ["Complete Grid Survey"]
        assert result.bonus_score == 150

        assert tracker.record_coverage(6).bonus_score == 0
        assert tracker.get(QuestType.COMPLETE_GRID_SURVEY).current_count == 5

    def test_empty_tracker(self):
        """A session without quests tracks nothing."""
        tracker = QuestTracker([])
        assert tracker.record_entry(_entry(EntryType.PHOTO)).bonus_score == 0
