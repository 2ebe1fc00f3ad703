"""
End-to-end tests for the ExcavationGame facade.

Exercises the full session lifecycle against in-memory repositories.
"""

from __future__ import annotations

from uuid import uuid4

import pytest

from src.db.memory import InMemoryProgressRepository
from src.engine import (
    ExcavationGame,
    InvalidInputError,
    InvalidStateError,
    NotFoundError,
)
from src.models import (
    ActionType,
    Difficulty,
    EntryType,
    GameplayConfig,
    SessionStatus,
    create_site,
)


class UnreliableProgressRepository(InMemoryProgressRepository):
    """Progress store whose first saves fail."""

    def __init__(self, failures: int = 1) -> None:
        super().__init__()
        self.failures = failures

    def save_progress(self, progress):
        if self.failures:
            self.failures -= 1
            raise RuntimeError("progress store unavailable")
        super().save_progress(progress)


@pytest.fixture
def user_id():
    """A learner ID for testing."""
    return uuid4()


@pytest.fixture
def session(game, user_id, beginner_site):
    """A started beginner session."""
    return game.start_session(user_id, beginner_site.id, Difficulty.BEGINNER)


TROWEL_USES_TO_HALF_DEPTH = 9


def excavate_everything(game, session, grid_width, grid_height):
    """Trowel every cell down past half depth."""
    for x in range(grid_width):
        for y in range(grid_height):
            for _ in range(TROWEL_USES_TO_HALF_DEPTH):
                game.apply_action(session.id, x, y, "trowel")


# =============================================================================
# Start
# =============================================================================


class TestStartSession:
    """Tests for start_session."""

    def test_start(self, session, session_repo, user_id, beginner_site):
        """A new session is stored active with its start action."""
        stored = session_repo.get_session(session.id)

        assert stored.status == SessionStatus.ACTIVE
        assert stored.user_id == user_id
        assert stored.site_id == beginner_site.id
        assert stored.current_score == 0
        assert stored.max_score == 1000
        assert stored.version == 1
        assert [a.action_type for a in stored.actions] == [ActionType.START]
        assert len(stored.state.grid) == 16

    def test_string_difficulty(self, game, user_id, beginner_site):
        """Difficulty may be given by value."""
        session = game.start_session(user_id, beginner_site.id, "advanced")
        assert session.difficulty == Difficulty.ADVANCED

    def test_missing_site(self, game, user_id):
        """Unknown sites are rejected."""
        with pytest.raises(NotFoundError):
            game.start_session(user_id, uuid4(), Difficulty.BEGINNER)

    def test_inactive_site(self, game, site_repo, user_id):
        """Inactive sites are rejected."""
        site = create_site("Closed", 2, 2, is_active=False)
        site_repo.save_site(site)

        with pytest.raises(NotFoundError):
            game.start_session(user_id, site.id, Difficulty.BEGINNER)

    def test_unknown_difficulty(self, game, user_id, beginner_site):
        """Unknown difficulties are rejected."""
        with pytest.raises(InvalidInputError):
            game.start_session(user_id, beginner_site.id, "expert")

    def test_session_config(self, game, user_id, beginner_site):
        """A per-session config overrides the engine defaults."""
        config = GameplayConfig(quests_enabled=False, max_score=500)
        session = game.start_session(user_id, beginner_site.id, Difficulty.BEGINNER, config)

        assert session.state.quests == []
        assert session.max_score == 500
        assert session.state.config == config


# =============================================================================
# Actions
# =============================================================================


class TestApplyAction:
    """Tests for apply_action through the facade."""

    def test_discovery_updates_session(self, game, session, session_repo):
        """The ninth trowel use finds the artifact and adds its score."""
        outcomes = [game.apply_action(session.id, 2, 2, "trowel") for _ in range(9)]

        assert outcomes[-1].discoveries == ["Artifact discovered at position (2, 2)"]
        stored = session_repo.get_session(session.id)
        assert stored.current_score == 155
        assert stored.completion_percentage == pytest.approx(100 / 16)
        assert len(stored.actions) == 10
        assert stored.actions[-1].action_type == ActionType.EXCAVATION
        assert stored.actions[-1].data["score"] == 155
        assert stored.version == 10

    def test_violations_do_not_reduce_score(self, game, session, session_repo):
        """Recorded violations leave the running score alone."""
        game.apply_action(session.id, 2, 2, "trowel")
        outcome = game.apply_action(session.id, 0, 0, "underwater_camera")

        assert len(outcome.violations) == 1
        stored = session_repo.get_session(session.id)
        assert stored.current_score == 0
        assert len(stored.state.violations) == 1
        assert stored.actions[-1].data["violations"][0]["severity"] == "moderate"

    def test_rejected_action_leaves_state_unchanged(self, game, session, session_repo):
        """A failed operation stores nothing."""
        before = session_repo.get_session(session.id)

        with pytest.raises(InvalidInputError):
            game.apply_action(session.id, 0, 0, "jackhammer")
        with pytest.raises(InvalidInputError):
            game.apply_action(session.id, 7, 7, "trowel")

        assert session_repo.get_session(session.id) == before

    def test_missing_session(self, game):
        """Unknown sessions are rejected."""
        with pytest.raises(NotFoundError):
            game.apply_action(uuid4(), 0, 0, "trowel")

    def test_inactive_session(self, game, session):
        """Completed sessions accept no more actions."""
        game.complete_session(session.id)

        with pytest.raises(InvalidStateError):
            game.apply_action(session.id, 0, 0, "trowel")
        with pytest.raises(InvalidStateError):
            game.change_tool(session.id, "trowel")
        with pytest.raises(InvalidStateError):
            game.add_documentation_entry(session.id, EntryType.NOTE, "late", 0, 0)


class TestChangeTool:
    """Tests for change_tool."""

    def test_change_tool(self, game, session, session_repo):
        """The tool switch is stored and logged."""
        game.change_tool(session.id, "trowel")

        stored = session_repo.get_session(session.id)
        assert stored.state.current_tool_id == "trowel"
        assert stored.actions[-1].action_type == ActionType.CHANGE_TOOL
        assert stored.actions[-1].data == {"previous_tool_id": "soft_brush", "tool_id": "trowel"}

    def test_unknown_tool(self, game, session):
        """Unknown tools are rejected."""
        with pytest.raises(InvalidInputError):
            game.change_tool(session.id, "shovel")


class TestDocumentation:
    """Tests for add_documentation_entry."""

    def test_quest_bonus_added_to_score(self, game, session, session_repo):
        """Documenting the found artifact completes the artifact quest."""
        for _ in range(9):
            outcome = game.apply_action(session.id, 2, 2, "trowel")
        artifact_id = outcome.discovered_artifact_id

        result = game.add_documentation_entry(
            session.id, EntryType.DISCOVERY, "Amphora neck", 2, 2, artifact_id=artifact_id
        )

        assert result.quests_completed == ["Document Artifacts"]
        assert result.bonus_score == 100
        stored = session_repo.get_session(session.id)
        assert stored.current_score == 255
        assert stored.state.documentation[0].artifact_id == artifact_id

    def test_off_grid(self, game, session):
        """Entries off the grid are rejected."""
        with pytest.raises(InvalidInputError):
            game.add_documentation_entry(session.id, EntryType.PHOTO, "?", -1, 0)


# =============================================================================
# Completion
# =============================================================================


class TestCompleteSession:
    """Tests for complete_session."""

    def test_perfect_session_scores_100(self, game, session, session_repo, user_id):
        """Full coverage, the artifact, all required entries and no violations."""
        excavate_everything(game, session, 4, 4)
        artifact_id = session_repo.get_session(session.id).state.discovered_artifacts[0]
        game.add_documentation_entry(session.id, EntryType.DISCOVERY, "Found", 2, 2, artifact_id)
        game.add_documentation_entry(session.id, EntryType.MEASUREMENT, "30 cm", 2, 2)
        game.add_documentation_entry(session.id, EntryType.PHOTO, "In situ", 2, 2)

        report = game.complete_session(session.id)

        assert report.completion_percentage == 100
        assert report.artifacts_found == 1
        assert report.documentation_quality == 100
        assert report.protocol_compliance == 100
        assert report.overall_score == 100
        assert report.recommendations == []
        assert "UNDERWATER ARCHAEOLOGICAL EXCAVATION REPORT" in report.digital_report

        stored = session_repo.get_session(session.id)
        assert stored.status == SessionStatus.COMPLETED
        assert stored.end_time is not None
        assert stored.current_score == 100
        assert stored.actions[-1].action_type == ActionType.COMPLETE

        progress = game.get_progress(user_id)
        assert progress.best_score == 100
        assert progress.sessions_completed == 1

    def test_progress_keeps_best(self, game, session, user_id, beginner_site):
        """A worse later session keeps the best score and updates the average."""
        excavate_everything(game, session, 4, 4)
        first = game.complete_session(session.id)

        second = game.start_session(user_id, beginner_site.id, Difficulty.BEGINNER)
        report = game.complete_session(second.id)

        # Only compliance contributes to an untouched session
        assert report.overall_score == 10
        progress = game.get_progress(user_id)
        assert progress.best_score == first.overall_score
        assert progress.sessions_completed == 2
        assert progress.average_score == pytest.approx((first.overall_score + 10) / 2)

    def test_failed_progress_save_reopens_session(
        self, site_repo, session_repo, scripted_rng, user_id, beginner_site
    ):
        """A progress store failure leaves the session active and retryable."""
        progress_repo = UnreliableProgressRepository(failures=1)
        game = ExcavationGame(
            sites=site_repo, sessions=session_repo, progress=progress_repo, rng=scripted_rng
        )
        session = game.start_session(user_id, beginner_site.id, Difficulty.BEGINNER)
        game.apply_action(session.id, 2, 2, "trowel")

        with pytest.raises(RuntimeError):
            game.complete_session(session.id)

        stored = session_repo.get_session(session.id)
        assert stored.status == SessionStatus.ACTIVE
        assert stored.end_time is None
        assert stored.actions[-1].action_type == ActionType.EXCAVATION
        assert game.get_progress(user_id) is None

        report = game.complete_session(session.id)

        assert session_repo.get_session(session.id).status == SessionStatus.COMPLETED
        assert game.get_progress(user_id).best_score == report.overall_score

    def test_complete_twice(self, game, session):
        """A completed session cannot be completed again."""
        game.complete_session(session.id)
        with pytest.raises(InvalidStateError):
            game.complete_session(session.id)

    def test_missing_session(self, game):
        """Unknown sessions are rejected."""
        with pytest.raises(NotFoundError):
            game.complete_session(uuid4())


class TestAbandonSession:
    """Tests for abandon_session."""

    def test_abandon(self, game, session, user_id):
        """Abandoning closes the session without touching progress."""
        abandoned = game.abandon_session(session.id)

        assert abandoned.status == SessionStatus.ABANDONED
        assert abandoned.end_time is not None
        assert game.get_progress(user_id) is None

        with pytest.raises(InvalidStateError):
            game.abandon_session(session.id)
        with pytest.raises(InvalidStateError):
            game.complete_session(session.id)


# =============================================================================
# Queries
# =============================================================================


class TestSessionState:
    """Tests for get_session_state and get_guidance."""

    def test_snapshot(self, game, session, beginner_site):
        """The snapshot carries the session layout in place of the site's."""
        game.apply_action(session.id, 0, 0, "trowel")
        snapshot = game.get_session_state(session.id)

        assert snapshot.session.id == session.id
        assert snapshot.site.id == beginner_site.id
        assert snapshot.site.artifacts == snapshot.state.layout
        assert snapshot.site.artifacts[0] is not snapshot.state.layout[0]
        assert snapshot.state.cell_at(0, 0).excavation_depth > 0

    def test_snapshot_idempotent(self, game, session):
        """Reading twice without actions returns identical data."""
        assert game.get_session_state(session.id) == game.get_session_state(session.id)

    def test_missing_session(self, game):
        """Unknown sessions return None."""
        assert game.get_session_state(uuid4()) is None

    def test_guidance(self, game, session):
        """A fresh session is told to document and dig."""
        guidance = game.get_guidance(session.id)
        assert "Increase excavation pace to cover more area" in guidance

    def test_guidance_missing_session(self, game):
        """Guidance for unknown sessions is rejected."""
        with pytest.raises(NotFoundError):
            game.get_guidance(uuid4())


class TestTimedSession:
    """Tests for sessions with time constraints."""

    def test_time_reported(self, site_repo, session_repo, progress_repo, scripted_rng, user_id, beginner_site):
        """Timed sessions report the remaining budget."""
        game = ExcavationGame(
            sites=site_repo, sessions=session_repo, progress=progress_repo, rng=scripted_rng
        )
        session = game.start_session(
            user_id, beginner_site.id, Difficulty.BEGINNER, GameplayConfig(time_constraints=True)
        )

        outcome = game.apply_action(session.id, 0, 0, "trowel")

        assert outcome.time_used_seconds == 35
        assert outcome.time_remaining_seconds == 45 * 60 - 35
