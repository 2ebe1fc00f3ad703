"""
Tests for the in-memory repositories.
"""

from __future__ import annotations

from uuid import uuid4

import pytest

from src.db.memory import (
    InMemoryProgressRepository,
    InMemorySessionRepository,
    InMemorySiteRepository,
)
from src.engine import ConcurrentModificationError, NotFoundError
from src.models import Difficulty, GameSession, create_progress, create_site


@pytest.fixture
def stored_session(engine, beginner_site):
    """A session record saved to a fresh repository."""
    repo = InMemorySessionRepository()
    session = GameSession(
        user_id=uuid4(),
        site_id=beginner_site.id,
        difficulty=Difficulty.BEGINNER,
        state=engine.start_state(beginner_site, Difficulty.BEGINNER),
    )
    repo.create_session(session)
    return repo, session


class TestSiteRepository:
    """Tests for InMemorySiteRepository."""

    def test_list_sites(self):
        """Inactive sites are hidden unless asked for."""
        repo = InMemorySiteRepository()
        repo.save_site(create_site("B Reef", 2, 2))
        repo.save_site(create_site("A Reef", 2, 2))
        repo.save_site(create_site("Closed", 2, 2, is_active=False))

        assert [s.name for s in repo.list_sites()] == ["A Reef", "B Reef"]
        assert len(repo.list_sites(active_only=False)) == 3

    def test_returns_copies(self):
        """Mutating a loaded site does not change the store."""
        repo = InMemorySiteRepository()
        site = create_site("Reef", 2, 2)
        repo.save_site(site)

        loaded = repo.get_site(site.id)
        loaded.name = "Renamed"

        assert repo.get_site(site.id).name == "Reef"


class TestSessionRepository:
    """Tests for InMemorySessionRepository."""

    def test_create_sets_version(self, stored_session):
        """New sessions start at version 1."""
        repo, session = stored_session
        assert session.version == 1
        assert repo.get_session(session.id).version == 1

    def test_save_bumps_version(self, stored_session):
        """Each save increments the version."""
        repo, session = stored_session
        loaded = repo.get_session(session.id)
        loaded.current_score = 42
        repo.save_session(loaded)

        assert loaded.version == 2
        stored = repo.get_session(session.id)
        assert stored.version == 2
        assert stored.current_score == 42

    def test_stale_save_rejected(self, stored_session):
        """A save based on an old version is rejected."""
        repo, session = stored_session
        first = repo.get_session(session.id)
        second = repo.get_session(session.id)

        repo.save_session(first)
        second.current_score = 99

        with pytest.raises(ConcurrentModificationError):
            repo.save_session(second)
        assert repo.get_session(session.id).current_score == 0

    def test_duplicate_create(self, stored_session):
        """A session cannot be created twice."""
        repo, session = stored_session
        with pytest.raises(ValueError):
            repo.create_session(session)

    def test_save_unknown(self, stored_session, engine, beginner_site):
        """Saving a session that was never created is rejected."""
        repo, _ = stored_session
        orphan = GameSession(
            user_id=uuid4(),
            site_id=beginner_site.id,
            difficulty=Difficulty.BEGINNER,
            state=engine.start_state(beginner_site, Difficulty.BEGINNER),
        )
        with pytest.raises(NotFoundError):
            repo.save_session(orphan)

    def test_loaded_copy_is_private(self, stored_session):
        """Mutating a loaded session does not change the store."""
        repo, session = stored_session
        loaded = repo.get_session(session.id)
        loaded.state.grid[0].excavated = True

        assert repo.get_session(session.id).state.grid[0].excavated is False

    def test_list_sessions(self, stored_session):
        """Sessions are listed per user."""
        repo, session = stored_session
        assert [s.id for s in repo.list_sessions(session.user_id)] == [session.id]
        assert repo.list_sessions(uuid4()) == []


class TestProgressRepository:
    """Tests for InMemoryProgressRepository."""

    def test_round_trip(self):
        """Progress is keyed by user and game type."""
        repo = InMemoryProgressRepository()
        progress = create_progress(uuid4(), 80)
        repo.save_progress(progress)

        assert repo.get_progress(progress.user_id, progress.game_type).best_score == 80
        assert repo.get_progress(progress.user_id, "timeline_ordering") is None
