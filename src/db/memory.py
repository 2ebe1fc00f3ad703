"""
In-memory implementations of database interfaces for testing.

These implementations store everything in dictionaries, making tests
fast and isolated from actual database infrastructure. Records are
deep-copied on the way in and out so callers never share state with
the store.
"""

from __future__ import annotations

from copy import deepcopy
from uuid import UUID

from src.engine.errors import ConcurrentModificationError, NotFoundError
from src.models import GameSession, Site, StudentProgress


class InMemorySiteRepository:
    """In-memory implementation of SiteRepository."""

    def __init__(self) -> None:
        self._sites: dict[UUID, Site] = {}

    def save_site(self, site: Site) -> None:
        """Insert or update a site."""
        self._sites[site.id] = deepcopy(site)

    def get_site(self, site_id: UUID) -> Site | None:
        """Get a site by ID."""
        site = self._sites.get(site_id)
        return deepcopy(site) if site else None

    def list_sites(self, active_only: bool = True) -> list[Site]:
        """List sites, ordered by name."""
        sites = [s for s in self._sites.values() if s.is_active or not active_only]
        return [deepcopy(s) for s in sorted(sites, key=lambda s: s.name)]


class InMemorySessionRepository:
    """In-memory implementation of SessionRepository with version checks."""

    def __init__(self) -> None:
        self._sessions: dict[UUID, GameSession] = {}

    def create_session(self, session: GameSession) -> None:
        """Insert a new session record and set its version to 1."""
        if session.id in self._sessions:
            raise ValueError(f"Session {session.id} already exists")
        session.version = 1
        self._sessions[session.id] = deepcopy(session)

    def get_session(self, session_id: UUID) -> GameSession | None:
        """Get a private copy of a session record."""
        session = self._sessions.get(session_id)
        return deepcopy(session) if session else None

    def save_session(self, session: GameSession) -> None:
        """Replace a session record if its version is current."""
        stored = self._sessions.get(session.id)
        if stored is None:
            raise NotFoundError(f"Session {session.id} not found")
        if stored.version != session.version:
            raise ConcurrentModificationError(session.id, session.version, stored.version)

        session.version += 1
        self._sessions[session.id] = deepcopy(session)

    def list_sessions(self, user_id: UUID) -> list[GameSession]:
        """All sessions for a user, oldest first."""
        sessions = [s for s in self._sessions.values() if s.user_id == user_id]
        return [deepcopy(s) for s in sorted(sessions, key=lambda s: s.start_time)]


class InMemoryProgressRepository:
    """In-memory implementation of ProgressRepository."""

    def __init__(self) -> None:
        self._progress: dict[tuple[UUID, str], StudentProgress] = {}

    def get_progress(self, user_id: UUID, game_type: str) -> StudentProgress | None:
        """Get a learner's progress for a game type."""
        progress = self._progress.get((user_id, game_type))
        return deepcopy(progress) if progress else None

    def save_progress(self, progress: StudentProgress) -> None:
        """Insert or update a progress record."""
        self._progress[(progress.user_id, progress.game_type)] = deepcopy(progress)
