"""
Database interface definitions for the excavation simulation.

Uses Protocol classes to define the contract for repository operations.
Implementations can use real drivers or in-memory mocks for testing.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol
from uuid import UUID

if TYPE_CHECKING:
    from src.models import GameSession, Site, StudentProgress


class SiteRepository(Protocol):
    """
    Read access to authored excavation sites.

    The engine only reads sites; `save_site` exists for seeding content.
    """

    def save_site(self, site: Site) -> None:
        """Insert or update a site."""
        ...

    def get_site(self, site_id: UUID) -> Site | None:
        """Get a site by ID."""
        ...

    def list_sites(self, active_only: bool = True) -> list[Site]:
        """List sites, ordered by name."""
        ...


class SessionRepository(Protocol):
    """
    Storage for game session records.

    Saves are optimistically versioned: a save must carry the version
    it was loaded with, and the stored version is bumped on success.
    """

    def create_session(self, session: GameSession) -> None:
        """Insert a new session record and set its version to 1."""
        ...

    def get_session(self, session_id: UUID) -> GameSession | None:
        """Get a private copy of a session record."""
        ...

    def save_session(self, session: GameSession) -> None:
        """
        Replace a session record.

        Raises:
            NotFoundError: If the session was never created
            ConcurrentModificationError: If the session's version is stale
        """
        ...

    def list_sessions(self, user_id: UUID) -> list[GameSession]:
        """All sessions for a user, oldest first."""
        ...


class ProgressRepository(Protocol):
    """Per-learner progress records, one per game type."""

    def get_progress(self, user_id: UUID, game_type: str) -> StudentProgress | None:
        """Get a learner's progress for a game type."""
        ...

    def save_progress(self, progress: StudentProgress) -> None:
        """Insert or update a progress record."""
        ...
