"""
Excavation Game facade.

Binds the pure ExcavationEngine to site, session and progress
repositories. Every operation loads a private copy of the session,
validates, mutates the copy, logs an action record and saves it with
a version check. A rejected operation never reaches the store.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING
from uuid import UUID

from src.engine.errors import InvalidInputError, InvalidStateError, NotFoundError
from src.engine.excavation import ExcavationEngine
from src.engine.models import (
    DocumentationResult,
    EngineConfig,
    ExcavationOutcome,
    SessionSnapshot,
)
from src.models.excavation import EntryType
from src.models.session import (
    ActionType,
    GameplayConfig,
    GameSession,
    SessionStatus,
    StudentProgress,
    create_progress,
)
from src.models.site import Difficulty, Site
from src.services.report import SiteReport
from src.skills.layout import RandomSource
from src.skills.tools import ToolRegistry

if TYPE_CHECKING:
    from src.db.interfaces import ProgressRepository, SessionRepository, SiteRepository

logger = logging.getLogger(__name__)


@dataclass
class ExcavationGame:
    """
    Session-level operations for the excavation simulation.

    Usage:
        game = ExcavationGame(sites=site_repo, sessions=session_repo, progress=progress_repo)
        session = game.start_session(user_id, site_id, Difficulty.BEGINNER)
        outcome = game.apply_action(session.id, 2, 2, "trowel")
        report = game.complete_session(session.id)
    """

    sites: SiteRepository
    sessions: SessionRepository
    progress: ProgressRepository
    config: EngineConfig = field(default_factory=EngineConfig)
    registry: ToolRegistry = field(default_factory=ToolRegistry)
    rng: RandomSource | None = None

    engine: ExcavationEngine = field(init=False)

    def __post_init__(self) -> None:
        self.engine = ExcavationEngine(registry=self.registry, rng=self.rng or random.Random())

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start_session(
        self,
        user_id: UUID,
        site_id: UUID,
        difficulty: Difficulty | str,
        config: GameplayConfig | None = None,
    ) -> GameSession:
        """
        Start a new session on an active site.

        Args:
            user_id: The learner
            site_id: Site to excavate
            difficulty: Difficulty tier; drives the quest set
            config: Rules for this session (engine defaults if omitted)

        Returns:
            The stored session

        Raises:
            NotFoundError: Site missing or inactive
            InvalidInputError: Unknown difficulty or default tool
        """
        site = self.sites.get_site(site_id)
        if site is None or not site.is_active:
            logger.warning(f"Cannot start session: site {site_id} not found or inactive")
            raise NotFoundError(f"Excavation site {site_id} not found or inactive")

        try:
            difficulty = Difficulty(difficulty)
        except ValueError:
            raise InvalidInputError(f"Unknown difficulty: {difficulty}") from None

        config = config or self.config.gameplay
        state = self.engine.start_state(site, difficulty, config)

        session = GameSession(
            user_id=user_id,
            site_id=site.id,
            game_type=self.config.game_type,
            difficulty=difficulty,
            max_score=config.max_score,
            state=state,
        )
        session.log_action(
            ActionType.START,
            site_id=str(site.id),
            difficulty=difficulty.value,
            artifacts=len(state.layout),
        )
        self.sessions.create_session(session)

        logger.info(
            f"Session {session.id} started on '{site.name}' "
            f"({difficulty.value}, {len(state.layout)} artifacts)"
        )
        return session

    def complete_session(self, session_id: UUID, report_date: date | None = None) -> SiteReport:
        """
        Score a session, close it, and update the learner's progress.

        The final score replaces the running score. If the progress
        record cannot be saved the session is written back as active and
        the error is re-raised, so completion can be retried.

        Raises:
            NotFoundError: Session or its site missing
            InvalidStateError: Session already completed or abandoned
        """
        session = self._load_active(session_id)
        site = self._load_site(session)
        reopened = session.model_copy(deep=True)

        report = self.engine.complete(session.state, site, report_date)
        progress = self._updated_progress(session.user_id, session.game_type, report.overall_score)

        session.status = SessionStatus.COMPLETED
        session.end_time = datetime.now(UTC)
        session.current_score = report.overall_score
        session.completion_percentage = report.completion_percentage
        session.log_action(
            ActionType.COMPLETE,
            overall_score=report.overall_score,
            completion_percentage=report.completion_percentage,
            artifacts_found=report.artifacts_found,
        )
        self.sessions.save_session(session)

        try:
            self.progress.save_progress(progress)
        except Exception:
            logger.error(f"Progress save failed for session {session.id}, reopening it")
            reopened.version = session.version
            self.sessions.save_session(reopened)
            raise

        logger.info(
            f"Session {session.id} completed: score {report.overall_score}, "
            f"{report.artifacts_found}/{report.total_artifacts} artifacts"
        )
        return report

    def abandon_session(self, session_id: UUID) -> GameSession:
        """
        Close an active session without scoring it.

        Raises:
            NotFoundError: Session missing
            InvalidStateError: Session not active
        """
        session = self._load_active(session_id)
        session.status = SessionStatus.ABANDONED
        session.end_time = datetime.now(UTC)
        session.log_action(ActionType.ABANDON, score=session.current_score)
        self.sessions.save_session(session)

        logger.info(f"Session {session.id} abandoned")
        return session

    # =========================================================================
    # Actions
    # =========================================================================

    def apply_action(self, session_id: UUID, x: int, y: int, tool_id: str) -> ExcavationOutcome:
        """
        Use a tool on a grid cell.

        Raises:
            NotFoundError: Session or its site missing
            InvalidStateError: Session not active
            InvalidInputError: Unknown tool or off-grid coordinate
        """
        session = self._load_active(session_id)
        site = self._load_site(session)

        outcome = self.engine.apply_action(session.state, site.environment, x, y, tool_id)

        session.current_score += outcome.score
        session.completion_percentage = session.state.coverage_percent
        session.log_action(
            ActionType.EXCAVATION,
            grid_x=x,
            grid_y=y,
            tool_id=tool_id,
            discoveries=outcome.discoveries,
            violations=[v.model_dump(mode="json") for v in outcome.violations],
            score=outcome.score,
        )
        self.sessions.save_session(session)

        logger.debug(f"Session {session.id}: {tool_id} at ({x}, {y}) scored {outcome.score}")
        return outcome

    def change_tool(self, session_id: UUID, tool_id: str) -> None:
        """
        Switch the session's active tool.

        Raises:
            NotFoundError: Session missing
            InvalidStateError: Session not active
            InvalidInputError: Unknown tool
        """
        session = self._load_active(session_id)
        previous = session.state.current_tool_id
        tool = self.engine.change_tool(session.state, tool_id)
        session.log_action(ActionType.CHANGE_TOOL, previous_tool_id=previous, tool_id=tool.id)
        self.sessions.save_session(session)

        logger.debug(f"Session {session.id}: tool changed to {tool.id}")

    def add_documentation_entry(
        self,
        session_id: UUID,
        entry_type: EntryType | str,
        content: str,
        x: int,
        y: int,
        artifact_id: UUID | None = None,
    ) -> DocumentationResult:
        """
        Log a field entry and award any quest bonuses.

        Raises:
            NotFoundError: Session missing
            InvalidStateError: Session not active
            InvalidInputError: Unknown entry type or off-grid coordinate
        """
        session = self._load_active(session_id)

        result = self.engine.add_documentation(
            session.state, entry_type, content, x, y, artifact_id=artifact_id
        )

        session.current_score += result.bonus_score
        session.log_action(
            ActionType.DOCUMENTATION,
            entry_id=str(result.entry.id),
            entry_type=result.entry.entry_type.value,
            grid_x=x,
            grid_y=y,
            quests_completed=result.quests_completed,
            bonus_score=result.bonus_score,
        )
        self.sessions.save_session(session)

        logger.debug(
            f"Session {session.id}: {result.entry.entry_type.value} entry at ({x}, {y})"
        )
        return result

    # =========================================================================
    # Queries
    # =========================================================================

    def get_session_state(self, session_id: UUID) -> SessionSnapshot | None:
        """
        Read a session with its site and engine state.

        The site in the snapshot carries the session layout in place of
        its authored placements. Returns None if the session or site is
        missing.
        """
        session = self.sessions.get_session(session_id)
        if session is None:
            return None
        site = self.sites.get_site(session.site_id)
        if site is None:
            return None

        layout = [placement.model_copy() for placement in session.state.layout]
        site_view = site.model_copy(update={"artifacts": layout})
        return SessionSnapshot(session=session, site=site_view, state=session.state)

    def get_guidance(self, session_id: UUID) -> list[str]:
        """Non-binding protocol hints for the session's current state."""
        session = self.sessions.get_session(session_id)
        if session is None:
            raise NotFoundError(f"Game session {session_id} not found")
        site = self._load_site(session)
        return self.engine.guidance(session.state, site.environment)

    def get_progress(self, user_id: UUID) -> StudentProgress | None:
        """The learner's progress record for this game type."""
        return self.progress.get_progress(user_id, self.config.game_type)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _load_active(self, session_id: UUID) -> GameSession:
        session = self.sessions.get_session(session_id)
        if session is None:
            logger.warning(f"Game session {session_id} not found")
            raise NotFoundError(f"Game session {session_id} not found")
        if not session.is_active():
            logger.warning(f"Game session {session_id} is {session.status.value}, not active")
            raise InvalidStateError(f"Game session {session_id} is not active ({session.status.value})")
        return session

    def _load_site(self, session: GameSession) -> Site:
        site = self.sites.get_site(session.site_id)
        if site is None:
            logger.warning(f"Excavation site {session.site_id} not found")
            raise NotFoundError(f"Excavation site {session.site_id} not found")
        return site

    def _updated_progress(self, user_id: UUID, game_type: str, score: int) -> StudentProgress:
        progress = self.progress.get_progress(user_id, game_type)
        if progress is None:
            return create_progress(user_id, score, game_type)
        progress.record_score(score)
        return progress
