"""
Real Dolt database implementation for the excavation simulation.

Uses mysql-connector-python to connect to a Dolt SQL server. Sites,
sessions and progress each live in one table; the typed models are
serialized to JSON here and nowhere else.
"""

from __future__ import annotations

import json
import logging
from typing import Any
from uuid import UUID

import mysql.connector
from mysql.connector.cursor import MySQLCursor

from src.engine.errors import ConcurrentModificationError, NotFoundError
from src.models import GameSession, Site, StudentProgress

logger = logging.getLogger(__name__)


class DoltConnection:
    """
    Connection manager for Dolt database.

    Lazily opens one connection and reopens it if it drops.
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = 3306,
        user: str = "root",
        password: str = "",
        database: str = "excavation",
    ) -> None:
        self.config = {
            "host": host,
            "port": port,
            "user": user,
            "password": password,
            "database": database,
            "autocommit": True,
        }
        self._connection: Any = None

    def get_connection(self) -> Any:
        """Get or create a database connection."""
        if self._connection is None or not self._connection.is_connected():
            self._connection = mysql.connector.connect(**self.config)
        return self._connection

    def close(self) -> None:
        """Close the database connection."""
        if self._connection and self._connection.is_connected():
            self._connection.close()
            self._connection = None


class DoltRepository:
    """
    Dolt implementation of the site, session and progress repositories.

    Every write is followed by a Dolt commit so the history of each
    session is versioned alongside the data.
    """

    def __init__(self, connection: DoltConnection, commit: bool = True) -> None:
        self._conn = connection
        self._commit = commit

    def _execute(
        self,
        query: str,
        params: tuple[Any, ...] | None = None,
        fetch: bool = True,
    ) -> list[dict[str, Any]]:
        """Execute a query and return results as list of dicts."""
        conn = self._conn.get_connection()
        cursor: MySQLCursor = conn.cursor(dictionary=True)
        try:
            cursor.execute(query, params or ())
            if fetch:
                results = cursor.fetchall()
                return [dict(row) for row in results]  # type: ignore[arg-type]
            return []
        finally:
            cursor.close()

    def _execute_update(self, query: str, params: tuple[Any, ...]) -> int:
        """Execute a write and return the number of affected rows."""
        conn = self._conn.get_connection()
        cursor: MySQLCursor = conn.cursor()
        try:
            cursor.execute(query, params)
            return cursor.rowcount
        finally:
            cursor.close()

    def _execute_proc(self, proc_name: str, args: tuple[Any, ...] = ()) -> list[dict[str, Any]]:
        """Execute a Dolt stored procedure."""
        conn = self._conn.get_connection()
        cursor: MySQLCursor = conn.cursor(dictionary=True)
        try:
            cursor.callproc(proc_name, args)
            results = []
            for result in cursor.stored_results():
                results.extend(result.fetchall())
            return results
        finally:
            cursor.close()

    def _dolt_commit(self, message: str) -> None:
        if self._commit:
            self._execute_proc("dolt_commit", ("-am", message))

    # =========================================================================
    # Site Operations
    # =========================================================================

    def save_site(self, site: Site) -> None:
        """Insert or update a site."""
        query = """
            INSERT INTO excavation_sites (
                id, name, difficulty, is_active, data, created_at
            ) VALUES (
                %s, %s, %s, %s, %s, %s
            )
            ON DUPLICATE KEY UPDATE
                name = VALUES(name),
                difficulty = VALUES(difficulty),
                is_active = VALUES(is_active),
                data = VALUES(data)
        """
        self._execute(
            query,
            (
                str(site.id),
                site.name,
                site.difficulty.value,
                site.is_active,
                site.model_dump_json(),
                site.created_at,
            ),
            fetch=False,
        )
        self._dolt_commit(f"Save site {site.name}")

    def get_site(self, site_id: UUID) -> Site | None:
        """Get a site by ID."""
        result = self._execute(
            "SELECT data FROM excavation_sites WHERE id = %s",
            (str(site_id),),
        )
        if not result:
            return None
        return Site.model_validate_json(result[0]["data"])

    def list_sites(self, active_only: bool = True) -> list[Site]:
        """List sites, ordered by name."""
        query = "SELECT data FROM excavation_sites"
        if active_only:
            query += " WHERE is_active = TRUE"
        query += " ORDER BY name"
        return [Site.model_validate_json(row["data"]) for row in self._execute(query)]

    # =========================================================================
    # Session Operations
    # =========================================================================

    def create_session(self, session: GameSession) -> None:
        """Insert a new session record and set its version to 1."""
        session.version = 1
        query = """
            INSERT INTO game_sessions (
                id, user_id, site_id, game_type, status, current_score,
                version, data, start_time, end_time
            ) VALUES (
                %s, %s, %s, %s, %s, %s, %s, %s, %s, %s
            )
        """
        self._execute(
            query,
            (
                str(session.id),
                str(session.user_id),
                str(session.site_id),
                session.game_type,
                session.status.value,
                session.current_score,
                session.version,
                session.model_dump_json(),
                session.start_time,
                session.end_time,
            ),
            fetch=False,
        )
        self._dolt_commit(f"Start session {session.id}")

    def get_session(self, session_id: UUID) -> GameSession | None:
        """Get a session by ID."""
        result = self._execute(
            "SELECT data FROM game_sessions WHERE id = %s",
            (str(session_id),),
        )
        if not result:
            return None
        return GameSession.model_validate_json(result[0]["data"])

    def save_session(self, session: GameSession) -> None:
        """Replace a session record if its version is current."""
        expected = session.version
        session.version = expected + 1
        query = """
            UPDATE game_sessions SET
                status = %s,
                current_score = %s,
                version = %s,
                data = %s,
                end_time = %s
            WHERE id = %s AND version = %s
        """
        updated = self._execute_update(
            query,
            (
                session.status.value,
                session.current_score,
                session.version,
                session.model_dump_json(),
                session.end_time,
                str(session.id),
                expected,
            ),
        )
        if updated == 0:
            session.version = expected
            current = self._execute(
                "SELECT version FROM game_sessions WHERE id = %s",
                (str(session.id),),
            )
            if not current:
                raise NotFoundError(f"Session {session.id} not found")
            logger.warning(f"Stale save rejected for session {session.id}")
            raise ConcurrentModificationError(session.id, expected, current[0]["version"])

        self._dolt_commit(f"Update session {session.id} (v{session.version})")

    def list_sessions(self, user_id: UUID) -> list[GameSession]:
        """All sessions for a user, oldest first."""
        result = self._execute(
            "SELECT data FROM game_sessions WHERE user_id = %s ORDER BY start_time",
            (str(user_id),),
        )
        return [GameSession.model_validate_json(row["data"]) for row in result]

    # =========================================================================
    # Progress Operations
    # =========================================================================

    def get_progress(self, user_id: UUID, game_type: str) -> StudentProgress | None:
        """Get a learner's progress for a game type."""
        result = self._execute(
            "SELECT * FROM student_progress WHERE user_id = %s AND game_type = %s",
            (str(user_id), game_type),
        )
        if not result:
            return None
        return self._row_to_progress(result[0])

    def save_progress(self, progress: StudentProgress) -> None:
        """Insert or update a progress record."""
        query = """
            INSERT INTO student_progress (
                id, user_id, game_type, best_score, average_score,
                sessions_completed, last_played, achievements
            ) VALUES (
                %s, %s, %s, %s, %s, %s, %s, %s
            )
            ON DUPLICATE KEY UPDATE
                best_score = VALUES(best_score),
                average_score = VALUES(average_score),
                sessions_completed = VALUES(sessions_completed),
                last_played = VALUES(last_played),
                achievements = VALUES(achievements)
        """
        self._execute(
            query,
            (
                str(progress.id),
                str(progress.user_id),
                progress.game_type,
                progress.best_score,
                progress.average_score,
                progress.sessions_completed,
                progress.last_played,
                json.dumps(progress.achievements),
            ),
            fetch=False,
        )
        self._dolt_commit(f"Update progress for {progress.user_id}")

    def _row_to_progress(self, row: dict[str, Any]) -> StudentProgress:
        """Convert a database row to a StudentProgress object."""
        achievements = row.get("achievements")
        return StudentProgress(
            id=UUID(row["id"]),
            user_id=UUID(row["user_id"]),
            game_type=row["game_type"],
            best_score=row["best_score"],
            average_score=row["average_score"],
            sessions_completed=row["sessions_completed"],
            last_played=row["last_played"],
            achievements=json.loads(achievements) if achievements else [],
        )


# Schema creation SQL
DOLT_SCHEMA = """
CREATE TABLE IF NOT EXISTS excavation_sites (
    id VARCHAR(36) PRIMARY KEY,
    name VARCHAR(255) NOT NULL,
    difficulty VARCHAR(20) NOT NULL,
    is_active BOOLEAN DEFAULT TRUE,
    data LONGTEXT NOT NULL,
    created_at DATETIME NOT NULL,
    INDEX idx_active (is_active)
);

CREATE TABLE IF NOT EXISTS game_sessions (
    id VARCHAR(36) PRIMARY KEY,
    user_id VARCHAR(36) NOT NULL,
    site_id VARCHAR(36) NOT NULL,
    game_type VARCHAR(50) NOT NULL,
    status VARCHAR(20) NOT NULL,
    current_score INT DEFAULT 0,
    version INT NOT NULL,
    data LONGTEXT NOT NULL,
    start_time DATETIME NOT NULL,
    end_time DATETIME,
    INDEX idx_user (user_id),
    INDEX idx_status (status),
    FOREIGN KEY (site_id) REFERENCES excavation_sites(id)
);

CREATE TABLE IF NOT EXISTS student_progress (
    id VARCHAR(36) PRIMARY KEY,
    user_id VARCHAR(36) NOT NULL,
    game_type VARCHAR(50) NOT NULL,
    best_score INT DEFAULT 0,
    average_score FLOAT DEFAULT 0,
    sessions_completed INT DEFAULT 0,
    last_played DATETIME NOT NULL,
    achievements JSON,
    UNIQUE KEY uq_user_game (user_id, game_type)
);
"""


def init_dolt_schema(connection: DoltConnection) -> None:
    """Initialize the Dolt database schema."""
    conn = connection.get_connection()
    cursor = conn.cursor()
    try:
        for statement in DOLT_SCHEMA.split(";"):
            statement = statement.strip()
            if statement:
                cursor.execute(statement)
        conn.commit()
    finally:
        cursor.close()
