"""
Database layer for the excavation simulation.

Provides interfaces and implementations for site, session and learner
progress storage.

Implementations:
- InMemory*: For testing (no external dependencies)
- DoltRepository: For production (requires a running Dolt SQL server)
"""

from __future__ import annotations

from src.db.dolt import DOLT_SCHEMA, DoltConnection, DoltRepository, init_dolt_schema
from src.db.interfaces import ProgressRepository, SessionRepository, SiteRepository
from src.db.memory import (
    InMemoryProgressRepository,
    InMemorySessionRepository,
    InMemorySiteRepository,
)

__all__ = [
    # Protocol interfaces
    "ProgressRepository",
    "SessionRepository",
    "SiteRepository",
    # In-memory implementations (for testing)
    "InMemoryProgressRepository",
    "InMemorySessionRepository",
    "InMemorySiteRepository",
    # Real database implementations
    "DOLT_SCHEMA",
    "DoltConnection",
    "DoltRepository",
    "init_dolt_schema",
]
