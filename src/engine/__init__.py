"""
Core Engine for the excavation simulation.

The engine is split in two:
- ExcavationEngine: pure rules, (state, action) -> (state, outcome)
- ExcavationGame: repository-backed session operations

Rejected operations raise from the error taxonomy in src.engine.errors.
Protocol violations are recorded on the session, never raised.
"""

from __future__ import annotations

from src.engine.errors import (
    ConcurrentModificationError,
    ExcavationError,
    InvalidInputError,
    InvalidStateError,
    NotFoundError,
)
from src.engine.excavation import ExcavationEngine
from src.engine.game import ExcavationGame
from src.engine.models import (
    DocumentationResult,
    EngineConfig,
    ExcavationOutcome,
    SessionSnapshot,
)

__all__ = [
    # Facade
    "ExcavationGame",
    # Rules
    "ExcavationEngine",
    # Models
    "DocumentationResult",
    "EngineConfig",
    "ExcavationOutcome",
    "SessionSnapshot",
    # Errors
    "ConcurrentModificationError",
    "ExcavationError",
    "InvalidInputError",
    "InvalidStateError",
    "NotFoundError",
]
