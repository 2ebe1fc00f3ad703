"""
Engine error taxonomy.

Rejected operations raise one of these. Protocol violations are not
errors; they are recorded on the session as domain data.
"""

from __future__ import annotations


class ExcavationError(Exception):
    """Base class for rejected excavation operations."""


class NotFoundError(ExcavationError, LookupError):
    """A site or session does not exist."""


class InvalidStateError(ExcavationError):
    """The operation is not allowed in the session's current status."""


class InvalidInputError(ExcavationError, ValueError):
    """Bad arguments: unknown tool id, off-grid coordinates, and so on."""


class ConcurrentModificationError(InvalidStateError):
    """A session save was based on a stale version."""

    def __init__(self, session_id: object, expected: int, actual: int) -> None:
        super().__init__(
            f"Session {session_id} was modified concurrently "
            f"(expected version {expected}, found {actual})"
        )
        self.session_id = session_id
        self.expected = expected
        self.actual = actual
