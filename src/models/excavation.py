"""
Excavation record models.

Grid cells, field documentation, and protocol violations. These are
the pieces of per-session state that the engine mutates or appends to.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from src.models.site import GridPosition


class EntryType(str, Enum):
    """Kinds of field documentation."""

    DISCOVERY = "discovery"
    MEASUREMENT = "measurement"
    PHOTO = "photo"
    NOTE = "note"
    SAMPLE = "sample"


# Entry types that count toward documentation quality
REQUIRED_ENTRY_TYPES = (EntryType.DISCOVERY, EntryType.MEASUREMENT, EntryType.PHOTO)


class ViolationType(str, Enum):
    """Categories of protocol infraction."""

    IMPROPER_TOOL = "improper_tool"
    MISSING_DOCUMENTATION = "missing_documentation"
    RUSHED_EXCAVATION = "rushed_excavation"
    CONTAMINATION = "contamination"
    DAMAGE = "damage"


class Severity(str, Enum):
    """How serious a violation is."""

    MINOR = "minor"
    MODERATE = "moderate"
    SEVERE = "severe"


class GridCell(BaseModel):
    """One square of the excavation grid."""

    x: int = Field(ge=0)
    y: int = Field(ge=0)
    excavated: bool = False
    excavation_depth: float = Field(default=0.0, ge=0.0, le=1.0)
    contains_artifact: bool = False
    artifact_id: UUID | None = None
    notes: str | None = None

    def dig(self, progress: float, threshold: float) -> None:
        """
        Deepen the cell.

        Depth is additive and capped at 1.0. The cell counts as
        excavated once depth passes the threshold and stays that way.
        """
        self.excavation_depth = min(1.0, self.excavation_depth + max(0.0, progress))
        if self.excavation_depth > threshold:
            self.excavated = True


class DocumentationEntry(BaseModel):
    """A single field record made by the learner."""

    id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    position: GridPosition
    entry_type: EntryType
    content: str
    artifact_id: UUID | None = None
    is_required: bool = False
    is_complete: bool = True


class ProtocolViolation(BaseModel):
    """A recorded breach of archaeological protocol."""

    id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    violation_type: ViolationType
    description: str
    severity: Severity
    points_penalty: int = Field(ge=0)
    position: GridPosition | None = None
    tool_id: str | None = None
    recommended_tools: list[str] = Field(default_factory=list)
    """Tool names that would have avoided the violation."""


def create_documentation_entry(
    entry_type: EntryType,
    content: str,
    x: int,
    y: int,
    *,
    artifact_id: UUID | None = None,
) -> DocumentationEntry:
    """
    Factory function for a documentation entry.

    Discovery, measurement and photo entries are flagged as required.
    """
    return DocumentationEntry(
        position=GridPosition(x=x, y=y),
        entry_type=entry_type,
        content=content,
        artifact_id=artifact_id,
        is_required=entry_type in REQUIRED_ENTRY_TYPES,
        is_complete=True,
    )
