"""
Site Models for the excavation simulation.

A site is authored content: the grid, the environment, and the true
placement of every buried artifact. The engine never mutates a site.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, model_validator


class Difficulty(str, Enum):
    """Difficulty tier of a site or session."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class ArtifactCondition(str, Enum):
    """Preservation state of a buried artifact."""

    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class GridPosition(BaseModel):
    """A coordinate on the excavation grid."""

    x: int = Field(ge=0)
    y: int = Field(ge=0)

    def as_tuple(self) -> tuple[int, int]:
        return (self.x, self.y)


class EnvironmentalConditions(BaseModel):
    """Conditions on the sea floor for the whole site."""

    visibility: float = Field(default=80, ge=0, le=100)
    """Percent visibility, 0-100."""

    current_strength: float = Field(default=3, ge=0, le=10)
    """Water current, 0 (still) to 10 (violent)."""

    temperature: float = 18
    """Water temperature in Celsius."""

    depth: float = Field(default=10, ge=0)
    """Site depth in meters."""

    sediment_type: str = "sand"

    time_constraints: int = Field(default=45, ge=0)
    """Time budget in minutes."""


class ArtifactPlacement(BaseModel):
    """Where an artifact is buried and how well it survived."""

    artifact_id: UUID
    position: GridPosition
    depth: float = Field(default=0.5, ge=0.0, le=1.0)
    """Relative burial depth; the cell must be dug at least this far."""

    condition: ArtifactCondition = ArtifactCondition.GOOD
    is_discovered: bool = False


class Site(BaseModel):
    """An authored excavation site."""

    id: UUID = Field(default_factory=uuid4)
    name: str = Field(min_length=1, max_length=255)
    location: str = ""
    historical_period: str = ""
    description: str = ""

    grid_width: int = Field(ge=1)
    grid_height: int = Field(ge=1)
    difficulty: Difficulty = Difficulty.BEGINNER

    environment: EnvironmentalConditions = Field(default_factory=EnvironmentalConditions)
    artifacts: list[ArtifactPlacement] = Field(default_factory=list)

    is_active: bool = True
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @model_validator(mode="after")
    def _check_placements(self) -> Site:
        if len(self.artifacts) > self.grid_width * self.grid_height:
            raise ValueError("More artifacts than grid cells")
        occupied: set[tuple[int, int]] = set()
        for placement in self.artifacts:
            if not self.contains(placement.position.x, placement.position.y):
                raise ValueError(
                    f"Artifact placement ({placement.position.x}, {placement.position.y}) "
                    f"is outside the {self.grid_width}x{self.grid_height} grid"
                )
            if placement.position.as_tuple() in occupied:
                raise ValueError(
                    f"Two artifacts placed at ({placement.position.x}, {placement.position.y})"
                )
            occupied.add(placement.position.as_tuple())
        return self

    @property
    def total_cells(self) -> int:
        return self.grid_width * self.grid_height

    def contains(self, x: int, y: int) -> bool:
        """Check whether a coordinate lies on the grid."""
        return 0 <= x < self.grid_width and 0 <= y < self.grid_height


def create_site(
    name: str,
    grid_width: int,
    grid_height: int,
    *,
    difficulty: Difficulty = Difficulty.BEGINNER,
    environment: EnvironmentalConditions | None = None,
    artifacts: list[ArtifactPlacement] | None = None,
    location: str = "",
    historical_period: str = "",
    description: str = "",
    is_active: bool = True,
) -> Site:
    """
    Factory function to create a site with validated data.

    Args:
        name: Display name of the site
        grid_width: Number of grid columns
        grid_height: Number of grid rows
        difficulty: Difficulty tier
        environment: Environmental conditions (defaults if omitted)
        artifacts: True artifact placements
        location: Geographic location
        historical_period: Period the site belongs to
        description: Longer description for learners
        is_active: Whether the site can be played

    Returns:
        A new Site instance
    """
    return Site(
        name=name,
        grid_width=grid_width,
        grid_height=grid_height,
        difficulty=difficulty,
        environment=environment or EnvironmentalConditions(),
        artifacts=artifacts or [],
        location=location,
        historical_period=historical_period,
        description=description,
        is_active=is_active,
    )


def create_placement(
    x: int,
    y: int,
    *,
    depth: float = 0.5,
    condition: ArtifactCondition = ArtifactCondition.GOOD,
    artifact_id: UUID | None = None,
) -> ArtifactPlacement:
    """Factory function for an artifact placement."""
    return ArtifactPlacement(
        artifact_id=artifact_id or uuid4(),
        position=GridPosition(x=x, y=y),
        depth=depth,
        condition=condition,
    )
