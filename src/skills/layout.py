"""
Randomized Layout Generator.

Re-deals a site's artifacts onto fresh, collision-free cells for each
session so that replays of the same site differ.
"""

from __future__ import annotations

import logging
import random
from typing import Protocol

from src.models.site import ArtifactPlacement, GridPosition

logger = logging.getLogger(__name__)

MAX_PLACEMENT_ATTEMPTS = 100
DEPTH_VARIATION = 0.15  # Symmetric +/- offset
MIN_LAYOUT_DEPTH = 0.3
MAX_LAYOUT_DEPTH = 0.95
DEFAULT_BASE_DEPTH = 0.5


class RandomSource(Protocol):
    """The subset of random.Random the generator needs."""

    def randrange(self, stop: int) -> int: ...

    def uniform(self, a: float, b: float) -> float: ...


def randomize_layout(
    placements: list[ArtifactPlacement],
    grid_width: int,
    grid_height: int,
    rng: RandomSource | None = None,
) -> list[ArtifactPlacement]:
    """
    Build a session layout from a site's authored placements.

    Each artifact gets up to 100 random coordinate draws to find an
    unused cell; after that the grid is scanned in column-major order
    for the first free one. Depth is jittered by up to +/-0.15 and
    clamped to [0.3, 0.95]. Conditions and artifact ids are kept.

    Args:
        placements: The site's true placements
        grid_width: Grid columns
        grid_height: Grid rows
        rng: Random source (injected for deterministic tests)

    Returns:
        New placements, same length as the input, no shared cells

    Raises:
        ValueError: If there are more artifacts than cells
    """
    if len(placements) > grid_width * grid_height:
        raise ValueError(
            f"Cannot place {len(placements)} artifacts on a {grid_width}x{grid_height} grid"
        )

    rng = rng or random.Random()
    used: set[tuple[int, int]] = set()
    layout: list[ArtifactPlacement] = []

    for placement in placements:
        position = _draw_position(rng, grid_width, grid_height, used)
        if position is None:
            position = _first_free_position(grid_width, grid_height, used)
            logger.debug(
                f"Random placement exhausted for artifact {placement.artifact_id}, "
                f"fell back to {position}"
            )
        used.add(position)

        base_depth = placement.depth or DEFAULT_BASE_DEPTH
        offset = rng.uniform(-DEPTH_VARIATION, DEPTH_VARIATION)
        depth = max(MIN_LAYOUT_DEPTH, min(MAX_LAYOUT_DEPTH, base_depth + offset))

        layout.append(
            ArtifactPlacement(
                artifact_id=placement.artifact_id,
                position=GridPosition(x=position[0], y=position[1]),
                depth=depth,
                condition=placement.condition,
                is_discovered=False,
            )
        )

    return layout


def _draw_position(
    rng: RandomSource,
    grid_width: int,
    grid_height: int,
    used: set[tuple[int, int]],
) -> tuple[int, int] | None:
    """Rejection-sample an unused cell, giving up after the attempt limit."""
    for _ in range(MAX_PLACEMENT_ATTEMPTS):
        candidate = (rng.randrange(grid_width), rng.randrange(grid_height))
        if candidate not in used:
            return candidate
    return None


def _first_free_position(
    grid_width: int,
    grid_height: int,
    used: set[tuple[int, int]],
) -> tuple[int, int]:
    for x in range(grid_width):
        for y in range(grid_height):
            if (x, y) not in used:
                return (x, y)
    # Unreachable: the caller checked capacity
    raise ValueError("No free grid cell left")
