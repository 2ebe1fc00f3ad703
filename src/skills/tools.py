"""
Tool Registry and Appropriateness Rule.

The registry is the single shared, read-only tool catalogue. The
appropriateness check is a pure function of tool, action, environment
and artifact condition.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from enum import Enum

from pydantic import BaseModel

from src.models.site import ArtifactCondition, EnvironmentalConditions
from src.models.tool import DOCUMENTATION_CATEGORIES, Tool, ToolCategory

HARD_BRUSH_ID = "hard_brush"

# Environmental limits
MIN_CAMERA_VISIBILITY = 30
MAX_BRUSH_CURRENT = 6

FRAGILE_CONDITIONS = frozenset({ArtifactCondition.POOR, ArtifactCondition.FAIR})


class ActionKind(str, Enum):
    """What a tool use is being judged as."""

    EXCAVATION = "excavation"
    DOCUMENTATION = "documentation"
    DISCOVERY = "discovery"  # Scoring an artifact find; no cell-state checks


class ToolCheck(BaseModel):
    """Result of an appropriateness check."""

    is_valid: bool
    reason: str | None = None


DEFAULT_TOOLS: tuple[Tool, ...] = (
    Tool(
        id="soft_brush",
        name="Soft Brush",
        category=ToolCategory.BRUSH,
        description="Gentle cleaning tool for delicate artifacts",
        effectiveness=0.8,
        appropriate_for=("delicate", "fragile", "detailed_cleaning"),
    ),
    Tool(
        id=HARD_BRUSH_ID,
        name="Hard Brush",
        category=ToolCategory.BRUSH,
        description="Sturdy brush for removing sediment",
        effectiveness=0.6,
        appropriate_for=("heavy_sediment", "initial_cleaning", "robust_artifacts"),
    ),
    Tool(
        id="trowel",
        name="Archaeological Trowel",
        category=ToolCategory.TROWEL,
        description="Precision tool for careful excavation",
        effectiveness=0.9,
        appropriate_for=("precision_work", "artifact_extraction", "grid_excavation"),
    ),
    Tool(
        id="measuring_tape",
        name="Measuring Tape",
        category=ToolCategory.MEASURING_TAPE,
        description="For accurate measurements and grid mapping",
        effectiveness=1.0,
        appropriate_for=("documentation", "mapping", "measurements"),
    ),
    Tool(
        id="underwater_camera",
        name="Underwater Camera",
        category=ToolCategory.CAMERA,
        description="Waterproof camera for site documentation",
        effectiveness=1.0,
        appropriate_for=("photography", "documentation", "evidence"),
    ),
    Tool(
        id="sieve",
        name="Archaeological Sieve",
        category=ToolCategory.SIEVE,
        description="For separating small artifacts from sediment",
        effectiveness=0.7,
        appropriate_for=("small_artifacts", "sediment_processing", "thorough_search"),
    ),
    Tool(
        id="probe",
        name="Archaeological Probe",
        category=ToolCategory.PROBE,
        description="For detecting buried objects without damage",
        effectiveness=0.5,
        appropriate_for=("detection", "preliminary_survey", "safe_exploration"),
    ),
)


class ToolRegistry:
    """Read-only tool catalogue keyed by tool id."""

    def __init__(self, tools: Iterable[Tool] = DEFAULT_TOOLS) -> None:
        self._tools: dict[str, Tool] = {}
        for tool in tools:
            if tool.id in self._tools:
                raise ValueError(f"Duplicate tool id: {tool.id}")
            self._tools[tool.id] = tool

    def get(self, tool_id: str) -> Tool | None:
        """Look up a tool, or None if the id is unknown."""
        return self._tools.get(tool_id)

    def __contains__(self, tool_id: object) -> bool:
        return tool_id in self._tools

    def __iter__(self) -> Iterator[Tool]:
        return iter(self._tools.values())

    def __len__(self) -> int:
        return len(self._tools)

    def ids(self) -> list[str]:
        return list(self._tools)


def check_tool_usage(
    tool: Tool,
    action: ActionKind,
    conditions: EnvironmentalConditions,
    artifact_condition: ArtifactCondition | None = None,
    cell_excavated: bool = False,
) -> ToolCheck:
    """
    Decide whether a tool use follows field protocol.

    Rules are checked in a fixed order and the first failure wins:
    documentation on an unexcavated cell, documentation tools used to
    dig, sieving as initial excavation, cameras in poor visibility,
    brushes in strong current, and the hard brush on fragile artifacts.
    Discovery checks skip the two cell-state rules.

    Args:
        tool: The tool being used
        action: What the use is judged as
        conditions: Site environment
        artifact_condition: Condition of the artifact in the cell, if any
        cell_excavated: Whether the target cell is already excavated

    Returns:
        ToolCheck with the reason for any failure
    """
    if action == ActionKind.DOCUMENTATION and not cell_excavated:
        return ToolCheck(
            is_valid=False,
            reason=(
                f"{tool.name} can only be used on excavated cells. "
                "Excavate this cell first with a Trowel or Brush."
            ),
        )

    if action == ActionKind.EXCAVATION:
        if tool.category in DOCUMENTATION_CATEGORIES:
            return ToolCheck(
                is_valid=False,
                reason=(
                    f"{tool.name} is for documentation, not excavation. "
                    "Use Archaeological Trowel or Soft Brush to excavate this cell."
                ),
            )
        if tool.category == ToolCategory.SIEVE:
            return ToolCheck(
                is_valid=False,
                reason=(
                    f"{tool.name} is for processing excavated sediment. "
                    "Use Archaeological Trowel or Soft Brush to excavate first."
                ),
            )

    if tool.category == ToolCategory.CAMERA and conditions.visibility < MIN_CAMERA_VISIBILITY:
        return ToolCheck(
            is_valid=False,
            reason=(
                f"Visibility is too low for photography ({conditions.visibility:g}%). "
                "Improve lighting or wait for better conditions before taking photos."
            ),
        )

    if tool.category == ToolCategory.BRUSH and conditions.current_strength > MAX_BRUSH_CURRENT:
        return ToolCheck(
            is_valid=False,
            reason=(
                f"Water current is too strong for brush work ({conditions.current_strength:g}/10). "
                "Switch to Archaeological Trowel or wait for calmer conditions."
            ),
        )

    if tool.id == HARD_BRUSH_ID and artifact_condition in FRAGILE_CONDITIONS:
        if artifact_condition == ArtifactCondition.POOR:
            reason = (
                "This artifact is too fragile for a Hard Brush. "
                "Switch to Soft Brush or Archaeological Trowel to avoid damage."
            )
        else:
            reason = (
                "This artifact is delicate. "
                "Use a Soft Brush or Archaeological Trowel for safer excavation."
            )
        return ToolCheck(is_valid=False, reason=reason)

    return ToolCheck(is_valid=True)
