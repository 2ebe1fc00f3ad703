"""Field protocol guidance and tool suggestions."""

from __future__ import annotations

from src.models.excavation import REQUIRED_ENTRY_TYPES
from src.models.session import ExcavationState
from src.models.site import EnvironmentalConditions
from src.models.tool import Tool, ToolCategory
from src.skills.tools import HARD_BRUSH_ID, MAX_BRUSH_CURRENT, MIN_CAMERA_VISIBILITY

# Guidance thresholds
LOW_VISIBILITY_GUIDANCE = 50
LOW_COVERAGE_FRACTION = 0.3
EMPTY_HANDED_COVERAGE_FRACTION = 0.4


def suggest_tools(
    tool: Tool,
    conditions: EnvironmentalConditions,
) -> list[str]:
    """Name the tools that would have avoided an improper-tool violation."""
    if tool.id == HARD_BRUSH_ID:
        return ["Soft Brush", "Archaeological Trowel"]
    if tool.category == ToolCategory.BRUSH and conditions.current_strength > MAX_BRUSH_CURRENT:
        return ["Archaeological Trowel", "Archaeological Probe"]
    if tool.category == ToolCategory.CAMERA and conditions.visibility < MIN_CAMERA_VISIBILITY:
        return ["Measuring Tape", "Archaeological Probe"]
    if tool.is_documentation_tool or tool.category == ToolCategory.SIEVE:
        # Documentation or sieving attempted before the cell was dug
        return ["Archaeological Trowel", "Soft Brush"]
    return ["Archaeological Trowel", "Soft Brush", "Measuring Tape"]


def get_protocol_guidance(
    state: ExcavationState,
    conditions: EnvironmentalConditions,
) -> list[str]:
    """
    Non-binding hints for the learner based on the current state.

    Guidance never records violations or changes the score.
    """
    guidance: list[str] = []

    if conditions.visibility < LOW_VISIBILITY_GUIDANCE:
        guidance.append("Low visibility - use the probe to locate artifacts safely")

    if conditions.current_strength > MAX_BRUSH_CURRENT:
        guidance.append("Strong current - use stable tools and secure positioning")

    present = {entry.entry_type for entry in state.documentation}
    if any(entry_type not in present for entry_type in REQUIRED_ENTRY_TYPES):
        guidance.append("Complete required documentation: discovery, measurement and photo entries")

    coverage = state.excavated_count / state.total_cells
    if coverage < LOW_COVERAGE_FRACTION:
        guidance.append("Increase excavation pace to cover more area")

    if not state.discovered_artifacts and coverage > EMPTY_HANDED_COVERAGE_FRACTION:
        guidance.append("No artifacts found yet - try using the probe in different areas")

    return guidance
