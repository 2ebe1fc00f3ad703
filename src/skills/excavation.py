"""
Excavation Formulas.

Pure scoring and progress math for a single tool use.
"""

from __future__ import annotations

from src.models.site import ArtifactCondition, ArtifactPlacement, EnvironmentalConditions
from src.models.tool import Tool, ToolCategory
from src.skills.tools import ActionKind, check_tool_usage

# Progress
BASE_PROGRESS_RATE = 0.1
MIN_CURRENT_FACTOR = 0.3
MIN_PROGRESS = 0.01
TROWEL_MULTIPLIER = 1.2
BRUSH_MULTIPLIER = 0.8

# A cell counts as excavated once its depth passes this
EXCAVATED_THRESHOLD = 0.3

# Discovery score
BASE_DISCOVERY_SCORE = 100
PROPER_TOOL_BONUS = 25
CONDITION_BONUS: dict[ArtifactCondition, int] = {
    ArtifactCondition.EXCELLENT: 50,
    ArtifactCondition.GOOD: 30,
    ArtifactCondition.FAIR: 15,
    ArtifactCondition.POOR: 5,
}
LOW_VISIBILITY_BONUS = 20
STRONG_CURRENT_BONUS = 15
DEEP_SITE_BONUS = 10

# Simulated time
BASE_ACTION_SECONDS = 30


def calculate_excavation_progress(tool: Tool, conditions: EnvironmentalConditions) -> float:
    """
    How much depth one tool use removes.

    progress = effectiveness x 0.1 x visibility/100 x max(0.3, 1 - current/10),
    then x1.2 for trowels and x0.8 for brushes, never below 0.01.
    """
    progress = tool.effectiveness * BASE_PROGRESS_RATE

    visibility_factor = conditions.visibility / 100
    current_factor = max(MIN_CURRENT_FACTOR, 1 - conditions.current_strength / 10)
    progress *= visibility_factor * current_factor

    if tool.category == ToolCategory.TROWEL:
        progress *= TROWEL_MULTIPLIER
    elif tool.category == ToolCategory.BRUSH:
        progress *= BRUSH_MULTIPLIER

    return max(MIN_PROGRESS, progress)


def calculate_discovery_score(
    artifact: ArtifactPlacement,
    tool: Tool,
    conditions: EnvironmentalConditions,
) -> int:
    """
    Points for uncovering an artifact.

    All bonuses are independent and additive:
    - 100 base
    - +25 if the tool passes the discovery appropriateness check
    - +50/30/15/5 for excellent/good/fair/poor condition
    - +20 for visibility under 50, +15 for current over 5,
      +10 for a site deeper than 20 meters
    """
    score = BASE_DISCOVERY_SCORE

    check = check_tool_usage(tool, ActionKind.DISCOVERY, conditions, artifact.condition)
    if check.is_valid:
        score += PROPER_TOOL_BONUS

    score += CONDITION_BONUS[artifact.condition]

    if conditions.visibility < 50:
        score += LOW_VISIBILITY_BONUS
    if conditions.current_strength > 5:
        score += STRONG_CURRENT_BONUS
    if conditions.depth > 20:
        score += DEEP_SITE_BONUS

    return score


def calculate_time_usage(
    tool: Tool,
    conditions: EnvironmentalConditions,
    excavation_depth: float,
) -> int:
    """Simulated seconds consumed by one excavation action."""
    seconds = BASE_ACTION_SECONDS * (2 - tool.effectiveness)

    if conditions.visibility < 50:
        seconds *= 1.5
    if conditions.current_strength > 5:
        seconds *= 1.3

    # Deeper cells take longer
    seconds *= 1 + excavation_depth

    return round(seconds)
