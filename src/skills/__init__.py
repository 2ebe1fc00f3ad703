"""
Stateless Skills for the excavation simulation.

Skills are pure functions that:
- Take structured input (Pydantic models)
- Execute rule logic (tool checks, progress math, layout dealing)
- Return structured output
- NEVER maintain state between calls
"""

from src.skills.excavation import (
    EXCAVATED_THRESHOLD,
    calculate_discovery_score,
    calculate_excavation_progress,
    calculate_time_usage,
)
from src.skills.layout import RandomSource, randomize_layout
from src.skills.protocols import get_protocol_guidance, suggest_tools
from src.skills.tools import (
    DEFAULT_TOOLS,
    HARD_BRUSH_ID,
    ActionKind,
    ToolCheck,
    ToolRegistry,
    check_tool_usage,
)

__all__ = [
    # Tools
    "DEFAULT_TOOLS",
    "HARD_BRUSH_ID",
    "ActionKind",
    "ToolCheck",
    "ToolRegistry",
    "check_tool_usage",
    # Formulas
    "EXCAVATED_THRESHOLD",
    "calculate_excavation_progress",
    "calculate_discovery_score",
    "calculate_time_usage",
    # Layout
    "RandomSource",
    "randomize_layout",
    # Protocols
    "get_protocol_guidance",
    "suggest_tools",
]
