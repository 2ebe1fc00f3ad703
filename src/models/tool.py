"""
Tool Models for the excavation simulation.

Tools are immutable catalogue entries shared read-only by every session.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ToolCategory(str, Enum):
    """Kinds of field equipment."""

    BRUSH = "brush"
    TROWEL = "trowel"
    MEASURING_TAPE = "measuring_tape"
    CAMERA = "camera"
    SIEVE = "sieve"
    PROBE = "probe"


# Categories that record the site rather than remove sediment
DOCUMENTATION_CATEGORIES = frozenset({ToolCategory.CAMERA, ToolCategory.MEASURING_TAPE})


class Tool(BaseModel):
    """A single piece of excavation equipment."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str
    category: ToolCategory
    description: str = ""
    effectiveness: float = Field(ge=0.0, le=1.0)
    appropriate_for: tuple[str, ...] = ()
    """Use tags such as "delicate" or "grid_excavation"."""

    @property
    def is_documentation_tool(self) -> bool:
        """Cameras and measuring tapes document; everything else digs."""
        return self.category in DOCUMENTATION_CATEGORIES
