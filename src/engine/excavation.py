"""
Excavation State Machine.

Applies one learner action at a time to a session's engine state. The
engine works on the state it is given; callers pass a private copy and
persist it only when the operation succeeds. Every input is validated
before the first mutation.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from datetime import date
from uuid import UUID

from src.engine.errors import InvalidInputError
from src.engine.models import DocumentationResult, ExcavationOutcome
from src.models.excavation import (
    EntryType,
    GridCell,
    ProtocolViolation,
    Severity,
    ViolationType,
    create_documentation_entry,
)
from src.models.session import ExcavationState, GameplayConfig
from src.models.site import Difficulty, EnvironmentalConditions, GridPosition, Site
from src.models.tool import Tool
from src.services.quest import QuestTracker, generate_documentation_quests
from src.services.report import SiteReport, generate_digital_report, generate_site_report
from src.skills.excavation import (
    EXCAVATED_THRESHOLD,
    calculate_discovery_score,
    calculate_excavation_progress,
    calculate_time_usage,
)
from src.skills.layout import RandomSource, randomize_layout
from src.skills.protocols import get_protocol_guidance, suggest_tools
from src.skills.tools import ActionKind, ToolRegistry, check_tool_usage

logger = logging.getLogger(__name__)

IMPROPER_TOOL_PENALTY = 10
DOCUMENTATION_BONUS = 10

# Rushed-excavation warning (time constraints only)
RUSHED_PENALTY = 10
TIME_WARNING_FRACTION = 0.8
RUSHED_COVERAGE_PERCENT = 50


@dataclass
class ExcavationEngine:
    """
    Rules engine for the excavation simulation.

    Holds only read-only collaborators: the shared tool catalogue and
    the random source used to deal session layouts.
    """

    registry: ToolRegistry = field(default_factory=ToolRegistry)
    rng: RandomSource = field(default_factory=random.Random)

    def get_tool(self, tool_id: str) -> Tool:
        """Look up a tool or reject the id."""
        tool = self.registry.get(tool_id)
        if tool is None:
            raise InvalidInputError(f"Unknown tool: {tool_id}")
        return tool

    # =========================================================================
    # Start
    # =========================================================================

    def start_state(
        self,
        site: Site,
        difficulty: Difficulty,
        config: GameplayConfig | None = None,
    ) -> ExcavationState:
        """
        Build the initial engine state for a new session.

        The grid starts fully unexcavated, the site's artifacts are
        re-dealt into a session layout, and quests are generated for
        the difficulty unless the config turns them off.
        """
        config = config or GameplayConfig()
        self.get_tool(config.default_tool_id)

        layout = randomize_layout(site.artifacts, site.grid_width, site.grid_height, self.rng)
        grid = [
            GridCell(x=x, y=y)
            for x in range(site.grid_width)
            for y in range(site.grid_height)
        ]

        quests = []
        if config.quests_enabled:
            quests = generate_documentation_quests(difficulty, len(layout), site.total_cells)

        time_budget = None
        if config.time_constraints:
            time_budget = site.environment.time_constraints * 60

        return ExcavationState(
            site_id=site.id,
            grid_width=site.grid_width,
            grid_height=site.grid_height,
            config=config,
            current_tool_id=config.default_tool_id,
            grid=grid,
            layout=layout,
            quests=quests,
            time_budget_seconds=time_budget,
        )

    # =========================================================================
    # Actions
    # =========================================================================

    def apply_action(
        self,
        state: ExcavationState,
        conditions: EnvironmentalConditions,
        x: int,
        y: int,
        tool_id: str,
    ) -> ExcavationOutcome:
        """
        Use a tool on a grid cell.

        An inappropriate tool records a moderate violation but the
        action still goes ahead. A documentation tool on an excavated
        cell earns a small bonus and leaves the grid alone; anywhere
        else the tool digs.

        Raises:
            InvalidInputError: Unknown tool or off-grid coordinate
        """
        tool = self.get_tool(tool_id)
        self._require_on_grid(state, x, y)

        cell = state.cell_at(x, y)
        artifact = state.artifact_at(x, y)
        artifact_condition = artifact.condition if artifact else None

        discoveries: list[str] = []
        violations: list[ProtocolViolation] = []
        score = 0
        discovered_id: UUID | None = None

        action = ActionKind.DOCUMENTATION if tool.is_documentation_tool else ActionKind.EXCAVATION
        check = check_tool_usage(tool, action, conditions, artifact_condition, cell.excavated)
        if not check.is_valid:
            violation = ProtocolViolation(
                violation_type=ViolationType.IMPROPER_TOOL,
                description=check.reason or "Improper tool usage",
                severity=Severity.MODERATE,
                points_penalty=IMPROPER_TOOL_PENALTY,
                position=GridPosition(x=x, y=y),
                tool_id=tool.id,
                recommended_tools=suggest_tools(tool, conditions),
            )
            violations.append(violation)
            logger.info(f"Protocol violation at ({x}, {y}) with {tool.id}: {violation.description}")

        if tool.is_documentation_tool and cell.excavated:
            state.violations.extend(violations)
            return ExcavationOutcome(
                cell=cell.model_copy(),
                discoveries=[f"Documented cell at position ({x}, {y})"],
                violations=violations,
                score=DOCUMENTATION_BONUS,
                **self._time_fields(state),
            )

        cell.dig(calculate_excavation_progress(tool, conditions), EXCAVATED_THRESHOLD)

        if artifact and cell.excavation_depth >= artifact.depth and not cell.contains_artifact:
            cell.contains_artifact = True
            cell.artifact_id = artifact.artifact_id
            if not state.is_discovered(artifact.artifact_id):
                state.discovered_artifacts.append(artifact.artifact_id)
                artifact.is_discovered = True
                discovered_id = artifact.artifact_id
                discoveries.append(f"Artifact discovered at position ({x}, {y})")
                score += calculate_discovery_score(artifact, tool, conditions)
                logger.info(f"Artifact {artifact.artifact_id} discovered at ({x}, {y})")

        state.violations.extend(violations)

        if cell.excavated:
            progress = QuestTracker(state.quests).record_coverage(state.excavated_count)
            score += progress.bonus_score
            discoveries.extend(f"Quest completed: {title}!" for title in progress.quests_completed)

        if state.time_budget_seconds is not None:
            warning = self._spend_time(state, tool, conditions, cell)
            if warning is not None:
                violations.append(warning)

        logger.debug(
            f"{tool.id} at ({x}, {y}): depth {cell.excavation_depth:.3f}, score +{score}"
        )

        return ExcavationOutcome(
            cell=cell.model_copy(),
            discoveries=discoveries,
            discovered_artifact_id=discovered_id,
            violations=violations,
            score=score,
            **self._time_fields(state),
        )

    def change_tool(self, state: ExcavationState, tool_id: str) -> Tool:
        """Make a tool the active one. No other side effects."""
        tool = self.get_tool(tool_id)
        state.current_tool_id = tool.id
        return tool

    def add_documentation(
        self,
        state: ExcavationState,
        entry_type: EntryType | str,
        content: str,
        x: int,
        y: int,
        artifact_id: UUID | None = None,
    ) -> DocumentationResult:
        """
        Append a field entry and advance matching quests.

        Raises:
            InvalidInputError: Unknown entry type or off-grid coordinate
        """
        try:
            entry_type = EntryType(entry_type)
        except ValueError:
            raise InvalidInputError(f"Unknown documentation entry type: {entry_type}") from None
        self._require_on_grid(state, x, y)

        entry = create_documentation_entry(entry_type, content, x, y, artifact_id=artifact_id)
        state.documentation.append(entry)

        progress = QuestTracker(state.quests).record_entry(entry)
        return DocumentationResult(
            entry=entry,
            quests_completed=progress.quests_completed,
            bonus_score=progress.bonus_score,
        )

    # =========================================================================
    # Reporting
    # =========================================================================

    def complete(
        self,
        state: ExcavationState,
        site: Site,
        report_date: date | None = None,
    ) -> SiteReport:
        """Score the session and attach the narrative report."""
        report = generate_site_report(state)
        report.digital_report = generate_digital_report(state, site, report, report_date)
        return report

    def guidance(self, state: ExcavationState, conditions: EnvironmentalConditions) -> list[str]:
        return get_protocol_guidance(state, conditions)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _require_on_grid(self, state: ExcavationState, x: int, y: int) -> None:
        if not state.contains(x, y):
            raise InvalidInputError(
                f"Grid position ({x}, {y}) is outside the "
                f"{state.grid_width}x{state.grid_height} grid"
            )

    def _spend_time(
        self,
        state: ExcavationState,
        tool: Tool,
        conditions: EnvironmentalConditions,
        cell: GridCell,
    ) -> ProtocolViolation | None:
        """Charge simulated time; warn once about rushing."""
        budget = state.time_budget_seconds or 0
        state.time_used_seconds += calculate_time_usage(tool, conditions, cell.excavation_depth)

        if state.time_warning_issued:
            return None
        if state.time_used_seconds <= budget * TIME_WARNING_FRACTION:
            return None
        if state.coverage_percent >= RUSHED_COVERAGE_PERCENT:
            return None

        state.time_warning_issued = True
        violation = ProtocolViolation(
            violation_type=ViolationType.RUSHED_EXCAVATION,
            description=(
                "Over 80% of the dive time is used with less than half of the grid excavated. "
                "Plan the remaining work before time runs out."
            ),
            severity=Severity.MINOR,
            points_penalty=RUSHED_PENALTY,
        )
        state.violations.append(violation)
        logger.info(f"Rushed excavation warning after {state.time_used_seconds}s of {budget}s")
        return violation

    def _time_fields(self, state: ExcavationState) -> dict[str, int | None]:
        if state.time_budget_seconds is None:
            return {}
        return {
            "time_used_seconds": state.time_used_seconds,
            "time_remaining_seconds": state.time_remaining_seconds,
        }
