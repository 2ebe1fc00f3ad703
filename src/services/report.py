"""
Scoring and Site Report Generation.

Turns a finished session's engine state into summary metrics,
recommendations, and a plain-text excavation report.
"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field

from src.models.excavation import REQUIRED_ENTRY_TYPES, Severity
from src.models.session import ExcavationState
from src.models.site import Site

# Compliance deductions per violation
SEVERITY_DEDUCTIONS = {
    Severity.SEVERE: 30,
    Severity.MODERATE: 15,
    Severity.MINOR: 5,
}

# Overall score weights
COVERAGE_WEIGHT = 0.3
RECOVERY_WEIGHT = 0.4
DOCUMENTATION_WEIGHT = 0.2
COMPLIANCE_WEIGHT = 0.1

# Recommendation thresholds
COVERAGE_TARGET = 70
DOCUMENTATION_TARGET = 80
COMPLIANCE_TARGET = 90

RECOMMEND_COVERAGE = "Consider more systematic excavation to improve site coverage"
RECOMMEND_DOCUMENTATION = "Improve documentation by taking more photos and measurements"
RECOMMEND_COMPLIANCE = "Review archaeological protocols to avoid violations"
RECOMMEND_RECOVERY = "Use probes and careful excavation to locate remaining artifacts"


class SiteReport(BaseModel):
    """Final assessment of a session."""

    completion_percentage: int
    artifacts_found: int
    total_artifacts: int
    documentation_quality: int
    protocol_compliance: int
    overall_score: int
    recommendations: list[str] = Field(default_factory=list)
    compliance_breakdown: dict[Severity, int] = Field(default_factory=dict)
    digital_report: str = ""


def calculate_documentation_quality(state: ExcavationState) -> float:
    """Share of the three required entry types present, 0-100."""
    present = {entry.entry_type for entry in state.documentation}
    covered = sum(1 for entry_type in REQUIRED_ENTRY_TYPES if entry_type in present)
    return covered / len(REQUIRED_ENTRY_TYPES) * 100


def count_violations(state: ExcavationState) -> dict[Severity, int]:
    """Violations per severity, every severity present."""
    counts = {severity: 0 for severity in Severity}
    for violation in state.violations:
        counts[violation.severity] += 1
    return counts


def calculate_protocol_compliance(state: ExcavationState) -> float:
    """100 minus severity-weighted deductions, floored at 0."""
    counts = count_violations(state)
    deductions = sum(SEVERITY_DEDUCTIONS[severity] * count for severity, count in counts.items())
    return max(0, 100 - deductions)


def generate_site_report(state: ExcavationState) -> SiteReport:
    """
    Score a session.

    overall = round(0.3 x coverage + 0.4 x recovery + 0.2 x documentation
    + 0.1 x compliance), computed from unrounded components. A layout
    with no artifacts counts as fully recovered.
    """
    completion = state.coverage_percent

    artifacts_found = len(state.discovered_artifacts)
    total_artifacts = len(state.layout)
    recovery = artifacts_found / total_artifacts * 100 if total_artifacts else 100.0

    documentation_quality = calculate_documentation_quality(state)
    protocol_compliance = calculate_protocol_compliance(state)

    overall_score = round(
        completion * COVERAGE_WEIGHT
        + recovery * RECOVERY_WEIGHT
        + documentation_quality * DOCUMENTATION_WEIGHT
        + protocol_compliance * COMPLIANCE_WEIGHT
    )

    recommendations: list[str] = []
    if completion < COVERAGE_TARGET:
        recommendations.append(RECOMMEND_COVERAGE)
    if documentation_quality < DOCUMENTATION_TARGET:
        recommendations.append(RECOMMEND_DOCUMENTATION)
    if protocol_compliance < COMPLIANCE_TARGET:
        recommendations.append(RECOMMEND_COMPLIANCE)
    if artifacts_found < total_artifacts:
        recommendations.append(RECOMMEND_RECOVERY)

    return SiteReport(
        completion_percentage=round(completion),
        artifacts_found=artifacts_found,
        total_artifacts=total_artifacts,
        documentation_quality=round(documentation_quality),
        protocol_compliance=round(protocol_compliance),
        overall_score=overall_score,
        recommendations=recommendations,
        compliance_breakdown=count_violations(state),
    )


def generate_digital_report(
    state: ExcavationState,
    site: Site,
    report: SiteReport,
    report_date: date | None = None,
) -> str:
    """Assemble the plain-text excavation report."""
    report_date = report_date or date.today()
    env = site.environment

    lines = [
        "UNDERWATER ARCHAEOLOGICAL EXCAVATION REPORT",
        "",
        f"Site: {site.name}",
        f"Location: {site.location}",
        f"Historical Period: {site.historical_period}",
        f"Date: {report_date.isoformat()}",
        "",
        "EXCAVATION SUMMARY:",
        f"- Site Completion: {report.completion_percentage}%",
        f"- Artifacts Discovered: {report.artifacts_found}/{report.total_artifacts}",
        f"- Documentation Quality: {report.documentation_quality}%",
        f"- Protocol Compliance: {report.protocol_compliance}%",
        f"- Overall Score: {report.overall_score}/100",
        "",
        "ENVIRONMENTAL CONDITIONS:",
        f"- Visibility: {env.visibility:g}%",
        f"- Current Strength: {env.current_strength:g}/10",
        f"- Temperature: {env.temperature:g} C",
        f"- Depth: {env.depth:g} m",
        f"- Sediment: {env.sediment_type}",
        f"- Time Budget: {env.time_constraints} minutes",
        "",
        "ARTIFACTS DISCOVERED:",
    ]
    lines.extend(_numbered(f"Artifact ID: {artifact_id}" for artifact_id in state.discovered_artifacts))

    lines += ["", "DOCUMENTATION ENTRIES:"]
    entries = sorted(state.documentation, key=lambda e: e.timestamp)
    lines.extend(
        _numbered(
            f"{entry.entry_type.value.upper()} at ({entry.position.x}, {entry.position.y}): {entry.content}"
            for entry in entries
        )
    )

    lines += ["", "PROTOCOL VIOLATIONS:"]
    violations = _numbered(
        f"{violation.severity.value.upper()}: {violation.description}" for violation in state.violations
    )
    lines.extend(violations or ["None recorded"])

    lines += ["", "RECOMMENDATIONS:"]
    lines.extend(_numbered(report.recommendations) or ["None - excellent fieldwork"])

    lines += [
        "",
        "This report was generated automatically by the Underwater Archaeology Learning System.",
    ]
    return "\n".join(lines)


def _numbered(items) -> list[str]:
    return [f"{index}. {item}" for index, item in enumerate(items, 1)]
