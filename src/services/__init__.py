"""
Service layer for the excavation simulation.

Services hold the session-scoped bookkeeping the engine delegates to:
quest tracking and end-of-session scoring.
"""

from __future__ import annotations

from src.services.quest import QuestProgressResult, QuestTracker, generate_documentation_quests
from src.services.report import SiteReport, generate_digital_report, generate_site_report

__all__ = [
    "QuestProgressResult",
    "QuestTracker",
    "generate_documentation_quests",
    "SiteReport",
    "generate_digital_report",
    "generate_site_report",
]
