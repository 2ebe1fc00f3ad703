"""
Shared fixtures for the excavation tests.
"""

from __future__ import annotations

import pytest

from src.db.memory import (
    InMemoryProgressRepository,
    InMemorySessionRepository,
    InMemorySiteRepository,
)
from src.engine import ExcavationEngine, ExcavationGame
from src.models import ArtifactCondition, Difficulty, create_placement, create_site
from tests.helpers import ScriptedRandom


@pytest.fixture
def scripted_rng():
    """Random source that keeps a single artifact at (2, 2) with no depth jitter."""
    return ScriptedRandom([2, 2])


@pytest.fixture
def beginner_site():
    """4x4 beginner site, default conditions, one good artifact at (2, 2) depth 0.5."""
    return create_site(
        "Training Reef",
        4,
        4,
        difficulty=Difficulty.BEGINNER,
        location="Test Bay",
        historical_period="Modern",
        artifacts=[create_placement(2, 2, depth=0.5, condition=ArtifactCondition.GOOD)],
    )


@pytest.fixture
def engine(scripted_rng):
    """Pure rules engine with the default tool catalogue."""
    return ExcavationEngine(rng=scripted_rng)


@pytest.fixture
def site_repo(beginner_site):
    """Site repository holding the beginner site."""
    repo = InMemorySiteRepository()
    repo.save_site(beginner_site)
    return repo


@pytest.fixture
def session_repo():
    """In-memory session repository."""
    return InMemorySessionRepository()


@pytest.fixture
def progress_repo():
    """In-memory progress repository."""
    return InMemoryProgressRepository()


@pytest.fixture
def game(site_repo, session_repo, progress_repo, scripted_rng):
    """Game facade over in-memory repositories."""
    return ExcavationGame(
        sites=site_repo,
        sessions=session_repo,
        progress=progress_repo,
        rng=scripted_rng,
    )
