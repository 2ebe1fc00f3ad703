"""
Starter Sites for the excavation simulation.

Three authored sites, one per difficulty tier, so a learner can start
digging immediately.
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from src.db.interfaces import SiteRepository
from src.models import (
    ArtifactCondition,
    Difficulty,
    EnvironmentalConditions,
    Site,
    create_placement,
    create_site,
)


@dataclass
class StarterSitesResult:
    """Result of seeding the starter sites."""

    sites: dict[str, UUID]  # name -> id
    by_difficulty: dict[Difficulty, UUID]


def build_starter_sites() -> list[Site]:
    """Build the starter sites without saving them."""
    # =========================================================================
    # Beginner: Roman villa, clear and calm
    # =========================================================================
    roman_villa = create_site(
        "Villa Maritima Romana",
        6,
        6,
        difficulty=Difficulty.BEGINNER,
        location="Mediterranean Sea, Italy",
        historical_period="Ancient Roman",
        description=(
            "A well-preserved Roman villa submerged off the Italian coast. "
            "Excellent visibility and calm conditions make it ideal for learning "
            "basic underwater excavation. The villa holds mosaics and everyday "
            "Roman artifacts."
        ),
        environment=EnvironmentalConditions(
            visibility=90,
            current_strength=1.5,
            temperature=22,
            depth=8,
            sediment_type="sand",
            time_constraints=50,
        ),
        artifacts=[
            create_placement(2, 2, depth=0.3, condition=ArtifactCondition.GOOD),
            create_placement(4, 3, depth=0.5, condition=ArtifactCondition.EXCELLENT),
            create_placement(1, 4, depth=0.4, condition=ArtifactCondition.FAIR),
        ],
    )

    # =========================================================================
    # Intermediate: medieval shipwreck in silt
    # =========================================================================
    merchant_vessel = create_site(
        "Medieval Merchant Vessel",
        8,
        10,
        difficulty=Difficulty.INTERMEDIATE,
        location="North Sea, England",
        historical_period="Medieval",
        description=(
            "A 14th-century merchant ship that sank during a storm. The wreck is "
            "partly buried in silt and needs careful excavation. It carries trade "
            "goods, navigation instruments and the crew's belongings."
        ),
        environment=EnvironmentalConditions(
            visibility=65,
            current_strength=4.2,
            temperature=12,
            depth=18,
            sediment_type="silt",
            time_constraints=40,
        ),
        artifacts=[
            create_placement(3, 4, depth=0.7, condition=ArtifactCondition.FAIR),
            create_placement(5, 6, depth=0.6, condition=ArtifactCondition.GOOD),
            create_placement(2, 7, depth=0.8, condition=ArtifactCondition.POOR),
            create_placement(6, 3, depth=0.5, condition=ArtifactCondition.EXCELLENT),
            create_placement(1, 8, depth=0.9, condition=ArtifactCondition.FAIR),
        ],
    )

    # =========================================================================
    # Advanced: Greek temple, strong current and poor visibility
    # =========================================================================
    poseidon_temple = create_site(
        "Temple of Poseidon Submerged",
        12,
        12,
        difficulty=Difficulty.ADVANCED,
        location="Aegean Sea, Greece",
        historical_period="Ancient Greek",
        description=(
            "A temple complex dedicated to Poseidon, drowned by seismic activity. "
            "Strong currents and limited visibility make this a demanding dive. "
            "Rare religious artifacts, architectural elements and votive offerings "
            "lie across the site."
        ),
        environment=EnvironmentalConditions(
            visibility=45,
            current_strength=7.8,
            temperature=16,
            depth=25,
            sediment_type="rocky",
            time_constraints=35,
        ),
        artifacts=[
            create_placement(6, 6, depth=0.8, condition=ArtifactCondition.EXCELLENT),
            create_placement(4, 8, depth=0.9, condition=ArtifactCondition.GOOD),
            create_placement(9, 4, depth=0.7, condition=ArtifactCondition.FAIR),
            create_placement(2, 10, depth=0.95, condition=ArtifactCondition.POOR),
            create_placement(10, 2, depth=0.6, condition=ArtifactCondition.GOOD),
            create_placement(7, 9, depth=0.85, condition=ArtifactCondition.EXCELLENT),
            create_placement(3, 3, depth=0.75, condition=ArtifactCondition.FAIR),
            create_placement(11, 7, depth=0.9, condition=ArtifactCondition.GOOD),
        ],
    )

    return [roman_villa, merchant_vessel, poseidon_temple]


def create_starter_sites(sites: SiteRepository) -> StarterSitesResult:
    """
    Seed the starter sites into a repository.

    Args:
        sites: Repository to save into

    Returns:
        StarterSitesResult with the saved site IDs
    """
    result = StarterSitesResult(sites={}, by_difficulty={})
    for site in build_starter_sites():
        sites.save_site(site)
        result.sites[site.name] = site.id
        result.by_difficulty[site.difficulty] = site.id
    return result
