"""Config — load simulation parameters from YAML files.

Grid size, the day/night cycle, per-species seeding probabilities and the
disease parameters live in YAML and are parsed into typed dataclasses
here.  Species behaviour itself is data too (see
``canopy.species.catalog``); configuration refers to species by name.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from canopy.species.catalog import ANIMAL_SPECIES, PLANT_SPECIES
from canopy.species.disease import Disease

logger = logging.getLogger("canopy.config")

DEFAULT_WIDTH = 120
DEFAULT_HEIGHT = 80


def _default_plant_seeding() -> dict[str, float]:
    return {"fern": 0.30, "fruit_tree": 0.25}


def _default_animal_seeding() -> dict[str, float]:
    return {
        "capybara": 0.09,
        "howler_monkey": 0.10,
        "jaguar": 0.015,
        "harpy_eagle": 0.018,
    }


@dataclass
class SimulationConfig:
    """Top-level simulation configuration.

    Attributes:
        seed: RNG seed for deterministic replay.
        world_width: Number of grid columns.
        world_height: Number of grid rows.
        day_length: Steps per full day/night cycle.
        weather_change_steps: Steps of the day at which weather is redrawn.
        plant_seeding: Ordered species -> probability that a cell starts
            with that plant.  The first matching bucket wins.
        animal_seeding: Ordered species -> probability that a cell starts
            with that animal.
        initial_infection_probability: Chance a seeded animal starts
            infected.
        disease: Disease parameters shared by every animal.
    """

    seed: int = 42
    world_width: int = DEFAULT_WIDTH
    world_height: int = DEFAULT_HEIGHT
    day_length: int = 24
    weather_change_steps: tuple[int, ...] = (0,)
    plant_seeding: dict[str, float] = field(default_factory=_default_plant_seeding)
    animal_seeding: dict[str, float] = field(default_factory=_default_animal_seeding)
    initial_infection_probability: float = 0.02
    disease: Disease = field(default_factory=Disease)

    def __post_init__(self) -> None:
        """Clamp a degenerate grid and validate the seeding tables.

        Raises:
            ValueError: If a seeding table names an unknown species or its
                probabilities sum to more than 1.0.
        """
        if self.world_width <= 0 or self.world_height <= 0:
            logger.warning(
                "grid %dx%d is not usable, falling back to %dx%d",
                self.world_width,
                self.world_height,
                DEFAULT_WIDTH,
                DEFAULT_HEIGHT,
            )
            self.world_width = DEFAULT_WIDTH
            self.world_height = DEFAULT_HEIGHT
        self.weather_change_steps = tuple(self.weather_change_steps)
        _check_seeding("plant_seeding", self.plant_seeding, PLANT_SPECIES)
        _check_seeding("animal_seeding", self.animal_seeding, ANIMAL_SPECIES)

    @classmethod
    def from_yaml(cls, path: str | Path) -> SimulationConfig:
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML config file.

        Returns:
            A populated SimulationConfig instance.

        Raises:
            FileNotFoundError: If the config file does not exist.
            ValueError: If the seeding tables are invalid.
        """
        path = Path(path)
        with path.open("r") as f:
            data = yaml.safe_load(f) or {}

        disease_data = data.get("disease") or {}
        return cls(
            seed=data.get("seed", cls.seed),
            world_width=data.get("world_width", cls.world_width),
            world_height=data.get("world_height", cls.world_height),
            day_length=data.get("day_length", cls.day_length),
            weather_change_steps=tuple(
                data.get("weather_change_steps", cls.weather_change_steps),
            ),
            plant_seeding=data.get("plant_seeding", _default_plant_seeding()),
            animal_seeding=data.get("animal_seeding", _default_animal_seeding()),
            initial_infection_probability=data.get(
                "initial_infection_probability",
                cls.initial_infection_probability,
            ),
            disease=Disease(**disease_data),
        )


def _check_seeding(
    name: str,
    table: dict[str, float],
    known: Mapping[str, object],
) -> None:
    unknown = [species for species in table if species not in known]
    if unknown:
        msg = f"{name}: unknown species {', '.join(unknown)}"
        raise ValueError(msg)
    total = sum(table.values())
    if total > 1.0 + 1e-9:
        msg = f"{name}: probabilities sum to {total:.3f}, must be at most 1.0"
        raise ValueError(msg)
